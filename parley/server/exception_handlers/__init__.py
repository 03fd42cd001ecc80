"""
Exception handlers for the Parley server.

This package contains custom exception handlers for different error types
and a setup function to register them with the FastAPI application.
"""

from fastapi import FastAPI

from parley.core.errors import ParleyError
from parley.core.logging_config import get_logger

from .domain_handler import domain_exception_handler
from .global_handler import global_exception_handler

logger = get_logger(__name__)


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    Domain errors map to their own status codes; anything else becomes a 500
    carrying an error id.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(ParleyError, domain_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered successfully")


__all__ = ["domain_exception_handler", "global_exception_handler", "setup_exception_handlers"]
