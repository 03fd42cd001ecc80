"""
Core utilities and configuration for Parley.

This package provides core functionality including logging configuration,
security helpers, the database layer and other shared utilities.
"""

from parley.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
