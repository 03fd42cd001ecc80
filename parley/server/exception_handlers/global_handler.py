"""
Global Exception Handler.

Last-resort handler for exceptions no other handler claimed. The client
gets a generic 500 with an error id and the request's correlation id, which is
also echoed in ``X-Correlation-ID``. The log line carries the same ids
together with the traceback.
"""

import traceback

from fastapi import Request
from fastapi.responses import JSONResponse

from parley.core.logging_config import get_correlation_id, get_logger, reset_correlation_id, set_correlation_id
from parley.server.middleware.request_logging import CORRELATION_ID_HEADER

logger = get_logger(__name__)


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Log an unhandled exception and hide its details from the client.

    Args:
        request: The HTTP request that caused the exception
        exc: The exception that was raised

    Returns:
        500 JSONResponse with ``detail``, ``error_id``, ``error_type`` and ``correlation_id``
    """
    error_id = id(exc)
    # the request context is already unwound when this handler runs
    correlation_id = getattr(request.state, "correlation_id", None)
    if not isinstance(correlation_id, str):
        correlation_id = get_correlation_id()

    token = set_correlation_id(correlation_id)
    try:
        logger.error(
            f"Unhandled exception [{error_id}] in {request.method} {request.url.path}: {exc}",
            exc_info=exc,
            extra={
                "error_id": error_id,
                "method": request.method,
                "path": request.url.path,
                "query_params": dict(request.query_params),
                "client": request.client.host if request.client else "unknown",
                "error_type": type(exc).__name__,
                "traceback": "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
            },
        )
    finally:
        reset_correlation_id(token)

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error_id": error_id,
            "error_type": type(exc).__name__,
            "correlation_id": correlation_id,
        },
        headers={CORRELATION_ID_HEADER: correlation_id} if correlation_id != "-" else None,
    )
