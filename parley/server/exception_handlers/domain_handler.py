"""
Domain Exception Handler.

Maps ``ParleyError`` subclasses raised by services to their HTTP status
codes.
"""

from fastapi import Request
from fastapi.responses import JSONResponse

from parley.core.errors import AuthenticationError, ParleyError
from parley.core.logging_config import get_logger

logger = get_logger(__name__)


async def domain_exception_handler(request: Request, exc: ParleyError) -> JSONResponse:
    """
    Translate a domain error into a JSON error response.

    Args:
        request: The HTTP request that caused the exception
        exc: The domain exception

    Returns:
        JSONResponse with ``detail`` and ``error_type`` and the error's status code
    """
    if exc.status_code >= 500:
        logger.error(f"Domain error in {request.method} {request.url.path}: {exc.message}", exc_info=exc)
    else:
        logger.info(
            f"{request.method} {request.url.path} -> {exc.status_code} {type(exc).__name__}: {exc.message}",
            extra={"method": request.method, "path": request.url.path, "status_code": exc.status_code},
        )

    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error_type": type(exc).__name__},
        headers=headers,
    )
