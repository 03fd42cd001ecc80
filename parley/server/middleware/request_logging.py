"""
Request Logging Middleware for FastAPI.

Every HTTP request is logged with its status and duration. The request's
correlation id is taken from ``X-Correlation-ID`` (or minted as a uuid4),
bound to the logging context for the duration of the request and echoed
back together with ``X-Process-Time`` in milliseconds. Requests slower than
``SLOW_REQUEST_MS`` are logged at WARNING.
"""

import time
import uuid
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from parley.core.logging_config import get_logger, reset_correlation_id, set_correlation_id
from parley.core.monitoring import log_api_request

logger = get_logger(__name__)

CORRELATION_ID_HEADER = "X-Correlation-ID"
PROCESS_TIME_HEADER = "X-Process-Time"
SLOW_REQUEST_MS = 1000


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging API requests."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Process the request and log its outcome.

        Args:
            request: The incoming HTTP request
            call_next: The next middleware/handler

        Returns:
            The HTTP response with correlation and timing headers
        """
        start_time = time.perf_counter()
        method = request.method
        path = request.url.path
        correlation_id = request.headers.get(CORRELATION_ID_HEADER) or uuid.uuid4().hex
        request.state.correlation_id = correlation_id
        token = set_correlation_id(correlation_id)

        try:
            try:
                response = await call_next(request)
            except Exception as e:
                logger.error(
                    f"API request failed: {method} {path}",
                    exc_info=True,
                    extra={
                        "method": method,
                        "path": path,
                        "duration_ms": (time.perf_counter() - start_time) * 1000,
                        "error": str(e),
                    },
                )
                raise

            duration_ms = (time.perf_counter() - start_time) * 1000
            response.headers[PROCESS_TIME_HEADER] = f"{duration_ms:.2f}"
            response.headers[CORRELATION_ID_HEADER] = correlation_id

            extra = {"method": method, "path": path, "status_code": response.status_code, "duration_ms": duration_ms}
            if duration_ms > SLOW_REQUEST_MS:
                logger.warning(f"Slow API request: {method} {path} took {duration_ms:.2f}ms", extra=extra)
            else:
                logger.info(f"{method} {path} {response.status_code} {duration_ms:.2f}ms", extra=extra)
            log_api_request(method, path, response.status_code, duration_ms)
            return response
        finally:
            reset_correlation_id(token)
