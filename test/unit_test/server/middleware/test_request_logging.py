"""
Unit tests for the request logging middleware.
"""

from unittest.mock import patch

import pytest
from fastapi import FastAPI
from starlette.testclient import TestClient

from parley.core.logging_config import get_correlation_id
from parley.server.middleware import RequestLoggingMiddleware
from parley.server.middleware.request_logging import CORRELATION_ID_HEADER, PROCESS_TIME_HEADER


@pytest.fixture
def app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(RequestLoggingMiddleware)

    @app.get("/ping")
    async def ping():
        return {"ok": True}

    @app.get("/boom")
    async def boom():
        raise RuntimeError("boom")

    return app


def test_sets_headers_and_logs(app):
    with patch("parley.server.middleware.request_logging.logger") as mock_logger:
        response = TestClient(app).get("/ping")

    assert response.status_code == 200
    assert len(response.headers[CORRELATION_ID_HEADER]) == 32
    assert float(response.headers[PROCESS_TIME_HEADER]) >= 0
    mock_logger.info.assert_called_once()
    extra = mock_logger.info.call_args[1]["extra"]
    assert extra["path"] == "/ping"
    assert extra["status_code"] == 200


def test_reuses_incoming_correlation_id(app):
    response = TestClient(app).get("/ping", headers={CORRELATION_ID_HEADER: "abc-123"})

    assert response.headers[CORRELATION_ID_HEADER] == "abc-123"


def test_slow_request_logged_as_warning(app):
    with patch("parley.server.middleware.request_logging.SLOW_REQUEST_MS", -1), patch(
        "parley.server.middleware.request_logging.logger"
    ) as mock_logger:
        TestClient(app).get("/ping")

    mock_logger.warning.assert_called_once()
    mock_logger.info.assert_not_called()
    assert "Slow API request" in mock_logger.warning.call_args[0][0]


def test_failed_request_logged_and_reraised(app):
    with patch("parley.server.middleware.request_logging.logger") as mock_logger:
        with pytest.raises(RuntimeError, match="boom"):
            TestClient(app).get("/boom")

    mock_logger.error.assert_called_once()
    assert mock_logger.error.call_args[1]["extra"]["error"] == "boom"


def test_correlation_id_bound_while_handling(app):
    @app.get("/cid")
    async def cid():
        return {"correlation_id": get_correlation_id()}

    response = TestClient(app).get("/cid", headers={CORRELATION_ID_HEADER: "req-42"})

    assert response.json() == {"correlation_id": "req-42"}
    assert get_correlation_id() == "-"


def test_completed_request_sent_to_monitoring(app):
    with patch("parley.server.middleware.request_logging.log_api_request") as log_api_request:
        TestClient(app).get("/ping")

    log_api_request.assert_called_once()
    method, path, status_code, duration_ms = log_api_request.call_args.args
    assert (method, path, status_code) == ("GET", "/ping", 200)
    assert duration_ms >= 0
