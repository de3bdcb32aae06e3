"""Tests for logging setup and the per-request context middleware."""

import logging

import pytest
import structlog
from fastapi import FastAPI
from fastapi.testclient import TestClient

from market_api.logging import (
    QUIET_LOGGERS,
    REQUEST_ID_HEADER,
    ROUTED_LOGGERS,
    request_context_middleware,
    setup_logging,
)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def context_client() -> TestClient:
    app = FastAPI()
    app.middleware("http")(request_context_middleware)

    @app.get("/ctx")
    async def ctx() -> dict:
        return structlog.contextvars.get_contextvars()

    return TestClient(app)


class TestSetupLogging:
    def test_single_root_handler_at_level(self, restore_root_logger) -> None:
        setup_logging("DEBUG")

        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, structlog.stdlib.ProcessorFormatter)
        assert root.level == logging.DEBUG

    def test_uvicorn_loggers_propagate_to_root(self, restore_root_logger) -> None:
        logging.getLogger("uvicorn.error").addHandler(logging.NullHandler())

        setup_logging()

        for name in ROUTED_LOGGERS:
            assert logging.getLogger(name).handlers == []
            assert logging.getLogger(name).propagate is True

    def test_chatty_libraries_are_quieted(self, restore_root_logger) -> None:
        setup_logging("DEBUG")

        for name in QUIET_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING


class TestRequestContext:
    def test_binds_request_id_and_path(self, context_client: TestClient) -> None:
        resp = context_client.get("/ctx")

        bound = resp.json()
        assert bound["path"] == "/ctx"
        assert bound["request_id"] == resp.headers[REQUEST_ID_HEADER]

    def test_reuses_incoming_request_id(self, context_client: TestClient) -> None:
        resp = context_client.get("/ctx", headers={REQUEST_ID_HEADER: "abc123"})

        assert resp.headers[REQUEST_ID_HEADER] == "abc123"
        assert resp.json()["request_id"] == "abc123"

    def test_context_is_cleared_after_request(self, context_client: TestClient) -> None:
        context_client.get("/ctx")

        assert "request_id" not in structlog.contextvars.get_contextvars()
