import logging

from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from customer_api.error_handlers import unhandled_exception_handler
from customer_api.logging_context import (
    RequestContext,
    RequestContextFilter,
    RequestLoggingMiddleware,
    current_context,
)

CONTEXT_KEYS = {"request_id", "client_ip", "method", "path", "duration_ms", "status_code"}


def _make_app(seen):
    app = FastAPI()
    app.add_middleware(RequestLoggingMiddleware, fault_handler=unhandled_exception_handler)

    @app.get("/ok")
    async def ok(request: Request):
        context = current_context()
        seen.append((context, dict(context.fields)))
        assert request.state.log_context is context
        record = logging.LogRecord("test", logging.INFO, __file__, 0, "msg", None, None)
        RequestContextFilter().filter(record)
        return {"request_id": record.request_id}

    @app.get("/boom")
    async def boom():
        seen.append((current_context(), dict(current_context().fields)))
        raise RuntimeError("boom")

    return app


def test_context_bound_during_request_and_cleared_after():
    seen = []
    client = TestClient(_make_app(seen))

    resp = client.get("/ok")

    assert resp.status_code == 200
    context, during = seen[0]
    assert during["method"] == "GET"
    assert during["path"] == "/ok"
    assert during["client_ip"] == "testclient"
    assert during["request_id"] == resp.headers["X-Request-ID"]
    assert resp.json()["request_id"] == during["request_id"]

    assert not CONTEXT_KEYS & set(context.fields)
    assert current_context() is None


def test_context_cleared_when_handler_raises():
    seen = []
    client = TestClient(_make_app(seen))

    resp = client.get("/boom")

    assert resp.status_code == 500
    assert resp.json()["message"] == "boom"
    context, during = seen[0]
    assert during["path"] == "/boom"
    assert context.fields == {}
    assert current_context() is None


def test_each_request_gets_its_own_context():
    seen = []
    client = TestClient(_make_app(seen))

    client.get("/ok")
    client.get("/ok")

    (first, first_fields), (second, second_fields) = seen
    assert first is not second
    assert first_fields["request_id"] != second_fields["request_id"]


def test_completion_line_has_status_and_duration(caplog):
    caplog.set_level(logging.INFO, logger="customer_api.logging_context")
    client = TestClient(_make_app([]))

    client.get("/ok")
    client.get("/boom")

    messages = [r.getMessage() for r in caplog.records]
    assert "Received request: GET /ok" in messages
    assert any(m.startswith("Completed request: GET /ok - Status: 200 - Duration: ") for m in messages)
    assert any(m.startswith("Completed request: GET /boom - Status: 500 - Duration: ") for m in messages)


def test_filter_outside_request_uses_placeholder():
    record = logging.LogRecord("test", logging.INFO, __file__, 0, "msg", None, None)
    assert RequestContextFilter().filter(record) is True
    assert record.request_id == "-"
    assert record.client_ip == "-"


def test_finish_records_duration_and_status():
    context = RequestContext("abc", "127.0.0.1", "GET", "/customers")
    duration = context.finish(204)
    assert duration >= 0
    assert context.fields["status_code"] == 204
    assert context.fields["duration_ms"] == duration
    context.clear()
    assert context.fields == {}
