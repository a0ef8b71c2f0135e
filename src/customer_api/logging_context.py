"""Per-request correlation context for logging.

Each request gets its own ``RequestContext``. It is bound to a ``ContextVar``
only while that request is being served, so concurrent requests never see each
other's fields, and it is emptied when the request ends.
"""
import logging
import logging.config
import time
import uuid
from contextvars import ContextVar
from typing import Any, Awaitable, Callable, Dict, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

logger = logging.getLogger(__name__)

_current_context: ContextVar[Optional["RequestContext"]] = ContextVar("request_context", default=None)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(request_id)s] %(name)s: %(message)s"

FaultHandler = Callable[[Request, Exception], Awaitable[Response]]


class RequestContext:
    def __init__(self, request_id: str, client_ip: str, method: str, path: str):
        self.fields: Dict[str, Any] = {
            "request_id": request_id,
            "client_ip": client_ip,
            "method": method,
            "path": path,
        }
        self._started = time.perf_counter()

    @classmethod
    def from_request(cls, request: Request) -> "RequestContext":
        return cls(
            request_id=str(uuid.uuid4()),
            client_ip=request.client.host if request.client else "unknown",
            method=request.method,
            path=request.url.path,
        )

    def __getattr__(self, name: str) -> Any:
        try:
            return self.__dict__["fields"][name]
        except KeyError:
            raise AttributeError(name) from None

    def finish(self, status_code: int) -> float:
        duration_ms = round((time.perf_counter() - self._started) * 1000, 2)
        self.fields["duration_ms"] = duration_ms
        self.fields["status_code"] = status_code
        return duration_ms

    def clear(self) -> None:
        self.fields.clear()


def current_context() -> Optional[RequestContext]:
    return _current_context.get()


class RequestContextFilter(logging.Filter):
    """Stamp every record with the request id of the request being served."""

    def filter(self, record: logging.LogRecord) -> bool:
        context = _current_context.get()
        fields = context.fields if context is not None else {}
        record.request_id = fields.get("request_id", "-")
        record.client_ip = fields.get("client_ip", "-")
        return True


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, fault_handler: Optional[FaultHandler] = None):
        super().__init__(app)
        self.fault_handler = fault_handler

    async def dispatch(self, request: Request, call_next):
        context = RequestContext.from_request(request)
        token = _current_context.set(context)
        request.state.log_context = context
        status_code = 500
        try:
            logger.info("Received request: %s %s", context.method, context.path)
            try:
                response = await call_next(request)
            except Exception as exc:
                if self.fault_handler is None:
                    raise
                response = await self.fault_handler(request, exc)
            status_code = response.status_code
            response.headers["X-Request-ID"] = context.request_id
            return response
        finally:
            method, path = context.method, context.path
            duration_ms = context.finish(status_code)
            logger.info(
                "Completed request: %s %s - Status: %s - Duration: %sms",
                method,
                path,
                status_code,
                duration_ms,
            )
            context.clear()
            _current_context.reset(token)


def configure_logging(level: str = "INFO") -> None:
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {
                "request_context": {"()": RequestContextFilter},
            },
            "formatters": {
                "default": {"format": LOG_FORMAT},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "filters": ["request_context"],
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {"level": level, "handlers": ["console"]},
        }
    )
