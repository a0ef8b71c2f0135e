import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from . import __version__
from .config import HOST, INIT_SCHEMA, LOG_LEVEL, PORT
from .db import apply_schema, get_conn
from .error_handlers import register_error_handlers, unhandled_exception_handler
from .logging_context import RequestLoggingMiddleware, configure_logging
from .routes import router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(LOG_LEVEL)
    if INIT_SCHEMA:
        conn = get_conn()
        try:
            apply_schema(conn)
        finally:
            conn.close()
        logger.info("Database schema applied")
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="Customer API",
        description="CRUD service for customer records.",
        version=__version__,
        lifespan=lifespan,
    )
    # Uncaught faults are turned into the 500 envelope inside the request's log context
    app.add_middleware(RequestLoggingMiddleware, fault_handler=unhandled_exception_handler)
    register_error_handlers(app)
    app.include_router(router)

    @app.get("/health", tags=["health"])
    def health():
        return {"status": "ok"}

    return app


app = create_app()


def run() -> None:
    configure_logging(LOG_LEVEL)
    uvicorn.run(app, host=HOST, port=PORT, log_config=None)


if __name__ == "__main__":
    run()
