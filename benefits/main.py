"""FastAPI application instance and startup hooks."""
from __future__ import annotations

from pathlib import Path

from fastapi import FastAPI

from benefits.core import get_logger, get_settings
from benefits.core.logger import init_logging
from benefits.middleware.request_context import RequestContextMiddleware
from benefits.routers import eib_router, reports_router, soap_router

LOGGER = get_logger(__name__)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = get_settings()
    log_dir = settings.logging.log_dir
    init_logging(level=settings.logging.level, log_dir=Path(log_dir) if log_dir else None)

    app = FastAPI(title="Benefits Cost Service", version="0.1.0")
    app.add_middleware(RequestContextMiddleware)
    app.include_router(reports_router)
    app.include_router(soap_router)
    app.include_router(eib_router)

    @app.get("/health", tags=["health"])
    def health() -> dict[str, bool]:
        return {"ok": True}

    LOGGER.info("FastAPI application initialised (database=%s)", settings.database.masked_url)
    return app


app = create_app()
