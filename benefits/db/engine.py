"""Database engine factories."""
from __future__ import annotations

from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool

from benefits.core.config import DatabaseSettings, get_settings
from benefits.core.logger import get_logger

LOGGER = get_logger(__name__)


def timeout_connect_args(backend: str, seconds: int) -> dict[str, Any]:
    """Translate a query timeout into driver connect arguments.

    Each backend enforces the bound itself; a statement that exceeds it fails
    with a driver error which surfaces as ``SQLAlchemyError``.
    """

    if backend == "postgresql":
        return {"options": f"-c statement_timeout={seconds * 1000}"}
    if backend == "mysql":
        return {"read_timeout": seconds, "write_timeout": seconds}
    if backend == "sqlite":
        return {"timeout": seconds}
    return {}


def create_sync_engine(url: str | None = None, **kwargs) -> Engine:
    """Create a synchronous SQLAlchemy engine using configured defaults."""

    settings = get_settings()
    database: DatabaseSettings = settings.database
    parsed = make_url(url or database.sqlalchemy_url)
    backend = parsed.get_backend_name()

    options = dict(kwargs)
    options.setdefault("echo", settings.sqlalchemy_echo)
    connect_args = timeout_connect_args(backend, settings.reporting.query_timeout_seconds)
    if backend == "sqlite":
        connect_args["check_same_thread"] = False
        if parsed.database in (None, "", ":memory:"):
            # One shared in-memory database for every session of the process.
            options.setdefault("poolclass", StaticPool)
    connect_args.update(options.pop("connect_args", {}))
    options["connect_args"] = connect_args
    if backend != "sqlite":
        options.setdefault("pool_pre_ping", True)

    LOGGER.debug(
        "Creating SQLAlchemy engine",
        extra={"url": database.masked_url if url is None else backend, "options": sorted(options)},
    )
    return create_engine(parsed, future=True, **options)
