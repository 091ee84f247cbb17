"""Shared FastAPI dependency definitions."""
from __future__ import annotations

from collections.abc import Generator
from datetime import date
from typing import Callable

from fastapi import Depends
from sqlalchemy.orm import Session, sessionmaker

from benefits.core.config import get_settings
from benefits.db.session import get_sessionmaker
from benefits.services import BenefitsCostService, ImportService

# Instantiate a session factory once so that connections can be reused by the
# FastAPI dependency system. ``get_sessionmaker`` internally shares the engine
# through SQLAlchemy, so this avoids re-creating engines on every request.
SessionFactory: sessionmaker = get_sessionmaker()


def get_db_session() -> Generator[Session, None, None]:
    """Yield a database session suitable for request-scoped usage."""

    session = SessionFactory()
    try:
        yield session
    finally:
        session.close()


def get_report_clock() -> Callable[[], date]:
    """Return the callable that supplies "today" for report windows."""

    return date.today


def get_benefits_cost_service(
    session: Session = Depends(get_db_session),
    clock: Callable[[], date] = Depends(get_report_clock),
) -> BenefitsCostService:
    """Return a service instance per request."""

    return BenefitsCostService(session, today=clock)


def get_import_service(session: Session = Depends(get_db_session)) -> ImportService:
    return ImportService(session, actor=get_settings().reporting.import_actor)
