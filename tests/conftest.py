"""Shared fixtures: an in-memory SQLite store wired into the FastAPI app."""
from __future__ import annotations

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_DIR"] = ""

from datetime import date  # noqa: E402
from decimal import Decimal  # noqa: E402
from typing import Iterator  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402

from benefits.db import create_sync_engine  # noqa: E402
from benefits.main import app  # noqa: E402
from benefits.models import Base, Enrollment, Worker  # noqa: E402
from benefits.web.dependencies import get_db_session, get_report_clock  # noqa: E402

TODAY = date(2025, 6, 30)


@pytest.fixture()
def session_factory() -> Iterator[sessionmaker]:
    engine = create_sync_engine("sqlite://")
    Base.metadata.create_all(engine)
    try:
        yield sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    finally:
        engine.dispose()


@pytest.fixture()
def session(session_factory: sessionmaker) -> Iterator[Session]:
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(session_factory: sessionmaker) -> Iterator[TestClient]:
    def _override_session() -> Iterator[Session]:
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db_session] = _override_session
    app.dependency_overrides[get_report_clock] = lambda: (lambda: TODAY)
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


def add_worker(
    session: Session,
    worker_id: str,
    *,
    last_name: str,
    first_name: str = "Test",
    department: str = "Engineering",
    salary: str = "100000",
    hire_date: date = date(2020, 1, 15),
) -> Worker:
    worker = Worker(
        worker_id=worker_id,
        first_name=first_name,
        last_name=last_name,
        email=f"{worker_id.lower()}@example.com",
        department=department,
        job_title="Engineer",
        hire_date=hire_date,
        birth_date=date(1990, 5, 1),
        salary=Decimal(salary),
    )
    session.add(worker)
    session.commit()
    return worker


def add_enrollment(
    session: Session,
    worker_id: str,
    *,
    employee_prem: str,
    employer_prem: str,
    effective_date: date,
    plan_type: str = "Medical",
) -> Enrollment:
    enrollment = Enrollment(
        worker_id=worker_id,
        plan_type=plan_type,
        coverage_level="Employee",
        employee_prem=Decimal(employee_prem),
        employer_prem=Decimal(employer_prem),
        effective_date=effective_date,
    )
    session.add(enrollment)
    session.commit()
    return enrollment


@pytest.fixture()
def make_worker(session: Session):
    return lambda worker_id, **kwargs: add_worker(session, worker_id, **kwargs)


@pytest.fixture()
def make_enrollment(session: Session):
    return lambda worker_id, **kwargs: add_enrollment(session, worker_id, **kwargs)
