"""Deterministic demo dataset for the benefits cost reports."""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Iterator

from faker import Faker
from sqlalchemy import delete, insert
from sqlalchemy.orm import Session

from benefits.core.logger import get_logger, progress_manager, timeit
from benefits.models import AuditLog, Enrollment, TimeEntry, Worker
from benefits.repositories import RecordsRepository

LOGGER = get_logger(__name__)

SEED_ACTOR = "seed@system"

DEPTS = ["Engineering", "Finance", "Sales", "HR", "IT", "Marketing", "Operations", "Support"]
PLANS = ["Medical", "Dental", "Vision"]
COV = ["Employee", "Employee+Spouse", "Employee+Children", "Family"]

ENROLL_MONTHS = (12, 24)
TIME_DAYS = (60, 120)
EMPLOYEE_PREM = (100, 400)
EMPLOYER_PREM = (300, 1200)
SALARY = (55000, 190000)


@dataclass
class SeedDataset:
    workers: list[dict[str, Any]] = field(default_factory=list)
    enrollments: list[dict[str, Any]] = field(default_factory=list)
    time_entries: list[dict[str, Any]] = field(default_factory=list)

    def counts(self) -> dict[str, int]:
        return {
            "workers": len(self.workers),
            "enrollments": len(self.enrollments),
            "timeEntries": len(self.time_entries),
        }


def add_months(start: date, months: int) -> date:
    """Shift ``start`` by whole months, clamping the day to 28."""

    index = start.month - 1 + months
    return date(start.year + index // 12, index % 12 + 1, min(start.day, 28))


def _past_date(rng: random.Random, today: date, *, years: int) -> date:
    return today - timedelta(days=rng.randint(1, 365 * years))


def build_workers(rng: random.Random, faker: Faker, count: int, today: date) -> list[dict[str, Any]]:
    workers = []
    for index in range(count):
        worker_id = f"W{1000 + index}"
        first = faker.first_name()
        last = faker.last_name()
        workers.append(
            {
                "worker_id": worker_id,
                "first_name": first,
                "last_name": last,
                # worker id suffix keeps emails unique
                "email": f"{first}.{last}.{worker_id}@example.com".lower(),
                "department": rng.choice(DEPTS),
                "job_title": faker.job()[:160],
                "hire_date": _past_date(rng, today, years=8),
                "birth_date": today - timedelta(days=rng.randint(22 * 365, 60 * 365)),
                "salary": Decimal(rng.randint(*SALARY)),
                "manager_id": None,
                "status": "Active",
            }
        )
    return workers


def build_enrollments(
    rng: random.Random, workers: list[dict[str, Any]], today: date
) -> list[dict[str, Any]]:
    enrollments = []
    for worker in workers:
        plans = rng.sample(PLANS, rng.randint(1, len(PLANS)))
        months = rng.randint(*ENROLL_MONTHS)
        start = _past_date(rng, today, years=2)
        for plan in plans:
            for offset in range(months):
                enrollments.append(
                    {
                        "worker_id": worker["worker_id"],
                        "plan_type": plan,
                        "coverage_level": rng.choice(COV),
                        "employee_prem": Decimal(rng.randint(*EMPLOYEE_PREM)),
                        "employer_prem": Decimal(rng.randint(*EMPLOYER_PREM)),
                        "effective_date": add_months(start, offset),
                    }
                )
    return enrollments


def build_time_entries(
    rng: random.Random, workers: list[dict[str, Any]], today: date
) -> list[dict[str, Any]]:
    entries = []
    for worker in workers:
        days = rng.randint(*TIME_DAYS)
        start = _past_date(rng, today, years=1)
        for offset in range(days):
            day = start + timedelta(days=offset)
            if day.weekday() >= 5:
                continue
            overtime = rng.randint(1, 15) == 1
            entries.append(
                {
                    "worker_id": worker["worker_id"],
                    "entry_date": day,
                    "hours": Decimal(10 if overtime else 8),
                    "time_type": "OT" if overtime else "Regular",
                }
            )
    return entries


def generate_dataset(seed: int = 42, workers: int = 1000, *, today: date | None = None) -> SeedDataset:
    """Build workers, monthly enrollments and weekday time entries.

    The same ``seed`` and ``today`` always produce the same dataset.
    """

    today = today or date.today()
    rng = random.Random(seed)
    faker = Faker("en_US")
    faker.seed_instance(seed)

    worker_rows = build_workers(rng, faker, workers, today)
    return SeedDataset(
        workers=worker_rows,
        enrollments=build_enrollments(rng, worker_rows, today),
        time_entries=build_time_entries(rng, worker_rows, today),
    )


def _chunks(rows: list[dict[str, Any]], size: int) -> Iterator[list[dict[str, Any]]]:
    for start in range(0, len(rows), size):
        yield rows[start : start + size]


def clear_tables(session: Session) -> None:
    """Delete every row written by imports or a previous seed."""

    for model in (AuditLog, TimeEntry, Enrollment, Worker):
        session.execute(delete(model))


def write_dataset(session: Session, dataset: SeedDataset, *, chunk_size: int = 1000) -> dict[str, int]:
    """Insert ``dataset`` in chunks and record a ``SEED`` audit entry."""

    tables = (
        ("workers", Worker, dataset.workers),
        ("enrollments", Enrollment, dataset.enrollments),
        ("time entries", TimeEntry, dataset.time_entries),
    )
    for label, model, rows in tables:
        with timeit(f"Seed {label}", logger=LOGGER, unit="rows", total=len(rows)), progress_manager.task(
            f"Writing {label}", total=len(rows)
        ) as task:
            for batch in _chunks(rows, chunk_size):
                session.execute(insert(model), batch)
                task.advance(len(batch))

    counts = dataset.counts()
    RecordsRepository(session).add_audit(
        actor=SEED_ACTOR,
        action="SEED",
        entity="System",
        entity_id="-",
        after=counts,
        reason="Initial demo dataset",
    )
    session.flush()
    return counts
