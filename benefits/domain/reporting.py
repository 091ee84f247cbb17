"""Immutable value objects flowing through the benefits cost engine."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

EPOCH_START = date(1970, 1, 1)


@dataclass(frozen=True, slots=True)
class ReportQuery:
    """Canonical report parameters shared by every request surface.

    ``start``/``end`` are inclusive; ``None`` means "use the report default".
    """

    start: date | None = None
    end: date | None = None
    department: str | None = None

    def worker_window(self, today: date) -> tuple[date, date]:
        """Window for per-worker costs: epoch start through ``today`` by default."""

        return (self.start or EPOCH_START, self.end or today)


@dataclass(frozen=True, slots=True)
class WorkerSnapshot:
    """The subset of a worker row the aggregations read."""

    worker_id: str
    first_name: str
    last_name: str
    department: str
    hire_date: date
    salary: Decimal


@dataclass(frozen=True, slots=True)
class EnrollmentSnapshot:
    worker_id: str
    employee_prem: Decimal
    employer_prem: Decimal
    effective_date: date

    @property
    def premium(self) -> Decimal:
        return self.employee_prem + self.employer_prem


@dataclass(frozen=True, slots=True)
class CostRecord:
    """Per-worker benefits cost row; computed per request, never stored."""

    worker_id: str
    first_name: str
    last_name: str
    department: str
    salary: Decimal
    years_of_service: int
    benefits_cost: Decimal
    pct_salary: Decimal | None
    total_comp: Decimal


@dataclass(frozen=True, slots=True)
class DepartmentRollup:
    department: str
    employees: int
    total_benefits_cost: Decimal
    avg_benefits_per_employee: Decimal
    avg_salary: Decimal
    avg_pct_salary: Decimal | None


@dataclass(frozen=True, slots=True)
class TrendPoint:
    """Premium total for one calendar month (``month`` is its first day)."""

    month: date
    benefits_cost: Decimal
    department: str | None = None
