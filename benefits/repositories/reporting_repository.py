"""Range queries feeding the benefits cost aggregations."""
from __future__ import annotations

from datetime import date

from sqlalchemy import select

from benefits.domain import EnrollmentSnapshot, WorkerSnapshot
from benefits.models import Enrollment, Worker

from .base import BaseRepository


class ReportingRepository(BaseRepository):
    """Read-only access to workers and enrollments for report queries."""

    def fetch_workers(self, *, department: str | None = None) -> list[WorkerSnapshot]:
        """Return workers in storage order, optionally restricted to one department."""

        statement = select(
            Worker.worker_id,
            Worker.first_name,
            Worker.last_name,
            Worker.department,
            Worker.hire_date,
            Worker.salary,
        ).order_by(Worker.id)
        if department is not None:
            statement = statement.where(Worker.department == department)

        return [
            WorkerSnapshot(
                worker_id=row.worker_id,
                first_name=row.first_name or "",
                last_name=row.last_name or "",
                department=row.department or "",
                hire_date=self._coerce_date(row.hire_date),
                salary=self._to_decimal(row.salary),
            )
            for row in self._session.execute(statement)
        ]

    def fetch_enrollments(
        self,
        *,
        start: date | None = None,
        end: date | None = None,
        department: str | None = None,
    ) -> list[EnrollmentSnapshot]:
        """Return enrollments of known workers with ``effective_date`` in ``[start, end]``.

        Orphaned enrollments (no matching worker) are excluded by the join.
        """

        statement = (
            select(
                Enrollment.worker_id,
                Enrollment.employee_prem,
                Enrollment.employer_prem,
                Enrollment.effective_date,
            )
            .join(Worker, Worker.worker_id == Enrollment.worker_id)
            .order_by(Enrollment.id)
        )
        if start is not None:
            statement = statement.where(Enrollment.effective_date >= start)
        if end is not None:
            statement = statement.where(Enrollment.effective_date <= end)
        if department is not None:
            statement = statement.where(Worker.department == department)

        return [
            EnrollmentSnapshot(
                worker_id=row.worker_id,
                employee_prem=self._to_decimal(row.employee_prem),
                employer_prem=self._to_decimal(row.employer_prem),
                effective_date=self._coerce_date(row.effective_date),
            )
            for row in self._session.execute(statement)
        ]
