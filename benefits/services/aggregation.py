"""Pure aggregation functions behind the three benefits cost reports.

Each function takes plain worker/enrollment snapshots so it can be exercised
against an in-memory fixture without a database. The repository narrows the
rows it loads, but every function applies its own filters again and ignores
enrollments whose worker is unknown.
"""
from __future__ import annotations

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Iterable, Sequence

from benefits.domain import (
    CostRecord,
    DepartmentRollup,
    EnrollmentSnapshot,
    ReportQuery,
    TrendPoint,
    WorkerSnapshot,
)

ZERO = Decimal(0)


def years_of_service(hire_date: date, today: date) -> int:
    """Whole years elapsed since ``hire_date``; hires in the future count as zero."""

    years = today.year - hire_date.year
    if (today.month, today.day) < (hire_date.month, hire_date.day):
        years -= 1
    return max(years, 0)


def salary_ratio(cost: Decimal, salary: Decimal) -> Decimal | None:
    """``cost / salary``, or ``None`` when the salary is not positive."""

    if salary <= 0:
        return None
    return cost / salary


def _in_window(day: date, start: date | None, end: date | None) -> bool:
    if start is not None and day < start:
        return False
    if end is not None and day > end:
        return False
    return True


def _premiums_by_worker(
    enrollments: Iterable[EnrollmentSnapshot],
    *,
    start: date | None = None,
    end: date | None = None,
) -> dict[str, Decimal]:
    totals: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for enrollment in enrollments:
        if _in_window(enrollment.effective_date, start, end):
            totals[enrollment.worker_id] += enrollment.premium
    return totals


def aggregate_worker_costs(
    workers: Sequence[WorkerSnapshot],
    enrollments: Iterable[EnrollmentSnapshot],
    query: ReportQuery,
    *,
    today: date,
) -> tuple[CostRecord, ...]:
    """One cost record per worker in ``query.department``, sorted by last name.

    The sort is stable, so workers sharing a last name keep their input order.
    """

    start, end = query.worker_window(today)
    totals = _premiums_by_worker(enrollments, start=start, end=end)

    records = []
    for worker in workers:
        if query.department is not None and worker.department != query.department:
            continue
        cost = totals.get(worker.worker_id, ZERO)
        records.append(
            CostRecord(
                worker_id=worker.worker_id,
                first_name=worker.first_name,
                last_name=worker.last_name,
                department=worker.department,
                salary=worker.salary,
                years_of_service=years_of_service(worker.hire_date, today),
                benefits_cost=cost,
                pct_salary=salary_ratio(cost, worker.salary),
                total_comp=worker.salary + cost,
            )
        )
    return tuple(sorted(records, key=lambda record: record.last_name))


def rollup_departments(
    workers: Sequence[WorkerSnapshot],
    enrollments: Iterable[EnrollmentSnapshot],
) -> tuple[DepartmentRollup, ...]:
    """Department totals over each worker's all-time enrollment cost.

    ``avg_pct_salary`` averages the per-worker ratios (zero-salary workers are
    skipped), which differs from total cost over total salary.
    """

    totals = _premiums_by_worker(enrollments)
    grouped: dict[str, list[WorkerSnapshot]] = defaultdict(list)
    for worker in workers:
        grouped[worker.department].append(worker)

    rollups = []
    for department in sorted(grouped):
        members = grouped[department]
        costs = [totals.get(worker.worker_id, ZERO) for worker in members]
        ratios = [
            ratio
            for ratio in (
                salary_ratio(cost, worker.salary) for cost, worker in zip(costs, members)
            )
            if ratio is not None
        ]
        headcount = len(members)
        total_cost = sum(costs, ZERO)
        rollups.append(
            DepartmentRollup(
                department=department,
                employees=headcount,
                total_benefits_cost=total_cost,
                avg_benefits_per_employee=total_cost / headcount,
                avg_salary=sum((worker.salary for worker in members), ZERO) / headcount,
                avg_pct_salary=sum(ratios, ZERO) / len(ratios) if ratios else None,
            )
        )
    rollups.sort(key=lambda rollup: rollup.total_benefits_cost, reverse=True)
    return tuple(rollups)


def monthly_trend(
    workers: Sequence[WorkerSnapshot],
    enrollments: Iterable[EnrollmentSnapshot],
    query: ReportQuery,
) -> tuple[TrendPoint, ...]:
    """Premium totals per calendar month, ascending, with empty months omitted."""

    departments = {worker.worker_id: worker.department for worker in workers}
    buckets: dict[date, Decimal] = defaultdict(lambda: ZERO)
    for enrollment in enrollments:
        department = departments.get(enrollment.worker_id)
        if department is None:
            continue
        if query.department is not None and department != query.department:
            continue
        if not _in_window(enrollment.effective_date, query.start, query.end):
            continue
        day = enrollment.effective_date
        buckets[date(day.year, day.month, 1)] += enrollment.premium

    return tuple(
        TrendPoint(month=month, benefits_cost=buckets[month], department=query.department)
        for month in sorted(buckets)
    )
