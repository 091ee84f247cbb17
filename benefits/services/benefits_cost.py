"""Service implementation for the benefits cost reports."""
from __future__ import annotations

from datetime import date
from typing import Callable

from sqlalchemy.orm import Session

from benefits.core.logger import get_logger, timeit
from benefits.domain import CostRecord, DepartmentRollup, ReportQuery, TrendPoint
from benefits.repositories import ReportingRepository
from benefits.services.aggregation import (
    aggregate_worker_costs,
    monthly_trend,
    rollup_departments,
)

LOGGER = get_logger(__name__)


class BenefitsCostService:
    """Loads store rows for a query and hands them to the aggregation functions.

    Every call recomputes from the current store state; nothing is cached and
    a store failure propagates unchanged so no partial result escapes.
    """

    def __init__(self, session: Session, *, today: Callable[[], date] = date.today) -> None:
        self._session = session
        self._repository = ReportingRepository(session)
        self._today = today

    def cost_by_worker(self, query: ReportQuery) -> tuple[CostRecord, ...]:
        """Return per-worker cost records for ``query``."""

        today = self._today()
        start, end = query.worker_window(today)
        LOGGER.debug(
            "Loading benefits cost by worker start=%s end=%s dept=%s",
            start,
            end,
            query.department,
        )
        with timeit("Benefits cost by worker", logger=LOGGER, unit="workers", session=self._session) as timer:
            workers = self._repository.fetch_workers(department=query.department)
            enrollments = self._repository.fetch_enrollments(
                start=start, end=end, department=query.department
            )
            records = aggregate_worker_costs(workers, enrollments, query, today=today)
            timer.set_total(len(records))
        return records

    def cost_by_department(self) -> tuple[DepartmentRollup, ...]:
        """Return the all-time department roll-up."""

        with timeit("Benefits cost by department", logger=LOGGER, unit="departments", session=self._session) as timer:
            workers = self._repository.fetch_workers()
            enrollments = self._repository.fetch_enrollments()
            rollups = rollup_departments(workers, enrollments)
            timer.set_total(len(rollups))
        return rollups

    def cost_trend(self, query: ReportQuery) -> tuple[TrendPoint, ...]:
        """Return the monthly premium trend, optionally for one department."""

        with timeit("Benefits cost trend", logger=LOGGER, unit="months", session=self._session) as timer:
            workers = self._repository.fetch_workers(department=query.department)
            enrollments = self._repository.fetch_enrollments(
                start=query.start, end=query.end, department=query.department
            )
            points = monthly_trend(workers, enrollments, query)
            timer.set_total(len(points))
        return points
