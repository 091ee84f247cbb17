"""ORM models for benefit enrollments and time entries."""
from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import BigInteger, Date, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base

_ID_TYPE = BigInteger().with_variant(Integer, "sqlite")


class Enrollment(Base):
    """Monthly benefit election; ``worker_id`` is deliberately not a foreign key.

    Rows may reference workers that were never imported. Aggregation treats
    them as orphans rather than failing.
    """

    __tablename__ = "enrollment"
    __table_args__ = (Index("ix_enrollment_worker_effective", "worker_id", "effective_date"),)

    id: Mapped[int] = mapped_column(_ID_TYPE, primary_key=True, autoincrement=True)
    worker_id: Mapped[str] = mapped_column(String(32), nullable=False)
    plan_type: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    coverage_level: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    employee_prem: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    employer_prem: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    effective_date: Mapped[date] = mapped_column(Date, nullable=False)


class TimeEntry(Base):
    """Hours booked by a worker on a day. Stored only; no report reads it."""

    __tablename__ = "time_entry"

    id: Mapped[int] = mapped_column(_ID_TYPE, primary_key=True, autoincrement=True)
    worker_id: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    entry_date: Mapped[date] = mapped_column("date", Date, nullable=False)
    hours: Mapped[Decimal] = mapped_column(Numeric(6, 2), nullable=False)
    time_type: Mapped[str] = mapped_column(String(32), nullable=False, default="Regular")
