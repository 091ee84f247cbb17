"""ORM model representing workers (employees) and their compensation."""
from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import BigInteger, Date, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base

_ID_TYPE = BigInteger().with_variant(Integer, "sqlite")


class Worker(Base):
    """Identity record for a worker, keyed externally by ``worker_id``."""

    __tablename__ = "worker"

    id: Mapped[int] = mapped_column(_ID_TYPE, primary_key=True, autoincrement=True)
    worker_id: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    first_name: Mapped[str] = mapped_column(String(120), nullable=False, default="")
    last_name: Mapped[str] = mapped_column(String(120), nullable=False, default="", index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    department: Mapped[str] = mapped_column(String(120), nullable=False, default="", index=True)
    job_title: Mapped[str] = mapped_column(String(160), nullable=False, default="")
    hire_date: Mapped[date] = mapped_column(Date, nullable=False)
    birth_date: Mapped[date] = mapped_column(Date, nullable=False)
    salary: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    manager_id: Mapped[str | None] = mapped_column(String(32))
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="Active")
