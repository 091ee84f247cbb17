"""Database models for the benefits domain."""
from __future__ import annotations

from .audit import AuditLog
from .base import Base
from .enrollments import Enrollment, TimeEntry
from .workers import Worker

__all__ = [
    "AuditLog",
    "Base",
    "Enrollment",
    "TimeEntry",
    "Worker",
]
