"""Data access layer over the worker/enrollment store."""

from .records_repository import RecordsRepository
from .reporting_repository import ReportingRepository

__all__ = ["RecordsRepository", "ReportingRepository"]
