"""Domain value objects and errors for the benefits cost engine."""

from .errors import InvalidReportQuery, ReportingError, SoapRequestError
from .reporting import (
    EPOCH_START,
    CostRecord,
    DepartmentRollup,
    EnrollmentSnapshot,
    ReportQuery,
    TrendPoint,
    WorkerSnapshot,
)

__all__ = [
    "EPOCH_START",
    "CostRecord",
    "DepartmentRollup",
    "EnrollmentSnapshot",
    "InvalidReportQuery",
    "ReportQuery",
    "ReportingError",
    "SoapRequestError",
    "TrendPoint",
    "WorkerSnapshot",
]
