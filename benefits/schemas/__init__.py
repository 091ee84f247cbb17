"""Pydantic schemas for request and response payloads."""

from .reports import CostRecordOut, DepartmentRollupOut, ImportResult, TrendPointOut

__all__ = [
    "CostRecordOut",
    "DepartmentRollupOut",
    "ImportResult",
    "TrendPointOut",
]
