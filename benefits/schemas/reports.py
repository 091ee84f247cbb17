"""Response schemas for the benefits cost reports."""
from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field, field_serializer

from benefits.core.formatting import json_number
from benefits.domain import CostRecord, DepartmentRollup, TrendPoint


class CostRecordOut(BaseModel):
    """Per-worker benefits cost row using the public camelCase field names."""

    worker_id: str = Field(serialization_alias="workerId")
    first_name: str = Field(serialization_alias="firstName")
    last_name: str = Field(serialization_alias="lastName")
    department: str
    salary: Decimal
    years_of_service: int = Field(serialization_alias="yearsOfService")
    benefits_cost: Decimal = Field(serialization_alias="benefitsCost")
    pct_salary: Decimal | None = Field(default=None, serialization_alias="pctSalary")
    total_comp: Decimal = Field(serialization_alias="totalComp")

    @field_serializer("salary", "benefits_cost", "total_comp")
    def _serialize_amount(self, value: Decimal) -> float | str:
        return json_number(value)

    @field_serializer("pct_salary")
    def _serialize_ratio(self, value: Decimal | None) -> float | str | None:
        return None if value is None else json_number(value)

    @classmethod
    def from_domain(cls, record: CostRecord) -> "CostRecordOut":
        return cls(
            worker_id=record.worker_id,
            first_name=record.first_name,
            last_name=record.last_name,
            department=record.department,
            salary=record.salary,
            years_of_service=record.years_of_service,
            benefits_cost=record.benefits_cost,
            pct_salary=record.pct_salary,
            total_comp=record.total_comp,
        )


class DepartmentRollupOut(BaseModel):
    """Department level aggregate of worker benefits costs."""

    department: str
    employees: int
    total_benefits_cost: Decimal
    avg_benefits_per_employee: Decimal
    avg_salary: Decimal
    avg_pct_salary: Decimal | None = None

    @field_serializer("total_benefits_cost", "avg_benefits_per_employee", "avg_salary")
    def _serialize_amount(self, value: Decimal) -> float | str:
        return json_number(value)

    @field_serializer("avg_pct_salary")
    def _serialize_ratio(self, value: Decimal | None) -> float | str | None:
        return None if value is None else json_number(value)

    @classmethod
    def from_domain(cls, rollup: DepartmentRollup) -> "DepartmentRollupOut":
        return cls(
            department=rollup.department,
            employees=rollup.employees,
            total_benefits_cost=rollup.total_benefits_cost,
            avg_benefits_per_employee=rollup.avg_benefits_per_employee,
            avg_salary=rollup.avg_salary,
            avg_pct_salary=rollup.avg_pct_salary,
        )


class TrendPointOut(BaseModel):
    """Monthly premium total; ``department`` is present only when filtered."""

    month: date
    department: str | None = None
    benefits_cost: Decimal

    @field_serializer("benefits_cost")
    def _serialize_amount(self, value: Decimal) -> float | str:
        return json_number(value)

    @classmethod
    def from_domain(cls, point: TrendPoint) -> "TrendPointOut":
        return cls(month=point.month, department=point.department, benefits_cost=point.benefits_cost)


class ImportResult(BaseModel):
    """Outcome of a CSV import: rows written and per-row failure messages."""

    imported: int = 0
    errors: list[str] = Field(default_factory=list)
