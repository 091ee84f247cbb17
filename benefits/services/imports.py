"""Row-by-row CSV import of workers, enrollments and time entries."""
from __future__ import annotations

import csv
import io
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Iterable, Mapping

from sqlalchemy.exc import DataError, IntegrityError
from sqlalchemy.orm import Session

from benefits.core.formatting import has_xml_illegal_chars, plain_decimal
from benefits.core.logger import get_logger, log_context, timeit
from benefits.repositories import RecordsRepository
from benefits.schemas import ImportResult

LOGGER = get_logger(__name__)

IMPORT_ACTION = "IMPORT"
IMPORT_REASON = "EIB import"

Row = Mapping[str, str]


class RowError(ValueError):
    """A single CSV row failed validation; the batch continues."""


def read_csv_rows(content: bytes) -> list[dict[str, str]]:
    """Parse an uploaded CSV (header row required) into trimmed dictionaries."""

    text = content.decode("utf-8-sig")
    reader = csv.DictReader(io.StringIO(text))
    rows = []
    for raw in reader:
        rows.append(
            {
                (key or "").strip(): (value or "").strip() if isinstance(value, str) else ""
                for key, value in raw.items()
                if key is not None
            }
        )
    return rows


def _text(row: Row, key: str, default: str = "") -> str:
    value = (row.get(key) or default).strip()
    if has_xml_illegal_chars(value):
        raise RowError(f"{key} contains control characters")
    return value


def _as_decimal(value: str | None) -> Decimal | None:
    if value is None or not value.strip():
        return None
    try:
        parsed = Decimal(value.strip())
    except InvalidOperation:
        return None
    return parsed if parsed.is_finite() else None


def _as_date(value: str | None) -> date | None:
    if not value or not value.strip():
        return None
    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def _json_safe(values: Mapping[str, Any] | None) -> dict[str, Any] | None:
    if values is None:
        return None
    safe: dict[str, Any] = {}
    for key, value in values.items():
        if isinstance(value, Decimal):
            safe[key] = plain_decimal(value)
        elif isinstance(value, date):
            safe[key] = value.isoformat()
        else:
            safe[key] = value
    return safe


def worker_values(row: Row) -> dict[str, Any]:
    """Validate a ``workers.csv`` row.

    Columns: workerId,firstName,lastName,email,department,jobTitle,hireDate,
    birthDate,salary,managerId,status
    """

    worker_id = _text(row, "workerId")
    email = _text(row, "email")
    if not worker_id or not email:
        raise RowError("workerId and email required")
    hire_date = _as_date(row.get("hireDate"))
    if hire_date is None:
        raise RowError("invalid hireDate")
    birth_date = _as_date(row.get("birthDate"))
    if birth_date is None:
        raise RowError("invalid birthDate")
    salary = _as_decimal(row.get("salary"))
    if salary is None or salary < 0:
        raise RowError("invalid salary")
    return {
        "worker_id": worker_id,
        "first_name": _text(row, "firstName"),
        "last_name": _text(row, "lastName"),
        "email": email,
        "department": _text(row, "department"),
        "job_title": _text(row, "jobTitle"),
        "hire_date": hire_date,
        "birth_date": birth_date,
        "salary": salary,
        "manager_id": _text(row, "managerId") or None,
        "status": _text(row, "status", "Active") or "Active",
    }


def enrollment_values(row: Row) -> dict[str, Any]:
    """Validate an ``enrollments.csv`` row.

    Columns: workerId,planType,coverageLevel,employeePrem,employerPrem,effectiveDate
    """

    worker_id = _text(row, "workerId")
    if not worker_id:
        raise RowError("workerId required")
    effective_date = _as_date(row.get("effectiveDate"))
    if effective_date is None:
        raise RowError("invalid effectiveDate")
    employee_prem = _as_decimal(row.get("employeePrem"))
    employer_prem = _as_decimal(row.get("employerPrem"))
    if employee_prem is None or employer_prem is None:
        raise RowError("invalid employeePrem/employerPrem")
    if employee_prem < 0 or employer_prem < 0:
        raise RowError("premiums must not be negative")
    return {
        "worker_id": worker_id,
        "plan_type": _text(row, "planType"),
        "coverage_level": _text(row, "coverageLevel"),
        "employee_prem": employee_prem,
        "employer_prem": employer_prem,
        "effective_date": effective_date,
    }


def time_entry_values(row: Row) -> dict[str, Any]:
    """Validate a ``time_entries.csv`` row. Columns: workerId,date,hours,timeType"""

    worker_id = _text(row, "workerId")
    if not worker_id:
        raise RowError("workerId required")
    entry_date = _as_date(row.get("date"))
    if entry_date is None:
        raise RowError("invalid date")
    hours = _as_decimal(row.get("hours"))
    if hours is None:
        raise RowError("invalid hours")
    return {
        "worker_id": worker_id,
        "entry_date": entry_date,
        "hours": hours,
        "time_type": _text(row, "timeType", "Regular") or "Regular",
    }


class ImportService:
    """Validate and store uploaded rows, one commit and audit entry per row.

    Invalid rows and constraint violations are reported as ``row N: message``
    and skipped. Any other store failure aborts the import.
    """

    def __init__(self, session: Session, *, actor: str) -> None:
        self._session = session
        self._records = RecordsRepository(session)
        self._actor = actor

    def import_workers(self, rows: Iterable[Row]) -> ImportResult:
        def persist(values: dict[str, Any]) -> dict[str, Any] | None:
            _, before = self._records.upsert_worker(values)
            return before

        return self._run("Worker", rows, worker_values, persist)

    def import_enrollments(self, rows: Iterable[Row]) -> ImportResult:
        def persist(values: dict[str, Any]) -> None:
            self._records.add_enrollment(values)

        return self._run("Enrollment", rows, enrollment_values, persist)

    def import_time_entries(self, rows: Iterable[Row]) -> ImportResult:
        def persist(values: dict[str, Any]) -> None:
            self._records.add_time_entry(values)

        return self._run("TimeEntry", rows, time_entry_values, persist)

    def _run(
        self,
        entity: str,
        rows: Iterable[Row],
        validate: Callable[[Row], dict[str, Any]],
        persist: Callable[[dict[str, Any]], dict[str, Any] | None],
    ) -> ImportResult:
        result = ImportResult()
        with log_context.scoped(import_entity=entity), timeit(
            f"Import {entity} rows", logger=LOGGER, unit="rows"
        ) as timer:
            for index, row in enumerate(rows, start=1):
                try:
                    values = validate(row)
                    before = persist(values)
                    self._records.add_audit(
                        actor=self._actor,
                        action=IMPORT_ACTION,
                        entity=entity,
                        entity_id=values["worker_id"],
                        before=_json_safe(before),
                        after=_json_safe(values),
                        reason=IMPORT_REASON,
                    )
                    self._session.commit()
                except RowError as exc:
                    result.errors.append(f"row {index}: {exc}")
                except (IntegrityError, DataError) as exc:
                    self._session.rollback()
                    LOGGER.warning("Row %s rejected by the store: %s", index, exc.orig)
                    result.errors.append(f"row {index}: rejected by the store ({type(exc.orig).__name__})")
                except Exception:
                    self._session.rollback()
                    raise
                else:
                    result.imported += 1
                timer.add()
        LOGGER.info(
            "Imported %s %s rows with %s errors", result.imported, entity, len(result.errors)
        )
        return result
