"""Translate surface-specific requests into ``ReportQuery`` and errors back out.

Both front ends funnel through :func:`build_query`, so a query-string request
and a SOAP request with the same values produce the same query object.
"""
from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from datetime import date, datetime

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError

from benefits.domain import InvalidReportQuery, ReportQuery, ReportingError, SoapRequestError

SOAP_OPERATIONS = ("GetBenefitsCost", "GetBenefitsCostRequest")
STORE_FAILURE_MESSAGE = "Report query failed"
UNHANDLED_MESSAGE = "Unhandled error"


def parse_report_date(value: str | None, *, field: str) -> date | None:
    """Parse an ISO date (or ISO datetime, truncated to its date).

    Blank values mean "not supplied"; anything unparseable is rejected rather
    than replaced by a default.
    """

    if value is None:
        return None
    text = value.strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        raise InvalidReportQuery(f"Invalid '{field}' date: {value!r}") from None


def build_query(
    *,
    start: str | None = None,
    end: str | None = None,
    department: str | None = None,
) -> ReportQuery:
    """Validate raw values and assemble the canonical query."""

    start_date = parse_report_date(start, field="from")
    end_date = parse_report_date(end, field="to")
    if start_date and end_date and start_date > end_date:
        raise InvalidReportQuery("'from' must not be after 'to'")
    department = department.strip() if department else None
    return ReportQuery(start=start_date, end=end_date, department=department or None)


def query_from_params(
    from_: str | None = None,
    to: str | None = None,
    dept: str | None = None,
) -> ReportQuery:
    """Query-string front end: ``from``, ``to`` and ``dept`` parameters."""

    return build_query(start=from_, end=to, department=dept)


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _child(element: ET.Element, name: str) -> ET.Element | None:
    for child in element:
        if _local_name(child.tag) == name:
            return child
    return None


@dataclass(frozen=True, slots=True)
class SoapOperation:
    """Values carried by the operation element of a SOAP request."""

    name: str
    dept: str | None
    from_: str | None
    to: str | None


def parse_envelope(payload: bytes | str) -> SoapOperation:
    """Extract the ``GetBenefitsCost`` operation from a SOAP envelope.

    Namespace prefixes are ignored. A bare ``Body`` root is accepted as well
    as a full ``Envelope``.
    """

    raw = payload.encode("utf-8") if isinstance(payload, str) else payload
    if not raw.strip():
        raise SoapRequestError("Empty SOAP request body")
    if b"<!DOCTYPE" in raw.upper():
        raise SoapRequestError("Document type declarations are not allowed")
    try:
        root = ET.fromstring(raw)
    except ET.ParseError as exc:
        raise SoapRequestError(f"Malformed XML envelope: {exc}") from None

    if _local_name(root.tag) == "Envelope":
        body = _child(root, "Body")
    elif _local_name(root.tag) == "Body":
        body = root
    else:
        body = None
    if body is None:
        raise SoapRequestError("SOAP Body element not found")

    for name in SOAP_OPERATIONS:
        operation = _child(body, name)
        if operation is not None:
            break
    else:
        raise SoapRequestError("GetBenefitsCost operation element not found")

    def _value(field: str) -> str | None:
        element = _child(operation, field)
        if element is None or element.text is None:
            return None
        return element.text.strip() or None

    return SoapOperation(name=name, dept=_value("Dept"), from_=_value("From"), to=_value("To"))


def query_from_envelope(payload: bytes | str) -> ReportQuery:
    """SOAP front end: map ``Dept``/``From``/``To`` onto the canonical query."""

    operation = parse_envelope(payload)
    try:
        return build_query(start=operation.from_, end=operation.to, department=operation.dept)
    except SoapRequestError:
        raise
    except InvalidReportQuery as exc:
        raise SoapRequestError(exc.message) from None


def soap_fault_for(exc: BaseException) -> tuple[str, str]:
    """Map a failure to a stable SOAP fault code and a caller-safe message."""

    if isinstance(exc, InvalidReportQuery):
        return "Client", exc.message
    if isinstance(exc, ReportingError):
        return "Server", exc.message
    if isinstance(exc, SQLAlchemyError):
        return "Server", STORE_FAILURE_MESSAGE
    return "Server", UNHANDLED_MESSAGE


def http_error_for(exc: Exception) -> HTTPException:
    """Map a failure to the JSON surface's ``HTTPException`` convention."""

    if isinstance(exc, InvalidReportQuery):
        return HTTPException(status_code=400, detail=exc.message)
    if isinstance(exc, ReportingError):
        return HTTPException(status_code=500, detail=exc.message)
    if isinstance(exc, SQLAlchemyError):
        return HTTPException(status_code=500, detail=STORE_FAILURE_MESSAGE)
    return HTTPException(status_code=500, detail=UNHANDLED_MESSAGE)
