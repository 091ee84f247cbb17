"""Render one immutable result sequence as JSON, CSV or a SOAP envelope.

Projectors never recompute anything: they only re-encode the rows handed to
them, so every surface reports the same values in the same order.
"""
from __future__ import annotations

import csv
import io
import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Callable, Generic, Sequence, TypeVar

from pydantic import BaseModel, TypeAdapter

from benefits.core.formatting import has_xml_illegal_chars, plain_decimal
from benefits.domain import CostRecord, ReportingError

RowT = TypeVar("RowT")

SOAP_ENV_NS = "http://schemas.xmlsoap.org/soap/envelope/"
RAAS_NS = "urn:openworkdaylab:raas"
XSI_NS = "http://www.w3.org/2001/XMLSchema-instance"

ET.register_namespace("soapenv", SOAP_ENV_NS)
ET.register_namespace("tns", RAAS_NS)
ET.register_namespace("xsi", XSI_NS)


@dataclass(frozen=True, slots=True)
class Column:
    """A cost record field under its JSON/CSV name and its XML element name."""

    name: str
    element: str
    attribute: str


COST_RECORD_COLUMNS: tuple[Column, ...] = (
    Column("workerId", "WorkerId", "worker_id"),
    Column("firstName", "FirstName", "first_name"),
    Column("lastName", "LastName", "last_name"),
    Column("department", "Department", "department"),
    Column("salary", "Salary", "salary"),
    Column("yearsOfService", "YearsOfService", "years_of_service"),
    Column("benefitsCost", "BenefitsCost", "benefits_cost"),
    Column("pctSalary", "PctSalary", "pct_salary"),
    Column("totalComp", "TotalComp", "total_comp"),
)


def field_text(value: object) -> str | None:
    """Text form of a result value; ``None`` stays ``None``."""

    if value is None:
        return None
    if isinstance(value, Decimal):
        return plain_decimal(value)
    return str(value)


@dataclass(frozen=True)
class RenderedReport:
    body: bytes
    media_type: str
    headers: dict[str, str] = field(default_factory=dict)


class Projector(ABC, Generic[RowT]):
    """Strategy interface: encode a row sequence for one output surface."""

    media_type: str = "application/octet-stream"

    @abstractmethod
    def render(self, rows: Sequence[RowT]) -> RenderedReport:
        raise NotImplementedError


class JsonProjector(Projector[RowT]):
    """Serialise rows through a pydantic response schema."""

    media_type = "application/json"

    def __init__(
        self,
        schema: type[BaseModel],
        convert: Callable[[RowT], BaseModel],
        *,
        exclude_none: bool = False,
    ) -> None:
        self._adapter = TypeAdapter(list[schema])  # type: ignore[valid-type]
        self._convert = convert
        self._exclude_none = exclude_none

    def render(self, rows: Sequence[RowT]) -> RenderedReport:
        payload = [self._convert(row) for row in rows]
        body = self._adapter.dump_json(
            payload, by_alias=True, exclude_none=self._exclude_none
        )
        return RenderedReport(body=body, media_type=self.media_type)


class CsvProjector(Projector[CostRecord]):
    """RFC 4180 CSV: fixed columns, header always present, every field quoted."""

    media_type = "text/csv"

    def __init__(
        self,
        columns: Sequence[Column] = COST_RECORD_COLUMNS,
        *,
        filename: str = "benefits_cost.csv",
    ) -> None:
        self._columns = tuple(columns)
        self._filename = filename

    def render(self, rows: Sequence[CostRecord]) -> RenderedReport:
        buffer = io.StringIO()
        writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\r\n")
        writer.writerow([column.name for column in self._columns])
        for row in rows:
            writer.writerow(
                [field_text(getattr(row, column.attribute)) or "" for column in self._columns]
            )
        return RenderedReport(
            body=buffer.getvalue().encode("utf-8"),
            media_type=f"{self.media_type}; charset=utf-8",
            headers={"Content-Disposition": f"attachment; filename={self._filename}"},
        )


def _xml_text(value: object, element: str) -> str | None:
    text = field_text(value)
    if text is not None and has_xml_illegal_chars(text):
        raise ReportingError(f"{element} value contains characters not allowed in XML")
    return text


def _soap_envelope() -> tuple[ET.Element, ET.Element]:
    envelope = ET.Element(f"{{{SOAP_ENV_NS}}}Envelope")
    body = ET.SubElement(envelope, f"{{{SOAP_ENV_NS}}}Body")
    return envelope, body


def _to_xml_bytes(envelope: ET.Element) -> bytes:
    ET.indent(envelope)
    return ET.tostring(envelope, encoding="utf-8", xml_declaration=True)


class SoapEnvelopeProjector(Projector[CostRecord]):
    """Wrap cost records in a ``GetBenefitsCostResponse`` SOAP 1.1 envelope.

    Numbers are written as fixed-point decimal strings; a missing
    ``PctSalary`` is written as an ``xsi:nil`` element.
    """

    media_type = "text/xml"

    def __init__(
        self,
        columns: Sequence[Column] = COST_RECORD_COLUMNS,
        *,
        operation: str = "GetBenefitsCost",
    ) -> None:
        self._columns = tuple(columns)
        self._operation = operation

    def _qualified(self, name: str) -> str:
        return f"{{{RAAS_NS}}}{name}"

    def render(self, rows: Sequence[CostRecord]) -> RenderedReport:
        envelope, body = _soap_envelope()
        response = ET.SubElement(body, self._qualified(f"{self._operation}Response"))
        items = ET.SubElement(response, self._qualified("Items"))
        for row in rows:
            item = ET.SubElement(items, self._qualified("Item"))
            for column in self._columns:
                child = ET.SubElement(item, self._qualified(column.element))
                text = _xml_text(getattr(row, column.attribute), column.element)
                if text is None:
                    child.set(f"{{{XSI_NS}}}nil", "true")
                else:
                    child.text = text
        return RenderedReport(
            body=_to_xml_bytes(envelope),
            media_type=f"{self.media_type}; charset=utf-8",
        )

    def fault(self, code: str, message: str) -> RenderedReport:
        """Render a SOAP fault carrying ``code`` and ``message`` only."""

        envelope, body = _soap_envelope()
        fault = ET.SubElement(body, f"{{{SOAP_ENV_NS}}}Fault")
        # SOAP 1.1 fault children are unqualified.
        ET.SubElement(fault, "faultcode").text = f"soapenv:{code}"
        ET.SubElement(fault, "faultstring").text = message
        return RenderedReport(
            body=_to_xml_bytes(envelope),
            media_type=f"{self.media_type}; charset=utf-8",
        )


def negotiate(
    accept: str | None, *, json_projector: Projector, csv_projector: Projector
) -> Projector:
    """Pick the CSV projector when ``Accept`` mentions ``text/csv``; JSON otherwise."""

    if accept and "text/csv" in accept.lower():
        return csv_projector
    return json_projector
