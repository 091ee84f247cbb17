"""Exception hierarchy for report queries."""
from __future__ import annotations


class ReportingError(Exception):
    """Base class for failures the reporting surfaces know how to render."""

    #: Message safe to show to callers; subclasses carry their own text.
    public_message = "Report query failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.public_message)

    @property
    def message(self) -> str:
        return str(self.args[0]) if self.args else self.public_message


class InvalidReportQuery(ReportingError):
    """The caller supplied parameters that cannot form a report query."""


class SoapRequestError(InvalidReportQuery):
    """The SOAP envelope is malformed or lacks the operation element."""
