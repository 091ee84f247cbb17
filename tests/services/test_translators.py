from datetime import date

import pytest
from sqlalchemy.exc import OperationalError

from benefits.domain import InvalidReportQuery, ReportQuery, SoapRequestError
from benefits.services.translators import (
    http_error_for,
    parse_envelope,
    query_from_envelope,
    query_from_params,
    soap_fault_for,
)

ENVELOPE = """<?xml version="1.0"?>
<soapenv:Envelope xmlns:soapenv="http://schemas.xmlsoap.org/soap/envelope/"
                  xmlns:raas="urn:openworkdaylab:raas">
  <soapenv:Body>
    <raas:GetBenefitsCost>
      <raas:Dept>Engineering</raas:Dept>
      <raas:From>2024-01-01</raas:From>
      <raas:To>2024-12-31</raas:To>
    </raas:GetBenefitsCost>
  </soapenv:Body>
</soapenv:Envelope>"""


def test_query_params_build_canonical_query() -> None:
    query = query_from_params("2024-01-01", "2024-12-31T23:59:59Z", " Engineering ")

    assert query == ReportQuery(
        start=date(2024, 1, 1), end=date(2024, 12, 31), department="Engineering"
    )


def test_blank_params_mean_defaults() -> None:
    assert query_from_params("", None, "  ") == ReportQuery()


@pytest.mark.parametrize("value", ["not-a-date", "2024-13-01", "01/02/2024"])
def test_invalid_dates_are_rejected(value: str) -> None:
    with pytest.raises(InvalidReportQuery):
        query_from_params(value, None, None)


def test_from_after_to_is_rejected() -> None:
    with pytest.raises(InvalidReportQuery, match="'from' must not be after 'to'"):
        query_from_params("2024-02-01", "2024-01-01", None)


def test_envelope_and_params_produce_same_query() -> None:
    assert query_from_envelope(ENVELOPE) == query_from_params(
        "2024-01-01", "2024-12-31", "Engineering"
    )


def test_request_operation_alias_and_bare_body() -> None:
    payload = b"<Body><GetBenefitsCostRequest><Dept>HR</Dept></GetBenefitsCostRequest></Body>"

    operation = parse_envelope(payload)

    assert operation.name == "GetBenefitsCostRequest"
    assert operation.dept == "HR"
    assert operation.from_ is None


@pytest.mark.parametrize(
    "payload",
    [
        b"",
        b"<Envelope><Body>",
        b"<Envelope><Body><Other/></Body></Envelope>",
        b"<Envelope><Header/></Envelope>",
        b'<!DOCTYPE x [<!ENTITY e "boom">]><Envelope/>',
    ],
)
def test_unusable_envelopes_raise_soap_request_error(payload: bytes) -> None:
    with pytest.raises(SoapRequestError):
        query_from_envelope(payload)


def test_bad_envelope_dates_are_soap_request_errors() -> None:
    payload = ENVELOPE.replace("2024-01-01", "yesterday")

    with pytest.raises(SoapRequestError, match="Invalid 'from' date"):
        query_from_envelope(payload)


def test_error_mapping() -> None:
    store_error = OperationalError("SELECT 1", {}, Exception("gone away"))

    assert soap_fault_for(SoapRequestError("bad")) == ("Client", "bad")
    assert soap_fault_for(store_error) == ("Server", "Report query failed")
    assert soap_fault_for(RuntimeError("secret detail")) == ("Server", "Unhandled error")
    assert http_error_for(InvalidReportQuery("bad")).status_code == 400
    assert http_error_for(store_error).detail == "Report query failed"
