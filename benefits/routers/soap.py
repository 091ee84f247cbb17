"""SOAP 1.1 surface for the benefits cost report (RaaS style)."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from fastapi import APIRouter, Depends, Request, Response
from starlette.concurrency import run_in_threadpool

from benefits.core.config import get_settings
from benefits.core.logger import get_logger
from benefits.domain import InvalidReportQuery, SoapRequestError
from benefits.services import BenefitsCostService
from benefits.services.projectors import RenderedReport, SoapEnvelopeProjector
from benefits.services.translators import query_from_envelope, soap_fault_for
from benefits.web.dependencies import get_benefits_cost_service

router = APIRouter(prefix="/api/soap", tags=["soap"])
LOGGER = get_logger(__name__)

WSDL_PATH = Path(__file__).resolve().parent.parent / "resources" / "raas.wsdl"
ENVELOPE = SoapEnvelopeProjector()


@lru_cache(maxsize=1)
def load_wsdl() -> bytes:
    return WSDL_PATH.read_bytes()


async def read_envelope(request: Request, limit: int) -> bytes:
    """Read the request body, refusing anything larger than ``limit`` bytes.

    A declared ``Content-Length`` over the limit is rejected before reading;
    otherwise the stream is consumed only until the limit is crossed.
    """

    too_large = SoapRequestError(f"SOAP request exceeds {limit} bytes")
    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > limit:
        raise too_large
    payload = bytearray()
    async for chunk in request.stream():
        payload.extend(chunk)
        if len(payload) > limit:
            raise too_large
    return bytes(payload)


def _respond(report: RenderedReport, *, status_code: int = 200) -> Response:
    return Response(content=report.body, media_type=report.media_type, status_code=status_code)


@router.get("/raas.wsdl", summary="RaaS service description")
def read_wsdl() -> Response:
    return Response(content=load_wsdl(), media_type="text/xml")


@router.post("/raas", summary="GetBenefitsCost SOAP operation")
async def call_raas(
    request: Request,
    service: BenefitsCostService = Depends(get_benefits_cost_service),
) -> Response:
    """Answer a ``GetBenefitsCost`` envelope with the same rows as the JSON report.

    Every failure is returned as a SOAP fault with HTTP 500.
    """

    try:
        payload = await read_envelope(request, get_settings().reporting.envelope_max_bytes)
        query = query_from_envelope(payload)
        records = await run_in_threadpool(service.cost_by_worker, query)
        return _respond(ENVELOPE.render(records))
    except InvalidReportQuery as exc:
        LOGGER.info("SOAP request rejected: %s", exc.message)
        code, message = soap_fault_for(exc)
    except Exception as exc:
        LOGGER.exception("SOAP GetBenefitsCost failed")
        code, message = soap_fault_for(exc)
    return _respond(ENVELOPE.fault(code, message), status_code=500)
