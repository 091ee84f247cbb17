"""JSON/CSV routes for the benefits cost reports."""
from __future__ import annotations

from typing import Callable, TypeVar

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.exc import SQLAlchemyError

from benefits.core.logger import get_logger
from benefits.domain import InvalidReportQuery
from benefits.schemas import CostRecordOut, DepartmentRollupOut, TrendPointOut
from benefits.services import BenefitsCostService
from benefits.services.projectors import CsvProjector, JsonProjector, RenderedReport, negotiate
from benefits.services.translators import http_error_for, query_from_params
from benefits.web.dependencies import get_benefits_cost_service

router = APIRouter(prefix="/api/reports", tags=["reports"])
LOGGER = get_logger(__name__)

T = TypeVar("T")

COST_JSON = JsonProjector(CostRecordOut, CostRecordOut.from_domain)
COST_CSV = CsvProjector()
ROLLUP_JSON = JsonProjector(DepartmentRollupOut, DepartmentRollupOut.from_domain)
TREND_JSON = JsonProjector(TrendPointOut, TrendPointOut.from_domain, exclude_none=True)


def _execute(label: str, call: Callable[[], T]) -> T:
    """Run a report, translating failures into HTTP errors."""

    try:
        return call()
    except InvalidReportQuery as exc:
        LOGGER.info("%s rejected: %s", label, exc.message)
        raise http_error_for(exc) from exc
    except SQLAlchemyError as exc:
        LOGGER.exception("%s failed", label)
        raise http_error_for(exc) from exc


def _respond(report: RenderedReport) -> Response:
    return Response(content=report.body, media_type=report.media_type, headers=report.headers)


@router.get("/benefits-cost", summary="Benefits cost per worker")
def read_benefits_cost(
    request: Request,
    from_: str | None = Query(None, alias="from"),
    to: str | None = Query(None),
    dept: str | None = Query(None),
    service: BenefitsCostService = Depends(get_benefits_cost_service),
) -> Response:
    """Per-worker cost records as JSON, or CSV when ``Accept`` asks for ``text/csv``."""

    records = _execute(
        "Benefits cost query",
        lambda: service.cost_by_worker(query_from_params(from_, to, dept)),
    )
    projector = negotiate(
        request.headers.get("accept"), json_projector=COST_JSON, csv_projector=COST_CSV
    )
    return _respond(projector.render(records))


@router.get("/benefits-by-dept", summary="Benefits cost by department")
def read_benefits_by_department(
    service: BenefitsCostService = Depends(get_benefits_cost_service),
) -> Response:
    rollups = _execute("Department roll-up", service.cost_by_department)
    return _respond(ROLLUP_JSON.render(rollups))


@router.get("/benefits-trend", summary="Monthly benefits cost trend")
def read_benefits_trend(
    from_: str | None = Query(None, alias="from"),
    to: str | None = Query(None),
    dept: str | None = Query(None),
    service: BenefitsCostService = Depends(get_benefits_cost_service),
) -> Response:
    """Premium totals per month; months without enrollments are left out."""

    points = _execute(
        "Benefits trend query",
        lambda: service.cost_trend(query_from_params(from_, to, dept)),
    )
    return _respond(TREND_JSON.render(points))
