"""CSV inbound integrations (EIB style) and their sample files."""
from __future__ import annotations

import csv
from pathlib import Path
from typing import Callable

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import FileResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.concurrency import run_in_threadpool

from benefits.core.config import get_settings
from benefits.core.logger import get_logger
from benefits.schemas import ImportResult
from benefits.services import ImportService
from benefits.services.imports import read_csv_rows
from benefits.services.translators import STORE_FAILURE_MESSAGE
from benefits.web.dependencies import get_import_service

router = APIRouter(prefix="/api/eib", tags=["eib"])
LOGGER = get_logger(__name__)

SAMPLES_DIR = Path(__file__).resolve().parent.parent / "resources" / "samples"
SAMPLE_FILES = ("workers", "enrollments", "time_entries")


async def _read_upload(file: UploadFile | None) -> list[dict[str, str]]:
    if file is None:
        raise HTTPException(status_code=400, detail="file is required")
    if not (file.filename or "").lower().endswith(".csv"):
        raise HTTPException(status_code=400, detail="Only .csv files allowed")
    limit = get_settings().reporting.import_max_bytes
    content = await file.read(limit + 1)
    if len(content) > limit:
        raise HTTPException(status_code=400, detail=f"File exceeds {limit} bytes")
    try:
        return read_csv_rows(content)
    except UnicodeDecodeError as exc:
        raise HTTPException(status_code=400, detail="File is not valid UTF-8") from exc
    except csv.Error as exc:
        raise HTTPException(status_code=400, detail=f"Malformed CSV: {exc}") from exc


async def _import(
    label: str,
    file: UploadFile | None,
    run: Callable[[list[dict[str, str]]], ImportResult],
) -> ImportResult:
    rows = await _read_upload(file)
    LOGGER.info("Received %s upload %s with %s rows", label, file.filename, len(rows))
    try:
        return await run_in_threadpool(run, rows)
    except SQLAlchemyError as exc:
        LOGGER.exception("%s import failed", label)
        raise HTTPException(status_code=500, detail=STORE_FAILURE_MESSAGE) from exc


@router.post("/import/workers", response_model=ImportResult)
async def import_workers(
    file: UploadFile | None = File(None),
    service: ImportService = Depends(get_import_service),
) -> ImportResult:
    """Columns: workerId,firstName,lastName,email,department,jobTitle,hireDate,birthDate,salary,managerId,status"""

    return await _import("Worker", file, service.import_workers)


@router.post("/import/enrollments", response_model=ImportResult)
async def import_enrollments(
    file: UploadFile | None = File(None),
    service: ImportService = Depends(get_import_service),
) -> ImportResult:
    """Columns: workerId,planType,coverageLevel,employeePrem,employerPrem,effectiveDate"""

    return await _import("Enrollment", file, service.import_enrollments)


@router.post("/import/time-entries", response_model=ImportResult)
async def import_time_entries(
    file: UploadFile | None = File(None),
    service: ImportService = Depends(get_import_service),
) -> ImportResult:
    """Columns: workerId,date,hours,timeType"""

    return await _import("TimeEntry", file, service.import_time_entries)


@router.get("/samples/{name}.csv", summary="Download a sample import file")
def read_sample(name: str) -> FileResponse:
    if name not in SAMPLE_FILES:
        raise HTTPException(status_code=404, detail="Sample not found")
    return FileResponse(
        SAMPLES_DIR / f"{name}.csv", media_type="text/csv", filename=f"{name}.csv"
    )
