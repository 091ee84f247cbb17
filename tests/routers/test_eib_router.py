"""CSV upload endpoints and sample downloads."""
from __future__ import annotations

import csv
import io

import pytest

from benefits.core.config import get_settings


def _upload(client, path: str, content: bytes, filename: str = "upload.csv"):
    return client.post(path, files={"file": (filename, content, "text/csv")})


@pytest.mark.parametrize("name", ["workers", "enrollments", "time_entries"])
def test_samples_are_downloadable(client, name: str) -> None:
    response = client.get(f"/api/eib/samples/{name}.csv")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    header = next(csv.reader(io.StringIO(response.text)))
    assert header[0] == "workerId"


def test_unknown_sample_is_not_found(client) -> None:
    assert client.get("/api/eib/samples/passwords.csv").status_code == 404


def test_sample_files_import_cleanly(client) -> None:
    for name, path in (
        ("workers", "/api/eib/import/workers"),
        ("enrollments", "/api/eib/import/enrollments"),
        ("time_entries", "/api/eib/import/time-entries"),
    ):
        sample = client.get(f"/api/eib/samples/{name}.csv").content
        response = _upload(client, path, sample, filename=f"{name}.csv")

        assert response.status_code == 200
        body = response.json()
        assert body["errors"] == []
        assert body["imported"] > 0

    report = client.get("/api/reports/benefits-cost").json()
    assert {row["workerId"] for row in report} == {"W9001", "W9002", "W9003"}


def test_imported_rows_feed_reports(client) -> None:
    _upload(
        client,
        "/api/eib/import/workers",
        b"workerId,firstName,lastName,email,department,jobTitle,hireDate,birthDate,salary\n"
        b"W1001,Ada,Lovelace,ada@example.com,Engineering,Engineer,2020-01-15,1990-01-01,100000\n",
    )
    _upload(
        client,
        "/api/eib/import/enrollments",
        b"workerId,planType,coverageLevel,employeePrem,employerPrem,effectiveDate\n"
        b"W1001,Medical,Employee,200,600,2024-01-01\n"
        b"W1001,Medical,Employee,200,600,2024-02-01\n",
    )

    (row,) = client.get("/api/reports/benefits-cost").json()

    assert row["benefitsCost"] == 1600
    assert row["totalComp"] == 101600


def test_row_errors_are_reported(client) -> None:
    response = _upload(
        client,
        "/api/eib/import/time-entries",
        b"workerId,date,hours,timeType\nW1,2024-01-08,8,Regular\nW1,not-a-date,8,Regular\n",
    )

    assert response.status_code == 200
    assert response.json() == {"imported": 1, "errors": ["row 2: invalid date"]}


def test_missing_file_is_bad_request(client) -> None:
    response = client.post("/api/eib/import/workers")

    assert response.status_code == 400
    assert response.json()["detail"] == "file is required"


def test_non_csv_upload_is_bad_request(client) -> None:
    response = _upload(client, "/api/eib/import/workers", b"workerId\nW1\n", filename="workers.xlsx")

    assert response.status_code == 400
    assert response.json()["detail"] == "Only .csv files allowed"


def test_oversized_upload_is_bad_request(client, monkeypatch) -> None:
    monkeypatch.setattr(get_settings().reporting, "import_max_bytes", 16)

    response = _upload(client, "/api/eib/import/workers", b"workerId,email\n" + b"W1,a@b.c\n" * 10)

    assert response.status_code == 400


def test_undecodable_upload_is_bad_request(client) -> None:
    response = _upload(client, "/api/eib/import/workers", b"workerId\n\xff\xfe\xfa\n")

    assert response.status_code == 400
