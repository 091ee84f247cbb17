"""HTTP behaviour of the JSON/CSV report endpoints."""
from __future__ import annotations

import csv
import io
from datetime import date

from sqlalchemy.exc import OperationalError

from benefits.main import app
from benefits.web.dependencies import get_benefits_cost_service


def _seed(make_worker, make_enrollment) -> None:
    make_worker("W1001", last_name="Lovelace", first_name="Ada")
    make_worker("W1002", last_name="Babbage", first_name="Charles", department="Finance", salary="0")
    make_enrollment("W1001", employee_prem="200", employer_prem="600", effective_date=date(2024, 1, 1))
    make_enrollment("W1001", employee_prem="200", employer_prem="600", effective_date=date(2024, 2, 1))


class _FailingService:
    def cost_by_worker(self, query):
        raise OperationalError("SELECT", {}, Exception("connection lost"))

    def cost_by_department(self):
        raise OperationalError("SELECT", {}, Exception("connection lost"))


def test_benefits_cost_json(client, make_worker, make_enrollment) -> None:
    _seed(make_worker, make_enrollment)

    response = client.get("/api/reports/benefits-cost")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/json")
    rows = response.json()
    assert [row["workerId"] for row in rows] == ["W1002", "W1001"]
    assert rows[0]["pctSalary"] is None
    assert rows[1]["benefitsCost"] == 1600
    assert rows[1]["pctSalary"] == 0.016
    assert rows[1]["totalComp"] == 101600
    assert rows[1]["yearsOfService"] == 5


def test_benefits_cost_csv(client, make_worker, make_enrollment) -> None:
    _seed(make_worker, make_enrollment)

    response = client.get("/api/reports/benefits-cost", headers={"Accept": "text/csv"})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert response.headers["content-disposition"] == "attachment; filename=benefits_cost.csv"
    rows = list(csv.reader(io.StringIO(response.text, newline="")))
    assert rows[0][0] == "workerId"
    assert rows[1][0] == "W1002"
    assert rows[1][7] == ""
    assert rows[2][6] == "1600.00"


def test_filters_by_department_and_window(client, make_worker, make_enrollment) -> None:
    _seed(make_worker, make_enrollment)

    response = client.get(
        "/api/reports/benefits-cost",
        params={"dept": "Engineering", "from": "2024-02-01", "to": "2024-02-29"},
    )

    (row,) = response.json()
    assert row["workerId"] == "W1001"
    assert row["benefitsCost"] == 800


def test_unknown_department_returns_empty_list(client, make_worker, make_enrollment) -> None:
    _seed(make_worker, make_enrollment)

    response = client.get("/api/reports/benefits-cost", params={"dept": "Nowhere"})

    assert response.status_code == 200
    assert response.json() == []


def test_invalid_date_is_bad_request(client) -> None:
    response = client.get("/api/reports/benefits-cost", params={"from": "nope"})

    assert response.status_code == 400
    assert "from" in response.json()["detail"]


def test_reversed_window_is_bad_request(client) -> None:
    response = client.get(
        "/api/reports/benefits-trend", params={"from": "2024-05-01", "to": "2024-01-01"}
    )

    assert response.status_code == 400


def test_idempotent_responses(client, make_worker, make_enrollment) -> None:
    _seed(make_worker, make_enrollment)

    first = client.get("/api/reports/benefits-cost")
    second = client.get("/api/reports/benefits-cost")

    assert first.content == second.content


def test_benefits_by_department(client, make_worker, make_enrollment) -> None:
    make_worker("W1", last_name="A", salary="80000")
    make_worker("W2", last_name="B", salary="80000")
    make_worker("W3", last_name="C", department="HR", salary="0")
    make_enrollment("W1", employee_prem="500", employer_prem="1500", effective_date=date(2024, 1, 1))
    make_enrollment("W2", employee_prem="500", employer_prem="1500", effective_date=date(2024, 1, 1))

    response = client.get("/api/reports/benefits-by-dept")

    assert response.status_code == 200
    engineering, hr = response.json()
    assert engineering["department"] == "Engineering"
    assert engineering["employees"] == 2
    assert engineering["avg_benefits_per_employee"] == 2000
    assert engineering["avg_pct_salary"] == 0.025
    assert hr["total_benefits_cost"] == 0
    assert hr["avg_pct_salary"] is None


def test_benefits_trend(client, make_worker, make_enrollment) -> None:
    make_worker("W1", last_name="A")
    make_enrollment("W1", employee_prem="100", employer_prem="200", effective_date=date(2024, 1, 10))
    make_enrollment("W1", employee_prem="100", employer_prem="200", effective_date=date(2024, 3, 10))

    unfiltered = client.get("/api/reports/benefits-trend").json()
    filtered = client.get("/api/reports/benefits-trend", params={"dept": "Engineering"}).json()

    assert unfiltered == [
        {"month": "2024-01-01", "benefits_cost": 300},
        {"month": "2024-03-01", "benefits_cost": 300},
    ]
    assert [point["department"] for point in filtered] == ["Engineering", "Engineering"]


def test_store_failure_is_server_error(client) -> None:
    app.dependency_overrides[get_benefits_cost_service] = lambda: _FailingService()

    cost = client.get("/api/reports/benefits-cost")
    rollup = client.get("/api/reports/benefits-by-dept")

    assert cost.status_code == 500
    assert cost.json() == {"detail": "Report query failed"}
    assert rollup.status_code == 500
