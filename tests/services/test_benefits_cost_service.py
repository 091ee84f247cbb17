from datetime import date
from decimal import Decimal

from benefits.domain import ReportQuery
from benefits.services import BenefitsCostService

TODAY = date(2025, 6, 30)


def _service(session) -> BenefitsCostService:
    return BenefitsCostService(session, today=lambda: TODAY)


def test_cost_by_worker_reads_store(session, make_worker, make_enrollment) -> None:
    make_worker("W1001", last_name="Lovelace")
    make_worker("W1002", last_name="Babbage", department="Finance", salary="0")
    make_enrollment("W1001", employee_prem="200", employer_prem="600", effective_date=date(2024, 1, 1))
    make_enrollment("W1001", employee_prem="200", employer_prem="600", effective_date=date(2024, 2, 1))
    make_enrollment("W9999", employee_prem="1", employer_prem="1", effective_date=date(2024, 2, 1))

    records = _service(session).cost_by_worker(ReportQuery())

    assert [record.worker_id for record in records] == ["W1002", "W1001"]
    assert records[0].pct_salary is None
    assert records[1].benefits_cost == Decimal("1600")
    assert records[1].pct_salary == Decimal("0.016")
    assert records[1].total_comp == Decimal("101600")


def test_unknown_department_is_empty(session, make_worker) -> None:
    make_worker("W1", last_name="A")

    assert _service(session).cost_by_worker(ReportQuery(department="Nowhere")) == ()


def test_repeated_queries_are_identical(session, make_worker, make_enrollment) -> None:
    make_worker("W1", last_name="A")
    make_enrollment("W1", employee_prem="10.10", employer_prem="20.20", effective_date=date(2024, 5, 1))
    service = _service(session)

    assert service.cost_by_worker(ReportQuery()) == service.cost_by_worker(ReportQuery())
    assert service.cost_trend(ReportQuery()) == service.cost_trend(ReportQuery())


def test_rollup_ignores_time_window(session, make_worker, make_enrollment) -> None:
    make_worker("W1", last_name="A", salary="80000")
    make_enrollment("W1", employee_prem="500", employer_prem="1500", effective_date=date(2030, 1, 1))

    (rollup,) = _service(session).cost_by_department()

    assert rollup.total_benefits_cost == Decimal("2000")
    assert rollup.avg_pct_salary == Decimal("0.025")


def test_trend_window_and_department(session, make_worker, make_enrollment) -> None:
    make_worker("W1", last_name="A")
    make_worker("W2", last_name="B", department="Sales")
    make_enrollment("W1", employee_prem="100", employer_prem="100", effective_date=date(2024, 1, 5))
    make_enrollment("W1", employee_prem="100", employer_prem="100", effective_date=date(2024, 3, 5))
    make_enrollment("W2", employee_prem="100", employer_prem="100", effective_date=date(2024, 3, 5))

    points = _service(session).cost_trend(
        ReportQuery(start=date(2024, 2, 1), department="Engineering")
    )

    assert [(point.month, point.benefits_cost, point.department) for point in points] == [
        (date(2024, 3, 1), Decimal("200"), "Engineering"),
    ]
