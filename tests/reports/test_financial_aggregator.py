from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from src.school_billing.school_billing.core.exceptions import ValidationError


def _enroll(setup, student_id, start="2025-01-15"):
    return setup.container.enrollment_service.create(
        student_id=student_id, class_id=setup.school_class.class_id, start_date=start
    )


def test_withdrawn_enrollment_excludes_later_months(setup):
    plan = _enroll(setup, setup.student.student_id)
    setup.container.enrollment_service.withdraw(
        enrollment_id=plan.enrollment.enrollment_id, withdrawal_date="2025-02-10"
    )

    report = setup.container.financial_aggregator.student_fees(cycle_id=setup.cycle.cycle_id, today=date(2025, 3, 31))

    months = report.students[0]["enrollments"][0]["months"]
    assert [m["month"] for m in months] == ["2025-01", "2025-02"]
    assert report.total_debt == Decimal("200.00")


def test_fees_counts_only_overdue_unpaid_as_debt(setup):
    plan = _enroll(setup, setup.student.student_id)
    setup.container.payment_service.record_payment(installment_id=plan.installments[0].installment_id)

    report = setup.container.financial_aggregator.student_fees(cycle_id=setup.cycle.cycle_id, today=date(2025, 2, 15))

    row = report.students[0]
    detail = row["enrollments"][0]
    assert row["full_name"] == "Juan Perez"
    assert row["total_debt"] == "100.00"
    assert [m["is_overdue"] for m in detail["months"]] == [False, True, False]
    assert detail["next_due_date"] == "2025-02-15"
    assert detail["is_paid"] is False


def test_fees_sorted_by_debt_descending(setup):
    _enroll(setup, setup.student.student_id, "2025-02-01")
    other = setup.container.catalog_service.add_student(first_name="Maria", last_name="Garcia")
    _enroll(setup, other.student_id, "2025-01-01")

    report = setup.container.financial_aggregator.student_fees(cycle_id=setup.cycle.cycle_id, today=date(2025, 3, 31))

    assert [r["full_name"] for r in report.students] == ["Maria Garcia", "Juan Perez"]
    assert [r["total_debt"] for r in report.students] == ["300.00", "200.00"]
    assert report.total_debt == Decimal("500.00")


def test_fees_reports_recovered_discount(setup):
    _enroll(setup, setup.student.student_id)
    setup.container.cycle_service.add_event(
        cycle_id=setup.cycle.cycle_id,
        name="Carnival",
        start_date="2025-02-01",
        end_date="2025-02-05",
        discount_percentage="50",
    )

    report = setup.container.financial_aggregator.student_fees(cycle_id=setup.cycle.cycle_id, today=date(2025, 3, 31))

    february = report.students[0]["enrollments"][0]["months"][1]
    assert february["amount"] == "50.00"
    assert february["notes"].endswith("Carnival (50%)")
    assert report.total_debt == Decimal("250.00")


def test_dashboard_totals_and_gap_filled_series(setup):
    plan = _enroll(setup, setup.student.student_id)
    setup.container.payment_service.record_payment(
        installment_id=plan.installments[0].installment_id, payment_date="2025-01-20"
    )

    data = setup.container.financial_aggregator.dashboard(cycle_id=setup.cycle.cycle_id)

    assert data.total_collected == Decimal("100.00")
    assert data.total_debt == Decimal("200.00")
    assert data.monthly_collected == [
        {"month": "2025-01", "label": "Jan", "value": "100.00"},
        {"month": "2025-02", "label": "Feb", "value": "0.00"},
        {"month": "2025-03", "label": "Mar", "value": "0.00"},
    ]
    assert setup.container.financial_aggregator.collected_in_month("2025-01") == Decimal("100.00")


def test_unknown_cycle_rejected(container):
    with pytest.raises(ValidationError):
        container.financial_aggregator.dashboard(cycle_id="missing")
