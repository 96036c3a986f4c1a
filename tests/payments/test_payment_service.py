from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from src.school_billing.school_billing.core.exceptions import ValidationError


@pytest.fixture
def plan(setup):
    return setup.container.enrollment_service.create(
        student_id=setup.student.student_id,
        class_id=setup.school_class.class_id,
        start_date="2025-01-15",
    )


def test_record_payment_marks_installment_paid(setup, plan):
    january = plan.installments[0]

    payment = setup.container.payment_service.record_payment(
        installment_id=january.installment_id, payment_date="2025-01-20"
    )

    assert payment.amount == Decimal("100.00")
    assert payment.month == "2025-01"
    assert payment.date == date(2025, 1, 20)
    stored = setup.container.installments_repo.get_by_id(january.installment_id)
    assert stored.is_paid and stored.payment_id == payment.payment_id


def test_record_payment_charges_recovered_discount(setup, plan):
    # Event created after the installments were generated.
    setup.container.cycle_service.add_event(
        cycle_id=setup.cycle.cycle_id,
        name="Carnival",
        start_date="2025-02-25",
        end_date="2025-03-02",
        discount_percentage="50",
    )

    payment = setup.container.payment_service.record_payment(installment_id=plan.installments[1].installment_id)

    assert payment.amount == Decimal("50.00")


def test_record_payment_twice_rejected(setup, plan):
    inst_id = plan.installments[0].installment_id
    setup.container.payment_service.record_payment(installment_id=inst_id)
    with pytest.raises(ValidationError):
        setup.container.payment_service.record_payment(installment_id=inst_id)


def test_month_after_withdrawal_cannot_be_paid(setup, plan):
    setup.container.enrollment_service.withdraw(
        enrollment_id=plan.enrollment.enrollment_id, withdrawal_date="2025-02-10"
    )
    with pytest.raises(ValidationError):
        setup.container.payment_service.record_payment(installment_id=plan.installments[2].installment_id)


def test_clear_payments_resets_installments(setup, plan):
    for inst in plan.installments[:2]:
        setup.container.payment_service.record_payment(installment_id=inst.installment_id)

    counts = setup.container.payment_service.clear_payments()

    assert counts == {"payments": 2, "installments": 2}
    assert setup.container.payments_repo.list_all() == []
    stored = setup.container.installments_repo.list_for_enrollment(plan.enrollment.enrollment_id)
    assert len(stored) == 3
    assert not any(i.is_paid or i.payment_id for i in stored)


def test_clear_billing_deletes_everything_but_catalog(setup, plan):
    setup.container.payment_service.record_payment(installment_id=plan.installments[0].installment_id)

    counts = setup.container.payment_service.clear_billing()

    assert counts == {"enrollments": 1, "installments": 3, "payments": 1}
    assert setup.container.courses_repo.get_by_id(setup.course.course_id) is not None
    assert setup.container.cycles_repo.get_by_id(setup.cycle.cycle_id) is not None


def test_recovered_discount_payment_matches_reports(setup, plan):
    setup.container.cycle_service.add_event(
        cycle_id=setup.cycle.cycle_id,
        name="New year",
        start_date="2025-01-02",
        end_date="2025-01-05",
        discount_percentage="50",
    )
    january = plan.installments[0]

    payment = setup.container.payment_service.record_payment(
        installment_id=january.installment_id, payment_date="2025-01-20"
    )

    stored = setup.container.installments_repo.get_by_id(january.installment_id)
    assert stored.amount == payment.amount == Decimal("50.00")
    assert stored.original_amount == Decimal("100.00")
    assert stored.notes.endswith("New year (50%)")

    aggregator = setup.container.financial_aggregator
    data = aggregator.dashboard(cycle_id=setup.cycle.cycle_id)
    assert data.total_collected == Decimal("50.00")
    assert data.monthly_collected[0]["value"] == "50.00"
    assert aggregator.collected_in_month("2025-01") == data.total_collected
