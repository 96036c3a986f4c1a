from __future__ import annotations

from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from src.school_billing.school_billing.billing.document_repository import DocumentInstallmentRepository
from src.school_billing.school_billing.billing.scheduler import InstallmentScheduler
from src.school_billing.school_billing.catalog.model import Course
from src.school_billing.school_billing.core.exceptions import EmptyRangeError, PersistenceError
from src.school_billing.school_billing.cycles.model import AcademicCycle, EventDiscount
from src.school_billing.school_billing.enrollments.model import Enrollment
from src.school_billing.school_billing.storage.memory_store import InMemoryDocumentStore

CYCLE = AcademicCycle(cycle_id="cyc-1", name="Summer 2025", start_date=date(2025, 1, 1), end_date=date(2025, 3, 31))
COURSE = Course(course_id="crs-1", name="Math", price=Decimal("100"))
ENROLLMENT = Enrollment(enrollment_id="enr-1", student_id="stu-1", class_id="cls-1", date=date(2025, 1, 15))


def _event(target: str, pct: str, name: str = "Carnival") -> EventDiscount:
    return EventDiscount(
        event_id=f"evt-{name}",
        name=name,
        start_date=date(2025, 2, 1),
        end_date=date(2025, 2, 3),
        target_month=target,
        discount_percentage=Decimal(pct),
    )


class FailingInstallments(DocumentInstallmentRepository):
    """Fails the n-th upsert (1-based)."""

    def __init__(self, store, fail_on: int):
        super().__init__(store)
        self.fail_on = fail_on
        self.calls = 0

    def upsert(self, installment):
        self.calls += 1
        if self.calls == self.fail_on:
            raise PersistenceError("store unavailable")
        return super().upsert(installment)


@pytest.fixture
def repo():
    return DocumentInstallmentRepository(InMemoryDocumentStore())


def test_one_installment_per_month_without_events(repo):
    drafts = InstallmentScheduler(repo).generate(enrollment=ENROLLMENT, course=COURSE, cycle=CYCLE)

    assert [d.month for d in drafts] == ["2025-01", "2025-02", "2025-03"]
    assert all(d.amount == Decimal("100.00") for d in drafts)
    assert [d.due_date.day for d in drafts] == [15, 15, 15]
    assert all(d.notes is None and not d.is_paid for d in drafts)


def test_event_discounts_only_its_target_month(repo):
    cycle = replace(CYCLE, events=(_event("2025-02", "50"),))
    drafts = InstallmentScheduler(repo).generate(enrollment=ENROLLMENT, course=COURSE, cycle=cycle)

    assert [d.amount for d in drafts] == [Decimal("100.00"), Decimal("50.00"), Decimal("100.00")]
    assert drafts[1].original_amount == Decimal("100.00")
    assert drafts[1].notes == "Carnival (50%)"


def test_stacked_discounts_are_capped(repo):
    cycle = replace(CYCLE, events=(_event("2025-02", "60", "A"), _event("2025-02", "70", "B")))
    drafts = InstallmentScheduler(repo).generate(enrollment=ENROLLMENT, course=COURSE, cycle=cycle)

    assert drafts[1].amount == Decimal("0.00")


def test_zero_price_course_yields_zero_installments_amounts(repo):
    drafts = InstallmentScheduler(repo).generate(
        enrollment=ENROLLMENT, course=replace(COURSE, price=Decimal("0")), cycle=CYCLE
    )
    assert len(drafts) == 3
    assert all(d.amount == Decimal("0.00") for d in drafts)


def test_anchor_day_is_clamped(repo):
    drafts = InstallmentScheduler(repo).generate(enrollment=ENROLLMENT, course=COURSE, cycle=CYCLE, anchor_day=31)
    assert [d.due_date for d in drafts] == [date(2025, 1, 31), date(2025, 2, 28), date(2025, 3, 31)]


def test_enrollment_before_cycle_starts_at_cycle_start(repo):
    early = replace(ENROLLMENT, date=date(2024, 11, 20))
    drafts = InstallmentScheduler(repo).generate(enrollment=early, course=COURSE, cycle=CYCLE)

    assert [d.month for d in drafts] == ["2025-01", "2025-02", "2025-03"]
    assert drafts[0].due_date == date(2025, 1, 20)


def test_enrollment_after_cycle_end_is_empty_range(repo):
    late = replace(ENROLLMENT, date=date(2025, 4, 2))
    with pytest.raises(EmptyRangeError):
        InstallmentScheduler(repo).generate(enrollment=late, course=COURSE, cycle=CYCLE)


def test_legacy_cycle_uses_stored_months(repo):
    legacy = AcademicCycle(cycle_id="old", name="Legacy", months=("2025-3", "2025-01", "2025-02"))
    enrollment = replace(ENROLLMENT, date=date(2025, 2, 10))
    drafts = InstallmentScheduler(repo).generate(enrollment=enrollment, course=COURSE, cycle=legacy)

    assert [d.month for d in drafts] == ["2025-02", "2025-03"]
    assert [d.due_date.day for d in drafts] == [10, 10]


def test_schedule_is_idempotent(repo):
    scheduler = InstallmentScheduler(repo)
    scheduler.schedule(enrollment=ENROLLMENT, course=COURSE, cycle=CYCLE)
    scheduler.schedule(enrollment=ENROLLMENT, course=COURSE, cycle=CYCLE)

    stored = repo.list_for_enrollment("enr-1")
    assert [i.installment_id for i in stored] == ["enr-1-2025-01", "enr-1-2025-02", "enr-1-2025-03"]


def test_persist_keeps_paid_installments(repo):
    scheduler = InstallmentScheduler(repo)
    scheduler.schedule(enrollment=ENROLLMENT, course=COURSE, cycle=CYCLE)
    repo.mark_paid(installment_id="enr-1-2025-01", payment_id="pay-1")

    cycle = replace(CYCLE, events=(_event("2025-01", "50"),))
    written = scheduler.schedule(enrollment=ENROLLMENT, course=COURSE, cycle=cycle)

    assert [w.month for w in written] == ["2025-02", "2025-03"]
    paid = repo.get_by_id("enr-1-2025-01")
    assert paid.is_paid and paid.payment_id == "pay-1"
    assert paid.amount == Decimal("100.00")


def test_partial_failure_reports_written_count_and_retry_converges():
    store = InMemoryDocumentStore()
    failing = FailingInstallments(store, fail_on=3)
    scheduler = InstallmentScheduler(failing)

    with pytest.raises(PersistenceError) as exc:
        scheduler.schedule(enrollment=ENROLLMENT, course=COURSE, cycle=CYCLE)

    assert exc.value.written == 2
    assert [i.month for i in failing.list_for_enrollment("enr-1")] == ["2025-01", "2025-02"]

    scheduler.schedule(enrollment=ENROLLMENT, course=COURSE, cycle=CYCLE)
    assert [i.month for i in failing.list_for_enrollment("enr-1")] == ["2025-01", "2025-02", "2025-03"]
