from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from src.school_billing.school_billing.billing.discount import (
    RECOVERED_NOTE_PREFIX,
    DiscountResolver,
    target_month_for_event,
)
from src.school_billing.school_billing.billing.model import Installment
from src.school_billing.school_billing.core.exceptions import ValidationError
from src.school_billing.school_billing.cycles.model import EventDiscount


def _event(name: str, target: str, pct: str, event_id: str = "") -> EventDiscount:
    return EventDiscount(
        event_id=event_id or f"evt-{name}",
        name=name,
        start_date=date(2025, 2, 1),
        end_date=date(2025, 2, 2),
        target_month=target,
        discount_percentage=Decimal(pct),
    )


def _installment(*, amount="100.00", original="100.00", is_paid=False, notes=None) -> Installment:
    return Installment(
        installment_id="enr-1-2025-02",
        enrollment_id="enr-1",
        student_id="stu-1",
        month="2025-02",
        amount=Decimal(amount),
        original_amount=Decimal(original),
        due_date=date(2025, 2, 15),
        is_paid=is_paid,
        notes=notes,
    )


def test_resolve_sums_events_of_the_month():
    resolver = DiscountResolver()
    result = resolver.resolve([_event("Carnival", "2025-02", "20"), _event("Promo", "2025-02", "10.5")], "2025-02")

    assert result.percentage == Decimal("30.5")
    assert result.notes == "Carnival (20%), Promo (10.5%)"


def test_resolve_ignores_other_months():
    result = DiscountResolver().resolve([_event("Carnival", "2025-03", "50")], "2025-02")
    assert result.percentage == 0
    assert result.notes == ""
    assert not result.applies


def test_resolve_caps_at_one_hundred():
    result = DiscountResolver().resolve([_event("A", "2025-02", "60"), _event("B", "2025-02", "70")], "2025-02")
    assert result.percentage == Decimal("100")


def test_resolve_accepts_unpadded_target_month():
    result = DiscountResolver().resolve([_event("Legacy", "2025-2", "50")], "2025-02")
    assert result.percentage == Decimal("50")


def test_resolve_skips_malformed_target_month():
    result = DiscountResolver().resolve([_event("Broken", "febrero", "50"), _event("Ok", "2025-02", "10")], "2025-02")
    assert result.percentage == Decimal("10")
    assert result.notes == "Ok (10%)"


def test_apply_never_goes_negative_or_above_original():
    resolver = DiscountResolver()
    full = resolver.resolve([_event("A", "2025-02", "100")], "2025-02")
    none = resolver.resolve([], "2025-02")

    assert DiscountResolver.apply(Decimal("100"), full) == Decimal("0.00")
    assert DiscountResolver.apply(Decimal("100"), none) == Decimal("100.00")


def test_target_month_is_month_with_most_days():
    assert target_month_for_event(date(2025, 2, 25), date(2025, 3, 2)) == "2025-02"
    assert target_month_for_event(date(2025, 2, 27), date(2025, 3, 5)) == "2025-03"


def test_target_month_tie_goes_to_earliest():
    assert target_month_for_event(date(2025, 1, 30), date(2025, 2, 2)) == "2025-01"


def test_target_month_rejects_reversed_range():
    with pytest.raises(ValidationError):
        target_month_for_event(date(2025, 3, 2), date(2025, 2, 25))


def test_effective_amount_recovers_missing_discount():
    amount, notes = DiscountResolver().effective_amount(_installment(), [_event("Carnival", "2025-02", "50")])

    assert amount == Decimal("50.00")
    assert notes == f"{RECOVERED_NOTE_PREFIX}Carnival (50%)"


def test_effective_amount_keeps_paid_and_already_discounted():
    events = [_event("Carnival", "2025-02", "50")]
    resolver = DiscountResolver()

    paid = _installment(is_paid=True)
    assert resolver.effective_amount(paid, events) == (Decimal("100.00"), None)

    discounted = _installment(amount="50.00", notes="Carnival (50%)")
    assert resolver.effective_amount(discounted, events) == (Decimal("50.00"), "Carnival (50%)")
