from datetime import date

import pytest

from src.school_billing.school_billing.billing.anchor import BillingAnchorResolver
from src.school_billing.school_billing.billing.calculator.clamped_calculator import ClampedDueDateCalculator
from src.school_billing.school_billing.core.exceptions import ValidationError


def test_due_date_uses_anchor_day():
    calc = ClampedDueDateCalculator()
    assert calc.due_date(year=2025, month=3, anchor_day=15) == date(2025, 3, 15)


def test_due_date_clamps_to_short_months():
    calc = ClampedDueDateCalculator()
    assert calc.due_date(year=2025, month=2, anchor_day=31) == date(2025, 2, 28)
    assert calc.due_date(year=2024, month=2, anchor_day=31) == date(2024, 2, 29)
    assert calc.due_date(year=2025, month=4, anchor_day=31) == date(2025, 4, 30)


def test_due_date_rejects_invalid_anchor():
    with pytest.raises(ValidationError):
        ClampedDueDateCalculator().due_date(year=2025, month=1, anchor_day=0)


def test_anchor_is_day_of_earliest_date():
    resolver = BillingAnchorResolver()
    assert resolver.resolve([date(2025, 3, 20), date(2025, 1, 15), date(2025, 2, 3)]) == 15


def test_anchor_requires_dates():
    with pytest.raises(ValidationError):
        BillingAnchorResolver().resolve([])
