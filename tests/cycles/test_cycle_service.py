from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from src.school_billing.school_billing.core.exceptions import EmptyRangeError, ValidationError


def test_create_cycle_derives_months(container):
    cycle = container.cycle_service.create_cycle(name="Annual 2025", start_date="2025-03-01", end_date="2025-12-31")

    stored = container.cycles_repo.get_by_id(cycle.cycle_id)
    assert stored.start_date == date(2025, 3, 1)
    assert stored.month_tokens()[0] == "2025-03"
    assert len(stored.month_tokens()) == 10


def test_create_cycle_rejects_reversed_dates(container):
    with pytest.raises(EmptyRangeError):
        container.cycle_service.create_cycle(name="Bad", start_date="2025-03-01", end_date="2025-02-01")


def test_create_cycle_rejects_duplicate_name(container):
    container.cycle_service.create_cycle(name="Summer 2025", start_date="2025-01-01", end_date="2025-02-28")
    with pytest.raises(ValidationError):
        container.cycle_service.create_cycle(name="Summer 2025", start_date="2025-01-01", end_date="2025-02-28")


def test_add_event_targets_month_with_most_days(setup):
    event = setup.container.cycle_service.add_event(
        cycle_id=setup.cycle.cycle_id,
        name="Carnival",
        start_date="2025-02-25",
        end_date="2025-03-02",
        discount_percentage="50",
    )

    assert event.target_month == "2025-02"
    assert event.discount_percentage == Decimal("50")
    stored = setup.container.cycles_repo.get_by_id(setup.cycle.cycle_id)
    assert [e.event_id for e in stored.events] == [event.event_id]


def test_add_event_rejects_invalid_percentage(setup):
    with pytest.raises(ValidationError):
        setup.container.cycle_service.add_event(
            cycle_id=setup.cycle.cycle_id,
            name="Too much",
            start_date="2025-02-01",
            end_date="2025-02-02",
            discount_percentage="150",
        )


def test_remove_event(setup):
    svc = setup.container.cycle_service
    event = svc.add_event(
        cycle_id=setup.cycle.cycle_id, name="Promo", start_date="2025-01-10", end_date="2025-01-12",
        discount_percentage="10",
    )

    assert svc.remove_event(cycle_id=setup.cycle.cycle_id, event_id=event.event_id) is True
    assert svc.remove_event(cycle_id=setup.cycle.cycle_id, event_id=event.event_id) is False
    assert setup.container.cycles_repo.get_by_id(setup.cycle.cycle_id).events == ()


def test_standard_cycles_and_current_detection(container):
    created = container.cycle_service.ensure_standard_cycles(2025)
    assert [c.cycle_id for c in created] == ["summer-2025", "annual-2025"]
    assert container.cycle_service.ensure_standard_cycles(2025) == []

    assert container.cycle_service.detect_current(date(2025, 2, 14)).cycle_id == "summer-2025"
    assert container.cycle_service.detect_current(date(2025, 7, 1)).cycle_id == "annual-2025"
    assert container.cycle_service.detect_current(date(2026, 1, 5)) is None
