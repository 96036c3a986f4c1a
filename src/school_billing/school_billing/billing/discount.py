"""Promotional discounts keyed to calendar months."""

from __future__ import annotations

import logging
from collections import Counter
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Optional, Union

from ..common.money import percentage_of, to_money
from ..common.months import MonthYear, normalize_month
from ..common.validators import require_date_order
from ..core.constants import MAX_DISCOUNT_PERCENTAGE
from ..core.exceptions import ValidationError
from ..cycles.model import AcademicCycle, EventDiscount
from .model import DiscountResult, Installment

logger = logging.getLogger(__name__)

RECOVERED_NOTE_PREFIX = "Automatic discount (recovered): "


def _format_pct(value: Decimal) -> str:
    return str(value.to_integral_value()) if value == value.to_integral_value() else str(value.normalize())


def target_month_for_event(start: date, end: date) -> str:
    """Month holding the most days of ``[start, end]``.

    Ties go to the month that reached the maximum first, i.e. the earliest.
    """

    require_date_order(start, end, what="event end date")
    counts: Counter[MonthYear] = Counter()
    current = start
    while current <= end:
        counts[MonthYear.of(current)] += 1
        current += timedelta(days=1)

    best: Optional[MonthYear] = None
    for month in sorted(counts):
        if best is None or counts[month] > counts[best]:
            best = month
    return str(best)


class DiscountResolver:
    def resolve(self, events: Iterable[EventDiscount], month: Union[str, MonthYear]) -> DiscountResult:
        target = normalize_month(month)
        total = Decimal("0")
        names: list[str] = []

        for ev in events:
            try:
                event_month = normalize_month(ev.target_month)
            except ValidationError:
                logger.warning("Ignoring event %s with malformed target month %r", ev.event_id, ev.target_month)
                continue
            if event_month != target:
                continue
            total += ev.discount_percentage
            names.append(f"{ev.name} ({_format_pct(ev.discount_percentage)}%)")

        total = min(max(total, Decimal("0")), MAX_DISCOUNT_PERCENTAGE)
        return DiscountResult(percentage=total, notes=", ".join(names))

    def resolve_for_cycle(self, cycle: AcademicCycle, month: Union[str, MonthYear]) -> DiscountResult:
        return self.resolve(cycle.events, month)

    @staticmethod
    def apply(original: Decimal, result: DiscountResult) -> Decimal:
        original = to_money(original)
        discounted = to_money(original - percentage_of(original, result.percentage))
        if discounted > original:
            return original
        return discounted

    def effective_amount(
        self, installment: Installment, events: Iterable[EventDiscount]
    ) -> tuple[Decimal, Optional[str]]:
        """Amount and notes to report for an installment.

        Unpaid installments generated before a matching event existed still
        hold the undiscounted amount; they are reported at the discounted
        amount with a recovered note. Paid installments are reported as stored.
        """

        if installment.is_paid:
            return installment.amount, installment.notes

        result = self.resolve(events, installment.month)
        if not result.applies or installment.amount < installment.original_amount:
            return installment.amount, installment.notes

        amount = self.apply(installment.original_amount, result)
        notes = installment.notes or f"{RECOVERED_NOTE_PREFIX}{result.notes}"
        return amount, notes
