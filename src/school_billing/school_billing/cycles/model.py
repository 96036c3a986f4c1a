from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..common.months import MonthYear, months_between, normalize_month


@dataclass(frozen=True)
class EventDiscount:
    """Promotional event; its discount applies to ``target_month`` only.

    ``target_month`` is kept as stored (legacy records may be unpadded, e.g.
    ``"2025-2"``); consumers normalize before comparing.
    """

    event_id: str
    name: str
    start_date: date
    end_date: date
    target_month: str
    discount_percentage: Decimal


@dataclass(frozen=True)
class AcademicCycle:
    """An academic term with a fixed calendar span.

    Legacy cycles have no ``start_date``/``end_date`` and only carry the
    stored ``months`` list.
    """

    cycle_id: str
    name: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    months: tuple[str, ...] = ()
    events: tuple[EventDiscount, ...] = ()

    @property
    def has_date_span(self) -> bool:
        return self.start_date is not None and self.end_date is not None

    def month_tokens(self) -> list[str]:
        """Inclusive ``YYYY-MM`` months of the cycle."""
        if self.has_date_span:
            return [str(m) for m in months_between(self.start_date, self.end_date)]
        return [normalize_month(m) for m in self.months]

    def contains_month(self, month: MonthYear) -> bool:
        return str(month) in self.month_tokens()
