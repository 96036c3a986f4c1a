from __future__ import annotations

from datetime import date

from ...common.months import MonthYear
from ...core.exceptions import ValidationError
from .base import DueDateCalculator


class ClampedDueDateCalculator(DueDateCalculator):
    """Standard rule: anchor day, clamped to the last day of short months."""

    def due_date(self, *, year: int, month: int, anchor_day: int) -> date:
        if not 1 <= int(anchor_day) <= 31:
            raise ValidationError(f"Invalid billing day: {anchor_day}")
        target = MonthYear(int(year), int(month))
        return date(target.year, target.month, min(int(anchor_day), target.days))
