from __future__ import annotations

from datetime import date
from typing import Iterable

from ..core.exceptions import ValidationError


class BillingAnchorResolver:
    """Day-of-month used for every due date of one student.

    The anchor is the day of the student's earliest enrollment start date, so
    adding courses later never moves the billing day. Callers pass the dates
    read fresh from storage plus the in-flight date.
    """

    def resolve(self, enrollment_dates: Iterable[date]) -> int:
        dates = list(enrollment_dates)
        if not dates:
            raise ValidationError("At least one enrollment date is required to resolve the billing day")
        return min(dates).day
