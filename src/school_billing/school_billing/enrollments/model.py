from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..common.months import MonthYear
from ..core.enums import EnrollmentStatus


@dataclass(frozen=True)
class Enrollment:
    """A student's membership in a class; ``date`` starts the billing obligation."""

    enrollment_id: str
    student_id: str
    class_id: str
    date: date
    status: EnrollmentStatus = EnrollmentStatus.ACTIVE
    withdrawal_date: Optional[date] = None

    @property
    def is_withdrawn(self) -> bool:
        return self.status == EnrollmentStatus.WITHDRAWN

    def counts_month(self, month: str) -> bool:
        """False for months strictly after the withdrawal month."""
        if not self.is_withdrawn or self.withdrawal_date is None:
            return True
        return MonthYear.parse(month) <= MonthYear.of(self.withdrawal_date)
