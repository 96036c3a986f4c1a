from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional


def installment_key(enrollment_id: str, month: str) -> str:
    """Deterministic installment id; one installment per (enrollment, month)."""
    return f"{enrollment_id}-{month}"


@dataclass(frozen=True)
class Installment:
    """One month's tuition obligation for one enrollment."""

    installment_id: str
    enrollment_id: str
    student_id: str
    month: str
    amount: Decimal
    original_amount: Decimal
    due_date: date
    is_paid: bool = False
    payment_id: Optional[str] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class DiscountResult:
    percentage: Decimal
    notes: str = ""

    @property
    def applies(self) -> bool:
        return self.percentage > 0
