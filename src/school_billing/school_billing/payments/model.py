from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Payment:
    payment_id: str
    student_id: str
    enrollment_id: str
    amount: Decimal
    date: date
    month: str
    installment_id: Optional[str] = None
