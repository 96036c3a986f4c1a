from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol, Sequence

from .model import Installment


class InstallmentRepository(Protocol):
    def get_by_id(self, installment_id: str) -> Optional[Installment]:
        raise NotImplementedError

    def list_for_enrollment(self, enrollment_id: str) -> Sequence[Installment]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Installment]:
        raise NotImplementedError

    def upsert(self, installment: Installment) -> Installment:
        """Create or replace the installment keyed by its deterministic id."""

        raise NotImplementedError

    def mark_paid(
        self,
        *,
        installment_id: str,
        payment_id: str,
        amount: Optional[Decimal] = None,
        notes: Optional[str] = None,
    ) -> bool:
        """Flag the installment paid; ``amount``/``notes`` record what was actually charged."""

        raise NotImplementedError

    def mark_unpaid(self, *, installment_id: str) -> bool:
        raise NotImplementedError

    def delete(self, installment_id: str) -> bool:
        raise NotImplementedError
