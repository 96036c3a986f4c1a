from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Payment


class PaymentRepository(Protocol):
    def get_by_id(self, payment_id: str) -> Optional[Payment]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Payment]:
        raise NotImplementedError

    def list_for_month(self, month: str) -> Sequence[Payment]:
        raise NotImplementedError

    def create(self, payment: Payment) -> Payment:
        raise NotImplementedError

    def delete(self, payment_id: str) -> bool:
        raise NotImplementedError
