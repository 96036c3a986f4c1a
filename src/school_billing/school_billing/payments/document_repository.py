from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence

from ..common.datetime_utils import format_iso_date, parse_iso_date
from ..common.money import format_money, to_money
from ..common.months import normalize_month
from ..core.enums import Collection
from ..storage.document_store import DocumentStore
from .model import Payment
from .repository import PaymentRepository


def _to_payment(doc: dict) -> Payment:
    return Payment(
        payment_id=str(doc["id"]),
        student_id=str(doc.get("studentId") or ""),
        enrollment_id=str(doc.get("enrollmentId") or ""),
        amount=to_money(doc.get("amount")),
        date=parse_iso_date(str(doc["date"])[:10]),
        month=normalize_month(doc["monthYear"]),
        installment_id=doc.get("installmentId"),
    )


class DocumentPaymentRepository(PaymentRepository):
    def __init__(self, store: DocumentStore):
        self._store = store

    def get_by_id(self, payment_id: str) -> Optional[Payment]:
        doc = self._store.get(Collection.PAYMENTS, payment_id)
        return _to_payment(doc) if doc else None

    def list_all(self) -> Sequence[Payment]:
        return [_to_payment(d) for d in self._store.list(Collection.PAYMENTS)]

    def list_for_month(self, month: str) -> Sequence[Payment]:
        target = normalize_month(month)
        return [p for p in self.list_all() if p.month == target]

    def create(self, payment: Payment) -> Payment:
        data = {
            "studentId": payment.student_id,
            "enrollmentId": payment.enrollment_id,
            "installmentId": payment.installment_id,
            "amount": format_money(payment.amount),
            "date": format_iso_date(payment.date),
            "monthYear": payment.month,
        }
        if not payment.payment_id:
            return replace(payment, payment_id=self._store.add(Collection.PAYMENTS, data))
        self._store.set(Collection.PAYMENTS, payment.payment_id, data)
        return payment

    def delete(self, payment_id: str) -> bool:
        return self._store.delete(Collection.PAYMENTS, payment_id)
