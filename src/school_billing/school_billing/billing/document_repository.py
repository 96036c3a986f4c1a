from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

from ..common.datetime_utils import format_iso_date, parse_iso_date
from ..common.money import format_money, to_money
from ..common.months import normalize_month
from ..core.enums import Collection
from ..storage.document_store import DocumentStore
from .model import Installment
from .repository import InstallmentRepository


def _to_installment(doc: dict) -> Installment:
    amount = to_money(doc.get("amount"))
    original = doc.get("originalAmount")
    return Installment(
        installment_id=str(doc["id"]),
        enrollment_id=str(doc.get("enrollmentId") or ""),
        student_id=str(doc.get("studentId") or ""),
        month=normalize_month(doc["monthYear"]),
        amount=amount,
        # Records written before discounts existed carry no originalAmount.
        original_amount=to_money(original) if original not in (None, "") else amount,
        due_date=parse_iso_date(str(doc["dueDate"])[:10]),
        is_paid=bool(doc.get("isPaid")),
        payment_id=doc.get("paymentId"),
        notes=doc.get("notes") or None,
    )


def _installment_doc(inst: Installment) -> dict:
    return {
        "enrollmentId": inst.enrollment_id,
        "studentId": inst.student_id,
        "monthYear": inst.month,
        "amount": format_money(inst.amount),
        "originalAmount": format_money(inst.original_amount),
        "isPaid": inst.is_paid,
        "paymentId": inst.payment_id,
        "dueDate": format_iso_date(inst.due_date),
        "notes": inst.notes,
    }


class DocumentInstallmentRepository(InstallmentRepository):
    def __init__(self, store: DocumentStore):
        self._store = store

    def get_by_id(self, installment_id: str) -> Optional[Installment]:
        doc = self._store.get(Collection.INSTALLMENTS, installment_id)
        return _to_installment(doc) if doc else None

    def list_for_enrollment(self, enrollment_id: str) -> Sequence[Installment]:
        items = [_to_installment(d) for d in self._store.list(Collection.INSTALLMENTS, enrollmentId=enrollment_id)]
        return sorted(items, key=lambda i: i.month)

    def list_all(self) -> Sequence[Installment]:
        return [_to_installment(d) for d in self._store.list(Collection.INSTALLMENTS)]

    def upsert(self, installment: Installment) -> Installment:
        self._store.set(Collection.INSTALLMENTS, installment.installment_id, _installment_doc(installment))
        return installment

    def mark_paid(
        self,
        *,
        installment_id: str,
        payment_id: str,
        amount: Optional[Decimal] = None,
        notes: Optional[str] = None,
    ) -> bool:
        changes = {"isPaid": True, "paymentId": payment_id}
        if amount is not None:
            changes["amount"] = format_money(amount)
        if notes:
            changes["notes"] = notes
        return self._store.update(Collection.INSTALLMENTS, installment_id, changes)

    def mark_unpaid(self, *, installment_id: str) -> bool:
        return self._store.update(Collection.INSTALLMENTS, installment_id, {"isPaid": False, "paymentId": None})

    def delete(self, installment_id: str) -> bool:
        return self._store.delete(Collection.INSTALLMENTS, installment_id)
