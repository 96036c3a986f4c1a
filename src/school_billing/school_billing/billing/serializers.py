from __future__ import annotations

from ..common.datetime_utils import format_iso_date
from ..common.money import format_money
from .model import DiscountResult, Installment


def installment_json(inst: Installment) -> dict:
    return {
        "id": inst.installment_id,
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


def discount_json(result: DiscountResult) -> dict:
    pct = result.percentage
    return {
        "percentage": int(pct) if pct == pct.to_integral_value() else float(pct),
        "notes": result.notes,
    }
