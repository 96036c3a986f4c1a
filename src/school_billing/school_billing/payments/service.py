from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from ..billing.discount import DiscountResolver
from ..billing.repository import InstallmentRepository
from ..catalog.repository import ClassRepository
from ..common.validators import require_iso_date, require_non_empty
from ..core.exceptions import ValidationError
from ..cycles.repository import CycleRepository
from ..enrollments.repository import EnrollmentRepository
from .model import Payment
from .repository import PaymentRepository

logger = logging.getLogger(__name__)


class PaymentService:
    def __init__(
        self,
        payments: PaymentRepository,
        installments: InstallmentRepository,
        enrollments: EnrollmentRepository,
        classes: ClassRepository,
        cycles: CycleRepository,
        *,
        discounts: Optional[DiscountResolver] = None,
    ):
        self._payments = payments
        self._installments = installments
        self._enrollments = enrollments
        self._classes = classes
        self._cycles = cycles
        self._discounts = discounts or DiscountResolver()

    def _cycle_events(self, class_id: str):
        school_class = self._classes.get_by_id(class_id)
        cycle = self._cycles.get_by_id(school_class.cycle_id) if school_class else None
        return cycle.events if cycle else ()

    def record_payment(self, *, installment_id: str, payment_date=None) -> Payment:
        """Pay one installment in full at its effective (discounted) amount."""

        installment = self._installments.get_by_id(require_non_empty(installment_id, "Installment"))
        if not installment:
            raise ValidationError("Installment does not exist")
        if installment.is_paid:
            raise ValidationError("This installment is already paid")

        enrollment = self._enrollments.get_by_id(installment.enrollment_id)
        if not enrollment:
            raise ValidationError("The installment has no enrollment")
        if not enrollment.counts_month(installment.month):
            raise ValidationError("The installment falls after the withdrawal and is not owed")

        paid_on = require_iso_date(payment_date, "Payment date") if payment_date else date.today()
        amount, notes = self._discounts.effective_amount(installment, self._cycle_events(enrollment.class_id))

        payment = self._payments.create(
            Payment(
                payment_id="",
                student_id=installment.student_id,
                enrollment_id=installment.enrollment_id,
                installment_id=installment.installment_id,
                amount=amount,
                date=paid_on,
                month=installment.month,
            )
        )
        # The installment keeps the charged amount so reports agree with the payment.
        if not self._installments.mark_paid(
            installment_id=installment.installment_id,
            payment_id=payment.payment_id,
            amount=amount,
            notes=notes,
        ):
            raise ValidationError("Installment does not exist")

        logger.info("Recorded payment %s of %s for installment %s", payment.payment_id, amount, installment_id)
        return payment

    def clear_payments(self) -> dict[str, int]:
        """Delete every payment and reset paid installments to unpaid."""

        deleted = 0
        for payment in self._payments.list_all():
            if self._payments.delete(payment.payment_id):
                deleted += 1

        reset = 0
        for inst in self._installments.list_all():
            if inst.is_paid or inst.payment_id:
                if self._installments.mark_unpaid(installment_id=inst.installment_id):
                    reset += 1

        logger.info("Cleared %d payments, reset %d installments", deleted, reset)
        return {"payments": deleted, "installments": reset}

    def clear_billing(self) -> dict[str, int]:
        """Delete all enrollments, installments and payments."""

        counts = {"enrollments": 0, "installments": 0, "payments": 0}
        for enrollment in self._enrollments.list_all():
            if self._enrollments.delete(enrollment.enrollment_id):
                counts["enrollments"] += 1
        for inst in self._installments.list_all():
            if self._installments.delete(inst.installment_id):
                counts["installments"] += 1
        for payment in self._payments.list_all():
            if self._payments.delete(payment.payment_id):
                counts["payments"] += 1

        logger.info("Cleared billing data: %s", counts)
        return counts
