from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from ..catalog.model import Course
from ..common.money import to_money
from ..common.months import MonthYear, iter_months
from ..core.exceptions import EmptyRangeError, PersistenceError
from ..cycles.model import AcademicCycle
from ..enrollments.model import Enrollment
from .calculator.base import DueDateCalculator
from .calculator.clamped_calculator import ClampedDueDateCalculator
from .discount import DiscountResolver
from .model import Installment, installment_key
from .repository import InstallmentRepository

logger = logging.getLogger(__name__)


class InstallmentScheduler:
    """Builds and stores the monthly installments of one enrollment.

    ``generate`` is pure: it only reads its arguments. ``persist`` performs one
    upsert per month in chronological order, keyed by (enrollment, month), and
    never replaces an installment that is already paid.
    """

    def __init__(
        self,
        installments: InstallmentRepository,
        *,
        discounts: Optional[DiscountResolver] = None,
        due_dates: Optional[DueDateCalculator] = None,
    ):
        self._installments = installments
        self._discounts = discounts or DiscountResolver()
        self._due_dates = due_dates or ClampedDueDateCalculator()

    def billable_months(self, *, enrollment: Enrollment, cycle: AcademicCycle) -> list[MonthYear]:
        first = MonthYear.of(enrollment.date)

        if cycle.has_date_span:
            start = max(first, MonthYear.of(cycle.start_date))
            return list(iter_months(start, MonthYear.of(cycle.end_date)))

        # Legacy cycles only carry their stored month list.
        months = {MonthYear.parse(token) for token in cycle.months}
        return sorted(m for m in months if m >= first)

    def generate(
        self,
        *,
        enrollment: Enrollment,
        course: Course,
        cycle: AcademicCycle,
        anchor_day: Optional[int] = None,
    ) -> list[Installment]:
        months = self.billable_months(enrollment=enrollment, cycle=cycle)
        if not months:
            raise EmptyRangeError("The end date must be after the start date")

        day = int(anchor_day or enrollment.date.day)
        price = to_money(course.price)
        drafts: list[Installment] = []

        for month in months:
            discount = self._discounts.resolve(cycle.events, month)
            drafts.append(
                Installment(
                    installment_id=installment_key(enrollment.enrollment_id, str(month)),
                    enrollment_id=enrollment.enrollment_id,
                    student_id=enrollment.student_id,
                    month=str(month),
                    amount=self._discounts.apply(price, discount),
                    original_amount=price,
                    due_date=self._due_dates.due_date(year=month.year, month=month.month, anchor_day=day),
                    is_paid=False,
                    notes=discount.notes or None,
                )
            )
        return drafts

    def persist(self, drafts: Sequence[Installment]) -> list[Installment]:
        """Write drafts in order; returns the installments actually written.

        Raises PersistenceError on the first failed write. Months written
        before the failure stay committed, so a retry resumes cleanly.
        """

        paid_months = self._paid_months({d.enrollment_id for d in drafts})
        written: list[Installment] = []

        for draft in sorted(drafts, key=lambda d: d.month):
            if (draft.enrollment_id, draft.month) in paid_months:
                logger.debug("Keeping paid installment %s", draft.installment_id)
                continue
            try:
                self._installments.upsert(draft)
            except PersistenceError as exc:
                logger.error(
                    "Installment generation stopped at %s after %d of %d months: %s",
                    draft.month, len(written), len(drafts), exc,
                )
                raise PersistenceError(
                    f"Could not save installment {draft.month} ({len(written)} months saved): {exc}",
                    written=len(written),
                ) from exc
            written.append(draft)
        return written

    def schedule(
        self,
        *,
        enrollment: Enrollment,
        course: Course,
        cycle: AcademicCycle,
        anchor_day: Optional[int] = None,
    ) -> list[Installment]:
        drafts = self.generate(enrollment=enrollment, course=course, cycle=cycle, anchor_day=anchor_day)
        return self.persist(drafts)

    def _paid_months(self, enrollment_ids: Iterable[str]) -> set[tuple[str, str]]:
        paid: set[tuple[str, str]] = set()
        for enrollment_id in enrollment_ids:
            for inst in self._installments.list_for_enrollment(enrollment_id):
                if inst.is_paid:
                    paid.add((inst.enrollment_id, inst.month))
        return paid

    # Exposed name used by reporting/UI collaborators.
    generate_installments_for_enrollment = generate
