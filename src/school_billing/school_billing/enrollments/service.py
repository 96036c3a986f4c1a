from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Optional

from ..billing.anchor import BillingAnchorResolver
from ..billing.model import Installment
from ..billing.repository import InstallmentRepository
from ..billing.scheduler import InstallmentScheduler
from ..catalog.model import Course, SchoolClass
from ..catalog.repository import ClassRepository, CourseRepository
from ..common.validators import require_iso_date, require_non_empty
from ..core.enums import EnrollmentStatus
from ..core.exceptions import EmptyRangeError, ValidationError
from ..cycles.model import AcademicCycle
from ..cycles.repository import CycleRepository
from .model import Enrollment
from .repository import EnrollmentRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BillingContext:
    school_class: SchoolClass
    course: Course
    cycle: AcademicCycle


@dataclass(frozen=True)
class EnrollmentPlan:
    enrollment: Enrollment
    installments: list[Installment]


class EnrollmentLifecycleService:
    """Entry points that create, re-date, withdraw, transfer and remove enrollments.

    Every step is a separate store write and nothing is rolled back on
    failure. Steps are safe to replay: installments are keyed by
    (enrollment, month) and paid installments are never replaced. Two callers
    writing the same enrollment concurrently are not arbitrated
    (last write wins).
    """

    def __init__(
        self,
        enrollments: EnrollmentRepository,
        installments: InstallmentRepository,
        classes: ClassRepository,
        courses: CourseRepository,
        cycles: CycleRepository,
        *,
        scheduler: Optional[InstallmentScheduler] = None,
        anchor_resolver: Optional[BillingAnchorResolver] = None,
    ):
        self._enrollments = enrollments
        self._installments = installments
        self._classes = classes
        self._courses = courses
        self._cycles = cycles
        self._scheduler = scheduler or InstallmentScheduler(installments)
        self._anchors = anchor_resolver or BillingAnchorResolver()

    def _billing_context(self, class_id: str) -> BillingContext:
        school_class = self._classes.get_by_id(class_id)
        if not school_class:
            raise ValidationError("Class does not exist")
        course = self._courses.get_by_id(school_class.course_id)
        if not course:
            raise ValidationError("The class has no valid course")
        cycle = self._cycles.get_by_id(school_class.cycle_id)
        if not cycle:
            raise ValidationError("The class has no valid academic cycle")
        return BillingContext(school_class=school_class, course=course, cycle=cycle)

    def _get_enrollment(self, enrollment_id: str) -> Enrollment:
        enrollment = self._enrollments.get_by_id(require_non_empty(enrollment_id, "Enrollment"))
        if not enrollment:
            raise ValidationError("Enrollment does not exist")
        return enrollment

    def _require_billable(self, enrollment: Enrollment, ctx: BillingContext) -> None:
        if not self._scheduler.billable_months(enrollment=enrollment, cycle=ctx.cycle):
            raise EmptyRangeError("The end date must be after the start date")

    def _anchor_day(self, *, student_id: str, new_date: date, exclude_enrollment_id: Optional[str] = None) -> int:
        # Read fresh on every call; other course additions may have landed meanwhile.
        dates = [
            e.date
            for e in self._enrollments.list_for_student(student_id)
            if e.enrollment_id != exclude_enrollment_id
        ]
        dates.append(new_date)
        return self._anchors.resolve(dates)

    def create(self, *, student_id: str, class_id: str, start_date) -> EnrollmentPlan:
        student_id = require_non_empty(student_id, "Student")
        class_id = require_non_empty(class_id, "Class")
        start = require_iso_date(start_date, "Enrollment date")

        ctx = self._billing_context(class_id)
        draft = Enrollment(enrollment_id="", student_id=student_id, class_id=class_id, date=start)
        self._require_billable(draft, ctx)

        for existing in self._enrollments.list_for_student(student_id):
            if existing.class_id == class_id and not existing.is_withdrawn:
                if existing.date == start and self._schedule_incomplete(existing, ctx):
                    return self._resume(existing, ctx)
                raise ValidationError("The student is already enrolled in this class")

        anchor = self._anchor_day(student_id=student_id, new_date=start)
        enrollment = self._enrollments.create(draft)
        installments = self._scheduler.schedule(
            enrollment=enrollment, course=ctx.course, cycle=ctx.cycle, anchor_day=anchor
        )
        logger.info(
            "Enrolled student %s in class %s from %s (%d installments, billing day %d)",
            student_id, class_id, start, len(installments), anchor,
        )
        return EnrollmentPlan(enrollment=enrollment, installments=installments)

    def _schedule_incomplete(self, enrollment: Enrollment, ctx: BillingContext) -> bool:
        stored = {i.month for i in self._installments.list_for_enrollment(enrollment.enrollment_id)}
        expected = self._scheduler.billable_months(enrollment=enrollment, cycle=ctx.cycle)
        return any(str(m) not in stored for m in expected)

    def _resume(self, enrollment: Enrollment, ctx: BillingContext) -> EnrollmentPlan:
        """Finish the schedule of an enrollment whose earlier create stopped midway."""

        anchor = self._anchor_day(student_id=enrollment.student_id, new_date=enrollment.date)
        installments = self._scheduler.schedule(
            enrollment=enrollment, course=ctx.course, cycle=ctx.cycle, anchor_day=anchor
        )
        logger.info(
            "Resumed schedule of enrollment %s (%d installments written)",
            enrollment.enrollment_id, len(installments),
        )
        return EnrollmentPlan(enrollment=enrollment, installments=installments)

    def withdraw(self, *, enrollment_id: str, withdrawal_date) -> Enrollment:
        """Mark the enrollment withdrawn; later months stop counting as owed.

        Installments are kept; reporting filters months after the withdrawal month.
        """

        enrollment = self._get_enrollment(enrollment_id)
        when = require_iso_date(withdrawal_date, "Withdrawal date")
        if enrollment.is_withdrawn:
            raise ValidationError("The enrollment is already withdrawn")
        if when < enrollment.date:
            raise ValidationError("The withdrawal date cannot be before the enrollment date")

        if not self._enrollments.mark_withdrawn(enrollment_id=enrollment.enrollment_id, withdrawal_date=when):
            raise ValidationError("Withdrawal failed")
        logger.info("Withdrew enrollment %s on %s", enrollment.enrollment_id, when)
        return replace(enrollment, status=EnrollmentStatus.WITHDRAWN, withdrawal_date=when)

    def change_start_date(self, *, enrollment_id: str, new_date) -> list[Installment]:
        """Re-date an enrollment and rebuild its unpaid installments.

        Paid installments are kept as they are, including those for months
        before the new start date.
        """

        enrollment = self._get_enrollment(enrollment_id)
        new_start = require_iso_date(new_date, "Enrollment date")
        if enrollment.is_withdrawn:
            raise ValidationError("Cannot change the date of a withdrawn enrollment")

        ctx = self._billing_context(enrollment.class_id)
        updated = replace(enrollment, date=new_start)
        self._require_billable(updated, ctx)

        removed = 0
        for inst in self._installments.list_for_enrollment(enrollment.enrollment_id):
            if not inst.is_paid:
                self._installments.delete(inst.installment_id)
                removed += 1

        if not self._enrollments.update_date(enrollment_id=enrollment.enrollment_id, new_date=new_start):
            raise ValidationError("Enrollment does not exist")

        anchor = self._anchor_day(
            student_id=enrollment.student_id,
            new_date=new_start,
            exclude_enrollment_id=enrollment.enrollment_id,
        )
        installments = self._scheduler.schedule(
            enrollment=updated, course=ctx.course, cycle=ctx.cycle, anchor_day=anchor
        )
        logger.info(
            "Enrollment %s moved from %s to %s: %d unpaid removed, %d regenerated (billing day %d)",
            enrollment.enrollment_id, enrollment.date, new_start, removed, len(installments), anchor,
        )
        return installments

    # Exposed name used by UI collaborators.
    recalculate_for_date_change = change_start_date

    def transfer(self, *, enrollment_id: str, target_class_id: str, transfer_date) -> EnrollmentPlan:
        """Withdraw from the current class and enroll in another from the same date.

        The old enrollment keeps its payment history.
        """

        current = self._get_enrollment(enrollment_id)
        target_class_id = require_non_empty(target_class_id, "Target class")
        when = require_iso_date(transfer_date, "Transfer date")
        if current.is_withdrawn:
            raise ValidationError("Only active enrollments can be transferred")
        if current.class_id == target_class_id:
            raise ValidationError("The student is already in this class")

        target_ctx = self._billing_context(target_class_id)
        for existing in self._enrollments.list_for_student(current.student_id):
            if existing.class_id == target_class_id and not existing.is_withdrawn:
                raise ValidationError("The student is already enrolled in this class")
        if when < current.date:
            raise ValidationError("The withdrawal date cannot be before the enrollment date")
        self._require_billable(
            Enrollment(enrollment_id="", student_id=current.student_id, class_id=target_class_id, date=when),
            target_ctx,
        )

        self.withdraw(enrollment_id=current.enrollment_id, withdrawal_date=when)
        plan = self.create(student_id=current.student_id, class_id=target_class_id, start_date=when)
        logger.info(
            "Transferred student %s from class %s to %s on %s",
            current.student_id, current.class_id, target_class_id, when,
        )
        return plan

    def remove(self, *, enrollment_id: str) -> int:
        """Hard delete: the enrollment and all its installments, paid or not.

        Returns the number of installments deleted.
        """

        enrollment_id = require_non_empty(enrollment_id, "Enrollment")
        deleted = 0
        for inst in self._installments.list_for_enrollment(enrollment_id):
            if self._installments.delete(inst.installment_id):
                deleted += 1
        self._enrollments.delete(enrollment_id)
        logger.info("Removed enrollment %s and %d installments", enrollment_id, deleted)
        return deleted
