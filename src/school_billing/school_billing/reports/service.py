from __future__ import annotations

import calendar
from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..billing.discount import DiscountResolver
from ..billing.model import Installment
from ..billing.repository import InstallmentRepository
from ..catalog.repository import ClassRepository, CourseRepository, StudentRepository
from ..common.datetime_utils import format_iso_date
from ..common.money import format_money, to_money
from ..common.months import MonthYear, iter_months
from ..core.exceptions import ValidationError
from ..cycles.repository import CycleRepository
from ..enrollments.model import Enrollment
from ..enrollments.repository import EnrollmentRepository
from ..payments.repository import PaymentRepository


@dataclass(frozen=True)
class FeesReport:
    students: list[dict]
    total_debt: Decimal


@dataclass(frozen=True)
class DashboardData:
    total_collected: Decimal
    total_debt: Decimal
    monthly_collected: list[dict]


def is_counted(installment: Installment, enrollment: Enrollment) -> bool:
    """Withdrawal cutoff: months after the withdrawal month are not owed."""
    return enrollment.counts_month(installment.month)


class FinancialAggregator:
    """Read-only reporting over installments and payments of one cycle."""

    def __init__(
        self,
        enrollments: EnrollmentRepository,
        installments: InstallmentRepository,
        classes: ClassRepository,
        courses: CourseRepository,
        students: StudentRepository,
        cycles: CycleRepository,
        payments: PaymentRepository,
        *,
        discounts: Optional[DiscountResolver] = None,
    ):
        self._enrollments = enrollments
        self._installments = installments
        self._classes = classes
        self._courses = courses
        self._students = students
        self._cycles = cycles
        self._payments = payments
        self._discounts = discounts or DiscountResolver()

    def _cycle_scope(self, cycle_id: str):
        cycle = self._cycles.get_by_id(cycle_id)
        if not cycle:
            raise ValidationError("Academic cycle does not exist")
        classes = {c.class_id: c for c in self._classes.list_for_cycle(cycle_id)}
        enrollments = [e for e in self._enrollments.list_all() if e.class_id in classes]
        return cycle, classes, enrollments

    def student_fees(self, *, cycle_id: str, today: date) -> FeesReport:
        cycle, classes, enrollments = self._cycle_scope(cycle_id)
        by_student: dict[str, list[Enrollment]] = defaultdict(list)
        for e in enrollments:
            by_student[e.student_id].append(e)

        rows: list[tuple[Decimal, dict]] = []
        grand_total = Decimal("0.00")

        for student_id, student_enrollments in by_student.items():
            student = self._students.get_by_id(student_id)
            total = Decimal("0.00")
            details: list[dict] = []

            for enrol in student_enrollments:
                course = self._courses.get_by_id(classes[enrol.class_id].course_id)
                months: list[dict] = []
                debt = Decimal("0.00")

                for inst in self._installments.list_for_enrollment(enrol.enrollment_id):
                    if not is_counted(inst, enrol):
                        continue
                    amount, notes = self._discounts.effective_amount(inst, cycle.events)
                    overdue = inst.due_date <= today and not inst.is_paid
                    if overdue:
                        debt += amount
                    months.append(
                        {
                            "installment_id": inst.installment_id,
                            "month": inst.month,
                            "due_date": format_iso_date(inst.due_date),
                            "amount": format_money(amount),
                            "is_paid": inst.is_paid,
                            "is_overdue": overdue,
                            "payment_id": inst.payment_id,
                            "notes": notes or "",
                        }
                    )

                next_unpaid = next((m for m in months if not m["is_paid"]), None)
                total += debt
                details.append(
                    {
                        "enrollment_id": enrol.enrollment_id,
                        "status": enrol.status.value,
                        "course_name": course.name if course else "Unknown",
                        "monthly_price": format_money(course.price if course else 0),
                        "debt": format_money(debt),
                        "next_due_date": next_unpaid["due_date"] if next_unpaid else None,
                        "is_paid": next_unpaid is None,
                        "months": months,
                    }
                )

            grand_total += total
            rows.append(
                (
                    total,
                    {
                        "student_id": student_id,
                        "full_name": student.full_name if student else student_id,
                        "total_debt": format_money(total),
                        "enrollments": details,
                    },
                )
            )

        rows.sort(key=lambda r: r[0], reverse=True)
        return FeesReport(students=[r for _, r in rows], total_debt=to_money(grand_total))

    def dashboard(self, *, cycle_id: str) -> DashboardData:
        cycle, _, enrollments = self._cycle_scope(cycle_id)
        collected = Decimal("0.00")
        debt = Decimal("0.00")
        monthly: dict[MonthYear, Decimal] = defaultdict(lambda: Decimal("0.00"))
        seen: set[MonthYear] = set()

        for enrol in enrollments:
            for inst in self._installments.list_for_enrollment(enrol.enrollment_id):
                if not is_counted(inst, enrol):
                    continue
                month = MonthYear.parse(inst.month)
                seen.add(month)
                if inst.is_paid:
                    collected += inst.amount
                    monthly[month] += inst.amount
                else:
                    amount, _ = self._discounts.effective_amount(inst, cycle.events)
                    debt += amount

        series: list[dict] = []
        if seen:
            for month in iter_months(min(seen), max(seen)):
                series.append(
                    {
                        "month": str(month),
                        "label": calendar.month_abbr[month.month],
                        "value": format_money(monthly[month]),
                    }
                )
        return DashboardData(total_collected=to_money(collected), total_debt=to_money(debt), monthly_collected=series)

    def collected_in_month(self, month: str) -> Decimal:
        return to_money(sum((p.amount for p in self._payments.list_for_month(month)), Decimal("0.00")))
