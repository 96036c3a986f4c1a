from __future__ import annotations

from dataclasses import replace
from typing import Optional

from ..common.money import to_money
from ..common.validators import require_non_empty, require_price
from ..core.exceptions import ValidationError
from ..cycles.repository import CycleRepository
from .model import Course, SchoolClass, Student
from .repository import ClassRepository, CourseRepository, StudentRepository


class CatalogService:
    """Courses, classes and students that billing reads from.

    Editing a course price never rewrites installments already generated.
    """

    def __init__(
        self,
        courses: CourseRepository,
        classes: ClassRepository,
        students: StudentRepository,
        cycles: CycleRepository,
    ):
        self._courses = courses
        self._classes = classes
        self._students = students
        self._cycles = cycles

    @staticmethod
    def _duration(value, field_name: str) -> int:
        try:
            number = int(str(value or 0).strip() or 0)
        except ValueError:
            raise ValidationError(f"{field_name} must be a whole number")
        if number < 0:
            raise ValidationError(f"{field_name} cannot be negative")
        return number

    def add_course(self, *, name: str, price, hours=0, minutes=0) -> Course:
        course = Course(
            course_id="",
            name=require_non_empty(name, "Course name"),
            price=to_money(require_price(price)),
            hours=self._duration(hours, "Hours"),
            minutes=self._duration(minutes, "Minutes"),
        )
        return self._courses.save(course)

    def update_course(self, *, course_id: str, name: str, price, hours=0, minutes=0) -> Course:
        existing = self._courses.get_by_id(require_non_empty(course_id, "Course"))
        if not existing:
            raise ValidationError("Course does not exist")
        return self._courses.save(
            replace(
                existing,
                name=require_non_empty(name, "Course name"),
                price=to_money(require_price(price)),
                hours=self._duration(hours, "Hours"),
                minutes=self._duration(minutes, "Minutes"),
            )
        )

    def add_class(
        self,
        *,
        course_id: str,
        cycle_id: str,
        teacher_name: Optional[str] = None,
        capacity=None,
    ) -> SchoolClass:
        course = self._courses.get_by_id(require_non_empty(course_id, "Course"))
        if not course:
            raise ValidationError("Course does not exist")
        if not self._cycles.get_by_id(require_non_empty(cycle_id, "Cycle")):
            raise ValidationError("Academic cycle does not exist")
        if capacity in (None, ""):
            capacity = None
        elif self._duration(capacity, "Capacity") <= 0:
            raise ValidationError("Capacity must be positive")

        return self._classes.save(
            SchoolClass(
                class_id="",
                course_id=course.course_id,
                cycle_id=cycle_id,
                name=course.name,
                teacher_name=teacher_name.strip() if teacher_name else None,
                capacity=int(capacity) if capacity is not None else None,
            )
        )

    def add_student(self, *, first_name: str, last_name: str, phone: Optional[str] = None) -> Student:
        return self._students.save(
            Student(
                student_id="",
                first_name=require_non_empty(first_name, "First name"),
                last_name=require_non_empty(last_name, "Last name"),
                phone=phone.strip() if phone else None,
            )
        )
