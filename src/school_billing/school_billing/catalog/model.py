from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..core.enums import PersonStatus


@dataclass(frozen=True)
class Course:
    """A course with its monthly tuition price."""

    course_id: str
    name: str
    price: Decimal
    hours: int = 0
    minutes: int = 0


@dataclass(frozen=True)
class SchoolClass:
    """A class binds a course to an academic cycle."""

    class_id: str
    course_id: str
    cycle_id: str
    name: str = ""
    teacher_name: Optional[str] = None
    capacity: Optional[int] = None


@dataclass(frozen=True)
class Student:
    student_id: str
    first_name: str
    last_name: str
    phone: Optional[str] = None
    status: PersonStatus = PersonStatus.ACTIVE

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
