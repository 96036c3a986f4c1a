from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Course, SchoolClass, Student


class CourseRepository(Protocol):
    def get_by_id(self, course_id: str) -> Optional[Course]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Course]:
        raise NotImplementedError

    def save(self, course: Course) -> Course:
        """Create (empty ``course_id``) or replace a course."""

        raise NotImplementedError


class ClassRepository(Protocol):
    def get_by_id(self, class_id: str) -> Optional[SchoolClass]:
        raise NotImplementedError

    def list_for_cycle(self, cycle_id: str) -> Sequence[SchoolClass]:
        raise NotImplementedError

    def save(self, school_class: SchoolClass) -> SchoolClass:
        raise NotImplementedError


class StudentRepository(Protocol):
    def get_by_id(self, student_id: str) -> Optional[Student]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Student]:
        raise NotImplementedError

    def save(self, student: Student) -> Student:
        raise NotImplementedError
