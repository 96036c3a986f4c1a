from __future__ import annotations

from dataclasses import dataclass

import pytest

from src.school_billing.school_billing.catalog.model import Course, SchoolClass, Student
from src.school_billing.school_billing.container import Container, build_container
from src.school_billing.school_billing.cycles.model import AcademicCycle
from src.school_billing.school_billing.storage.memory_store import InMemoryDocumentStore


@dataclass
class Setup:
    container: Container
    cycle: AcademicCycle
    course: Course
    school_class: SchoolClass
    student: Student


@pytest.fixture
def container() -> Container:
    return build_container(store=InMemoryDocumentStore())


@pytest.fixture
def setup(container) -> Setup:
    """Cycle Jan-Mar 2025, a course at 100.00 and one class of it."""

    cycle = container.cycle_service.create_cycle(name="Summer 2025", start_date="2025-01-01", end_date="2025-03-31")
    course = container.catalog_service.add_course(name="Advanced Mathematics", price="100")
    school_class = container.catalog_service.add_class(course_id=course.course_id, cycle_id=cycle.cycle_id)
    student = container.catalog_service.add_student(first_name="Juan", last_name="Perez")
    return Setup(container=container, cycle=cycle, course=course, school_class=school_class, student=student)
