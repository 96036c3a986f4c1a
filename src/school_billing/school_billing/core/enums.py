from __future__ import annotations

from enum import Enum


class EnrollmentStatus(str, Enum):
    """Billing status of an enrollment. WITHDRAWN is terminal."""

    ACTIVE = "active"
    WITHDRAWN = "withdrawn"


class PersonStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class Collection(str, Enum):
    """Named collections of the document store."""

    COURSES = "courses"
    STUDENTS = "students"
    TEACHERS = "teachers"
    CLASSES = "classes"
    ENROLLMENTS = "enrollments"
    ACADEMIC_CYCLES = "academicCycles"
    INSTALLMENTS = "installments"
    PAYMENTS = "payments"


class ChangeKind(str, Enum):
    ADDED = "added"
    MODIFIED = "modified"
    REMOVED = "removed"
