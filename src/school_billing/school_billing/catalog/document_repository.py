from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence

from ..common.money import format_money, to_money
from ..core.enums import Collection, PersonStatus
from ..storage.document_store import DocumentStore
from .model import Course, SchoolClass, Student
from .repository import ClassRepository, CourseRepository, StudentRepository


def _to_course(doc: dict) -> Course:
    return Course(
        course_id=str(doc["id"]),
        name=str(doc.get("name") or ""),
        price=to_money(doc.get("price")),
        hours=int(doc.get("hours") or 0),
        minutes=int(doc.get("minutes") or 0),
    )


def _to_class(doc: dict) -> SchoolClass:
    capacity = doc.get("capacity")
    return SchoolClass(
        class_id=str(doc["id"]),
        course_id=str(doc.get("courseId") or ""),
        cycle_id=str(doc.get("cycleId") or ""),
        name=str(doc.get("courseName") or doc.get("name") or ""),
        teacher_name=doc.get("teacherName"),
        capacity=int(capacity) if capacity not in (None, "") else None,
    )


def _to_student(doc: dict) -> Student:
    return Student(
        student_id=str(doc["id"]),
        first_name=str(doc.get("firstName") or ""),
        last_name=str(doc.get("lastName") or ""),
        phone=doc.get("phone"),
        status=PersonStatus(doc.get("status") or PersonStatus.ACTIVE.value),
    )


class DocumentCourseRepository(CourseRepository):
    def __init__(self, store: DocumentStore):
        self._store = store

    def get_by_id(self, course_id: str) -> Optional[Course]:
        doc = self._store.get(Collection.COURSES, course_id)
        return _to_course(doc) if doc else None

    def list_all(self) -> Sequence[Course]:
        return [_to_course(d) for d in self._store.list(Collection.COURSES)]

    def save(self, course: Course) -> Course:
        data = {
            "name": course.name,
            # Stored as strings, e.g. "2" / "30", like the rest of the course form.
            "hours": str(course.hours),
            "minutes": str(course.minutes),
            "price": format_money(course.price),
        }
        if not course.course_id:
            return replace(course, course_id=self._store.add(Collection.COURSES, data))
        self._store.set(Collection.COURSES, course.course_id, data)
        return course


class DocumentClassRepository(ClassRepository):
    def __init__(self, store: DocumentStore):
        self._store = store

    def get_by_id(self, class_id: str) -> Optional[SchoolClass]:
        doc = self._store.get(Collection.CLASSES, class_id)
        return _to_class(doc) if doc else None

    def list_for_cycle(self, cycle_id: str) -> Sequence[SchoolClass]:
        return [_to_class(d) for d in self._store.list(Collection.CLASSES, cycleId=cycle_id)]

    def save(self, school_class: SchoolClass) -> SchoolClass:
        data = {
            "courseId": school_class.course_id,
            "cycleId": school_class.cycle_id,
            "courseName": school_class.name,
            "teacherName": school_class.teacher_name,
            "capacity": str(school_class.capacity) if school_class.capacity is not None else None,
        }
        if not school_class.class_id:
            return replace(school_class, class_id=self._store.add(Collection.CLASSES, data))
        self._store.set(Collection.CLASSES, school_class.class_id, data)
        return school_class


class DocumentStudentRepository(StudentRepository):
    def __init__(self, store: DocumentStore):
        self._store = store

    def get_by_id(self, student_id: str) -> Optional[Student]:
        doc = self._store.get(Collection.STUDENTS, student_id)
        return _to_student(doc) if doc else None

    def list_all(self) -> Sequence[Student]:
        return [_to_student(d) for d in self._store.list(Collection.STUDENTS)]

    def save(self, student: Student) -> Student:
        data = {
            "firstName": student.first_name,
            "lastName": student.last_name,
            "phone": student.phone,
            "status": student.status.value,
            "type": "student",
        }
        if not student.student_id:
            return replace(student, student_id=self._store.add(Collection.STUDENTS, data))
        self._store.set(Collection.STUDENTS, student.student_id, data)
        return student
