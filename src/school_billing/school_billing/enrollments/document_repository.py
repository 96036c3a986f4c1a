from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import format_iso_date, optional_date, parse_iso_date
from ..core.enums import Collection, EnrollmentStatus
from ..storage.document_store import DocumentStore
from .model import Enrollment
from .repository import EnrollmentRepository


def _to_enrollment(doc: dict) -> Enrollment:
    return Enrollment(
        enrollment_id=str(doc["id"]),
        student_id=str(doc.get("studentId") or ""),
        class_id=str(doc.get("classId") or ""),
        date=parse_iso_date(str(doc["date"]).strip()[:10]),
        status=EnrollmentStatus(doc.get("status") or EnrollmentStatus.ACTIVE.value),
        withdrawal_date=optional_date(doc.get("withdrawalDate")),
    )


class DocumentEnrollmentRepository(EnrollmentRepository):
    def __init__(self, store: DocumentStore):
        self._store = store

    def get_by_id(self, enrollment_id: str) -> Optional[Enrollment]:
        doc = self._store.get(Collection.ENROLLMENTS, enrollment_id)
        return _to_enrollment(doc) if doc else None

    def list_for_student(self, student_id: str) -> Sequence[Enrollment]:
        return [_to_enrollment(d) for d in self._store.list(Collection.ENROLLMENTS, studentId=student_id)]

    def list_for_class(self, class_id: str) -> Sequence[Enrollment]:
        return [_to_enrollment(d) for d in self._store.list(Collection.ENROLLMENTS, classId=class_id)]

    def list_all(self) -> Sequence[Enrollment]:
        return [_to_enrollment(d) for d in self._store.list(Collection.ENROLLMENTS)]

    def create(self, enrollment: Enrollment) -> Enrollment:
        data = {
            "studentId": enrollment.student_id,
            "classId": enrollment.class_id,
            "date": format_iso_date(enrollment.date),
            "status": enrollment.status.value,
            "withdrawalDate": format_iso_date(enrollment.withdrawal_date) if enrollment.withdrawal_date else None,
        }
        if not enrollment.enrollment_id:
            return replace(enrollment, enrollment_id=self._store.add(Collection.ENROLLMENTS, data))
        self._store.set(Collection.ENROLLMENTS, enrollment.enrollment_id, data)
        return enrollment

    def update_date(self, *, enrollment_id: str, new_date: date) -> bool:
        return self._store.update(Collection.ENROLLMENTS, enrollment_id, {"date": format_iso_date(new_date)})

    def mark_withdrawn(self, *, enrollment_id: str, withdrawal_date: date) -> bool:
        return self._store.update(
            Collection.ENROLLMENTS,
            enrollment_id,
            {"status": EnrollmentStatus.WITHDRAWN.value, "withdrawalDate": format_iso_date(withdrawal_date)},
        )

    def delete(self, enrollment_id: str) -> bool:
        return self._store.delete(Collection.ENROLLMENTS, enrollment_id)
