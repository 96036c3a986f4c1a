from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Enrollment


class EnrollmentRepository(Protocol):
    def get_by_id(self, enrollment_id: str) -> Optional[Enrollment]:
        raise NotImplementedError

    def list_for_student(self, student_id: str) -> Sequence[Enrollment]:
        raise NotImplementedError

    def list_for_class(self, class_id: str) -> Sequence[Enrollment]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Enrollment]:
        raise NotImplementedError

    def create(self, enrollment: Enrollment) -> Enrollment:
        """Persist a new enrollment; the store assigns the id when it is empty."""

        raise NotImplementedError

    def update_date(self, *, enrollment_id: str, new_date: date) -> bool:
        raise NotImplementedError

    def mark_withdrawn(self, *, enrollment_id: str, withdrawal_date: date) -> bool:
        raise NotImplementedError

    def delete(self, enrollment_id: str) -> bool:
        raise NotImplementedError
