from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import AcademicCycle


class CycleRepository(Protocol):
    def get_by_id(self, cycle_id: str) -> Optional[AcademicCycle]:
        raise NotImplementedError

    def list_all(self) -> Sequence[AcademicCycle]:
        raise NotImplementedError

    def save(self, cycle: AcademicCycle) -> AcademicCycle:
        """Create (empty ``cycle_id``) or replace a cycle including its events."""

        raise NotImplementedError

    def delete(self, cycle_id: str) -> bool:
        raise NotImplementedError
