from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date


class DueDateCalculator(ABC):
    """Calculator interface (Strategy Pattern for due dates)."""

    @abstractmethod
    def due_date(self, *, year: int, month: int, anchor_day: int) -> date:
        raise NotImplementedError
