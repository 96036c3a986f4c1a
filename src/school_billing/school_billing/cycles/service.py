from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import date
from typing import Optional

from ..billing.discount import target_month_for_event
from ..common.months import MonthYear
from ..common.validators import require_date_order, require_iso_date, require_non_empty, require_percentage
from ..core.constants import ANNUAL_MONTHS, SUMMER_MONTHS
from ..core.exceptions import EmptyRangeError, ValidationError
from .model import AcademicCycle, EventDiscount
from .repository import CycleRepository

logger = logging.getLogger(__name__)


class CycleService:
    def __init__(self, cycles: CycleRepository):
        self._cycles = cycles

    def _get(self, cycle_id: str) -> AcademicCycle:
        cycle = self._cycles.get_by_id(require_non_empty(cycle_id, "Cycle"))
        if not cycle:
            raise ValidationError("Academic cycle does not exist")
        return cycle

    def _validated_span(self, start_date, end_date) -> tuple[date, date]:
        start = require_iso_date(start_date, "Start date")
        end = require_iso_date(end_date, "End date")
        if end < start:
            raise EmptyRangeError("The end date must be after the start date")
        return start, end

    def _require_unique_name(self, name: str, *, cycle_id: str = "") -> None:
        for other in self._cycles.list_all():
            if other.name == name and other.cycle_id != cycle_id:
                raise ValidationError(f'A cycle named "{name}" already exists')

    def create_cycle(self, *, name: str, start_date, end_date, cycle_id: str = "") -> AcademicCycle:
        name = require_non_empty(name, "Cycle name")
        start, end = self._validated_span(start_date, end_date)
        self._require_unique_name(name, cycle_id=cycle_id)
        if cycle_id and self._cycles.get_by_id(cycle_id):
            raise ValidationError("Academic cycle already exists")

        cycle = self._cycles.save(AcademicCycle(cycle_id=cycle_id, name=name, start_date=start, end_date=end))
        logger.info("Created cycle %s (%s to %s)", cycle.name, start, end)
        return cycle

    def update_cycle(self, *, cycle_id: str, name: str, start_date, end_date) -> AcademicCycle:
        """Change name/span; events are kept. Existing installments are not touched."""

        cycle = self._get(cycle_id)
        name = require_non_empty(name, "Cycle name")
        start, end = self._validated_span(start_date, end_date)
        self._require_unique_name(name, cycle_id=cycle.cycle_id)

        return self._cycles.save(replace(cycle, name=name, start_date=start, end_date=end, months=()))

    def add_event(
        self,
        *,
        cycle_id: str,
        name: str,
        start_date,
        end_date,
        discount_percentage,
    ) -> EventDiscount:
        cycle = self._get(cycle_id)
        name = require_non_empty(name, "Event name")
        start = require_iso_date(start_date, "Event start date")
        end = require_iso_date(end_date, "Event end date")
        require_date_order(start, end, what="event end date")
        pct = require_percentage(discount_percentage)

        event = EventDiscount(
            event_id=f"evt-{uuid.uuid4().hex[:12]}",
            name=name,
            start_date=start,
            end_date=end,
            target_month=target_month_for_event(start, end),
            discount_percentage=pct,
        )
        self._cycles.save(replace(cycle, events=cycle.events + (event,)))
        logger.info("Added event %s (%s%%) to cycle %s targeting %s", name, pct, cycle.name, event.target_month)
        return event

    def remove_event(self, *, cycle_id: str, event_id: str) -> bool:
        cycle = self._get(cycle_id)
        events = tuple(e for e in cycle.events if e.event_id != event_id)
        if len(events) == len(cycle.events):
            return False
        self._cycles.save(replace(cycle, events=events))
        return True

    def list_cycles(self) -> list[AcademicCycle]:
        return sorted(self._cycles.list_all(), key=lambda c: (c.month_tokens() or [""])[0])

    def detect_current(self, today: date) -> Optional[AcademicCycle]:
        """The cycle whose months contain ``today``'s month."""
        month = MonthYear.of(today)
        for cycle in self.list_cycles():
            if cycle.contains_month(month):
                return cycle
        return None

    @staticmethod
    def standard_cycles(year: int) -> list[AcademicCycle]:
        """Summer (Jan-Feb) and annual (Mar-Dec) cycles of ``year``."""

        def span(months: tuple[int, ...]) -> tuple[date, date]:
            last = MonthYear(year, months[-1])
            return MonthYear(year, months[0]).first_day(), date(year, last.month, last.days)

        summer_start, summer_end = span(SUMMER_MONTHS)
        annual_start, annual_end = span(ANNUAL_MONTHS)
        return [
            AcademicCycle(cycle_id=f"summer-{year}", name=f"Summer {year}", start_date=summer_start, end_date=summer_end),
            AcademicCycle(cycle_id=f"annual-{year}", name=f"Annual {year}", start_date=annual_start, end_date=annual_end),
        ]

    def ensure_standard_cycles(self, year: int) -> list[AcademicCycle]:
        """Create the standard cycles of ``year`` that do not exist yet."""

        created = []
        existing = {c.name for c in self._cycles.list_all()}
        for cycle in self.standard_cycles(year):
            if cycle.name not in existing and not self._cycles.get_by_id(cycle.cycle_id):
                created.append(self._cycles.save(cycle))
        return created
