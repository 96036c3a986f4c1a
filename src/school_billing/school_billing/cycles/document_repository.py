from __future__ import annotations

from dataclasses import replace
from decimal import Decimal
from typing import Optional, Sequence

from ..common.datetime_utils import format_iso_date, optional_date, parse_iso_date
from ..core.enums import Collection
from ..storage.document_store import DocumentStore
from .model import AcademicCycle, EventDiscount
from .repository import CycleRepository


def _to_event(doc: dict) -> EventDiscount:
    return EventDiscount(
        event_id=str(doc.get("id") or ""),
        name=str(doc.get("name") or ""),
        start_date=parse_iso_date(doc["startDate"]),
        end_date=parse_iso_date(doc["endDate"]),
        target_month=str(doc.get("targetMonthYear") or ""),
        discount_percentage=Decimal(str(doc.get("discountPercentage") or 0)),
    )


def _event_doc(ev: EventDiscount) -> dict:
    pct = ev.discount_percentage
    return {
        "id": ev.event_id,
        "name": ev.name,
        "startDate": format_iso_date(ev.start_date),
        "endDate": format_iso_date(ev.end_date),
        "targetMonthYear": ev.target_month,
        "discountPercentage": int(pct) if pct == pct.to_integral_value() else float(pct),
    }


def _to_cycle(doc: dict) -> AcademicCycle:
    return AcademicCycle(
        cycle_id=str(doc["id"]),
        name=str(doc.get("name") or ""),
        start_date=optional_date(doc.get("startDate")),
        end_date=optional_date(doc.get("endDate")),
        months=tuple(str(m) for m in doc.get("months") or ()),
        events=tuple(_to_event(e) for e in doc.get("events") or ()),
    )


class DocumentCycleRepository(CycleRepository):
    def __init__(self, store: DocumentStore):
        self._store = store

    def get_by_id(self, cycle_id: str) -> Optional[AcademicCycle]:
        doc = self._store.get(Collection.ACADEMIC_CYCLES, cycle_id)
        return _to_cycle(doc) if doc else None

    def list_all(self) -> Sequence[AcademicCycle]:
        return [_to_cycle(d) for d in self._store.list(Collection.ACADEMIC_CYCLES)]

    def save(self, cycle: AcademicCycle) -> AcademicCycle:
        data = {
            "name": cycle.name,
            "startDate": format_iso_date(cycle.start_date) if cycle.start_date else None,
            "endDate": format_iso_date(cycle.end_date) if cycle.end_date else None,
            "months": cycle.month_tokens(),
            "events": [_event_doc(e) for e in cycle.events],
        }
        if not cycle.cycle_id:
            return replace(cycle, cycle_id=self._store.add(Collection.ACADEMIC_CYCLES, data))
        self._store.set(Collection.ACADEMIC_CYCLES, cycle.cycle_id, data)
        return cycle

    def delete(self, cycle_id: str) -> bool:
        return self._store.delete(Collection.ACADEMIC_CYCLES, cycle_id)
