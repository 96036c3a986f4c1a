from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Optional

from ..core.constants import ISO_DATE_FORMAT


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, ISO_DATE_FORMAT).date()


def format_iso_date(value: date) -> str:
    return value.strftime(ISO_DATE_FORMAT)


def optional_date(value: Optional[str]) -> Optional[date]:
    return parse_iso_date(value) if value else None


def now_local(offset_hours: Optional[int] = None) -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier. With ``offset_hours`` the
    clock is pinned to a fixed UTC offset instead of the host timezone.
    """
    if offset_hours is None:
        return datetime.now()
    return datetime.now(timezone(timedelta(hours=offset_hours))).replace(tzinfo=None)


def today_local(offset_hours: Optional[int] = None) -> date:
    return now_local(offset_hours).date()
