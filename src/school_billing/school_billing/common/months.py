from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date
from typing import Iterator, Union

from ..core.exceptions import ValidationError


@dataclass(frozen=True, order=True)
class MonthYear:
    """A calendar month. Rendered as zero-padded ``YYYY-MM`` when persisted."""

    year: int
    month: int

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise ValidationError(f"Invalid month: {self.year}-{self.month}")

    @classmethod
    def of(cls, value: date) -> "MonthYear":
        return cls(value.year, value.month)

    @classmethod
    def parse(cls, token: Union[str, "MonthYear"]) -> "MonthYear":
        """Parse ``YYYY-MM`` or unpadded ``YYYY-M``; a trailing day is ignored."""
        if isinstance(token, MonthYear):
            return token
        parts = str(token or "").strip().split("-")
        if len(parts) < 2:
            raise ValidationError(f"Invalid month token: {token!r}")
        try:
            return cls(int(parts[0]), int(parts[1]))
        except ValueError:
            raise ValidationError(f"Invalid month token: {token!r}")

    @property
    def days(self) -> int:
        return calendar.monthrange(self.year, self.month)[1]

    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    def next(self) -> "MonthYear":
        if self.month == 12:
            return MonthYear(self.year + 1, 1)
        return MonthYear(self.year, self.month + 1)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


def normalize_month(token: Union[str, MonthYear]) -> str:
    return str(MonthYear.parse(token))


def iter_months(start: MonthYear, end: MonthYear) -> Iterator[MonthYear]:
    """Yield every month from ``start`` to ``end`` inclusive."""
    current = start
    while current <= end:
        yield current
        current = current.next()


def months_between(start: date, end: date) -> list[MonthYear]:
    return list(iter_months(MonthYear.of(start), MonthYear.of(end)))
