from __future__ import annotations

import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Union

from ..core.constants import MAX_DISCOUNT_PERCENTAGE
from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_iso_date(value: Union[str, date, None], field_name: str) -> date:
    if isinstance(value, date):
        return value
    if not value or not _ISO_DATE_RE.match(value.strip()):
        raise ValidationError(f"{field_name} must be a YYYY-MM-DD date")
    try:
        return parse_iso_date(value.strip())
    except ValueError:
        raise ValidationError(f"{field_name} is not a valid calendar date")


def require_date_order(start: date, end: date, *, what: str = "end date") -> None:
    if end < start:
        raise ValidationError(f"The {what} must be after the start date")


def require_decimal(value: Union[str, int, float, Decimal, None], field_name: str) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{field_name} must be numeric")
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} must be numeric")
    if not number.is_finite():
        raise ValidationError(f"{field_name} must be numeric")
    return number


def require_price(value: Union[str, int, float, Decimal, None], field_name: str = "Price") -> Decimal:
    price = require_decimal(value, field_name)
    if price < 0:
        raise ValidationError(f"{field_name} cannot be negative")
    return price


def require_percentage(value: Union[str, int, float, Decimal, None], field_name: str = "Discount") -> Decimal:
    pct = require_decimal(value, field_name)
    if pct < 0 or pct > MAX_DISCOUNT_PERCENTAGE:
        raise ValidationError(f"{field_name} must be between 0 and 100")
    return pct
