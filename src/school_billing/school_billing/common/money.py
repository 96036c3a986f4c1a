"""Fixed-point money helpers.

Amounts travel as ``Decimal`` inside the package and as two-decimal strings
("100.00") in persisted documents.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from ..core.constants import MONEY_QUANT

MoneyLike = Union[str, int, float, Decimal, None]


def to_money(value: MoneyLike) -> Decimal:
    if value is None or value == "":
        return Decimal("0.00")
    if isinstance(value, float):
        value = repr(value)
    return Decimal(str(value)).quantize(MONEY_QUANT, rounding=ROUND_HALF_UP)


def format_money(value: MoneyLike) -> str:
    return f"{to_money(value):.2f}"


def percentage_of(amount: Decimal, percentage: Decimal) -> Decimal:
    return to_money(amount * percentage / Decimal("100"))
