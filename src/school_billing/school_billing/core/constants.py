"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

MONEY_QUANT = Decimal("0.01")
MAX_DISCOUNT_PERCENTAGE = Decimal("100")

ISO_DATE_FORMAT = "%Y-%m-%d"

SUMMER_MONTHS = (1, 2)
ANNUAL_MONTHS = tuple(range(3, 13))
