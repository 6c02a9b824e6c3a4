"""Order domain constants."""

from decimal import ROUND_HALF_UP, Decimal

# Status is a free-form label managed by the status-update endpoint.
DEFAULT_ORDER_STATUS = "pending"
STATUS_MAX_LENGTH = 50

# Currency precision for line totals and order totals.
CURRENCY_QUANTUM = Decimal("0.01")
CURRENCY_ROUNDING = ROUND_HALF_UP

# Storage precision of unit prices (catalog price and line-item snapshot).
PRICE_MAX_DIGITS = 12
PRICE_DECIMAL_PLACES = 4
AMOUNT_MAX_DIGITS = 12
AMOUNT_DECIMAL_PLACES = 2

# Largest values the id and quantity columns can hold (signed 64-bit ids,
# PositiveIntegerField quantities).
MAX_ID = 2**63 - 1
MAX_QUANTITY = 2**31 - 1
