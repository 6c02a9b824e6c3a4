"""Currency arithmetic for order lines.

Line totals are computed from the snapshot unit price and rounded **once**
to currency precision; the order total is the sum of already-rounded line
totals, so ``order.total == sum(item.line_total)`` holds exactly.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from modules.orders.constants import CURRENCY_QUANTUM, CURRENCY_ROUNDING


def round_currency(value: Decimal) -> Decimal:
    """Round *value* to cents using half-up rounding."""
    return Decimal(value).quantize(CURRENCY_QUANTUM, rounding=CURRENCY_ROUNDING)


def line_total(unit_price: Decimal, quantity: int) -> Decimal:
    """Return ``unit_price * quantity`` rounded to cents.

    >>> line_total(Decimal("4.995"), 2)
    Decimal('9.99')
    """
    return round_currency(Decimal(unit_price) * quantity)


def order_total(line_totals: Iterable[Decimal]) -> Decimal:
    return round_currency(sum(line_totals, Decimal("0.00")))
