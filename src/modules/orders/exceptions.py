"""Order domain exceptions.

``OrderRejected`` subclasses are raised *inside* the order-creation
transaction so that leaving the atomic block rolls everything back; the
service then converts them into an ``OrderError`` result.  ``OrderNotFound``
is raised by the single-entity queries and commands and caught by the views.
"""

from __future__ import annotations

from typing import Optional

from modules.orders.results import OrderError, OrderErrorKind


class OrderNotFound(Exception):
    """The requested order does not exist."""


class OrderRejected(Exception):
    """A business rule rejected the whole order."""

    kind: OrderErrorKind

    def __init__(self, message: str, product_id: Optional[int] = None) -> None:
        super().__init__(message)
        self.product_id = product_id

    def to_error(self) -> OrderError:
        return OrderError(kind=self.kind, message=str(self), product_id=self.product_id)


class ProductNotFound(OrderRejected):
    """A product referenced by an order item does not exist."""

    kind = OrderErrorKind.PRODUCT_NOT_FOUND


class InsufficientStock(OrderRejected):
    """Requested quantity exceeds the stock available under the row lock."""

    kind = OrderErrorKind.INSUFFICIENT_STOCK
