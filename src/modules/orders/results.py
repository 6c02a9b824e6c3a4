"""Outcome of an order-creation call.

``OrderService.create_order`` never raises for expected failures; it returns
an ``OrderResult`` holding either the committed order or an ``OrderError``
whose ``kind`` is one of the four failure categories below.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from modules.orders.models import Order


class OrderErrorKind(str, enum.Enum):
    INVALID_REQUEST = "InvalidRequest"
    PRODUCT_NOT_FOUND = "ProductNotFound"
    INSUFFICIENT_STOCK = "InsufficientStock"
    STORAGE_FAILURE = "StorageFailure"


@dataclass(frozen=True)
class OrderError:
    """Machine-readable failure kind plus a human-readable message.

    ``product_id`` identifies the offending product for ``ProductNotFound``
    and ``InsufficientStock``.  ``retryable`` is only ever set for storage
    failures caused by a transient lock conflict (deadlock, lock timeout).
    """

    kind: OrderErrorKind
    message: str
    product_id: Optional[int] = None
    retryable: bool = False

    def as_dict(self) -> dict:
        return {
            "error": self.kind.value,
            "detail": self.message,
            "product_id": self.product_id,
        }


@dataclass(frozen=True)
class OrderResult:
    order: Optional[Order] = None
    error: Optional[OrderError] = None

    def __post_init__(self) -> None:
        if (self.order is None) == (self.error is None):
            raise ValueError("OrderResult needs exactly one of order or error.")

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, order: Order) -> OrderResult:
        return cls(order=order)

    @classmethod
    def failure(cls, error: OrderError) -> OrderResult:
        return cls(error=error)
