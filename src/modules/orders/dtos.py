"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the validated request schemas the service accepts; loosely
typed request bodies never reach the order transaction.  DTOs are
immutable (``frozen=True``).

- ``CreateOrderItemDTO``: one requested line (product + quantity).
- ``CreateOrderDTO``: customer + ordered list of requested lines.
- ``UpdateOrderStatusDTO``: new free-form status label.
"""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from modules.orders.constants import MAX_ID, MAX_QUANTITY, STATUS_MAX_LENGTH


class CreateOrderItemDTO(BaseModel):
    """Immutable DTO for a single requested line.

    The caller sends ``product_id`` and ``quantity``; the unit price is
    captured from the catalog inside the transaction.
    """

    model_config = ConfigDict(frozen=True)

    # Strict: JSON booleans and numeric strings are not ids or quantities.
    product_id: int = Field(strict=True, le=MAX_ID)
    quantity: int = Field(strict=True, le=MAX_QUANTITY)

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        return v


class CreateOrderDTO(BaseModel):
    """Immutable DTO for order creation requests.

    Validates:
    - ``customer_id`` is a positive integer that fits a 64-bit column.
    - ``items`` contains at least one item.
    - Each item quantity is positive.

    The same product may appear on several lines; the transaction checks
    them cumulatively against stock.
    """

    model_config = ConfigDict(frozen=True)

    customer_id: int = Field(strict=True, le=MAX_ID)
    items: List[CreateOrderItemDTO]

    @field_validator("customer_id")
    @classmethod
    def customer_id_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("customer_id must be a positive integer.")
        return v

    @field_validator("items")
    @classmethod
    def items_must_not_be_empty(
        cls, v: List[CreateOrderItemDTO]
    ) -> List[CreateOrderItemDTO]:
        if not v:
            raise ValueError("Order must have at least one item.")
        return v

    @property
    def product_ids(self) -> List[int]:
        """Distinct product ids in lock-acquisition order (ascending)."""
        return sorted({item.product_id for item in self.items})


class UpdateOrderStatusDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: str

    @field_validator("status")
    @classmethod
    def status_must_be_present(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("status required.")
        if len(v) > STATUS_MAX_LENGTH:
            raise ValueError(f"status must be at most {STATUS_MAX_LENGTH} characters.")
        return v
