"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (Views) and the
Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateProductDTO``: input for product creation.
- ``UpdateProductDTO``: input for partial product updates.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _not_negative(value, label: str):
    if value is not None and value < 0:
        raise ValueError(f"{label} cannot be negative.")
    return value


class CreateProductDTO(BaseModel):
    """Immutable DTO for product creation requests.

    Validates:
    - ``name`` and ``sku`` are non-empty strings.
    - ``price`` is a non-negative Decimal (defaults to 0.00).
    - ``quantity`` is a non-negative integer (defaults to 0).
    """

    model_config = ConfigDict(frozen=True)

    name: str
    sku: str
    description: str = ""
    price: Decimal = Field(default=Decimal("0.00"), max_digits=12, decimal_places=4)
    quantity: int = 0

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("name is required.")
        return v.strip()

    @field_validator("sku")
    @classmethod
    def sku_must_not_be_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("sku is required.")
        return v.strip().upper()

    @field_validator("price")
    @classmethod
    def price_must_not_be_negative(cls, v: Decimal) -> Decimal:
        return _not_negative(v, "Price")

    @field_validator("quantity")
    @classmethod
    def quantity_must_not_be_negative(cls, v: int) -> int:
        return _not_negative(v, "Quantity")


class UpdateProductDTO(BaseModel):
    """Immutable DTO for product update requests.

    All fields are optional; only supplied fields will be updated.
    """

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    sku: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, max_digits=12, decimal_places=4)
    quantity: Optional[int] = None

    @field_validator("name", "sku")
    @classmethod
    def must_not_be_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("must not be blank.")
        return v.strip() if v is not None else v

    @field_validator("price")
    @classmethod
    def price_must_not_be_negative(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        return _not_negative(v, "Price")

    @field_validator("quantity")
    @classmethod
    def quantity_must_not_be_negative(cls, v: Optional[int]) -> Optional[int]:
        return _not_negative(v, "Quantity")

    def changes(self) -> dict:
        """Return only the fields the caller actually supplied."""
        return self.model_dump(exclude_none=True)
