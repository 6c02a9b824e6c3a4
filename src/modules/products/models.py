"""Product model: the catalog entry the order transaction reserves stock from.

Rules implemented here:
- SKU is unique and normalised (stripped, upper-cased) on save.
- ``price`` is a fixed-point value kept at four decimal places so sub-cent
  unit prices survive; line totals are rounded to cents by the order core.
- ``quantity`` (available stock) can never be negative, enforced by the
  field type, by ``clean()`` and by a database check constraint.
"""

from __future__ import annotations

from decimal import Decimal

import structlog
from django.core.exceptions import ValidationError
from django.db import models

from modules.core.models import BaseModel

logger = structlog.get_logger(__name__)


class Product(BaseModel):
    """Catalog entry with price and available quantity."""

    name = models.CharField(max_length=255)
    sku = models.CharField(max_length=64, unique=True)
    description = models.TextField(blank=True, default="")
    price = models.DecimalField(
        max_digits=12,
        decimal_places=4,
        default=Decimal("0.00"),
    )
    quantity = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "products"
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=0),
                name="products_quantity_non_negative",
            ),
            models.CheckConstraint(
                condition=models.Q(price__gte=0),
                name="products_price_non_negative",
            ),
        ]

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    @staticmethod
    def normalize_sku(value: str) -> str:
        return value.strip().upper()

    def clean(self) -> None:
        super().clean()
        if self.sku:
            self.sku = self.normalize_sku(self.sku)
        if self.price is not None and self.price < 0:
            raise ValidationError({"price": "Price cannot be negative."})
        if self.quantity is not None and self.quantity < 0:
            raise ValidationError({"quantity": "Quantity cannot be negative."})

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args, **kwargs) -> None:
        is_new = self._state.adding
        if self.sku:
            self.sku = self.normalize_sku(self.sku)
        super().save(*args, **kwargs)
        if is_new:
            logger.info(
                "product_created",
                product_id=self.id,
                sku=self.sku,
                name=self.name,
            )

    def __str__(self) -> str:
        return f"{self.sku} - {self.name}"
