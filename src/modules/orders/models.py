"""Order and OrderItem models.

Rules implemented:
- An order is created exactly once, by the order-creation transaction,
  which writes ``total``; afterwards only ``status`` changes.
- ``total`` equals the sum of its items' ``line_total``.
- OrderItem snapshots the product price at creation time (``unit_price``)
  and stores ``line_total`` rounded once to cents; neither tracks later
  catalog changes.
- Items belong to their order (CASCADE); the product reference is weak:
  no database constraint, so products may be changed or deleted later
  without touching recorded items.
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ObjectDoesNotExist, ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel
from modules.orders.constants import (
    AMOUNT_DECIMAL_PLACES,
    AMOUNT_MAX_DIGITS,
    DEFAULT_ORDER_STATUS,
    PRICE_DECIMAL_PLACES,
    PRICE_MAX_DIGITS,
    STATUS_MAX_LENGTH,
)
from shared.domain.events import DomainEventMixin


class Order(DomainEventMixin, BaseModel):
    """Order header (aggregate root of the ledger)."""

    customer_id = models.PositiveBigIntegerField(db_index=True)
    status = models.CharField(
        max_length=STATUS_MAX_LENGTH,
        default=DEFAULT_ORDER_STATUS,
    )
    total = models.DecimalField(
        max_digits=AMOUNT_MAX_DIGITS,
        decimal_places=AMOUNT_DECIMAL_PLACES,
        default=Decimal("0.00"),
    )

    class Meta:
        db_table = "orders"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
        ]

    def __str__(self) -> str:
        return f"Order #{self.pk} ({self.status})"


class OrderItem(BaseModel):
    """Line item: product snapshot, quantity and rounded line total."""

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    product = models.ForeignKey(
        "products.Product",
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        related_name="order_items",
    )
    unit_price = models.DecimalField(
        max_digits=PRICE_MAX_DIGITS,
        decimal_places=PRICE_DECIMAL_PLACES,
    )
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    line_total = models.DecimalField(
        max_digits=AMOUNT_MAX_DIGITS,
        decimal_places=AMOUNT_DECIMAL_PLACES,
    )

    class Meta:
        db_table = "order_items"
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_items_quantity_positive",
            ),
        ]

    def clean(self) -> None:
        super().clean()
        if self.quantity is not None and self.quantity < 1:
            raise ValidationError({"quantity": "Quantity must be at least 1."})

    @property
    def product_name(self) -> str | None:
        """Current name of the referenced product, ``None`` once it is gone."""
        try:
            product = self.product
        except ObjectDoesNotExist:
            return None
        return product.name if product is not None else None

    def __str__(self) -> str:
        return f"product {self.product_id} x{self.quantity} ({self.line_total})"
