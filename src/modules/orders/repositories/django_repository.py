"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.  The writes
used by order creation (``create_header``, ``add_item``, ``set_total``)
are deliberately *not* atomic on their own: they only make sense inside
the service's transaction, which owns commit and rollback.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, List, Mapping, Optional, Sequence

import structlog
from django.db import transaction

from modules.core.exceptions import InvalidFilters
from modules.orders.filters import OrderFilter
from modules.orders.models import Order, OrderItem
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Creation (called inside the order transaction)
    # ------------------------------------------------------------------

    def create_header(self, customer_id: int) -> Order:
        order = Order(customer_id=customer_id, total=Decimal("0.00"))
        order.save()
        return order

    def add_item(
        self,
        order: Order,
        product_id: int,
        unit_price: Decimal,
        quantity: int,
        line_total: Decimal,
    ) -> OrderItem:
        item = OrderItem(
            order=order,
            product_id=product_id,
            unit_price=unit_price,
            quantity=quantity,
            line_total=line_total,
        )
        item.save()
        return item

    def set_total(self, order: Order, total: Decimal) -> Order:
        order.total = total
        order.save(update_fields=["total", "updated_at"])
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: int) -> Optional[Order]:
        """Retrieve an order with eager-loaded items and their products.

        Returns ``None`` for non-existent, malformed or out-of-range IDs.
        """
        try:
            return (
                Order.objects.prefetch_related("items__product")
                .filter(pk=id)
                .first()
            )
        except (TypeError, ValueError, OverflowError):
            return None

    def list(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        ordering: Optional[Sequence[str]] = None,
    ) -> List[Order]:
        """List order headers matching ``OrderFilter`` parameters.

        Examples of valid filters::

            {"status": "pending"}
            {"customer": 7, "min_total": "10.00"}

        Raises:
            InvalidFilters: a parameter failed validation.
        """
        filterset = OrderFilter(filters or {}, queryset=Order.objects.all())
        if not filterset.is_valid():
            raise InvalidFilters.from_filterset(filterset)
        queryset = filterset.qs
        if ordering:
            queryset = queryset.order_by(*ordering)
        return list(queryset)

    # ------------------------------------------------------------------
    # Save / Update / Delete
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        """Persist (create or update) an order header."""
        entity.save()
        logger.info("order.saved", order_id=entity.id)
        return entity

    @transaction.atomic
    def update_status(self, order: Order, status: str) -> Order:
        order.status = status
        order.save(update_fields=["status", "updated_at"])
        return order

    @transaction.atomic
    def delete(self, id: int) -> bool:
        """Delete an order by ID; its line items are removed with it."""
        try:
            deleted, _ = Order.objects.filter(pk=id).delete()
        except (TypeError, ValueError, OverflowError):
            return False
        if not deleted:
            return False
        logger.info("order.deleted", order_id=id)
        return True
