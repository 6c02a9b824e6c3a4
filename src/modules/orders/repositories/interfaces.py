"""Order repository interface.

Extends ``IRepository[Order]`` with the writes the order-creation
transaction issues (header, line items, final total) and the status
update used by the ledger's CRUD surface.

Every write must run inside the caller's transaction; the repository
never commits on its own.
"""

from __future__ import annotations

from abc import abstractmethod
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import Order, OrderItem


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate (header + items)."""

    @abstractmethod
    def create_header(self, customer_id: int) -> Order:
        """Insert a provisional order header with ``total = 0.00``."""

    @abstractmethod
    def add_item(
        self,
        order: Order,
        product_id: int,
        unit_price: Decimal,
        quantity: int,
        line_total: Decimal,
    ) -> OrderItem:
        """Insert one line item for *order*."""

    @abstractmethod
    def set_total(self, order: Order, total: Decimal) -> Order:
        """Write the final total onto the order header."""

    @abstractmethod
    def get_by_id(self, id: int) -> Optional[Order]:
        """Retrieve an order with its items (and their products) prefetched."""

    @abstractmethod
    def update_status(self, order: Order, status: str) -> Order:
        """Change the status of an existing order; nothing else."""
