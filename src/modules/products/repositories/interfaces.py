"""Product repository interface.

Extends ``IRepository[Product]`` with the look-ups required by SKU
uniqueness and by the order transaction's stock reservation protocol.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Iterable, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product catalog."""

    @abstractmethod
    def save(
        self, entity: Product, update_fields: Optional[Iterable[str]] = None
    ) -> Product:
        """Persist a product.

        With *update_fields* only those columns are written, so a partial
        update never writes back a stale ``quantity``.
        """

    @abstractmethod
    def get_by_sku(self, sku: str) -> Optional[Product]:
        """Retrieve a product by SKU."""

    @abstractmethod
    def get_for_update(self, id: int) -> Optional[Product]:
        """Retrieve a product with a row-level lock (SELECT FOR UPDATE).

        Must be called inside an open transaction; the lock is held until
        that transaction commits or rolls back.  Returns ``None`` if the
        product does not exist.
        """

    @abstractmethod
    def decrement_stock(self, product: Product, quantity: int) -> Product:
        """Subtract *quantity* from a product previously locked with
        ``get_for_update`` and persist the new available quantity."""
