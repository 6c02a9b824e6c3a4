"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.
Error handling follows the Null Object pattern: methods return ``None``
instead of raising HTTP-level exceptions; the Service Layer decides
how to translate a missing entity into an API response.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional, Sequence

import structlog
from django.db import transaction

from modules.core.exceptions import InvalidFilters
from modules.products.filters import ProductFilter
from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: int) -> Optional[Product]:
        """Retrieve a product by primary key.

        Returns ``None`` for non-existent, malformed or out-of-range IDs.
        """
        try:
            return Product.objects.filter(pk=id).first()
        except (TypeError, ValueError, OverflowError):
            return None

    def list(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        ordering: Optional[Sequence[str]] = None,
    ) -> List[Product]:
        """List products matching ``ProductFilter`` parameters.

        Examples of valid filters::

            {"in_stock": "true"}
            {"search": "widget", "max_price": "20"}

        Raises:
            InvalidFilters: a parameter failed validation.
        """
        filterset = ProductFilter(filters or {}, queryset=Product.objects.all())
        if not filterset.is_valid():
            raise InvalidFilters.from_filterset(filterset)
        queryset = filterset.qs
        if ordering:
            queryset = queryset.order_by(*ordering)
        return list(queryset)

    @transaction.atomic
    def save(
        self, entity: Product, update_fields: Optional[Iterable[str]] = None
    ) -> Product:
        """Persist (create or update) a product."""
        if update_fields is None:
            entity.save()
        else:
            entity.save(update_fields=list(update_fields))
        logger.info(
            "product.saved",
            product_id=entity.id,
            sku=entity.sku,
        )
        return entity

    @transaction.atomic
    def delete(self, id: int) -> bool:
        """Hard-delete a product by ID.

        Order line items keep their snapshot (unit price, quantity, line
        total); they only lose the ability to resolve the product's name.
        """
        deleted, _ = Product.objects.filter(pk=id).delete()
        if not deleted:
            return False
        logger.info("product.deleted", product_id=id)
        return True

    def get_by_sku(self, sku: str) -> Optional[Product]:
        """Retrieve a product by SKU (case-insensitive via upper normalisation)."""
        return Product.objects.filter(sku=Product.normalize_sku(sku)).first()

    # ------------------------------------------------------------------
    # Stock reservation (used inside the order transaction)
    # ------------------------------------------------------------------

    def get_for_update(self, id: int) -> Optional[Product]:
        return Product.objects.select_for_update().filter(pk=id).first()

    def decrement_stock(self, product: Product, quantity: int) -> Product:
        product.quantity -= quantity
        product.save(update_fields=["quantity", "updated_at"])
        return product
