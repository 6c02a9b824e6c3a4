"""Product service layer (Use Cases).

Single-entity catalog operations, delegating persistence to the injected
``IProductRepository``.  Every mutation checks existence first and raises
``ProductNotFound`` when the row is missing.

Rules enforced here:
- SKU must be unique (checked up-front and on ``IntegrityError`` races).
- Price and quantity are non-negative (validated by the DTOs).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Mapping, Optional, Sequence

import structlog
from django.db import IntegrityError, transaction

from modules.products.exceptions import ProductAlreadyExists, ProductNotFound
from modules.products.models import Product

if TYPE_CHECKING:
    from modules.products.dtos import CreateProductDTO, UpdateProductDTO
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductService:
    """Application service for Product use-cases.

    Receives an ``IProductRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_product(self, dto: CreateProductDTO) -> Product:
        """Create a new product after enforcing SKU uniqueness.

        Raises:
            ProductAlreadyExists: if the SKU is already taken.
        """
        log = logger.bind(sku=dto.sku)

        if self._repo.get_by_sku(dto.sku):
            log.warning("product.duplicate_sku")
            raise ProductAlreadyExists(f"SKU '{dto.sku}' already registered.")

        product = Product(
            name=dto.name,
            sku=dto.sku,
            description=dto.description,
            price=dto.price,
            quantity=dto.quantity,
        )
        product = self._save_unique(product, log)
        log.info("product.created", product_id=product.id)
        return product

    def update_product(self, id: int, dto: UpdateProductDTO) -> Product:
        """Apply the supplied fields to an existing product.

        A direct ``quantity`` write does not take the order transaction's
        row lock; an order in flight for the same product may overwrite it
        (or be overwritten) at commit time.  The write is allowed as an
        administrative override and logged as ``product.stock_overwritten``.

        Raises:
            ProductNotFound: if the product does not exist.
            ProductAlreadyExists: if the new SKU belongs to another product.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")

        log = logger.bind(product_id=product.id)
        changes = dto.changes()

        new_sku = changes.get("sku")
        if new_sku and Product.normalize_sku(new_sku) != product.sku:
            other = self._repo.get_by_sku(new_sku)
            if other and other.pk != product.pk:
                log.warning("product.duplicate_sku", sku=new_sku)
                raise ProductAlreadyExists(f"SKU '{new_sku}' already registered.")

        if "quantity" in changes and changes["quantity"] != product.quantity:
            log.warning(
                "product.stock_overwritten",
                previous=product.quantity,
                new=changes["quantity"],
            )

        for field, value in changes.items():
            setattr(product, field, value)

        # Only the supplied columns are written; an order committed since the
        # read above keeps its stock decrement.
        self._save_unique(product, log, update_fields=sorted(changes))
        log.info("product.updated", fields=sorted(changes))
        return self._repo.get_by_id(product.pk) or product

    def delete_product(self, id: int) -> None:
        """Delete a product.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        self._repo.delete(product.pk)
        logger.info("product.removed", product_id=product.pk)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        ordering: Optional[Sequence[str]] = None,
    ) -> List[Product]:
        """Return products matching the query parameters, in ``ordering``.

        Raises:
            InvalidFilters: a filter parameter failed validation.
        """
        return self._repo.list(filters, ordering)

    def get_product(self, id: int) -> Product:
        """Retrieve a single product by ID.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        return product

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _save_unique(
        self, product: Product, log, update_fields: Optional[List[str]] = None
    ) -> Product:
        # The up-front SKU check is racy; the unique index is the authority.
        try:
            with transaction.atomic():
                return self._repo.save(product, update_fields=update_fields)
        except IntegrityError as exc:
            log.warning("product.integrity_error", error=str(exc))
            raise ProductAlreadyExists(
                f"SKU '{product.sku}' already registered."
            ) from exc
