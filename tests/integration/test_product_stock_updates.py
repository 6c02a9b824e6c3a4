"""Product edits versus committed stock reservations.

A product update writes only the columns the caller supplied.  Stock that
an order reserved after the product was read must survive an edit of
unrelated fields.
"""

from __future__ import annotations

import pytest

from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.dtos import UpdateProductDTO
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.services import ProductService

pytestmark = pytest.mark.integration


class OrderPlacedAfterReadRepository(ProductDjangoRepository):
    """Commits an order for *quantity* units right after the first read."""

    def __init__(self, quantity: int):
        self.quantity = quantity
        self.fired = False

    def get_by_id(self, id):
        product = super().get_by_id(id)
        if product is not None and not self.fired:
            self.fired = True
            result = OrderService(
                order_repository=OrderDjangoRepository(),
                product_repository=ProductDjangoRepository(),
            ).create_order(1, [{"product_id": product.id, "quantity": self.quantity}])
            assert result.ok, result.error
        return product


class TestUpdateKeepsReservedStock:
    def test_name_only_update_keeps_order_decrement(self, make_product):
        product = make_product("RACE-1", quantity=5)
        service = ProductService(repository=OrderPlacedAfterReadRepository(quantity=3))

        updated = service.update_product(product.id, UpdateProductDTO(name="Renamed"))

        product.refresh_from_db()
        assert product.name == "Renamed"
        assert product.quantity == 2
        assert updated.quantity == 2

    def test_price_update_keeps_order_decrement(self, make_product):
        product = make_product("RACE-2", price="10.00", quantity=5)
        service = ProductService(repository=OrderPlacedAfterReadRepository(quantity=1))

        service.update_product(product.id, UpdateProductDTO(price="12.50"))

        product.refresh_from_db()
        assert str(product.price) == "12.5000"
        assert product.quantity == 4

    def test_explicit_quantity_is_written(self, make_product):
        product = make_product("RACE-3", quantity=5)
        service = ProductService(repository=ProductDjangoRepository())

        service.update_product(product.id, UpdateProductDTO(quantity=9))

        product.refresh_from_db()
        assert product.quantity == 9

    def test_api_patch_name_returns_current_stock(self, api_client, make_product):
        product = make_product("RACE-4", quantity=5)
        OrderService(
            order_repository=OrderDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        ).create_order(1, [{"product_id": product.id, "quantity": 2}])

        response = api_client.patch(
            f"/api/v1/products/{product.id}/", {"name": "Renamed"}, format="json"
        )

        assert response.status_code == 200
        assert response.data["quantity"] == 3
