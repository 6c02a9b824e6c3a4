"""Unit tests for OrderDjangoRepository."""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.core.exceptions import InvalidFilters
from modules.orders.models import Order, OrderItem
from modules.orders.repositories.django_repository import OrderDjangoRepository

pytestmark = pytest.mark.unit


@pytest.fixture()
def repo():
    return OrderDjangoRepository()


@pytest.fixture()
def order(repo, make_product):
    product = make_product("REPO-1", price="2.50")
    order = repo.create_header(customer_id=11)
    repo.add_item(
        order,
        product_id=product.id,
        unit_price=product.price,
        quantity=4,
        line_total=Decimal("10.00"),
    )
    return repo.set_total(order, Decimal("10.00"))


class TestOrderRepository:
    def test_create_header_starts_at_zero(self, repo):
        order = repo.create_header(customer_id=5)
        assert order.pk is not None
        assert order.total == Decimal("0.00")
        assert order.status == "pending"

    def test_set_total_persists(self, order):
        order.refresh_from_db()
        assert order.total == Decimal("10.00")

    def test_get_by_id_prefetches_items(self, repo, order, django_assert_num_queries):
        with django_assert_num_queries(3):
            fetched = repo.get_by_id(order.id)
            names = [item.product_name for item in fetched.items.all()]
        assert names == ["Product REPO-1"]

    def test_get_by_id_missing_or_malformed(self, repo):
        assert repo.get_by_id(987_654) is None
        assert repo.get_by_id("abc") is None

    def test_list_with_filters(self, repo, order):
        assert repo.list({"customer": 11}) == [order]
        assert repo.list({"status": "shipped"}) == []

    def test_list_ordering(self, repo, order):
        other = repo.create_header(customer_id=12)
        assert repo.list(ordering=["-id"]) == [other, order]

    def test_list_rejects_invalid_filters(self, repo):
        with pytest.raises(InvalidFilters) as excinfo:
            repo.list({"max_total": "ten"})
        assert list(excinfo.value.errors) == ["max_total"]

    def test_update_status(self, repo, order):
        repo.update_status(order, "shipped")
        order.refresh_from_db()
        assert order.status == "shipped"

    def test_delete_cascades_items(self, repo, order):
        assert repo.delete(order.id) is True
        assert not Order.objects.exists()
        assert not OrderItem.objects.exists()

    def test_delete_missing(self, repo):
        assert repo.delete(987_654) is False
        assert repo.delete("abc") is False
