"""Unit tests for ProductDjangoRepository."""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.core.exceptions import InvalidFilters
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository

pytestmark = pytest.mark.unit


@pytest.fixture()
def repo():
    return ProductDjangoRepository()


class TestProductRepository:
    def test_get_by_id(self, repo, make_product):
        product = make_product("REPO-A")
        assert repo.get_by_id(product.id) == product

    def test_get_by_id_missing_or_malformed(self, repo):
        assert repo.get_by_id(424_242) is None
        assert repo.get_by_id("abc") is None

    def test_get_by_sku_is_case_insensitive(self, repo, make_product):
        product = make_product("REPO-B")
        assert repo.get_by_sku("  repo-b ") == product

    def test_list_filters(self, repo, make_product):
        in_stock = make_product("REPO-C", quantity=3)
        make_product("REPO-D", quantity=0)
        assert repo.list({"in_stock": "true"}) == [in_stock]
        assert len(repo.list()) == 2

    def test_list_ordering(self, repo, make_product):
        cheap = make_product("REPO-G", price="1.00")
        dear = make_product("REPO-H", price="9.00")
        assert repo.list(ordering=["-price"]) == [dear, cheap]

    def test_list_rejects_invalid_filters(self, repo):
        with pytest.raises(InvalidFilters) as excinfo:
            repo.list({"max_price": "free"})
        assert "max_price" in excinfo.value.errors

    def test_save_creates(self, repo):
        product = repo.save(Product(name="Saved", sku="repo-e", price=Decimal("1.50")))
        assert product.pk is not None
        assert product.sku == "REPO-E"

    def test_delete(self, repo, make_product):
        product = make_product("REPO-F")
        assert repo.delete(product.id) is True
        assert repo.delete(product.id) is False

    def test_get_for_update_returns_row(self, repo, make_product):
        product = make_product("REPO-G")
        assert repo.get_for_update(product.id) == product
        assert repo.get_for_update(424_242) is None

    def test_decrement_stock(self, repo, make_product):
        product = make_product("REPO-H", quantity=10)
        repo.decrement_stock(product, 4)
        product.refresh_from_db()
        assert product.quantity == 6
