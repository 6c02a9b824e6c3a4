"""Unit tests for the shared BaseModel timestamp bookkeeping."""

from __future__ import annotations

import pytest

from modules.products.models import Product

pytestmark = pytest.mark.unit


def test_update_fields_includes_updated_at():
    product = Product.objects.create(name="Stamp", sku="STAMP-1", quantity=1)
    first = product.updated_at

    product.quantity = 2
    product.save(update_fields=["quantity"])
    product.refresh_from_db()

    assert product.quantity == 2
    assert product.updated_at >= first
    assert product.created_at <= product.updated_at
