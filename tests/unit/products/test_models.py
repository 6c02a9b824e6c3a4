"""Unit tests for the Product model."""

from __future__ import annotations

from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction

from modules.products.models import Product

pytestmark = pytest.mark.unit


class TestProduct:
    def test_sku_normalised_on_save(self):
        product = Product.objects.create(name="Widget", sku="  abc-9 ")
        assert product.sku == "ABC-9"

    def test_defaults(self):
        product = Product.objects.create(name="Widget", sku="DEF-1")
        assert product.price == Decimal("0.00")
        assert product.quantity == 0
        assert product.description == ""

    def test_sku_unique(self):
        Product.objects.create(name="One", sku="DUP-1")
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                Product.objects.create(name="Two", sku="dup-1")

    def test_clean_rejects_negative_price(self):
        product = Product(name="Widget", sku="NEG-1", price=Decimal("-1.00"))
        with pytest.raises(ValidationError):
            product.clean()

    def test_str(self):
        assert str(Product(name="Widget", sku="STR-1")) == "STR-1 - Widget"
