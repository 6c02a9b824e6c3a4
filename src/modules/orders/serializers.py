"""Order DRF serializers for API output.

Request bodies are validated by the Pydantic DTOs (``dtos.py``) inside
the service; these serializers only shape responses.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.models import Order, OrderItem


class OrderItemSerializer(serializers.ModelSerializer):
    """Line item with its price snapshot.

    ``product_name`` is looked up live and is ``null`` once the product
    has been deleted; the snapshot fields never change.
    """

    product_name = serializers.CharField(read_only=True, allow_null=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "order_id",
            "product_id",
            "product_name",
            "unit_price",
            "quantity",
            "line_total",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Order header with nested line items."""

    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "customer_id",
            "status",
            "total",
            "created_at",
            "updated_at",
            "items",
        ]
        read_only_fields = fields


class OrderListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for order list (no nested items)."""

    class Meta:
        model = Order
        fields = [
            "id",
            "customer_id",
            "status",
            "total",
            "created_at",
        ]
        read_only_fields = fields
