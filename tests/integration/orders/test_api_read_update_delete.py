"""Integration tests for order retrieval, listing, status update and delete."""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.orders.models import Order, OrderItem

pytestmark = pytest.mark.integration

URL = "/api/v1/orders/"


@pytest.fixture()
def order(api_client, make_product):
    product = make_product("RUD-1", price="2.50", quantity=20)
    response = api_client.post(
        URL,
        {"customer_id": 4, "items": [{"product_id": product.id, "quantity": 4}]},
        format="json",
    )
    assert response.status_code == 201
    return Order.objects.get(pk=response.data["id"])


class TestRetrieveAndList:
    def test_retrieve_includes_items(self, api_client, order):
        response = api_client.get(f"{URL}{order.id}/")
        assert response.status_code == 200
        assert response.data["id"] == order.id
        assert Decimal(response.data["total"]) == Decimal("10.00")
        assert len(response.data["items"]) == 1
        assert response.data["items"][0]["order_id"] == order.id

    def test_retrieve_missing(self, api_client):
        response = api_client.get(f"{URL}999999/")
        assert response.status_code == 404
        assert response.data == {"detail": "Order not found."}

    def test_retrieve_out_of_range_id(self, api_client):
        response = api_client.get(f"{URL}{2**70}/")
        assert response.status_code == 404

    def test_list_omits_items(self, api_client, order):
        response = api_client.get(URL)
        assert response.status_code == 200
        assert [o["id"] for o in response.data] == [order.id]
        assert "items" not in response.data[0]

    def test_list_filters(self, api_client, order):
        assert len(api_client.get(URL, {"customer": 4}).data) == 1
        assert len(api_client.get(URL, {"customer": 5}).data) == 0
        assert len(api_client.get(URL, {"status": "PENDING"}).data) == 1
        assert len(api_client.get(URL, {"min_total": "10.01"}).data) == 0
        assert len(api_client.get(URL, {"max_total": "10.00"}).data) == 1

    def test_list_ordering(self, api_client, order, make_product):
        product = make_product("RUD-2", price="1.00", quantity=5)
        api_client.post(
            URL,
            {"customer_id": 6, "items": [{"product_id": product.id, "quantity": 1}]},
            format="json",
        )
        response = api_client.get(URL, {"ordering": "total"})
        assert [Decimal(o["total"]) for o in response.data] == [
            Decimal("1.00"),
            Decimal("10.00"),
        ]

    @pytest.mark.parametrize(
        "params, field",
        [
            ({"min_total": "lots"}, "min_total"),
            ({"customer": "someone"}, "customer"),
            ({"created_after": "yesterday"}, "created_after"),
        ],
    )
    def test_list_invalid_filter(self, api_client, order, params, field):
        response = api_client.get(URL, params)
        assert response.status_code == 400
        assert field in response.data


class TestUpdateStatus:
    def test_patch_status(self, api_client, order):
        response = api_client.patch(f"{URL}{order.id}/", {"status": "shipped"}, format="json")
        assert response.status_code == 200
        assert response.data["status"] == "shipped"
        assert Decimal(response.data["total"]) == Decimal("10.00")
        assert len(response.data["items"]) == 1

    def test_put_ignores_other_fields(self, api_client, order):
        response = api_client.put(
            f"{URL}{order.id}/",
            {"status": "paid", "total": "0.01", "customer_id": 99},
            format="json",
        )
        assert response.status_code == 200
        order.refresh_from_db()
        assert order.status == "paid"
        assert order.total == Decimal("10.00")
        assert order.customer_id == 4

    def test_missing_status(self, api_client, order):
        response = api_client.patch(f"{URL}{order.id}/", {}, format="json")
        assert response.status_code == 400

    def test_update_missing_order(self, api_client):
        response = api_client.patch(f"{URL}999999/", {"status": "paid"}, format="json")
        assert response.status_code == 404


class TestDelete:
    def test_delete_removes_order_and_items(self, api_client, order):
        response = api_client.delete(f"{URL}{order.id}/")
        assert response.status_code == 204
        assert not Order.objects.exists()
        assert not OrderItem.objects.exists()

    def test_delete_missing(self, api_client):
        response = api_client.delete(f"{URL}999999/")
        assert response.status_code == 404
