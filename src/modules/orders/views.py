"""Order API views.

Exposes the ``OrderService`` via HTTP using DRF ViewSets.
Order creation returns an ``OrderResult`` whose error kind is mapped to a
status code here; other domain exceptions are caught and translated;
the view never swallows generic exceptions.
"""

from __future__ import annotations

import time
from typing import Any, Mapping

import structlog
from django.conf import settings
from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.filters import OrderingFilter
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.exceptions import InvalidFilters, format_validation_error
from modules.orders.dtos import UpdateOrderStatusDTO
from modules.orders.exceptions import OrderNotFound
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.results import OrderErrorKind, OrderResult
from modules.orders.serializers import OrderListSerializer, OrderSerializer
from modules.orders.services import OrderService
from modules.products.repositories.django_repository import ProductDjangoRepository

logger = structlog.get_logger(__name__)

ERROR_STATUS = {
    OrderErrorKind.INVALID_REQUEST: status.HTTP_400_BAD_REQUEST,
    OrderErrorKind.PRODUCT_NOT_FOUND: status.HTTP_400_BAD_REQUEST,
    OrderErrorKind.INSUFFICIENT_STOCK: status.HTTP_400_BAD_REQUEST,
    OrderErrorKind.STORAGE_FAILURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _not_found() -> Response:
    return Response(
        {"detail": "Order not found."},
        status=status.HTTP_404_NOT_FOUND,
    )


class OrderViewSet(GenericViewSet):
    """ViewSet for Order operations.

    Uses ``OrderService`` with injected repositories (DIP).
    Does **not** extend ``ModelViewSet``: all ORM access goes through
    the service/repository layer.
    """

    queryset = Order.objects.all()
    serializer_class = OrderSerializer
    filterset_class = OrderFilter
    ordering_fields = ["id", "created_at", "total", "status"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/

        Body: ``{"customer_id": int, "items": [{"product_id": int,
        "quantity": int}, ...]}``.  Returns 201 with the created order,
        400 for invalid requests and business-rule rejections, 500 for
        storage failures.
        """
        payload: Mapping[str, Any] = (
            request.data if isinstance(request.data, Mapping) else {}
        )
        result = self._create_with_retry(
            payload.get("customer_id"), payload.get("items")
        )

        if not result.ok:
            return Response(result.error.as_dict(), status=ERROR_STATUS[result.error.kind])

        out = OrderSerializer(result.order)
        return Response(out.data, status=status.HTTP_201_CREATED)

    def _create_with_retry(self, customer_id: Any, items: Any) -> OrderResult:
        """Re-run the whole transaction on transient lock conflicts.

        Each attempt is a fresh transaction; business-rule rejections and
        non-transient storage errors are returned immediately.
        """
        max_attempts = max(1, settings.ORDER_CREATE_MAX_ATTEMPTS)
        backoff = settings.ORDER_CREATE_RETRY_BACKOFF

        attempt = 0
        while True:
            attempt += 1
            result = self._service.create_order(customer_id, items)
            if result.ok or not result.error.retryable or attempt >= max_attempts:
                return result
            logger.warning(
                "order.create_retry",
                attempt=attempt,
                max_attempts=max_attempts,
            )
            time.sleep(backoff * attempt)

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/

        Query parameters are the ``OrderFilter`` fields (status, customer,
        date range, total range) plus ``ordering``.  Invalid values give 400.
        """
        ordering = OrderingFilter().get_ordering(request, self.get_queryset(), self)
        try:
            orders = self._service.list_orders(request.query_params, ordering)
        except InvalidFilters as exc:
            return Response(exc.errors, status=status.HTTP_400_BAD_REQUEST)
        serializer = OrderListSerializer(orders, many=True)
        return Response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        try:
            order = self._service.get_order(pk)
        except OrderNotFound:
            return _not_found()
        serializer = OrderSerializer(order)
        return Response(serializer.data)

    # ------------------------------------------------------------------
    # Status Update
    # ------------------------------------------------------------------

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/orders/{pk}/

        Only ``status`` can change.
        """
        payload = request.data if isinstance(request.data, Mapping) else {}
        try:
            dto = UpdateOrderStatusDTO(status=payload.get("status") or "")
        except PydanticValidationError as exc:
            return Response(
                {"detail": format_validation_error(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            order = self._service.update_status(pk, dto)
        except OrderNotFound:
            return _not_found()

        serializer = OrderSerializer(order)
        return Response(serializer.data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/orders/{pk}/"""
        return self.update(request, pk)

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/orders/{pk}/"""
        try:
            self._service.delete_order(pk)
        except OrderNotFound:
            return _not_found()
        return Response(status=status.HTTP_204_NO_CONTENT)
