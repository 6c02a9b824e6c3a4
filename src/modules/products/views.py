"""Product API views.

Exposes the ``ProductService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into appropriate
HTTP status codes; the view never swallows generic exceptions.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.filters import OrderingFilter
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.exceptions import InvalidFilters, format_validation_error
from modules.products.dtos import CreateProductDTO, UpdateProductDTO
from modules.products.exceptions import ProductAlreadyExists, ProductNotFound
from modules.products.filters import ProductFilter
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.serializers import ProductSerializer
from modules.products.services import ProductService

_UPDATABLE_FIELDS = ("name", "sku", "description", "price", "quantity")


def _not_found() -> Response:
    return Response(
        {"detail": "Product not found."},
        status=status.HTTP_404_NOT_FOUND,
    )


def _validation_error(exc: Exception) -> Response:
    if isinstance(exc, PydanticValidationError):
        detail = format_validation_error(exc)
    else:
        detail = str(exc)
    return Response({"detail": detail}, status=status.HTTP_400_BAD_REQUEST)


class ProductViewSet(GenericViewSet):
    """ViewSet for Product CRUD operations.

    Uses ``ProductService`` with ``ProductDjangoRepository`` (DIP).
    Does **not** extend ``ModelViewSet``: writes go through the
    service/repository layer.
    """

    filterset_class = ProductFilter
    ordering_fields = ["id", "name", "price", "quantity"]
    ordering = ["id"]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    queryset = Product.objects.all()
    serializer_class = ProductSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(repository=ProductDjangoRepository())

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/products/

        Query parameters are the ``ProductFilter`` fields (including
        ``search`` over name, SKU and description) plus ``ordering``.
        """
        ordering = OrderingFilter().get_ordering(request, self.get_queryset(), self)
        try:
            products = self._service.list_products(request.query_params, ordering)
        except InvalidFilters as exc:
            return Response(exc.errors, status=status.HTTP_400_BAD_REQUEST)
        serializer = ProductSerializer(products, many=True)
        return Response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{pk}/"""
        try:
            product = self._service.get_product(pk)
        except ProductNotFound:
            return _not_found()
        serializer = ProductSerializer(product)
        return Response(serializer.data)

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/products/"""
        data = request.data

        try:
            dto = CreateProductDTO(
                name=data.get("name") or "",
                sku=data.get("sku") or "",
                description=data.get("description") or "",
                price=data.get("price") if data.get("price") is not None else "0.00",
                quantity=data.get("quantity") if data.get("quantity") is not None else 0,
            )
        except (PydanticValidationError, ValueError) as exc:
            return _validation_error(exc)

        try:
            product = self._service.create_product(dto)
        except ProductAlreadyExists as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_409_CONFLICT,
            )

        out = ProductSerializer(product)
        return Response(out.data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/products/{pk}/

        Fields omitted from the payload (or sent as ``null``) keep their
        current value.
        """
        data = request.data

        try:
            dto = UpdateProductDTO(
                **{field: data.get(field) for field in _UPDATABLE_FIELDS}
            )
        except (PydanticValidationError, ValueError) as exc:
            return _validation_error(exc)

        try:
            product = self._service.update_product(pk, dto)
        except ProductNotFound:
            return _not_found()
        except ProductAlreadyExists as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_409_CONFLICT,
            )

        out = ProductSerializer(product)
        return Response(out.data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/products/{pk}/"""
        return self.update(request, pk)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/products/{pk}/"""
        try:
            self._service.delete_product(pk)
        except ProductNotFound:
            return _not_found()
        return Response(status=status.HTTP_204_NO_CONTENT)
