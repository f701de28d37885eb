"""Order API views.

Exposes the ``OrderService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into appropriate
HTTP status codes; the view never swallows generic exceptions.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.exceptions import VALIDATION_ERROR, error_response
from modules.orders.dtos import CreateOrderDTO, UpdateOrderDTO, build_dto
from modules.orders.exceptions import (
    ConcurrencyConflict,
    InsufficientStock,
    OrderError,
    OrderNotFound,
    OrderValidationError,
    ProductNotFound,
)
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import OrderInputSerializer, OrderSerializer
from modules.orders.services import OrderService
from modules.products.repositories.django_repository import ProductDjangoRepository


def _order_error_response(exc: OrderError) -> Response:
    """Translate a domain failure into the standardized error format."""
    if isinstance(exc, OrderValidationError):
        return error_response(exc.errors, status.HTTP_400_BAD_REQUEST, VALIDATION_ERROR)
    if isinstance(exc, OrderNotFound):
        return error_response(
            [{"code": "order_not_found", "detail": str(exc)}],
            status.HTTP_404_NOT_FOUND,
        )
    if isinstance(exc, ProductNotFound):
        return error_response(
            [
                {
                    "code": "product_not_found",
                    "detail": f"Product with ID {product_id} not found.",
                    "attr": "items",
                }
                for product_id in exc.product_ids
            ],
            status.HTTP_400_BAD_REQUEST,
        )
    if isinstance(exc, InsufficientStock):
        return error_response(
            [
                {
                    "code": "insufficient_stock",
                    "detail": (
                        f"Not enough stock for product {s.product_id}: "
                        f"requested {s.requested}, available {s.available}."
                    ),
                    "attr": "items",
                }
                for s in exc.shortages
            ],
            status.HTTP_409_CONFLICT,
        )
    if isinstance(exc, ConcurrencyConflict):
        return error_response(
            [{"code": "concurrency_conflict", "detail": str(exc)}],
            status.HTTP_409_CONFLICT,
        )
    raise exc


class OrderViewSet(GenericViewSet):
    """ViewSet for Order operations.

    Uses ``OrderService`` with injected repositories (DIP).
    Does **not** extend ``ModelViewSet``: all writes go through the
    service, which owns the transaction and the stock reconciliation.
    """

    queryset = Order.objects.prefetch_related("items__product")
    serializer_class = OrderSerializer
    filterset_class = OrderFilter
    search_fields = ["customer_name", "customer_email"]
    ordering_fields = ["order_date", "status", "id"]
    ordering = ["-order_date", "-id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    lookup_value_regex = r"\d+"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/

        Filtering (status, customer, date range) is handled by
        ``OrderFilter``; ordering by ``OrderingFilter``.  Results are
        paginated.
        """
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        serializer = OrderSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        try:
            order = self._service.get_order(int(pk))
        except OrderNotFound as exc:
            return _order_error_response(exc)
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    @extend_schema(request=OrderInputSerializer, responses={201: OrderSerializer})
    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/

        Unit prices are taken from the catalog; stock is decremented by
        the requested quantities.
        """
        try:
            dto = build_dto(CreateOrderDTO, request.data)
            order = self._service.create_order(dto)
        except OrderError as exc:
            return _order_error_response(exc)
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=OrderInputSerializer, responses={200: OrderSerializer})
    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/orders/{pk}/

        Replaces customer details, status and the whole line-item set;
        stock moves by the difference between the old and new lines.
        """
        try:
            dto = build_dto(UpdateOrderDTO, request.data)
            order = self._service.update_order(int(pk), dto)
        except OrderError as exc:
            return _order_error_response(exc)
        return Response(OrderSerializer(order).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/orders/{pk}/: returns the order's stock."""
        try:
            self._service.delete_order(int(pk))
        except OrderNotFound as exc:
            return _order_error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)
