from decimal import Decimal

import pytest

from rest_framework.test import APIClient

from modules.orders.dtos import CreateOrderDTO, OrderItemInputDTO
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def make_product():
    """Factory creating catalog products directly in the database."""

    def _make(name="Widget", price="10.00", stock=10, description=""):
        return Product.objects.create(
            name=name,
            description=description,
            price=Decimal(price),
            stock_quantity=stock,
        )

    return _make


@pytest.fixture()
def order_service():
    return OrderService(
        order_repository=OrderDjangoRepository(),
        product_repository=ProductDjangoRepository(),
    )


@pytest.fixture()
def customer_fields():
    return {
        "customer_name": "Ana Souza",
        "customer_email": "ana@example.com",
        "shipping_address": "Rua das Flores 10, Curitiba",
    }


@pytest.fixture()
def create_dto(customer_fields):
    """Build a ``CreateOrderDTO`` from ``(product, quantity)`` pairs."""

    def _build(*lines, status=None):
        return CreateOrderDTO(
            **customer_fields,
            status=status,
            items=[
                OrderItemInputDTO(product_id=product.id, quantity=quantity)
                for product, quantity in lines
            ],
        )

    return _build
