"""Concurrent order placement against one product.

Each worker thread opens its own database connection. PostgreSQL
serialises them on row locks; SQLite serialises whole write transactions
and reports the loser as "database is locked", which surfaces as a
``ConcurrencyConflict``. Either way stock never goes negative.
"""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import pytest
from django.db import connection, connections

from modules.orders.dtos import CreateOrderDTO, OrderItemInputDTO
from modules.orders.exceptions import ConcurrencyConflict, InsufficientStock
from modules.orders.models import OrderItem
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository

pytestmark = [pytest.mark.integration, pytest.mark.django_db(transaction=True)]

WORKERS = 10


def _place_order(product_id: int, quantity: int, barrier: threading.Barrier | None = None) -> str:
    service = OrderService(
        order_repository=OrderDjangoRepository(),
        product_repository=ProductDjangoRepository(),
    )
    dto = CreateOrderDTO(
        customer_name="Load Test",
        customer_email="load@example.com",
        shipping_address="Warehouse 1",
        items=[OrderItemInputDTO(product_id=product_id, quantity=quantity)],
    )
    try:
        if barrier is not None:
            barrier.wait(timeout=10)
        service.create_order(dto)
        return "created"
    except InsufficientStock:
        return "insufficient"
    except ConcurrencyConflict:
        return "conflict"
    finally:
        connections.close_all()


def _sold(product_id: int) -> int:
    return sum(
        OrderItem.objects.filter(product_id=product_id).values_list("quantity", flat=True)
    )


def test_two_buyers_race_for_the_last_unit():
    product = Product.objects.create(name="Last one", price=Decimal("1.00"), stock_quantity=1)
    barrier = threading.Barrier(2)

    with ThreadPoolExecutor(max_workers=2) as pool:
        futures = [pool.submit(_place_order, product.id, 1, barrier) for _ in range(2)]
        outcomes = [future.result() for future in futures]

    product.refresh_from_db()
    [loser] = [outcome for outcome in outcomes if outcome != "created"]
    assert outcomes.count("created") == 1
    assert loser in {"conflict", "insufficient"}
    assert product.stock_quantity == 0
    assert _sold(product.id) == 1


@pytest.mark.skipif(
    not connection.features.has_select_for_update,
    reason="without row locks losers may conflict instead of waiting",
)
def test_parallel_orders_never_oversell():
    product = Product.objects.create(name="Hot item", price=Decimal("1.00"), stock_quantity=5)

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        outcomes = list(pool.map(lambda _: _place_order(product.id, 1), range(WORKERS)))

    product.refresh_from_db()
    assert outcomes.count("created") == 5
    assert product.stock_quantity == 0
    assert _sold(product.id) == 5


def test_stock_plus_ordered_quantity_is_conserved():
    product = Product.objects.create(name="Bulk", price=Decimal("1.00"), stock_quantity=20)

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        outcomes = list(pool.map(lambda i: _place_order(product.id, 1 + i % 3), range(WORKERS)))

    product.refresh_from_db()
    sold = _sold(product.id)
    assert set(outcomes) <= {"created", "insufficient", "conflict"}
    assert product.stock_quantity >= 0
    assert product.stock_quantity + sold == 20
