"""Order service layer (Use Cases).

Coordinates order mutations with the product stock they consume.  Every
write runs inside one ``IUnitOfWork`` (one database transaction):

1. Lock the rows involved (the order, then its products in PK order).
2. Compute the per-product stock delta between the current and requested
   lines (``reconciliation.compute_stock_delta``).
3. Check the delta against the live, locked stock; collect *every* missing
   product or shortage before failing.
4. Apply the stock deltas and write the order and its lines.
5. Commit, or roll back everything if any step raised.

Only deltas are validated, so on update a line reduced in the same
request frees stock that another line of that request may consume.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Mapping, Optional

import structlog
from django.db import transaction
from django.utils import timezone

from modules.orders.constants import DEFAULT_STATUS
from modules.orders.events import OrderCreated, OrderDeleted, OrderUpdated
from modules.orders.exceptions import (
    ConcurrencyConflict,
    InsufficientStock,
    OrderNotFound,
    ProductNotFound,
)
from modules.orders.models import Order
from modules.orders.reconciliation import (
    check_feasibility,
    compute_stock_delta,
    quantities_from_lines,
    stock_credit,
)
from modules.orders.repositories.interfaces import OrderLine
from modules.orders.unit_of_work import DjangoUnitOfWork
from shared.infrastructure.bus import event_bus

if TYPE_CHECKING:
    from modules.orders.dtos import CreateOrderDTO, UpdateOrderDTO
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.orders.unit_of_work import IUnitOfWork
    from modules.products.models import Product
    from modules.products.repositories.interfaces import IProductRepository
    from shared.domain.events import DomainEvent

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives repositories via constructor injection (DIP).  Mutations open
    a unit of work from ``unit_of_work_factory``; by default a
    ``DjangoUnitOfWork`` over the injected repositories.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        product_repository: IProductRepository,
        unit_of_work_factory: Optional[Callable[[], IUnitOfWork]] = None,
    ) -> None:
        self._order_repo = order_repository
        self._product_repo = product_repository
        self._uow_factory = unit_of_work_factory or (
            lambda: DjangoUnitOfWork(
                products=self._product_repo, orders=self._order_repo
            )
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_order(self, dto: CreateOrderDTO) -> Order:
        """Create an order and take its quantities out of stock.

        Unit prices are snapshotted from the live product prices.

        Raises:
            ProductNotFound: one or more products do not exist.
            InsufficientStock: stock cannot cover one or more lines.
            ConcurrencyConflict: a concurrent writer won the race.
        """
        after = quantities_from_lines((i.product_id, i.quantity) for i in dto.items)
        log = logger.bind(customer_email=dto.customer_email, line_count=len(after))
        log.info("order.creation_started")

        with self._uow_factory() as uow:
            products = uow.products.lock_for_update(after)
            delta = compute_stock_delta({}, after)
            self._ensure_feasible(delta, products, log)
            uow.mark_validated()

            self._apply_stock_delta(uow, delta, log)
            order = uow.orders.save(
                Order(
                    customer_name=dto.customer_name,
                    customer_email=dto.customer_email,
                    shipping_address=dto.shipping_address,
                    status=dto.status or DEFAULT_STATUS,
                    order_date=timezone.now(),
                )
            )
            uow.orders.replace_items(
                order,
                [
                    OrderLine(
                        product_id=product_id,
                        quantity=quantity,
                        unit_price=products[product_id].price,
                    )
                    for product_id, quantity in after.items()
                ],
            )
            uow.mark_applied()
            self._publish_on_commit(OrderCreated(aggregate_id=order.id, stock_delta=delta))

        log.info("order.created", order_id=order.id)
        return self._reload(order.id)

    def update_order(self, order_id: int, dto: UpdateOrderDTO) -> Order:
        """Replace an order's details and lines, reconciling stock by delta.

        ``order_date`` is never touched.  Submitted unit prices are stored
        as given; a line without one keeps the price already recorded for
        that product, and a new product line without one uses the live
        product price.

        Raises:
            OrderNotFound: the order does not exist.
            ProductNotFound: one or more products do not exist.
            InsufficientStock: stock cannot cover one or more positive deltas.
            ConcurrencyConflict: a concurrent writer won the race.
        """
        after = quantities_from_lines((i.product_id, i.quantity) for i in dto.items)
        log = logger.bind(order_id=order_id, line_count=len(after))
        log.info("order.update_started")

        with self._uow_factory() as uow:
            order = uow.orders.get_for_update(order_id)
            if order is None:
                log.info("order.not_found")
                raise OrderNotFound(order_id)

            current_items = list(order.items.all())
            before = {item.product_id: item.quantity for item in current_items}
            recorded_prices = {item.product_id: item.unit_price for item in current_items}

            products = uow.products.lock_for_update(set(before) | set(after))
            delta = compute_stock_delta(before, after)
            self._ensure_feasible(delta, products, log)
            uow.mark_validated()

            self._apply_stock_delta(uow, delta, log)
            order.customer_name = dto.customer_name
            order.customer_email = dto.customer_email
            order.shipping_address = dto.shipping_address
            if dto.status is not None:
                order.status = dto.status
            uow.orders.save(order)
            uow.orders.replace_items(
                order,
                [
                    OrderLine(
                        product_id=item.product_id,
                        quantity=item.quantity,
                        unit_price=self._submitted_price(
                            item.unit_price,
                            recorded_prices.get(item.product_id),
                            products[item.product_id],
                        ),
                    )
                    for item in dto.items
                ],
            )
            uow.mark_applied()
            self._publish_on_commit(OrderUpdated(aggregate_id=order.id, stock_delta=delta))

        log.info("order.updated", status=order.status)
        return self._reload(order.id)

    def delete_order(self, order_id: int) -> None:
        """Delete an order and return all of its quantities to stock.

        Raises:
            OrderNotFound: the order does not exist (including a second
                delete of the same order).
        """
        log = logger.bind(order_id=order_id)

        with self._uow_factory() as uow:
            order = uow.orders.get_for_update(order_id)
            if order is None:
                log.info("order.not_found")
                raise OrderNotFound(order_id)

            before = {item.product_id: item.quantity for item in order.items.all()}
            uow.products.lock_for_update(before)
            delta = stock_credit(before)
            uow.mark_validated()

            self._apply_stock_delta(uow, delta, log)
            uow.orders.delete(order.id)
            uow.mark_applied()
            self._publish_on_commit(OrderDeleted(aggregate_id=order_id, stock_delta=delta))

        log.info("order.deleted")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: int) -> Order:
        """Retrieve a single order with its items and products.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(order_id)
        return order

    def list_orders(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """Return a list of orders, optionally filtered."""
        return self._order_repo.list(filters)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _ensure_feasible(
        delta: Mapping[int, int], products: Mapping[int, Product], log
    ) -> None:
        available = {pid: product.stock_quantity for pid, product in products.items()}
        feasibility = check_feasibility(delta, available)
        if feasibility.missing_products:
            log.warning("order.products_missing", product_ids=feasibility.missing_products)
            raise ProductNotFound(feasibility.missing_products)
        if feasibility.shortages:
            log.warning(
                "order.insufficient_stock",
                shortages=[
                    (s.product_id, s.requested, s.available) for s in feasibility.shortages
                ],
            )
            raise InsufficientStock(feasibility.shortages)

    @staticmethod
    def _apply_stock_delta(uow: IUnitOfWork, delta: Mapping[int, int], log) -> None:
        """Take positive deltas out of stock and put negative ones back."""
        for product_id, required in delta.items():
            if required == 0:
                continue
            if not uow.products.adjust_stock(product_id, -required):
                log.warning("order.concurrency_conflict", product_id=product_id)
                raise ConcurrencyConflict(
                    f"Stock of product {product_id} changed during the operation.",
                    product_id=product_id,
                )
            log.info("order.stock_adjusted", product_id=product_id, change=-required)

    @staticmethod
    def _submitted_price(
        submitted: Optional[Decimal], recorded: Optional[Decimal], product: Product
    ) -> Decimal:
        if submitted is not None:
            return submitted
        if recorded is not None:
            return recorded
        return product.price

    @staticmethod
    def _publish_on_commit(event: DomainEvent) -> None:
        transaction.on_commit(lambda: event_bus.publish(event), robust=True)

    def _reload(self, order_id: int) -> Order:
        """Re-fetch with prefetched items and products for output."""
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise OrderNotFound(order_id)
        return order
