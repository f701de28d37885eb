"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.  The write
methods do not open transactions of their own: they are meant to run
inside the order service's unit of work, which owns the transaction
boundary.  Row locks (``select_for_update``) serialize concurrent
mutations of the same order.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

import structlog

from modules.orders.models import Order, OrderItem
from modules.orders.repositories.interfaces import IOrderRepository, OrderLine

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: int) -> Optional[Order]:
        """Retrieve an order with eager-loaded items and products.

        ``prefetch_related`` for items and items→product runs two batched
        queries, preventing N+1.  Returns ``None`` for non-existent or
        malformed IDs.
        """
        try:
            return Order.objects.prefetch_related("items__product").filter(id=id).first()
        except (TypeError, ValueError, OverflowError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """List orders with optional filters and eager-loaded relations.

        Supported filter keys are Django look-ups on ``Order``, e.g.
        ``status``, ``customer_email__iexact``, ``order_date__gte``.
        """
        queryset = Order.objects.prefetch_related("items__product")
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def get_for_update(self, id: int) -> Optional[Order]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE).

        Eager-loads items so the caller can read the current lines while
        the row is locked.
        """
        try:
            return (
                Order.objects.select_for_update()
                .prefetch_related("items")
                .filter(id=id)
                .first()
            )
        except (TypeError, ValueError, OverflowError):
            return None

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def save(self, entity: Order) -> Order:
        """Insert or update the order row (customer fields and status)."""
        entity.save()
        logger.info("order.saved", order_id=entity.id, status=entity.status)
        return entity

    def replace_items(self, order: Order, lines: Sequence[OrderLine]) -> List[OrderItem]:
        """Replace the full line-item set of *order*."""
        removed, _ = OrderItem.objects.filter(order_id=order.id).delete()
        items = OrderItem.objects.bulk_create(
            [
                OrderItem(
                    order=order,
                    product_id=line.product_id,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                )
                for line in lines
            ]
        )
        logger.info(
            "order.items_replaced",
            order_id=order.id,
            removed=removed,
            inserted=len(items),
        )
        return items

    def delete(self, id: int) -> bool:
        """Delete an order's items, then the order row itself."""
        items_deleted, _ = OrderItem.objects.filter(order_id=id).delete()
        deleted, _ = Order.objects.filter(id=id).delete()
        if deleted:
            logger.info("order.deleted", order_id=id, items_deleted=items_deleted)
        return bool(deleted)
