"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.
Error handling follows the Null Object pattern: look-ups return ``None``
instead of raising; the Service Layer decides how to translate a missing
entity into a domain error.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence

import structlog

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: int) -> Optional[Product]:
        """Retrieve a product by primary key.

        Returns ``None`` for non-existent or malformed IDs.
        """
        try:
            return Product.objects.filter(id=id).first()
        except (TypeError, ValueError, OverflowError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Product]:
        """List products with optional Django ORM look-ups.

        Examples of valid filters::

            {"name__icontains": "widget"}
            {"stock_quantity__gt": 0}
        """
        queryset = Product.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @transaction.atomic
    def save(
        self, entity: Product, update_fields: Optional[Sequence[str]] = None
    ) -> Product:
        """Persist (create or update) a product.

        ``update_fields`` restricts the UPDATE to those columns so a catalog
        edit never writes back a stale ``stock_quantity``.
        """
        entity.save(update_fields=update_fields)
        logger.info("product.saved", product_id=entity.id)
        return entity

    @transaction.atomic
    def delete(self, id: int) -> bool:
        """Delete a product by ID.

        Returns ``True`` if the product existed, ``False`` otherwise.
        """
        deleted, _ = Product.objects.filter(id=id).delete()
        if deleted:
            logger.info("product.deleted", product_id=id)
        return bool(deleted)

    # ------------------------------------------------------------------
    # Stock control (used by the order service inside its unit of work)
    # ------------------------------------------------------------------

    def lock_for_update(self, ids: Iterable[int]) -> Dict[int, Product]:
        """Lock the requested product rows, sorted by PK to prevent deadlocks."""
        wanted = sorted(set(ids))
        if not wanted:
            return {}
        products = (
            Product.objects.select_for_update().filter(id__in=wanted).order_by("id")
        )
        return {product.id: product for product in products}

    def adjust_stock(self, id: int, delta: int) -> bool:
        """Apply a signed stock delta with a non-negative guard.

        A single ``UPDATE ... WHERE stock_quantity >= -delta`` both checks
        and writes, so a concurrent writer that slipped past the row lock
        (e.g. a direct catalog edit) turns into a zero-row update instead of
        a lost update.
        """
        queryset = Product.objects.filter(id=id)
        if delta < 0:
            queryset = queryset.filter(stock_quantity__gte=-delta)
        updated = queryset.update(
            stock_quantity=F("stock_quantity") + delta, updated_at=timezone.now()
        )
        if not updated:
            logger.warning("product.stock_guard_rejected", product_id=id, delta=delta)
            return False
        return True

    def is_referenced(self, id: int) -> bool:
        from modules.orders.models import OrderItem

        return OrderItem.objects.filter(product_id=id).exists()
