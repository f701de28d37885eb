"""Order and OrderItem models.

Business rules implemented:
- ``order_date`` is set once, when the order is created, and never changes.
- ``status`` is one of the ``OrderStatus`` names; no transition graph.
- An order owns its items: deleting the order deletes them (CASCADE).
- An item references a product without owning it; a referenced product
  cannot be deleted (PROTECT).
- OrderItem identity is the composite key ``(order, product)``, so an order
  holds at most one line per product by construction.
- ``unit_price`` is a snapshot, never re-derived from the live product.
"""

from __future__ import annotations

from decimal import Decimal
from typing import NamedTuple

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from modules.core.models import BaseModel
from modules.orders.constants import DEFAULT_STATUS, OrderStatus


class OrderItemKey(NamedTuple):
    """Identity of an order line."""

    order_id: int
    product_id: int


class Order(BaseModel):
    """Order aggregate root: customer details plus its line items."""

    customer_name = models.CharField(max_length=255)
    customer_email = models.EmailField(max_length=254)
    shipping_address = models.TextField()
    order_date = models.DateTimeField(default=timezone.now, editable=False)
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=DEFAULT_STATUS,
    )

    class Meta:
        db_table = "orders"
        ordering = ["-order_date", "-id"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-order_date"], name="orders_order_date_idx"),
        ]

    @property
    def total_amount(self) -> Decimal:
        """Sum of line subtotals (uses prefetched items when available)."""
        return sum((item.subtotal for item in self.items.all()), Decimal("0.00"))

    def __str__(self) -> str:
        return f"Order #{self.id} ({self.status})"


class OrderItem(models.Model):
    """Line item linking an Order to a Product.

    ``unit_price`` is a **snapshot** taken when the line is written; later
    product price changes do not affect it.
    """

    pk = models.CompositePrimaryKey("order_id", "product_id")
    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    product = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="order_items",
    )
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit_price = models.DecimalField(max_digits=18, decimal_places=2)

    class Meta:
        db_table = "order_items"
        ordering = ["product_id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_items_quantity_positive",
            ),
        ]

    @property
    def key(self) -> OrderItemKey:
        return OrderItemKey(self.order_id, self.product_id)

    @property
    def subtotal(self) -> Decimal:
        return self.quantity * self.unit_price

    def __str__(self) -> str:
        return f"{self.key}: x{self.quantity} @ {self.unit_price}"
