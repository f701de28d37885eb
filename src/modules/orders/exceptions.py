"""Order domain exceptions.

Raised by the Service Layer when an order mutation cannot be carried out.
Each failure carries structured data so the API layer (Views) can report
every problem in a single response.  None of them is fatal: they are
ordinary outcomes of user input and contention, and the transaction that
raised them has been rolled back.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from modules.orders.reconciliation import StockShortage


class OrderError(Exception):
    """Base class for order mutation failures."""


class OrderValidationError(OrderError):
    """Malformed customer fields, line items or status.

    Raised before the store is touched.
    """

    def __init__(self, errors: List[Dict[str, Any]]) -> None:
        self.errors = errors
        super().__init__("; ".join(str(error.get("detail", "")) for error in errors))


class OrderNotFound(OrderError):
    """The order targeted by an update or delete does not exist."""

    def __init__(self, order_id: Any) -> None:
        self.order_id = order_id
        super().__init__(f"Order {order_id} not found.")


class ProductNotFound(OrderError):
    """One or more products referenced by the order lines do not exist."""

    def __init__(self, product_ids: Sequence[int]) -> None:
        self.product_ids = list(product_ids)
        ids = ", ".join(str(product_id) for product_id in self.product_ids)
        super().__init__(f"Product(s) not found: {ids}.")


class InsufficientStock(OrderError):
    """Live stock cannot cover one or more positive deltas.

    ``shortages`` lists every offending product, not just the first.
    """

    def __init__(self, shortages: Sequence[StockShortage]) -> None:
        self.shortages = list(shortages)
        parts = [
            f"product {s.product_id}: requested {s.requested}, available {s.available}"
            for s in self.shortages
        ]
        super().__init__("Not enough stock for " + "; ".join(parts) + ".")


class ConcurrencyConflict(OrderError):
    """A concurrent writer changed the data this operation depended on.

    Retrying the whole operation from a fresh read may succeed.
    """

    def __init__(self, message: str, product_id: Optional[int] = None) -> None:
        self.product_id = product_id
        super().__init__(message)
