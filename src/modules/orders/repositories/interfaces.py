"""Order repository interface.

Extends ``IRepository[Order]`` with the operations the order service
needs inside its unit of work: locking the order row and replacing its
whole line-item set.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import Order, OrderItem


@dataclass(frozen=True)
class OrderLine:
    """A line item to be written for an order."""

    product_id: int
    quantity: int
    unit_price: Decimal


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    The Order aggregate includes its OrderItem children.
    """

    @abstractmethod
    def get_by_id(self, id: int) -> Optional[Order]:
        """Retrieve an order with prefetched items and products."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """List orders (with items and products) with optional filters."""

    @abstractmethod
    def get_for_update(self, id: int) -> Optional[Order]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE)."""

    @abstractmethod
    def replace_items(self, order: Order, lines: Sequence[OrderLine]) -> List[OrderItem]:
        """Delete every existing line of *order* and insert *lines*."""
