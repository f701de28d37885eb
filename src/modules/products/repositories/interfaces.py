"""Product repository interface.

Extends ``IRepository[Product]`` with the operations the order service
needs from the catalog: locked look-ups and guarded stock adjustment.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Dict, Iterable

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def lock_for_update(self, ids: Iterable[int]) -> Dict[int, "Product"]:
        """Retrieve products with row-level locks (SELECT FOR UPDATE).

        Rows are locked in primary-key order to avoid deadlocks between
        concurrent orders.  Must be called inside a transaction.  Unknown
        IDs are simply absent from the returned mapping.
        """

    @abstractmethod
    def adjust_stock(self, id: int, delta: int) -> bool:
        """Add ``delta`` (signed) to the product's stock.

        The write is conditional: it only applies when the resulting stock
        stays non-negative.  Returns ``False`` when the guard rejects the
        write, i.e. the stock changed underneath the caller.
        """

    @abstractmethod
    def is_referenced(self, id: int) -> bool:
        """Return ``True`` if any order line references the product."""
