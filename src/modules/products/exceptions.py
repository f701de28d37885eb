"""Product domain exceptions.

Raised by the Service Layer when catalog rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations


class ProductNotFound(Exception):
    """The requested product does not exist."""


class ProductInUse(Exception):
    """The product is referenced by at least one order line and cannot be deleted."""
