"""Domain events for the Orders bounded context.

Published only after the transaction that produced them has committed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderCreated(DomainEvent):
    """Raised when an order is created."""

    stock_delta: Dict[int, int] = field(default_factory=dict)


@dataclass(frozen=True)
class OrderUpdated(DomainEvent):
    """Raised when an order's details or lines are replaced."""

    stock_delta: Dict[int, int] = field(default_factory=dict)


@dataclass(frozen=True)
class OrderDeleted(DomainEvent):
    """Raised when an order is deleted and its stock returned."""

    stock_delta: Dict[int, int] = field(default_factory=dict)
