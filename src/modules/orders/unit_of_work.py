"""Unit of work for order mutations.

One ``DjangoUnitOfWork`` is one database transaction.  The order service
reaches the catalog and the order store only through the repositories it
exposes, so stock adjustments and line-item writes always commit or roll
back together.

Lifecycle::

    STARTED -> VALIDATED -> APPLIED -> COMMITTED
        \\____________\\__________\\__> ABORTED (rollback)
"""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

import structlog
from django.db import OperationalError, transaction

from modules.orders.exceptions import ConcurrencyConflict

if TYPE_CHECKING:
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class UnitOfWorkState(str, enum.Enum):
    NEW = "new"
    STARTED = "started"
    VALIDATED = "validated"
    APPLIED = "applied"
    COMMITTED = "committed"
    ABORTED = "aborted"


_CONTENTION_MARKERS = (
    "deadlock",
    "lock wait",
    "could not obtain lock",
    "database is locked",
    "database table is locked",
    "could not serialize",
    "serialization failure",
)


def is_contention_error(exc: BaseException) -> bool:
    """Return ``True`` if *exc* reports lock contention or a lost race."""
    if not isinstance(exc, OperationalError):
        return False
    message = str(exc).lower()
    return any(marker in message for marker in _CONTENTION_MARKERS)


_ORDER = [
    UnitOfWorkState.STARTED,
    UnitOfWorkState.VALIDATED,
    UnitOfWorkState.APPLIED,
]


class IUnitOfWork(ABC):
    """Transaction-scoped access to the catalog and order stores.

    Use as a context manager: entering begins the transaction, leaving
    normally commits it, leaving through an exception rolls it back.
    """

    products: IProductRepository
    orders: IOrderRepository

    def __init__(self) -> None:
        self.state = UnitOfWorkState.NEW

    def _advance(self, target: UnitOfWorkState) -> None:
        expected = _ORDER.index(target) - 1
        if self.state not in _ORDER or _ORDER.index(self.state) != expected:
            raise RuntimeError(f"Cannot move unit of work from {self.state} to {target}.")
        self.state = target

    def mark_validated(self) -> None:
        """All reads and feasibility checks passed; writes may start."""
        self._advance(UnitOfWorkState.VALIDATED)

    def mark_applied(self) -> None:
        """Every write of the operation has been issued."""
        self._advance(UnitOfWorkState.APPLIED)

    @abstractmethod
    def __enter__(self) -> IUnitOfWork: ...

    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> Optional[bool]: ...

    @abstractmethod
    def rollback(self) -> None:
        """Discard every write made so far once the block exits."""


class DjangoUnitOfWork(IUnitOfWork):
    """``transaction.atomic`` backed unit of work.

    Database errors that signal contention (lock wait timeouts, deadlocks,
    serialization failures, SQLite's "database is locked") are re-raised as
    ``ConcurrencyConflict`` so callers can decide to retry the whole
    operation.  Nothing is retried here.
    """

    def __init__(
        self,
        products: IProductRepository,
        orders: IOrderRepository,
        using: Optional[str] = None,
    ) -> None:
        super().__init__()
        self.products = products
        self.orders = orders
        self._using = using
        self._atomic: Optional[transaction.Atomic] = None

    def __enter__(self) -> DjangoUnitOfWork:
        if self.state is not UnitOfWorkState.NEW:
            raise RuntimeError("A unit of work can only be entered once.")
        self._atomic = transaction.atomic(using=self._using)
        self._atomic.__enter__()
        self.state = UnitOfWorkState.STARTED
        return self

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]:
        assert self._atomic is not None
        try:
            self._atomic.__exit__(exc_type, exc, tb)
        except OperationalError as commit_exc:
            self.state = UnitOfWorkState.ABORTED
            if not is_contention_error(commit_exc):
                raise
            logger.warning("uow.commit_conflict", error=str(commit_exc))
            raise ConcurrencyConflict(
                "The transaction could not be committed because of a concurrent update."
            ) from commit_exc
        finally:
            self._atomic = None

        if exc_type is None and self.state is not UnitOfWorkState.ABORTED:
            self.state = UnitOfWorkState.COMMITTED
            return None

        self.state = UnitOfWorkState.ABORTED
        if exc_type is not None:
            logger.info("uow.rolled_back", reason=exc_type.__name__)
        if is_contention_error(exc):
            logger.warning("uow.lock_conflict", error=str(exc))
            raise ConcurrencyConflict(
                "The data changed or was locked by a concurrent operation."
            ) from exc
        return None

    def rollback(self) -> None:
        transaction.set_rollback(True, using=self._using)
        self.state = UnitOfWorkState.ABORTED
        logger.info("uow.rollback_requested")
