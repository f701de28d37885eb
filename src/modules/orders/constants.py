"""Order domain constants.

Defines the closed set of order statuses and the parser that maps a
free-form client string onto it.  Statuses are ordered by declaration
only; any status may be set from any other (no transition graph).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "Pending", "Pending"
    PROCESSING = "Processing", "Processing"
    SHIPPED = "Shipped", "Shipped"
    DELIVERED = "Delivered", "Delivered"
    CANCELLED = "Cancelled", "Cancelled"


DEFAULT_STATUS = OrderStatus.PENDING


@dataclass(frozen=True)
class StatusParseError:
    """Result of ``parse_status`` for input that names no known status."""

    raw: object

    @property
    def message(self) -> str:
        allowed = ", ".join(OrderStatus.values)
        return f"Invalid order status: {self.raw!r}. Expected one of: {allowed}."


_STATUS_BY_KEY = {status.value.lower(): status for status in OrderStatus}


def parse_status(raw: object) -> Union[OrderStatus, StatusParseError]:
    """Map *raw* onto an ``OrderStatus``, case-insensitively.

    Total: returns a ``StatusParseError`` instead of raising for anything
    that is not a string naming one of the statuses (surrounding
    whitespace is ignored).
    """
    if isinstance(raw, OrderStatus):
        return raw
    if not isinstance(raw, str):
        return StatusParseError(raw)
    return _STATUS_BY_KEY.get(raw.strip().lower(), StatusParseError(raw))
