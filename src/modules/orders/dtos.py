"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer and the Service layer.
DTOs are immutable (``frozen=True``); building one is the validation step
that happens before any store access.

- ``OrderItemInputDTO``: one requested line (create).
- ``UpdateOrderItemDTO``: one submitted line (update, may carry a price).
- ``CreateOrderDTO``: customer details, optional status and lines.
- ``UpdateOrderDTO``: same shape for a full order replacement.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, List, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from modules.core.exceptions import pydantic_errors
from modules.orders.constants import OrderStatus, StatusParseError, parse_status
from modules.orders.exceptions import OrderValidationError

_MAX_LENGTHS = {"customer_name": 255, "customer_email": 254}

# Bounds of the backing columns (BigAutoField, PositiveIntegerField,
# DecimalField(18, 2)).
MAX_ID = 2**63 - 1
MAX_QUANTITY = 2**31 - 1
MAX_UNIT_PRICE = Decimal("10000000000000000")

DTO = TypeVar("DTO", bound=BaseModel)


def build_dto(dto_class: Type[DTO], data: Mapping[str, Any]) -> DTO:
    """Instantiate *dto_class*, reporting failures as ``OrderValidationError``."""
    if not isinstance(data, Mapping):
        raise OrderValidationError(
            [{"code": "invalid", "detail": "Expected an object.", "attr": None}]
        )
    try:
        return dto_class.model_validate(dict(data))
    except PydanticValidationError as exc:
        raise OrderValidationError(pydantic_errors(exc)) from exc


# ---------------------------------------------------------------------------
# Line items
# ---------------------------------------------------------------------------


class OrderItemInputDTO(BaseModel):
    """A requested line: the unit price is resolved from the catalog."""

    model_config = ConfigDict(frozen=True)

    product_id: int = Field(gt=0, le=MAX_ID)
    quantity: int = Field(le=MAX_QUANTITY)

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        return v


class UpdateOrderItemDTO(OrderItemInputDTO):
    """A submitted line on update.

    ``unit_price`` is taken as submitted; when omitted, the price already
    recorded for that product on the order is kept.
    """

    unit_price: Optional[Decimal] = None

    @field_validator("unit_price")
    @classmethod
    def unit_price_must_fit_column(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is None:
            return v
        if v < 0:
            raise ValueError("Unit price cannot be negative.")
        # Decimal(18, 2): at most 16 integer digits.
        if v >= MAX_UNIT_PRICE:
            raise ValueError(f"Unit price must be less than {MAX_UNIT_PRICE}.")
        return v.quantize(Decimal("0.01"))


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------


class _OrderDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    customer_name: str
    customer_email: str
    shipping_address: str
    status: Optional[OrderStatus] = None

    @field_validator("customer_name", "customer_email", "shipping_address")
    @classmethod
    def must_not_be_blank(cls, v: str, info) -> str:
        value = v.strip()
        if not value:
            raise ValueError(f"{info.field_name} must not be empty.")
        max_length = _MAX_LENGTHS.get(info.field_name)
        if max_length is not None and len(value) > max_length:
            raise ValueError(f"{info.field_name} must be at most {max_length} characters.")
        return value

    @field_validator("status", mode="before")
    @classmethod
    def status_must_be_known(cls, v: Any) -> Optional[OrderStatus]:
        if v is None:
            return None
        parsed = parse_status(v)
        if isinstance(parsed, StatusParseError):
            raise ValueError(parsed.message)
        return parsed

    @model_validator(mode="after")
    def one_line_per_product(self):
        product_ids = [item.product_id for item in self.items]
        if len(product_ids) != len(set(product_ids)):
            raise ValueError("Duplicate product IDs are not allowed in the same order.")
        return self

    @field_validator("items", check_fields=False)
    @classmethod
    def items_must_not_be_empty(cls, v: List[Any]) -> List[Any]:
        if not v:
            raise ValueError("Order must have at least one item.")
        return v


class CreateOrderDTO(_OrderDTO):
    """Immutable DTO for order creation requests.

    ``status`` defaults to ``Pending`` when omitted.
    """

    items: List[OrderItemInputDTO]


class UpdateOrderDTO(_OrderDTO):
    """Immutable DTO for full order updates.

    ``status`` left as ``None`` keeps the order's current status.
    """

    items: List[UpdateOrderItemDTO]
