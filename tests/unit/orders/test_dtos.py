"""Unit tests for order DTO validation."""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.orders.constants import OrderStatus
from modules.orders.dtos import CreateOrderDTO, UpdateOrderDTO, build_dto
from modules.orders.exceptions import OrderValidationError

pytestmark = pytest.mark.unit


def _payload(**overrides):
    data = {
        "customer_name": "Ana Souza",
        "customer_email": "ana@example.com",
        "shipping_address": "Rua das Flores 10",
        "items": [{"product_id": 1, "quantity": 2}],
    }
    data.update(overrides)
    return data


def _attrs(exc_info):
    return {error["attr"] for error in exc_info.value.errors}


class TestCreateOrderDTO:
    def test_valid_payload(self):
        dto = build_dto(CreateOrderDTO, _payload())
        assert dto.customer_name == "Ana Souza"
        assert dto.status is None
        assert dto.items[0].product_id == 1

    def test_fields_are_trimmed(self):
        dto = build_dto(CreateOrderDTO, _payload(customer_name="  Ana  "))
        assert dto.customer_name == "Ana"

    def test_is_immutable(self):
        dto = build_dto(CreateOrderDTO, _payload())
        with pytest.raises(Exception):
            dto.customer_name = "other"

    @pytest.mark.parametrize("field", ["customer_name", "customer_email", "shipping_address"])
    def test_blank_customer_field_rejected(self, field):
        with pytest.raises(OrderValidationError) as exc_info:
            build_dto(CreateOrderDTO, _payload(**{field: "   "}))
        assert field in _attrs(exc_info)

    def test_missing_customer_field_rejected(self):
        data = _payload()
        del data["shipping_address"]
        with pytest.raises(OrderValidationError) as exc_info:
            build_dto(CreateOrderDTO, data)
        assert "shipping_address" in _attrs(exc_info)

    def test_overlong_name_rejected(self):
        with pytest.raises(OrderValidationError):
            build_dto(CreateOrderDTO, _payload(customer_name="x" * 256))

    def test_empty_items_rejected(self):
        with pytest.raises(OrderValidationError) as exc_info:
            build_dto(CreateOrderDTO, _payload(items=[]))
        assert "items" in _attrs(exc_info)

    @pytest.mark.parametrize("quantity", [0, -3])
    def test_non_positive_quantity_rejected(self, quantity):
        with pytest.raises(OrderValidationError) as exc_info:
            build_dto(
                CreateOrderDTO,
                _payload(items=[{"product_id": 1, "quantity": quantity}]),
            )
        assert "items.0.quantity" in _attrs(exc_info)

    def test_duplicate_products_rejected(self):
        items = [{"product_id": 1, "quantity": 1}, {"product_id": 1, "quantity": 2}]
        with pytest.raises(OrderValidationError, match="Duplicate product"):
            build_dto(CreateOrderDTO, _payload(items=items))

    def test_status_parsed_case_insensitively(self):
        dto = build_dto(CreateOrderDTO, _payload(status="shipped"))
        assert dto.status is OrderStatus.SHIPPED

    def test_unknown_status_rejected(self):
        with pytest.raises(OrderValidationError) as exc_info:
            build_dto(CreateOrderDTO, _payload(status="Paid"))
        assert "status" in _attrs(exc_info)

    def test_every_problem_reported_at_once(self):
        with pytest.raises(OrderValidationError) as exc_info:
            build_dto(
                CreateOrderDTO,
                _payload(customer_name="", status="Lost", items=[]),
            )
        assert {"customer_name", "status", "items"} <= _attrs(exc_info)

    def test_non_object_payload_rejected(self):
        with pytest.raises(OrderValidationError):
            build_dto(CreateOrderDTO, ["not", "an", "object"])


class TestUpdateOrderDTO:
    def test_unit_price_optional_and_quantized(self):
        dto = build_dto(
            UpdateOrderDTO,
            _payload(
                items=[
                    {"product_id": 1, "quantity": 1, "unit_price": "9.5"},
                    {"product_id": 2, "quantity": 1},
                ]
            ),
        )
        assert dto.items[0].unit_price == Decimal("9.50")
        assert dto.items[1].unit_price is None

    def test_negative_unit_price_rejected(self):
        with pytest.raises(OrderValidationError):
            build_dto(
                UpdateOrderDTO,
                _payload(items=[{"product_id": 1, "quantity": 1, "unit_price": "-1"}]),
            )

    @pytest.mark.parametrize("unit_price", ["1e30", "10000000000000000"])
    def test_unit_price_beyond_column_rejected(self, unit_price):
        with pytest.raises(OrderValidationError) as exc_info:
            build_dto(
                UpdateOrderDTO,
                _payload(
                    items=[{"product_id": 1, "quantity": 1, "unit_price": unit_price}]
                ),
            )
        assert "items.0.unit_price" in _attrs(exc_info)

    def test_largest_unit_price_accepted(self):
        dto = build_dto(
            UpdateOrderDTO,
            _payload(
                items=[
                    {"product_id": 1, "quantity": 1, "unit_price": "9999999999999999.99"}
                ]
            ),
        )
        assert dto.items[0].unit_price == Decimal("9999999999999999.99")


class TestItemBounds:
    @pytest.mark.parametrize("product_id", [0, -1, 2**70])
    def test_product_id_out_of_range_rejected(self, product_id):
        with pytest.raises(OrderValidationError) as exc_info:
            build_dto(
                CreateOrderDTO,
                _payload(items=[{"product_id": product_id, "quantity": 1}]),
            )
        assert "items.0.product_id" in _attrs(exc_info)

    def test_huge_quantity_rejected(self):
        with pytest.raises(OrderValidationError) as exc_info:
            build_dto(
                CreateOrderDTO,
                _payload(items=[{"product_id": 1, "quantity": 2**40}]),
            )
        assert "items.0.quantity" in _attrs(exc_info)
