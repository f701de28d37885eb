"""Order DRF serializers.

Input validation lives in the Pydantic DTOs (``dtos.py``); these
serializers shape the committed order snapshot returned to clients and
document request bodies for the OpenAPI schema.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.constants import OrderStatus
from modules.orders.models import Order
from modules.products.serializers import ProductReferenceSerializer

# ---------------------------------------------------------------------------
# Input Serializers (schema only)
# ---------------------------------------------------------------------------


class OrderItemInputSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)
    unit_price = serializers.DecimalField(
        max_digits=18, decimal_places=2, required=False, help_text="Update only."
    )


class OrderInputSerializer(serializers.Serializer):
    customer_name = serializers.CharField()
    customer_email = serializers.CharField()
    shipping_address = serializers.CharField()
    status = serializers.ChoiceField(choices=OrderStatus.choices, required=False)
    items = OrderItemInputSerializer(many=True, allow_empty=False)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class OrderItemSerializer(serializers.Serializer):
    """Read serializer for a line item with its resolved product."""

    product_id = serializers.IntegerField(read_only=True)
    product = ProductReferenceSerializer(read_only=True)
    quantity = serializers.IntegerField(read_only=True)
    unit_price = serializers.DecimalField(max_digits=18, decimal_places=2, read_only=True)
    subtotal = serializers.DecimalField(max_digits=20, decimal_places=2, read_only=True)


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for orders with nested items."""

    items = OrderItemSerializer(many=True, read_only=True)
    total_amount = serializers.DecimalField(
        max_digits=20, decimal_places=2, read_only=True
    )

    class Meta:
        model = Order
        fields = [
            "id",
            "customer_name",
            "customer_email",
            "shipping_address",
            "order_date",
            "status",
            "total_amount",
            "items",
        ]
        read_only_fields = fields
