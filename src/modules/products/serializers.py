"""Product DRF serializers for API output.

Input is validated by the Pydantic DTOs in ``dtos.py``; the serializers
only shape responses.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.products.models import Product


class ProductSerializer(serializers.ModelSerializer):
    """Read serializer for the Product resource."""

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "description",
            "price",
            "stock_quantity",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ProductReferenceSerializer(serializers.ModelSerializer):
    """Compact product reference nested inside order lines."""

    class Meta:
        model = Product
        fields = ["id", "name", "price"]
        read_only_fields = fields
