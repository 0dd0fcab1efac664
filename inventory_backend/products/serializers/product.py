# products/serializers/product.py

"""
PRODUCT SERIALIZERS

Purpose:
- ProductSerializer: read shape (stock is reported, never written).
- ProductCreateSerializer / ProductUpdateSerializer: command input for the
  registry services. They do NOT touch the database.
"""

from rest_framework import serializers

from products.models import Product


class ProductSerializer(serializers.ModelSerializer):
    """
    GUARANTEES:
    - in_stock is read-only (orders and sales move it)
    - is_low_stock mirrors Product.is_low_stock (in_stock < warning level)
    """

    category_name = serializers.CharField(source="category.name", read_only=True, default=None)
    is_low_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "product_key",
            "name",
            "description",
            "category",
            "category_name",
            "price",
            "unit",
            "warning_stock_level",
            "in_stock",
            "is_low_stock",
            "created_at",
            "created_by",
            "modified_at",
            "modified_by",
        ]
        read_only_fields = fields


class ProductCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    unit = serializers.CharField(required=False, allow_blank=True, default="", max_length=32)
    warning_stock_level = serializers.DecimalField(
        max_digits=14, decimal_places=3, min_value=0, required=False, default=0
    )
    category_id = serializers.IntegerField(required=False, allow_null=True, default=None)
    initial_stock = serializers.DecimalField(
        max_digits=14, decimal_places=3, min_value=0, required=False, default=0
    )
    supplier_id = serializers.IntegerField(required=False, allow_null=True, default=None)


class ProductUpdateSerializer(serializers.Serializer):
    """
    Metadata only. Stock fields are rejected, not ignored.
    """

    name = serializers.CharField(max_length=255, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    unit = serializers.CharField(required=False, allow_blank=True, max_length=32)
    warning_stock_level = serializers.DecimalField(
        max_digits=14, decimal_places=3, min_value=0, required=False
    )
    category_id = serializers.IntegerField(required=False, allow_null=True)

    def validate(self, attrs):
        initial = getattr(self, "initial_data", {}) or {}
        if "in_stock" in initial:
            raise serializers.ValidationError(
                {"in_stock": "Stock changes only through orders and sales."}
            )
        return attrs
