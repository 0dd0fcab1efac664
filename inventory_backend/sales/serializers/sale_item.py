# sales/serializers/sale_item.py

from rest_framework import serializers

from sales.models import SaleItem


class SaleItemSerializer(serializers.ModelSerializer):
    """
    One batch draw (read-only).
    """

    product_name = serializers.CharField(source="product.name", read_only=True)
    order_code = serializers.CharField(source="batch.order.order_code", read_only=True)
    line_total = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = SaleItem
        fields = [
            "id",
            "product",
            "product_name",
            "batch",
            "order_code",
            "amount",
            "sale_price",
            "line_total",
            "created_at",
            "created_by",
        ]
        read_only_fields = fields
