# products/serializers/stock_batch.py

from rest_framework import serializers

from products.models import StockBatch


class StockBatchSerializer(serializers.ModelSerializer):
    """
    Read-only ledger view of a batch.
    """

    product_name = serializers.CharField(source="product.name", read_only=True)
    order_code = serializers.CharField(source="order.order_code", read_only=True)
    order_date = serializers.DateField(source="order.order_date", read_only=True)
    quantity_sold = serializers.DecimalField(max_digits=14, decimal_places=3, read_only=True)

    class Meta:
        model = StockBatch
        fields = [
            "id",
            "product",
            "product_name",
            "order",
            "order_code",
            "order_date",
            "order_item",
            "order_price",
            "quantity_received",
            "stock_left",
            "quantity_sold",
            "created_at",
            "created_by",
        ]
        read_only_fields = fields
