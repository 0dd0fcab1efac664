# sales/serializers/sale_command.py

from rest_framework import serializers


class SaleLineSerializer(serializers.Serializer):
    """
    One "sell N of product P" request line.

    This serializer does NOT touch the database. Stock checks belong to the
    FIFO engine, not here.
    """

    product_id = serializers.IntegerField()
    quantity = serializers.DecimalField(max_digits=14, decimal_places=3)
    unit_price = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, allow_null=True
    )


class SaleCreateSerializer(serializers.Serializer):
    sale_date = serializers.DateField()
    lines = SaleLineSerializer(many=True, allow_empty=False)


class SaleUpdateSerializer(serializers.Serializer):
    sale_date = serializers.DateField(required=False)
    lines = SaleLineSerializer(many=True, required=False)
