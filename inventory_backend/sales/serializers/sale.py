# sales/serializers/sale.py

from rest_framework import serializers

from sales.models import Sale

from .sale_item import SaleItemSerializer


class SaleSerializer(serializers.ModelSerializer):
    items = SaleItemSerializer(many=True, read_only=True)

    class Meta:
        model = Sale
        fields = [
            "id",
            "sale_code",
            "sale_date",
            "total_amount",
            "items",
            "created_at",
            "created_by",
            "modified_at",
            "modified_by",
        ]
        read_only_fields = fields
