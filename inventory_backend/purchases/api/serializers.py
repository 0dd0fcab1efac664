# purchases/api/serializers.py

from rest_framework import serializers

from purchases.models import PurchaseOrder, PurchaseOrderItem, Supplier


class SupplierSerializer(serializers.ModelSerializer):
    class Meta:
        model = Supplier
        fields = [
            "id",
            "name",
            "contact",
            "contact_person",
            "address",
            "created_at",
            "created_by",
            "modified_at",
            "modified_by",
        ]
        read_only_fields = ("id", "created_at", "created_by", "modified_at", "modified_by")


class OrderLineCreateSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    quantity = serializers.DecimalField(max_digits=14, decimal_places=3)
    unit_cost = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)


class OrderReceiveSerializer(serializers.Serializer):
    supplier_id = serializers.IntegerField(required=False, allow_null=True)
    order_date = serializers.DateField()
    total_amount = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    items = OrderLineCreateSerializer(many=True, required=False)

    def validate(self, attrs):
        attrs.setdefault("items", [])
        return attrs


class OrderEditSerializer(serializers.Serializer):
    supplier_id = serializers.IntegerField(required=False, allow_null=True)
    order_date = serializers.DateField(required=False)
    total_amount = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    items = OrderLineCreateSerializer(many=True, required=False)


class PurchaseOrderItemSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source="product.name", read_only=True)
    batch_id = serializers.IntegerField(source="batch.id", read_only=True)
    stock_left = serializers.DecimalField(
        source="batch.stock_left", max_digits=14, decimal_places=3, read_only=True
    )
    line_total = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = PurchaseOrderItem
        fields = [
            "id",
            "product",
            "product_name",
            "quantity",
            "unit_cost",
            "line_total",
            "batch_id",
            "stock_left",
        ]
        read_only_fields = fields


class PurchaseOrderSerializer(serializers.ModelSerializer):
    supplier_name = serializers.CharField(source="supplier.name", read_only=True, default=None)
    items = PurchaseOrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = PurchaseOrder
        fields = [
            "id",
            "order_code",
            "order_date",
            "supplier",
            "supplier_name",
            "total_amount",
            "items",
            "created_at",
            "created_by",
            "modified_at",
            "modified_by",
        ]
        read_only_fields = fields
