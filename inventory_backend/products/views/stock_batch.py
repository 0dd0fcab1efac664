# products/views/stock_batch.py

"""
======================================================
PATH: products/views/stock_batch.py
======================================================
STOCK BATCH VIEWSET (READ-ONLY)

Batches are created by receiving an order and consumed by sales.
There is no endpoint that writes a batch directly.
"""

from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated

from products.models import StockBatch
from products.serializers.stock_batch import StockBatchSerializer


class StockBatchViewSet(viewsets.ReadOnlyModelViewSet):
    """
    GET /api/products/batches/?product_id=<id>&available=true
    """

    serializer_class = StockBatchSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        qs = StockBatch.objects.select_related("product", "order").order_by(
            "order__order_date", "id"
        )

        product_id = (self.request.query_params.get("product_id") or "").strip()
        if product_id:
            qs = qs.filter(product_id=product_id)

        available = (self.request.query_params.get("available") or "").strip().lower()
        if available in ("1", "true", "yes"):
            qs = qs.filter(stock_left__gt=0)

        return qs
