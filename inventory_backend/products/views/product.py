# products/views/product.py

"""
PRODUCT VIEWSET

Purpose:
- Product registry endpoints (list / retrieve / create / edit / delete)
- Stock read endpoints (per product + low stock alerts)

Key rule alignment:
- Every write goes through products.services.registry (audited, atomic).
- in_stock is never written through this API.
"""

from django.db.models import F
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.api import ledger_error_response, request_actor
from core.exceptions import LedgerError
from products.models import Product
from products.serializers.product import (
    ProductCreateSerializer,
    ProductSerializer,
    ProductUpdateSerializer,
)
from products.services import (
    create_product,
    current_stock,
    delete_product,
    edit_product,
    is_low,
    verify_ledger,
)


class ProductViewSet(viewsets.ModelViewSet):
    """
    Product endpoints.

    - GET    /api/products/?q=<search>&category=<id>
    - POST   /api/products/               (optional initial_stock)
    - PATCH  /api/products/{id}/          (metadata only)
    - DELETE /api/products/{id}/          (409 once the product has sales)
    - GET    /api/products/{id}/stock/
    - GET    /api/products/alerts/low-stock/
    """

    serializer_class = ProductSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        qs = Product.objects.select_related("category").order_by("name", "id")

        q = (self.request.query_params.get("q") or "").strip()
        if q:
            qs = qs.filter(name__icontains=q)

        category = (self.request.query_params.get("category") or "").strip()
        if category:
            qs = qs.filter(category_id=category)

        return qs

    @extend_schema(request=ProductCreateSerializer, responses={201: ProductSerializer})
    def create(self, request, *args, **kwargs):
        command = ProductCreateSerializer(data=request.data)
        command.is_valid(raise_exception=True)

        try:
            product = create_product(**command.validated_data, **request_actor(request))
        except LedgerError as exc:
            return ledger_error_response(exc)

        product.refresh_from_db()
        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        if not kwargs.get("partial"):
            return Response(
                {"detail": "PUT is not allowed for products. Use PATCH for metadata."},
                status=status.HTTP_405_METHOD_NOT_ALLOWED,
            )

        command = ProductUpdateSerializer(data=request.data)
        command.is_valid(raise_exception=True)

        try:
            product = edit_product(
                kwargs.get("pk"), **command.validated_data, **request_actor(request)
            )
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(ProductSerializer(product).data, status=status.HTTP_200_OK)

    @extend_schema(request=ProductUpdateSerializer, responses={200: ProductSerializer})
    def partial_update(self, request, *args, **kwargs):
        kwargs["partial"] = True
        return self.update(request, *args, **kwargs)

    def destroy(self, request, *args, **kwargs):
        try:
            delete_product(kwargs.get("pk"), **request_actor(request))
        except LedgerError as exc:
            return ledger_error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)

    # -------------------------------------------------
    # STOCK
    # -------------------------------------------------
    @extend_schema(
        responses={
            200: OpenApiResponse(description="Running stock, batch total and low-stock flag"),
            404: OpenApiResponse(description="Unknown product"),
        }
    )
    @action(detail=True, methods=["get"], url_path="stock")
    def stock(self, request, pk=None):
        try:
            in_stock = current_stock(pk)
            low = is_low(pk)
        except LedgerError as exc:
            return ledger_error_response(exc)

        check = verify_ledger(Product.objects.get(pk=pk))
        return Response(
            {
                "product_id": int(pk),
                "in_stock": str(in_stock),
                "batch_total": str(check.batch_total),
                "is_low": low,
                "ledger_ok": check.ok,
            }
        )

    @action(detail=False, methods=["get"], url_path="alerts/low-stock")
    def low_stock_alerts(self, request):
        qs = self.get_queryset().filter(in_stock__lt=F("warning_stock_level"))
        data = ProductSerializer(qs, many=True).data
        return Response({"count": len(data), "results": data})
