# sales/api/viewsets/sale.py

"""
======================================================
PATH: sales/api/viewsets/sale.py
======================================================
SALE VIEWSET

Purpose:
- List / retrieve sales with their batch draws.
- Create a sale from request lines (FIFO allocation per line).
- Append lines, or allocate a single line through /allocate/.
- Delete a sale (every SaleItem reversed first).
- Delete one SaleItem (reversal credits its batch and product).

Error mapping (core.api.ledger_error_response):
- OutOfStock -> 409 with product / requested / available
======================================================
"""

from __future__ import annotations

from django.utils.dateparse import parse_date
from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.api import ledger_error_response, request_actor
from core.exceptions import LedgerError
from products.services import reverse_sale_item
from sales.models import Sale
from sales.serializers import (
    SaleCreateSerializer,
    SaleItemSerializer,
    SaleLineSerializer,
    SaleSerializer,
    SaleUpdateSerializer,
)
from sales.services.sale_service import add_sale_lines, allocate_line, create_sale, delete_sale


def _sales_qs():
    return Sale.objects.prefetch_related(
        "items", "items__product", "items__batch", "items__batch__order"
    ).order_by("-sale_date", "-id")


def _date_param(params, name):
    raw = (params.get(name) or "").strip()
    if not raw:
        return None
    try:
        value = parse_date(raw)
    except ValueError:
        value = None
    if value is None:
        raise ValidationError({name: "Use a valid date in YYYY-MM-DD format."})
    return value


class SaleViewSet(viewsets.ModelViewSet):
    """
    - GET    /api/sales/?date_from=YYYY-MM-DD&date_to=YYYY-MM-DD
    - POST   /api/sales/                 {sale_date, lines: [...]}
    - PATCH  /api/sales/{id}/            {sale_date?, lines?}
    - DELETE /api/sales/{id}/
    - POST   /api/sales/{id}/allocate/   {product_id, quantity, unit_price?}
    """

    serializer_class = SaleSerializer
    permission_classes = [IsAuthenticated]
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]

    def get_queryset(self):
        qs = _sales_qs()

        params = self.request.query_params

        date_from = _date_param(params, "date_from")
        if date_from:
            qs = qs.filter(sale_date__gte=date_from)

        date_to = _date_param(params, "date_to")
        if date_to:
            qs = qs.filter(sale_date__lte=date_to)

        return qs

    @extend_schema(request=SaleCreateSerializer, responses={201: SaleSerializer})
    def create(self, request, *args, **kwargs):
        command = SaleCreateSerializer(data=request.data)
        command.is_valid(raise_exception=True)
        data = command.validated_data

        try:
            sale = create_sale(
                sale_date=data["sale_date"],
                lines=[dict(line) for line in data["lines"]],
                **request_actor(request),
            )
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(
            SaleSerializer(_sales_qs().get(pk=sale.pk)).data,
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(request=SaleUpdateSerializer, responses={200: SaleSerializer})
    def partial_update(self, request, *args, **kwargs):
        command = SaleUpdateSerializer(data=request.data)
        command.is_valid(raise_exception=True)
        data = command.validated_data

        try:
            sale = add_sale_lines(
                kwargs.get("pk"),
                lines=[dict(line) for line in data.get("lines", [])],
                sale_date=data.get("sale_date"),
                **request_actor(request),
            )
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(SaleSerializer(_sales_qs().get(pk=sale.pk)).data)

    def destroy(self, request, *args, **kwargs):
        try:
            delete_sale(kwargs.get("pk"), **request_actor(request))
        except LedgerError as exc:
            return ledger_error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=SaleLineSerializer, responses={201: SaleItemSerializer(many=True)})
    @action(detail=True, methods=["post"], url_path="allocate")
    def allocate(self, request, pk=None):
        command = SaleLineSerializer(data=request.data)
        command.is_valid(raise_exception=True)
        data = command.validated_data

        try:
            items = allocate_line(pk, line=dict(data), **request_actor(request))
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(SaleItemSerializer(items, many=True).data, status=status.HTTP_201_CREATED)


class SaleItemDetailView(GenericAPIView):
    """
    DELETE /api/sales/items/{id}/  -> reversal
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["sales"], responses={204: None})
    def delete(self, request, item_id):
        try:
            reverse_sale_item(sale_item_id=item_id, **request_actor(request))
        except LedgerError as exc:
            return ledger_error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)
