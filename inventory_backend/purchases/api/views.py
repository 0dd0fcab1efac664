# purchases/api/views.py

"""
PURCHASES API

Thin HTTP layer over purchases.services:
- actor / clock are taken from the request and passed explicitly
- ledger errors are translated by core.api.ledger_error_response
"""

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.api import ledger_error_response, request_actor
from core.exceptions import LedgerError, NotFoundError
from purchases.api.serializers import (
    OrderEditSerializer,
    OrderReceiveSerializer,
    PurchaseOrderSerializer,
    SupplierSerializer,
)
from purchases.models import PurchaseOrder, Supplier
from purchases.services import (
    create_supplier,
    delete_order,
    delete_order_item,
    delete_supplier,
    edit_order,
    edit_supplier,
    receive,
)


def _orders_qs():
    return (
        PurchaseOrder.objects.select_related("supplier")
        .prefetch_related("items", "items__product", "items__batch")
        .order_by("-order_date", "-id")
    )


# ============================================================
# SUPPLIERS
# ============================================================

class SupplierListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = SupplierSerializer

    @extend_schema(tags=["purchases"], responses=SupplierSerializer(many=True))
    def get(self, request):
        qs = Supplier.objects.order_by("name")
        return Response(SupplierSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["purchases"],
        request=SupplierSerializer,
        responses={201: SupplierSerializer},
    )
    def post(self, request):
        s = SupplierSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            supplier = create_supplier(**s.validated_data, **request_actor(request))
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(SupplierSerializer(supplier).data, status=status.HTTP_201_CREATED)


class SupplierDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = SupplierSerializer

    @extend_schema(tags=["purchases"], responses=SupplierSerializer)
    def get(self, request, supplier_id):
        supplier = Supplier.objects.filter(pk=supplier_id).first()
        if supplier is None:
            return ledger_error_response(NotFoundError(f"Supplier not found: {supplier_id}"))
        return Response(SupplierSerializer(supplier).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["purchases"], request=SupplierSerializer, responses=SupplierSerializer)
    def patch(self, request, supplier_id):
        s = SupplierSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)

        try:
            supplier = edit_supplier(supplier_id, **s.validated_data, **request_actor(request))
        except LedgerError as exc:
            return ledger_error_response(exc)

        return Response(SupplierSerializer(supplier).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["purchases"], responses={204: None})
    def delete(self, request, supplier_id):
        try:
            delete_supplier(supplier_id, **request_actor(request))
        except LedgerError as exc:
            return ledger_error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)


# ============================================================
# ORDERS
# ============================================================

class PurchaseOrderListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = PurchaseOrderSerializer

    @extend_schema(tags=["purchases"], responses=PurchaseOrderSerializer(many=True))
    def get(self, request):
        qs = _orders_qs()

        supplier_id = (request.query_params.get("supplier_id") or "").strip()
        if supplier_id:
            qs = qs.filter(supplier_id=supplier_id)

        return Response(PurchaseOrderSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["purchases"],
        request=OrderReceiveSerializer,
        responses={201: PurchaseOrderSerializer},
    )
    def post(self, request):
        s = OrderReceiveSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            order = receive(
                supplier_id=data.get("supplier_id"),
                order_date=data["order_date"],
                items=[dict(line) for line in data["items"]],
                total_amount=data.get("total_amount"),
                **request_actor(request),
            )
        except LedgerError as exc:
            return ledger_error_response(exc)

        order = _orders_qs().get(pk=order.pk)
        return Response(PurchaseOrderSerializer(order).data, status=status.HTTP_201_CREATED)


class PurchaseOrderDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = PurchaseOrderSerializer

    @extend_schema(tags=["purchases"], responses=PurchaseOrderSerializer)
    def get(self, request, order_id):
        order = _orders_qs().filter(pk=order_id).first()
        if order is None:
            return ledger_error_response(NotFoundError(f"Order not found: {order_id}"))
        return Response(PurchaseOrderSerializer(order).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["purchases"], request=OrderEditSerializer, responses=PurchaseOrderSerializer)
    def patch(self, request, order_id):
        s = OrderEditSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            order = edit_order(
                order_id,
                order_date=data.get("order_date"),
                supplier_id=data.get("supplier_id"),
                total_amount=data.get("total_amount"),
                items=[dict(line) for line in data.get("items", [])],
                **request_actor(request),
            )
        except LedgerError as exc:
            return ledger_error_response(exc)

        order = _orders_qs().get(pk=order.pk)
        return Response(PurchaseOrderSerializer(order).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["purchases"], responses={204: None})
    def delete(self, request, order_id):
        try:
            delete_order(order_id, **request_actor(request))
        except LedgerError as exc:
            return ledger_error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)


class PurchaseOrderItemDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["purchases"], responses={204: None})
    def delete(self, request, item_id):
        try:
            delete_order_item(item_id, **request_actor(request))
        except LedgerError as exc:
            return ledger_error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)
