# purchases/api/urls.py

from django.urls import path

from purchases.api.views import (
    PurchaseOrderDetailView,
    PurchaseOrderItemDetailView,
    PurchaseOrderListCreateView,
    SupplierDetailView,
    SupplierListCreateView,
)

urlpatterns = [
    path("suppliers/", SupplierListCreateView.as_view(), name="purchase-suppliers"),
    path(
        "suppliers/<int:supplier_id>/",
        SupplierDetailView.as_view(),
        name="purchase-supplier-detail",
    ),
    path("orders/", PurchaseOrderListCreateView.as_view(), name="purchase-orders"),
    path(
        "orders/<int:order_id>/",
        PurchaseOrderDetailView.as_view(),
        name="purchase-order-detail",
    ),
    path(
        "order-items/<int:item_id>/",
        PurchaseOrderItemDetailView.as_view(),
        name="purchase-order-item-detail",
    ),
]
