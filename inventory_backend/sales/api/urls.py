# sales/api/urls.py

"""
SALES API URLS

Rules:
- Explicit non-PK routes (like "items/<id>/") MUST be registered BEFORE router URLs,
  otherwise the router will treat "items" as a <pk>.

Provides:
    /api/sales/                   list / create
    /api/sales/<id>/              retrieve / patch (append lines) / delete
    /api/sales/<id>/allocate/     single-line FIFO allocation
    /api/sales/items/<id>/        delete = reversal
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from sales.api.viewsets.sale import SaleItemDetailView, SaleViewSet

router = SimpleRouter()
router.register(r"", SaleViewSet, basename="sales")

urlpatterns = [
    path("items/<int:item_id>/", SaleItemDetailView.as_view(), name="sales-item-detail"),
    path("", include(router.urls)),
]
