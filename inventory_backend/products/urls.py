# products/urls.py

"""
PRODUCTS URLS

Purpose:
- Register product domain routes under /api/products/
    /api/products/                 products
    /api/products/{id}/stock/      stock read
    /api/products/categories/      categories
    /api/products/batches/         batch ledger (read-only)
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from products.views import CategoryViewSet, ProductViewSet, StockBatchViewSet

router = SimpleRouter()

# Registered before the r"" product routes so "categories"/"batches" are not read as a pk.
router.register(r"categories", CategoryViewSet, basename="categories")
router.register(r"batches", StockBatchViewSet, basename="stock-batches")
router.register(r"", ProductViewSet, basename="products")

urlpatterns = [
    path("", include(router.urls)),
]
