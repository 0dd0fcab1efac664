# products/serializers/__init__.py

from .category import CategorySerializer
from .product import ProductCreateSerializer, ProductSerializer, ProductUpdateSerializer
from .stock_batch import StockBatchSerializer

__all__ = [
    "CategorySerializer",
    "ProductSerializer",
    "ProductCreateSerializer",
    "ProductUpdateSerializer",
    "StockBatchSerializer",
]
