"""
Products models export surface.
"""

from .category import Category
from .product import Product
from .stock_batch import StockBatch

__all__ = ["Category", "Product", "StockBatch"]
