"""
SALES MODELS PACKAGE EXPORTS
"""

from .sale import Sale
from .sale_item import SaleItem

__all__ = ["Sale", "SaleItem"]
