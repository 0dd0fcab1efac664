from .sale import SaleSerializer
from .sale_command import SaleCreateSerializer, SaleLineSerializer, SaleUpdateSerializer
from .sale_item import SaleItemSerializer

__all__ = [
    "SaleSerializer",
    "SaleItemSerializer",
    "SaleCreateSerializer",
    "SaleLineSerializer",
    "SaleUpdateSerializer",
]
