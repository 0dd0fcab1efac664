from .receiving_service import delete_order, delete_order_item, edit_order, receive
from .supplier_service import create_supplier, delete_supplier, edit_supplier

__all__ = [
    "receive",
    "edit_order",
    "delete_order",
    "delete_order_item",
    "create_supplier",
    "edit_supplier",
    "delete_supplier",
]
