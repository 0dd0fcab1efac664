from .ledger_check import LedgerCheck, verify_all_products, verify_ledger
from .registry import (
    batch_stock_total,
    create_category,
    create_product,
    current_stock,
    delete_category,
    delete_product,
    edit_product,
    is_low,
    rename_category,
)
from .stock_fifo import allocate_fifo, reverse_sale_item

__all__ = [
    "allocate_fifo",
    "reverse_sale_item",
    "create_product",
    "edit_product",
    "delete_product",
    "current_stock",
    "is_low",
    "batch_stock_total",
    "create_category",
    "rename_category",
    "delete_category",
    "LedgerCheck",
    "verify_ledger",
    "verify_all_products",
]
