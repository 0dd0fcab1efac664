# products/admin.py
"""
=====================================================
PATH: products/admin.py
=====================================================

Admin rules (ledger-safe):

- The admin is a viewer for the stock ledger.
- Products, categories and batches are written ONLY through the services
  (API), so every change carries an actor and an activity entry.
- StockBatch rows are shown inline under their product, read-only.
"""

from __future__ import annotations

from django.contrib import admin

from products.models import Category, Product, StockBatch


class ReadOnlyAdminMixin:
    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


class StockBatchInline(ReadOnlyAdminMixin, admin.TabularInline):
    model = StockBatch
    extra = 0
    fields = ("order", "order_price", "quantity_received", "stock_left", "created_at")
    readonly_fields = fields
    ordering = ("order__order_date", "id")
    show_change_link = True


@admin.register(Product)
class ProductAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = (
        "product_key",
        "name",
        "category",
        "price",
        "in_stock",
        "warning_stock_level",
        "low_stock",
    )
    list_filter = ("category",)
    search_fields = ("name", "product_key")
    inlines = [StockBatchInline]

    @admin.display(boolean=True, description="Low")
    def low_stock(self, obj):
        return obj.is_low_stock


@admin.register(Category)
class CategoryAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ("name", "created_by", "created_at")
    search_fields = ("name",)


@admin.register(StockBatch)
class StockBatchAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ("id", "product", "order", "order_price", "quantity_received", "stock_left")
    list_filter = ("product",)
    search_fields = ("product__name", "order__order_code")
    list_select_related = ("product", "order")
