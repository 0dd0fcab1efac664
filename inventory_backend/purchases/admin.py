# purchases/admin.py

from django.contrib import admin

from products.admin import ReadOnlyAdminMixin
from purchases.models import PurchaseOrder, PurchaseOrderItem, Supplier


class PurchaseOrderItemInline(ReadOnlyAdminMixin, admin.TabularInline):
    model = PurchaseOrderItem
    extra = 0
    fields = ("product", "quantity", "unit_cost")
    readonly_fields = fields


@admin.register(PurchaseOrder)
class PurchaseOrderAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ("order_code", "order_date", "supplier", "total_amount", "created_by")
    list_filter = ("order_date", "supplier")
    search_fields = ("order_code", "supplier__name")
    inlines = [PurchaseOrderItemInline]


@admin.register(Supplier)
class SupplierAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ("name", "contact", "contact_person")
    search_fields = ("name", "contact_person")
