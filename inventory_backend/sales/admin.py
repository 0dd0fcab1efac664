# sales/admin.py

from django.contrib import admin

from products.admin import ReadOnlyAdminMixin
from sales.models import Sale, SaleItem


class SaleItemInline(ReadOnlyAdminMixin, admin.TabularInline):
    model = SaleItem
    extra = 0
    fields = ("product", "batch", "amount", "sale_price")
    readonly_fields = fields


@admin.register(Sale)
class SaleAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ("sale_code", "sale_date", "total_amount", "created_by")
    list_filter = ("sale_date",)
    search_fields = ("sale_code",)
    inlines = [SaleItemInline]
