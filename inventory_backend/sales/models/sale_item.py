# sales/models/sale_item.py

"""
SALE ITEM (ONE BATCH DRAW)

Represents the quantity taken from ONE StockBatch for a sale.

Notes:
- One "sell N of product P" request may produce several SaleItems
  when no single batch holds enough stock (FIFO split).
- The batch reference is non-owning: the batch belongs to its PurchaseOrder.
- Rows are created by allocate_fifo() and removed by reverse_sale_item();
  both keep StockBatch.stock_left and Product.in_stock in step.
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models

from products.models import Product, StockBatch

from .sale import Sale


class SaleItem(models.Model):
    sale = models.ForeignKey(
        Sale,
        on_delete=models.PROTECT,
        related_name="items",
    )

    product = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,
        related_name="sale_items",
    )

    batch = models.ForeignKey(
        StockBatch,
        on_delete=models.PROTECT,
        related_name="sale_items",
    )

    amount = models.DecimalField(max_digits=14, decimal_places=3)

    sale_price = models.DecimalField(max_digits=12, decimal_places=2)

    created_at = models.DateTimeField()
    created_by = models.CharField(max_length=150)
    modified_at = models.DateTimeField()
    modified_by = models.CharField(max_length=150)

    class Meta:
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gt=0),
                name="chk_saleitem_amount_gt_zero",
            ),
            models.CheckConstraint(
                condition=models.Q(sale_price__gte=0),
                name="chk_saleitem_sale_price_gte_zero",
            ),
        ]
        indexes = [
            models.Index(fields=["sale"], name="saleitem_sale_idx"),
            models.Index(fields=["product"], name="saleitem_product_idx"),
            models.Index(fields=["batch"], name="saleitem_batch_idx"),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("SaleItem records are immutable")

        if self.batch_id and self.product_id:
            batch_product_id = (
                StockBatch.objects.filter(pk=self.batch_id)
                .values_list("product_id", flat=True)
                .first()
            )
            if batch_product_id != self.product_id:
                raise ValidationError("Batch does not belong to product")

        super().save(*args, **kwargs)

    @property
    def line_total(self) -> Decimal:
        return Decimal(self.amount or 0) * Decimal(self.sale_price or 0)

    def __str__(self):
        return f"{self.product} x {self.amount} (batch {self.batch_id})"
