# products/models/stock_batch.py

"""
STOCK BATCH (RECEIPT-BASED LEDGER UNIT)

Represents ONE received lot of a product.

CANONICAL MODEL:
- created exactly once per PurchaseOrderItem, by the receiving service
- owned by its PurchaseOrder (cascade delete with the order)
- quantity_received is immutable after creation
- stock_left is mutated ONLY via services (FIFO debit / reversal credit)
- 0 <= stock_left <= quantity_received
- referenced (not owned) by SaleItem; a sold batch cannot be deleted
"""

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import F, Q

from .product import Product


class StockBatch(models.Model):
    product = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,
        related_name="stock_batches",
    )

    order = models.ForeignKey(
        "purchases.PurchaseOrder",
        on_delete=models.CASCADE,
        related_name="batches",
    )

    order_item = models.OneToOneField(
        "purchases.PurchaseOrderItem",
        on_delete=models.CASCADE,
        related_name="batch",
    )

    order_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text="Unit cost at receipt (immutable).",
    )

    quantity_received = models.DecimalField(
        max_digits=14,
        decimal_places=3,
        help_text="Quantity received (immutable).",
    )

    stock_left = models.DecimalField(
        max_digits=14,
        decimal_places=3,
        help_text="Remaining quantity (service-managed only).",
    )

    created_at = models.DateTimeField()
    created_by = models.CharField(max_length=150)
    modified_at = models.DateTimeField()
    modified_by = models.CharField(max_length=150)

    class Meta:
        ordering = ["id"]
        indexes = [
            models.Index(fields=["product", "stock_left"], name="stockbatch_product_left_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity_received__gt=0),
                name="chk_stockbatch_qty_received_gt_zero",
            ),
            models.CheckConstraint(
                condition=Q(stock_left__gte=0),
                name="chk_stockbatch_stock_left_gte_zero",
            ),
            models.CheckConstraint(
                condition=Q(stock_left__lte=F("quantity_received")),
                name="chk_stockbatch_stock_left_lte_received",
            ),
        ]

    # -------------------------------------------------
    # VALIDATION
    # -------------------------------------------------

    def clean(self):
        if self.quantity_received is None or self.quantity_received <= 0:
            raise ValidationError(
                {"quantity_received": "quantity_received must be greater than zero"}
            )

        if self.stock_left is None or self.stock_left < 0:
            raise ValidationError({"stock_left": "stock_left cannot be negative"})

        if self.stock_left > self.quantity_received:
            raise ValidationError(
                {"stock_left": "stock_left cannot exceed quantity_received"}
            )

        if self.order_price is not None and self.order_price < Decimal("0.00"):
            raise ValidationError({"order_price": "order_price cannot be negative"})

    # -------------------------------------------------
    # IMMUTABILITY
    # -------------------------------------------------

    def save(self, *args, **kwargs):
        if not self._state.adding:
            original = StockBatch.objects.only(
                "quantity_received", "order_price", "product_id"
            ).get(pk=self.pk)

            if self.quantity_received != original.quantity_received:
                raise ValidationError({"quantity_received": "quantity_received is immutable"})

            if self.order_price != original.order_price:
                raise ValidationError({"order_price": "order_price is immutable"})

            if self.product_id != original.product_id:
                raise ValidationError({"product": "product is immutable"})

        self.full_clean(exclude=["product", "order", "order_item"])
        super().save(*args, **kwargs)

    @property
    def is_depleted(self) -> bool:
        return Decimal(self.stock_left or 0) <= 0

    @property
    def quantity_sold(self) -> Decimal:
        return Decimal(self.quantity_received or 0) - Decimal(self.stock_left or 0)

    @property
    def total_remaining_value(self) -> Decimal:
        return Decimal(self.order_price or 0) * Decimal(self.stock_left or 0)

    def __str__(self):
        product_name = getattr(self.product, "name", "Product")
        return f"{product_name} | Batch {self.pk} | {self.stock_left}/{self.quantity_received}"
