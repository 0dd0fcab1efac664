# products/models/product.py

"""
PRODUCT (REGISTRY ENTRY)

STOCK MODEL (IMPORTANT):
- in_stock is the authoritative running total for the product
- it must equal the sum of StockBatch.stock_left for the product
- mutated ONLY by the receiving service (credit) and the FIFO engine (debit)
- never edited through the API or admin
"""

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q, Sum

from .category import Category

PRODUCT_KEY_PREFIX = "PR"


class Product(models.Model):
    product_key = models.CharField(max_length=32, unique=True, null=True, blank=True)
    name = models.CharField(max_length=255, db_index=True)
    description = models.TextField(blank=True, default="")

    category = models.ForeignKey(
        Category,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="products",
    )

    price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    unit = models.CharField(max_length=32, blank=True, default="")

    warning_stock_level = models.DecimalField(
        max_digits=14,
        decimal_places=3,
        default=Decimal("0.000"),
        help_text="Stock strictly below this level is reported as low.",
    )

    in_stock = models.DecimalField(
        max_digits=14,
        decimal_places=3,
        default=Decimal("0.000"),
        help_text="Running stock total (service-managed only).",
    )

    created_at = models.DateTimeField()
    created_by = models.CharField(max_length=150)
    modified_at = models.DateTimeField()
    modified_by = models.CharField(max_length=150)

    class Meta:
        ordering = ["name", "id"]
        constraints = [
            models.CheckConstraint(
                condition=Q(in_stock__gte=0),
                name="chk_product_in_stock_gte_zero",
            ),
            models.CheckConstraint(
                condition=Q(price__gte=0),
                name="chk_product_price_gte_zero",
            ),
        ]

    def clean(self):
        if not (self.name or "").strip():
            raise ValidationError({"name": "name is required"})

        if self.price is not None and Decimal(self.price) < Decimal("0.00"):
            raise ValidationError({"price": "price cannot be negative"})

        if self.in_stock is not None and Decimal(self.in_stock) < Decimal("0"):
            raise ValidationError({"in_stock": "in_stock cannot be negative"})

    @staticmethod
    def key_for(pk: int) -> str:
        return f"{PRODUCT_KEY_PREFIX}{1000 + int(pk)}"

    @property
    def is_low_stock(self) -> bool:
        return Decimal(self.in_stock or 0) < Decimal(self.warning_stock_level or 0)

    @property
    def batch_stock_total(self) -> Decimal:
        total = self.stock_batches.aggregate(total=Sum("stock_left")).get("total")
        return Decimal(total or 0)

    def __str__(self):
        return f"{self.name} ({self.product_key or '-'})"
