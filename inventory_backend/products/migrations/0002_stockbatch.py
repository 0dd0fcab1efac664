"""
======================================================
PATH: products/migrations/0002_stockbatch.py
======================================================
MIGRATION: CREATE StockBatch (RECEIPT-BASED LEDGER UNIT)

Notes:
- Needs purchases.PurchaseOrder / PurchaseOrderItem, hence its own step.
- 0 <= stock_left <= quantity_received is enforced by check constraints.
"""

from __future__ import annotations

from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    dependencies = [
        ("products", "0001_initial"),
        ("purchases", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="StockBatch",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "order_price",
                    models.DecimalField(
                        max_digits=12,
                        decimal_places=2,
                        help_text="Unit cost at receipt (immutable).",
                    ),
                ),
                (
                    "quantity_received",
                    models.DecimalField(
                        max_digits=14,
                        decimal_places=3,
                        help_text="Quantity received (immutable).",
                    ),
                ),
                (
                    "stock_left",
                    models.DecimalField(
                        max_digits=14,
                        decimal_places=3,
                        help_text="Remaining quantity (service-managed only).",
                    ),
                ),
                ("created_at", models.DateTimeField()),
                ("created_by", models.CharField(max_length=150)),
                ("modified_at", models.DateTimeField()),
                ("modified_by", models.CharField(max_length=150)),
                (
                    "order",
                    models.ForeignKey(
                        to="purchases.purchaseorder",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="batches",
                    ),
                ),
                (
                    "order_item",
                    models.OneToOneField(
                        to="purchases.purchaseorderitem",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="batch",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        to="products.product",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="stock_batches",
                    ),
                ),
            ],
            options={
                "ordering": ["id"],
            },
        ),
        migrations.AddIndex(
            model_name="stockbatch",
            index=models.Index(
                fields=["product", "stock_left"], name="stockbatch_product_left_idx"
            ),
        ),
        migrations.AddConstraint(
            model_name="stockbatch",
            constraint=models.CheckConstraint(
                condition=models.Q(quantity_received__gt=0),
                name="chk_stockbatch_qty_received_gt_zero",
            ),
        ),
        migrations.AddConstraint(
            model_name="stockbatch",
            constraint=models.CheckConstraint(
                condition=models.Q(stock_left__gte=0),
                name="chk_stockbatch_stock_left_gte_zero",
            ),
        ),
        migrations.AddConstraint(
            model_name="stockbatch",
            constraint=models.CheckConstraint(
                condition=models.Q(stock_left__lte=models.F("quantity_received")),
                name="chk_stockbatch_stock_left_lte_received",
            ),
        ),
    ]
