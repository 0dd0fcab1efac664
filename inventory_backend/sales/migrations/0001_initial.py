"""
======================================================
PATH: sales/migrations/0001_initial.py
======================================================
MIGRATION: CREATE Sale + SaleItem (FIFO BATCH DRAWS)
"""

from __future__ import annotations

from decimal import Decimal

from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("products", "0002_stockbatch"),
    ]

    operations = [
        migrations.CreateModel(
            name="Sale",
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
                    "sale_code",
                    models.CharField(max_length=32, unique=True, null=True, blank=True),
                ),
                ("sale_date", models.DateField()),
                (
                    "total_amount",
                    models.DecimalField(
                        max_digits=14, decimal_places=2, default=Decimal("0.00")
                    ),
                ),
                ("created_at", models.DateTimeField()),
                ("created_by", models.CharField(max_length=150)),
                ("modified_at", models.DateTimeField()),
                ("modified_by", models.CharField(max_length=150)),
            ],
            options={
                "ordering": ["-sale_date", "-id"],
            },
        ),
        migrations.CreateModel(
            name="SaleItem",
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
                ("amount", models.DecimalField(max_digits=14, decimal_places=3)),
                ("sale_price", models.DecimalField(max_digits=12, decimal_places=2)),
                ("created_at", models.DateTimeField()),
                ("created_by", models.CharField(max_length=150)),
                ("modified_at", models.DateTimeField()),
                ("modified_by", models.CharField(max_length=150)),
                (
                    "batch",
                    models.ForeignKey(
                        to="products.stockbatch",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="sale_items",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        to="products.product",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="sale_items",
                    ),
                ),
                (
                    "sale",
                    models.ForeignKey(
                        to="sales.sale",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="items",
                    ),
                ),
            ],
            options={
                "ordering": ["id"],
            },
        ),
        migrations.AddIndex(
            model_name="sale",
            index=models.Index(fields=["sale_date"], name="sale_date_idx"),
        ),
        migrations.AddIndex(
            model_name="saleitem",
            index=models.Index(fields=["sale"], name="saleitem_sale_idx"),
        ),
        migrations.AddIndex(
            model_name="saleitem",
            index=models.Index(fields=["product"], name="saleitem_product_idx"),
        ),
        migrations.AddIndex(
            model_name="saleitem",
            index=models.Index(fields=["batch"], name="saleitem_batch_idx"),
        ),
        migrations.AddConstraint(
            model_name="saleitem",
            constraint=models.CheckConstraint(
                condition=models.Q(amount__gt=0),
                name="chk_saleitem_amount_gt_zero",
            ),
        ),
        migrations.AddConstraint(
            model_name="saleitem",
            constraint=models.CheckConstraint(
                condition=models.Q(sale_price__gte=0),
                name="chk_saleitem_sale_price_gte_zero",
            ),
        ),
    ]
