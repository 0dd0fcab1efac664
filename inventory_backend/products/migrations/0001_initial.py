"""
======================================================
PATH: products/migrations/0001_initial.py
======================================================
MIGRATION: CREATE Category + Product (REGISTRY)

Notes:
- StockBatch depends on purchases and is created in 0002.
"""

from __future__ import annotations

from decimal import Decimal

from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Category",
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
                ("name", models.CharField(max_length=120, unique=True)),
                ("created_at", models.DateTimeField()),
                ("created_by", models.CharField(max_length=150)),
                ("modified_at", models.DateTimeField()),
                ("modified_by", models.CharField(max_length=150)),
            ],
            options={
                "ordering": ["name"],
                "verbose_name_plural": "categories",
            },
        ),
        migrations.CreateModel(
            name="Product",
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
                    "product_key",
                    models.CharField(max_length=32, unique=True, null=True, blank=True),
                ),
                ("name", models.CharField(max_length=255, db_index=True)),
                ("description", models.TextField(blank=True, default="")),
                (
                    "price",
                    models.DecimalField(
                        max_digits=12, decimal_places=2, default=Decimal("0.00")
                    ),
                ),
                ("unit", models.CharField(max_length=32, blank=True, default="")),
                (
                    "warning_stock_level",
                    models.DecimalField(
                        max_digits=14,
                        decimal_places=3,
                        default=Decimal("0.000"),
                        help_text="Stock strictly below this level is reported as low.",
                    ),
                ),
                (
                    "in_stock",
                    models.DecimalField(
                        max_digits=14,
                        decimal_places=3,
                        default=Decimal("0.000"),
                        help_text="Running stock total (service-managed only).",
                    ),
                ),
                ("created_at", models.DateTimeField()),
                ("created_by", models.CharField(max_length=150)),
                ("modified_at", models.DateTimeField()),
                ("modified_by", models.CharField(max_length=150)),
                (
                    "category",
                    models.ForeignKey(
                        to="products.category",
                        on_delete=django.db.models.deletion.SET_NULL,
                        null=True,
                        blank=True,
                        related_name="products",
                    ),
                ),
            ],
            options={
                "ordering": ["name", "id"],
            },
        ),
        migrations.AddConstraint(
            model_name="product",
            constraint=models.CheckConstraint(
                condition=models.Q(in_stock__gte=0),
                name="chk_product_in_stock_gte_zero",
            ),
        ),
        migrations.AddConstraint(
            model_name="product",
            constraint=models.CheckConstraint(
                condition=models.Q(price__gte=0),
                name="chk_product_price_gte_zero",
            ),
        ),
    ]
