"""
======================================================
PATH: purchases/migrations/0001_initial.py
======================================================
MIGRATION: CREATE Supplier + PurchaseOrder + PurchaseOrderItem
"""

from __future__ import annotations

from decimal import Decimal

from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("products", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Supplier",
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
                ("name", models.CharField(max_length=200)),
                ("contact", models.CharField(max_length=100, blank=True, default="")),
                (
                    "contact_person",
                    models.CharField(max_length=200, blank=True, default=""),
                ),
                ("address", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField()),
                ("created_by", models.CharField(max_length=150)),
                ("modified_at", models.DateTimeField()),
                ("modified_by", models.CharField(max_length=150)),
            ],
            options={
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="PurchaseOrder",
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
                    "order_code",
                    models.CharField(max_length=32, unique=True, null=True, blank=True),
                ),
                ("order_date", models.DateField()),
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
                (
                    "supplier",
                    models.ForeignKey(
                        to="purchases.supplier",
                        on_delete=django.db.models.deletion.PROTECT,
                        null=True,
                        blank=True,
                        related_name="orders",
                    ),
                ),
            ],
            options={
                "ordering": ["-order_date", "-id"],
            },
        ),
        migrations.CreateModel(
            name="PurchaseOrderItem",
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
                ("quantity", models.DecimalField(max_digits=14, decimal_places=3)),
                (
                    "unit_cost",
                    models.DecimalField(
                        max_digits=12, decimal_places=2, default=Decimal("0.00")
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
                        related_name="items",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        to="products.product",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="order_items",
                    ),
                ),
            ],
            options={
                "ordering": ["id"],
            },
        ),
        migrations.AddIndex(
            model_name="supplier",
            index=models.Index(fields=["name"], name="supplier_name_idx"),
        ),
        migrations.AddIndex(
            model_name="purchaseorder",
            index=models.Index(fields=["order_date"], name="po_order_date_idx"),
        ),
        migrations.AddIndex(
            model_name="purchaseorder",
            index=models.Index(
                fields=["supplier", "order_date"], name="po_supplier_date_idx"
            ),
        ),
        migrations.AddConstraint(
            model_name="purchaseorder",
            constraint=models.CheckConstraint(
                condition=models.Q(total_amount__gte=Decimal("0.00")),
                name="purchase_order_total_nonnegative",
            ),
        ),
        migrations.AddIndex(
            model_name="purchaseorderitem",
            index=models.Index(fields=["order"], name="po_item_order_idx"),
        ),
        migrations.AddIndex(
            model_name="purchaseorderitem",
            index=models.Index(fields=["product"], name="po_item_product_idx"),
        ),
        migrations.AddConstraint(
            model_name="purchaseorderitem",
            constraint=models.CheckConstraint(
                condition=models.Q(quantity__gt=0),
                name="purchase_order_item_quantity_gt_zero",
            ),
        ),
        migrations.AddConstraint(
            model_name="purchaseorderitem",
            constraint=models.CheckConstraint(
                condition=models.Q(unit_cost__gte=Decimal("0.00")),
                name="purchase_order_item_unit_cost_nonnegative",
            ),
        ),
    ]
