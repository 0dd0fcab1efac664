# purchases/models.py

from decimal import Decimal, ROUND_HALF_UP

from django.core.exceptions import ValidationError
from django.db import models

from products.models.product import Product

TWOPLACES = Decimal("0.01")
ORDER_CODE_PREFIX = "OD"


def _money(v) -> Decimal:
    return Decimal(str(v or "0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


class Supplier(models.Model):
    """
    Supplier master.
    """

    name = models.CharField(max_length=200)
    contact = models.CharField(max_length=100, blank=True, default="")
    contact_person = models.CharField(max_length=200, blank=True, default="")
    address = models.TextField(blank=True, default="")

    created_at = models.DateTimeField()
    created_by = models.CharField(max_length=150)
    modified_at = models.DateTimeField()
    modified_by = models.CharField(max_length=150)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["name"], name="supplier_name_idx"),
        ]

    def clean(self):
        if not (self.name or "").strip():
            raise ValidationError({"name": "name is required"})

    def __str__(self):
        return self.name


class PurchaseOrder(models.Model):
    """
    Receipt event header.

    Receiving is performed by services (purchases/services/receiving_service.py):
    - one PurchaseOrderItem per received line
    - one StockBatch per PurchaseOrderItem (1:1, created together)
    - the order owns its items and batches (cascade delete)
    - deletion is refused once any of its batches has been sold from
    """

    order_code = models.CharField(max_length=32, unique=True, null=True, blank=True)
    order_date = models.DateField()

    supplier = models.ForeignKey(
        Supplier,
        on_delete=models.PROTECT,
        related_name="orders",
        null=True,
        blank=True,
    )

    total_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )

    created_at = models.DateTimeField()
    created_by = models.CharField(max_length=150)
    modified_at = models.DateTimeField()
    modified_by = models.CharField(max_length=150)

    class Meta:
        ordering = ["-order_date", "-id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total_amount__gte=Decimal("0.00")),
                name="purchase_order_total_nonnegative",
            ),
        ]
        indexes = [
            models.Index(fields=["order_date"], name="po_order_date_idx"),
            models.Index(fields=["supplier", "order_date"], name="po_supplier_date_idx"),
        ]

    @staticmethod
    def code_for(pk: int) -> str:
        return f"{ORDER_CODE_PREFIX}{1000 + int(pk)}"

    @property
    def lines_total(self) -> Decimal:
        return _money(sum((it.line_total for it in self.items.all()), Decimal("0.00")))

    def __str__(self):
        return f"{self.order_code or self.pk} ({self.order_date})"


class PurchaseOrderItem(models.Model):
    """
    One received line.

    The matching StockBatch is reachable as `item.batch`.
    """

    order = models.ForeignKey(
        PurchaseOrder,
        on_delete=models.CASCADE,
        related_name="items",
    )
    product = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,
        related_name="order_items",
    )

    quantity = models.DecimalField(max_digits=14, decimal_places=3)
    unit_cost = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )

    created_at = models.DateTimeField()
    created_by = models.CharField(max_length=150)
    modified_at = models.DateTimeField()
    modified_by = models.CharField(max_length=150)

    class Meta:
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gt=0),
                name="purchase_order_item_quantity_gt_zero",
            ),
            models.CheckConstraint(
                condition=models.Q(unit_cost__gte=Decimal("0.00")),
                name="purchase_order_item_unit_cost_nonnegative",
            ),
        ]
        indexes = [
            models.Index(fields=["order"], name="po_item_order_idx"),
            models.Index(fields=["product"], name="po_item_product_idx"),
        ]

    @property
    def line_total(self) -> Decimal:
        return _money(Decimal(str(self.quantity)) * Decimal(str(self.unit_cost)))

    def __str__(self):
        product_name = getattr(self.product, "name", "Product")
        return f"{product_name} x {self.quantity}"
