# sales/models/sale.py

from decimal import Decimal

from django.db import models

SALE_CODE_PREFIX = "SL"


class Sale(models.Model):
    """
    Consumption event header.

    GUARANTEES:
    - Stock is mutated ONLY via the FIFO service (products/services/stock_fifo.py)
    - total_amount is derived from its SaleItems (recomputed on allocate/reverse)
    - A sale is deleted only after each of its items has been reversed
    """

    sale_code = models.CharField(max_length=32, unique=True, null=True, blank=True)
    sale_date = models.DateField()

    total_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )

    created_at = models.DateTimeField()
    created_by = models.CharField(max_length=150)
    modified_at = models.DateTimeField()
    modified_by = models.CharField(max_length=150)

    class Meta:
        ordering = ["-sale_date", "-id"]
        indexes = [
            models.Index(fields=["sale_date"], name="sale_date_idx"),
        ]

    @staticmethod
    def code_for(pk: int) -> str:
        return f"{SALE_CODE_PREFIX}{1000 + int(pk)}"

    def __str__(self):
        return f"{self.sale_code or self.pk} ({self.sale_date})"
