# products/services/ledger_check.py

"""
LEDGER CONSISTENCY CHECK

Product.in_stock must equal the sum of StockBatch.stock_left for the product.

Mismatches are reported (ERROR log) and returned to the caller.
Nothing here writes: a drifted ledger is a defect to investigate,
not something to overwrite.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from django.db.models import DecimalField, Sum, Value
from django.db.models.functions import Coalesce

from products.models import Product

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LedgerCheck:
    product_id: int
    in_stock: Decimal
    batch_total: Decimal
    ok: bool

    @property
    def difference(self) -> Decimal:
        return self.in_stock - self.batch_total


def _report(check: LedgerCheck) -> LedgerCheck:
    if not check.ok:
        logger.error(
            "Stock ledger mismatch",
            extra={
                "product_id": check.product_id,
                "in_stock": str(check.in_stock),
                "batch_total": str(check.batch_total),
            },
        )
    return check


def verify_ledger(product: Product) -> LedgerCheck:
    in_stock = Decimal(product.in_stock or 0)
    batch_total = product.batch_stock_total
    return _report(
        LedgerCheck(
            product_id=product.pk,
            in_stock=in_stock,
            batch_total=batch_total,
            ok=in_stock == batch_total,
        )
    )


def verify_all_products() -> list[LedgerCheck]:
    """
    One aggregate query for the whole catalogue.
    """
    rows = Product.objects.annotate(
        batch_total=Coalesce(
            Sum("stock_batches__stock_left"),
            Value(Decimal("0")),
            output_field=DecimalField(max_digits=14, decimal_places=3),
        )
    ).order_by("pk")

    results = []
    for product in rows:
        in_stock = Decimal(product.in_stock or 0)
        batch_total = Decimal(product.batch_total or 0)
        results.append(
            _report(
                LedgerCheck(
                    product_id=product.pk,
                    in_stock=in_stock,
                    batch_total=batch_total,
                    ok=in_stock == batch_total,
                )
            )
        )
    return results
