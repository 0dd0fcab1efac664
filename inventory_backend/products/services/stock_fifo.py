# products/services/stock_fifo.py

"""
FIFO ALLOCATION ENGINE

Purpose:
- Consume stock for a sale from the oldest batches first, splitting one
  request across several batches when no single batch holds enough.
- Reverse a single SaleItem back into its originating batch.

Canonical flow (allocate_fifo):
1) quantity must be > 0
2) lock the Sale row, then the Product row
3) fast-path guard: quantity > Product.in_stock -> OutOfStockError
4) lock candidate batches (stock_left > 0), oldest receipt first, ties by id
5) per batch: take = min(remaining, stock_left), one SaleItem, debit the batch
6) batches exhausted with quantity still open -> OutOfStockError
7) single Product.in_stock decrement by the full quantity
8) one CREATE activity entry per SaleItem
9) Sale.total_amount recomputed from its items

GUARANTEES:
- Everything runs in one transaction. Any failure (including step 6, after
  SaleItems were already written) rolls back every row touched by the call.
- Lock order is Sale -> Product -> batches -> SaleItem, for allocation
  and reversal alike.
- Product.in_stock is a fast-path cache. Batch sums are ground truth for
  allocation; a disagreement is logged, never "fixed" here.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.db import transaction

from activity.models import ActivityLog
from activity.services import record_activity
from core.audit import AuditStamp
from core.exceptions import NotFoundError, OutOfStockError
from core.quantities import TWOPLACES, ZERO, money, positive_qty
from products.models import Product, StockBatch
from sales.models import Sale, SaleItem

logger = logging.getLogger(__name__)


# ============================================================
# HELPERS
# ============================================================

def _sale_item_description(item: SaleItem) -> str:
    return (
        f"SaleItem ID {item.pk} Product {item.product.name} "
        f"Amount {item.amount} Price {item.sale_price}"
    )


def _lock_product(product_id) -> Product:
    try:
        return Product.objects.select_for_update().get(pk=product_id)
    except (Product.DoesNotExist, ValueError, TypeError) as exc:
        raise NotFoundError(f"Product not found: {product_id}") from exc


def _lock_sale(sale) -> Sale:
    sale_id = getattr(sale, "pk", sale)
    try:
        return Sale.objects.select_for_update().get(pk=sale_id)
    except (Sale.DoesNotExist, ValueError, TypeError) as exc:
        raise NotFoundError(f"Sale not found: {sale_id}") from exc


def _sale_item_refs(sale_item_id) -> tuple:
    """
    (sale_id, product_id, batch_id) of a SaleItem, read without a lock.
    """
    try:
        return SaleItem.objects.values_list("sale_id", "product_id", "batch_id").get(
            pk=sale_item_id
        )
    except (SaleItem.DoesNotExist, ValueError, TypeError) as exc:
        raise NotFoundError(f"Sale item not found: {sale_item_id}") from exc


def _lock_sale_item(sale_item_id) -> SaleItem:
    try:
        return (
            SaleItem.objects.select_for_update(of=("self",))
            .select_related("product")
            .get(pk=sale_item_id)
        )
    except SaleItem.DoesNotExist as exc:
        raise NotFoundError(f"Sale item not found: {sale_item_id}") from exc


def _candidate_batches(product: Product) -> list[StockBatch]:
    """
    Oldest receipt first; batch id breaks ties within a receipt date.
    """
    return list(
        StockBatch.objects.select_for_update(of=("self",))
        .filter(product=product, stock_left__gt=0)
        .order_by("order__order_date", "id")
    )


def _warn_on_drift(product: Product) -> None:
    batch_total = product.batch_stock_total
    if batch_total != Decimal(product.in_stock):
        logger.error(
            "Ledger mismatch: product stock differs from batch total",
            extra={
                "product_id": product.pk,
                "in_stock": str(product.in_stock),
                "batch_total": str(batch_total),
            },
        )


def recompute_sale_total(sale: Sale, *, stamp: AuditStamp) -> Sale:
    total = ZERO
    for amount, price in sale.items.values_list("amount", "sale_price"):
        total += Decimal(amount) * Decimal(price)

    sale.total_amount = total.quantize(TWOPLACES)
    stamp.apply_modified(sale)
    sale.save(update_fields=["total_amount", *AuditStamp.modified_fields()])
    return sale


# ============================================================
# FIFO ALLOCATION
# ============================================================

@transaction.atomic
def allocate_fifo(*, sale, product_id, quantity, unit_price, actor, now) -> list[SaleItem]:
    """
    Allocate `quantity` of a product to a sale, oldest batches first.

    Returns the SaleItems created (one per batch drawn from).
    """
    stamp = AuditStamp.of(actor=actor, now=now)

    requested = positive_qty(quantity, field_name="quantity")
    price = money(unit_price, field_name="unit_price")

    sale = _lock_sale(sale)
    product = _lock_product(product_id)

    in_stock = Decimal(product.in_stock or 0)
    if requested > in_stock:
        raise OutOfStockError(product.name, requested, in_stock)

    remaining = requested
    items = []

    for batch in _candidate_batches(product):
        if remaining <= ZERO:
            break

        take = min(remaining, Decimal(batch.stock_left))

        item = stamp.apply_created(
            SaleItem(
                sale=sale,
                product=product,
                batch=batch,
                amount=take,
                sale_price=price,
            )
        )
        item.save()
        items.append(item)

        batch.stock_left = Decimal(batch.stock_left) - take
        stamp.apply_modified(batch)
        batch.save(update_fields=["stock_left", *AuditStamp.modified_fields()])

        remaining -= take

    if remaining > ZERO:
        # Product total claimed enough, batches did not.
        logger.error(
            "Batch stock exhausted before product stock",
            extra={
                "product_id": product.pk,
                "requested": str(requested),
                "unfulfilled": str(remaining),
                "in_stock": str(in_stock),
            },
        )
        raise OutOfStockError(product.name, remaining, in_stock)

    product.in_stock = in_stock - requested
    stamp.apply_modified(product)
    product.save(update_fields=["in_stock", *AuditStamp.modified_fields()])

    for item in items:
        record_activity(
            activity=ActivityLog.Activity.CREATE,
            description=_sale_item_description(item),
            actor=stamp.actor,
            timestamp=stamp.at,
        )

    recompute_sale_total(sale, stamp=stamp)
    _warn_on_drift(product)

    logger.info(
        "FIFO allocation complete",
        extra={
            "sale_id": sale.pk,
            "product_id": product.pk,
            "quantity": str(requested),
            "batches": [item.batch_id for item in items],
        },
    )
    return items


# ============================================================
# REVERSAL
# ============================================================

@transaction.atomic
def reverse_sale_item(*, sale_item_id, actor, now) -> None:
    """
    Credit a SaleItem's amount back to its batch and product, then delete it.

    The item is read twice: once unlocked to learn which rows to lock, and
    again under lock once those are held. A concurrent reversal that won the
    locks has already deleted it, so the second read raises NotFoundError
    instead of crediting the amount a second time.
    """
    stamp = AuditStamp.of(actor=actor, now=now)

    sale_id, product_id, batch_id = _sale_item_refs(sale_item_id)

    sale = _lock_sale(sale_id)
    product = _lock_product(product_id)
    batch = StockBatch.objects.select_for_update().get(pk=batch_id)
    item = _lock_sale_item(sale_item_id)

    amount = Decimal(item.amount)

    # stock_left <= quantity_received is enforced by StockBatch.save()
    batch.stock_left = Decimal(batch.stock_left) + amount
    stamp.apply_modified(batch)
    batch.save(update_fields=["stock_left", *AuditStamp.modified_fields()])

    product.in_stock = Decimal(product.in_stock) + amount
    stamp.apply_modified(product)
    product.save(update_fields=["in_stock", *AuditStamp.modified_fields()])

    description = _sale_item_description(item)
    item.delete()

    record_activity(
        activity=ActivityLog.Activity.DELETE,
        description=description,
        actor=stamp.actor,
        timestamp=stamp.at,
    )

    recompute_sale_total(sale, stamp=stamp)

    logger.info(
        "Sale item reversed",
        extra={
            "sale_item_id": sale_item_id,
            "batch_id": batch.pk,
            "product_id": product.pk,
            "amount": str(amount),
        },
    )

