# purchases/services/receiving_service.py

"""
======================================================
PATH: purchases/services/receiving_service.py
======================================================
ORDER / RECEIPT SERVICE

Receive a PurchaseOrder atomically:

Canonical flow:
1) Validate lines (quantity > 0, unit_cost >= 0, known products)
2) Lock the products (id order)
3) Create the order header + order code (OD<1000+id>)
4) For each line: PurchaseOrderItem + StockBatch (stock_left = quantity)
5) Credit Product.in_stock (unless credit_stock=False)
6) One CREATE activity entry for the order

credit_stock=False exists for the initial-stock path: the product was created
with in_stock already set, and a synthetic order is generated so the batch
ledger matches it. Crediting again would double count.

Deletion rule:
- An order (or a single line) whose batch has been drawn from by a sale is
  NOT deleted. Cascading would orphan sale history -> ConflictError.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.db import transaction

from activity.models import ActivityLog
from activity.services import record_activity
from core.audit import AuditStamp
from core.exceptions import ConflictError, InvalidArgumentError, NotFoundError
from core.quantities import money, positive_qty
from products.models import Product, StockBatch
from purchases.models import PurchaseOrder, PurchaseOrderItem, Supplier

logger = logging.getLogger(__name__)


# ============================================================
# HELPERS
# ============================================================

def _order_description(order: PurchaseOrder) -> str:
    return f"Order ID {order.pk} Date {order.order_date}"


def _item_description(item: PurchaseOrderItem) -> str:
    return (
        f"OrderItem ID {item.pk} Product {item.product.name} "
        f"Amount {item.quantity} Cost {item.unit_cost}"
    )


def _get_supplier(supplier_id):
    if supplier_id in (None, ""):
        return None
    try:
        return Supplier.objects.get(pk=supplier_id)
    except (Supplier.DoesNotExist, ValueError, TypeError) as exc:
        raise NotFoundError(f"Supplier not found: {supplier_id}") from exc


def _normalize_lines(items) -> list[dict]:
    """
    Accepts mappings {product_id, quantity, unit_cost}.
    """
    lines = []
    for idx, raw in enumerate(items or []):
        if not isinstance(raw, dict):
            raise InvalidArgumentError(f"Line {idx + 1}: items must be objects")

        product_id = raw.get("product_id")
        if product_id in (None, ""):
            raise InvalidArgumentError(f"Line {idx + 1}: product_id is required")

        lines.append(
            {
                "product_id": product_id,
                "quantity": positive_qty(raw.get("quantity"), field_name="quantity"),
                "unit_cost": money(raw.get("unit_cost", "0"), field_name="unit_cost"),
            }
        )
    return lines


def _lock_products(product_ids) -> dict:
    """
    Lock every product touched by the operation, in id order.
    """
    wanted = set()
    for pid in product_ids:
        try:
            wanted.add(int(pid))
        except (TypeError, ValueError) as exc:
            raise NotFoundError(f"Product not found: {pid}") from exc

    locked = {
        p.pk: p
        for p in Product.objects.select_for_update().filter(pk__in=wanted).order_by("pk")
    }

    missing = sorted(wanted - set(locked))
    if missing:
        raise NotFoundError(f"Product not found: {missing[0]}")

    return locked


def _receive_line(*, order, product, quantity, unit_cost, credit_stock, stamp):
    item = stamp.apply_created(
        PurchaseOrderItem(
            order=order,
            product=product,
            quantity=quantity,
            unit_cost=unit_cost,
        )
    )
    item.save()

    batch = stamp.apply_created(
        StockBatch(
            product=product,
            order=order,
            order_item=item,
            order_price=unit_cost,
            quantity_received=quantity,
            stock_left=quantity,
        )
    )
    batch.save()

    if credit_stock:
        product.in_stock = Decimal(product.in_stock or 0) + quantity
        stamp.apply_modified(product)
        product.save(update_fields=["in_stock", *AuditStamp.modified_fields()])

    return item


def _debit_unsold_batch(*, batch: StockBatch, product: Product, stamp: AuditStamp) -> None:
    """
    Remove an unsold batch's remaining quantity from its (locked) product total.
    """
    if batch.sale_items.exists() or batch.stock_left < batch.quantity_received:
        raise ConflictError(
            f"Batch {batch.pk} of order {batch.order.order_code} has recorded sales; "
            "reverse those sales before deleting the order."
        )

    remaining = Decimal(batch.stock_left or 0)

    if Decimal(product.in_stock or 0) < remaining:
        logger.error(
            "Ledger mismatch while deleting batch",
            extra={
                "product_id": product.pk,
                "batch_id": batch.pk,
                "in_stock": str(product.in_stock),
                "stock_left": str(remaining),
            },
        )
        raise ConflictError(
            f"Deleting batch {batch.pk} would drive stock of '{product.name}' below zero "
            f"(in stock {product.in_stock}, batch holds {remaining})."
        )

    product.in_stock = Decimal(product.in_stock) - remaining
    stamp.apply_modified(product)
    product.save(update_fields=["in_stock", *AuditStamp.modified_fields()])


def _locked_order(order_id) -> PurchaseOrder:
    try:
        return PurchaseOrder.objects.select_for_update().get(pk=order_id)
    except (PurchaseOrder.DoesNotExist, ValueError, TypeError) as exc:
        raise NotFoundError(f"Order not found: {order_id}") from exc


def _locked_batches(order: PurchaseOrder):
    products = _lock_products(order.batches.values_list("product_id", flat=True))
    batches = list(
        StockBatch.objects.select_for_update()
        .select_related("order")
        .filter(order=order)
        .order_by("pk")
    )
    return batches, products


# ============================================================
# RECEIVE
# ============================================================

@transaction.atomic
def receive(
    *,
    order_date,
    items,
    actor,
    now,
    supplier_id=None,
    credit_stock: bool = True,
    total_amount=None,
) -> PurchaseOrder:
    """
    RECEIVE ORDER (atomic)

    Returns the saved PurchaseOrder (items and batches created).
    """
    stamp = AuditStamp.of(actor=actor, now=now)

    if order_date is None:
        raise InvalidArgumentError("order_date is required")

    supplier = _get_supplier(supplier_id)
    lines = _normalize_lines(items)
    products = _lock_products(line["product_id"] for line in lines)

    order = stamp.apply_created(
        PurchaseOrder(
            order_date=order_date,
            supplier=supplier,
            total_amount=Decimal("0.00"),
        )
    )
    order.save()
    order.order_code = PurchaseOrder.code_for(order.pk)

    for line in lines:
        _receive_line(
            order=order,
            product=products[int(line["product_id"])],
            quantity=line["quantity"],
            unit_cost=line["unit_cost"],
            credit_stock=credit_stock,
            stamp=stamp,
        )

    order.total_amount = (
        money(total_amount, field_name="total_amount")
        if total_amount is not None
        else order.lines_total
    )
    order.save(update_fields=["order_code", "total_amount"])

    record_activity(
        activity=ActivityLog.Activity.CREATE,
        description=_order_description(order),
        actor=stamp.actor,
        timestamp=stamp.at,
    )

    logger.info(
        "Order received",
        extra={
            "order_id": order.pk,
            "order_code": order.order_code,
            "lines": len(lines),
            "credit_stock": credit_stock,
        },
    )
    return order


# ============================================================
# EDIT (header + appended lines)
# ============================================================

@transaction.atomic
def edit_order(
    order_id,
    *,
    actor,
    now,
    order_date=None,
    supplier_id=None,
    total_amount=None,
    items=None,
) -> PurchaseOrder:
    """
    Header edits plus appended lines.

    Existing lines are never rewritten: their batches may already be sold from.
    New lines always credit stock.
    """
    stamp = AuditStamp.of(actor=actor, now=now)
    order = _locked_order(order_id)

    if order_date is not None:
        order.order_date = order_date

    if supplier_id not in (None, ""):
        order.supplier = _get_supplier(supplier_id)

    lines = _normalize_lines(items)
    products = _lock_products(line["product_id"] for line in lines)

    for line in lines:
        _receive_line(
            order=order,
            product=products[int(line["product_id"])],
            quantity=line["quantity"],
            unit_cost=line["unit_cost"],
            credit_stock=True,
            stamp=stamp,
        )

    if total_amount is not None:
        order.total_amount = money(total_amount, field_name="total_amount")
    elif lines:
        order.total_amount = order.lines_total

    stamp.apply_modified(order)
    order.save()

    record_activity(
        activity=ActivityLog.Activity.MODIFY,
        description=_order_description(order),
        actor=stamp.actor,
        timestamp=stamp.at,
    )
    return order


# ============================================================
# DELETE
# ============================================================

@transaction.atomic
def delete_order(order_id, *, actor, now) -> None:
    stamp = AuditStamp.of(actor=actor, now=now)
    order = _locked_order(order_id)

    batches, products = _locked_batches(order)
    for batch in batches:
        _debit_unsold_batch(batch=batch, product=products[batch.product_id], stamp=stamp)

    description = _order_description(order)
    order.delete()

    record_activity(
        activity=ActivityLog.Activity.DELETE,
        description=description,
        actor=stamp.actor,
        timestamp=stamp.at,
    )

    logger.info("Order deleted", extra={"order_id": order_id})


@transaction.atomic
def delete_order_item(order_item_id, *, actor, now) -> None:
    stamp = AuditStamp.of(actor=actor, now=now)

    try:
        item = PurchaseOrderItem.objects.select_related("product", "order").get(pk=order_item_id)
    except (PurchaseOrderItem.DoesNotExist, ValueError, TypeError) as exc:
        raise NotFoundError(f"Order item not found: {order_item_id}") from exc

    order = _locked_order(item.order_id)
    products = _lock_products([item.product_id])

    batch = (
        StockBatch.objects.select_for_update()
        .select_related("order")
        .get(order_item=item)
    )
    _debit_unsold_batch(batch=batch, product=products[item.product_id], stamp=stamp)

    description = _item_description(item)
    line_total = item.line_total
    item.delete()

    order.total_amount = max(Decimal("0.00"), Decimal(order.total_amount) - line_total)
    stamp.apply_modified(order)
    order.save(update_fields=["total_amount", *AuditStamp.modified_fields()])

    record_activity(
        activity=ActivityLog.Activity.DELETE,
        description=description,
        actor=stamp.actor,
        timestamp=stamp.at,
    )
