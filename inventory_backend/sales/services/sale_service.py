# sales/services/sale_service.py

"""
SALES DOMAIN SERVICE

Sale header lifecycle around the FIFO engine.

GUARANTEES:
- FIFO (products/services/stock_fifo.py) is the ONLY stock authority
- Each request line goes through allocate_fifo(); one line may become
  several SaleItems (one per batch drawn from)
- Fully atomic: one failed line rolls back the whole sale
- Deleting a sale reverses every SaleItem individually, so batch-level
  quantities come back, not just the product total
"""

from __future__ import annotations

import logging

from django.db import transaction

from activity.models import ActivityLog
from activity.services import record_activity
from core.audit import AuditStamp
from core.exceptions import InvalidArgumentError, NotFoundError
from products.models import Product
from products.services.stock_fifo import allocate_fifo, reverse_sale_item
from sales.models import Sale

logger = logging.getLogger(__name__)


def _sale_description(sale: Sale) -> str:
    return f"Sale ID {sale.pk} Date {sale.sale_date}"


def _locked_sale(sale_id) -> Sale:
    try:
        return Sale.objects.select_for_update().get(pk=sale_id)
    except (Sale.DoesNotExist, ValueError, TypeError) as exc:
        raise NotFoundError(f"Sale not found: {sale_id}") from exc


def _normalize_lines(lines) -> list[dict]:
    """
    Lines are {product_id, quantity, unit_price}. A missing unit_price
    falls back to the product's current price.
    """
    normalized = []
    for idx, raw in enumerate(lines or []):
        if not isinstance(raw, dict):
            raise InvalidArgumentError(f"Line {idx + 1}: lines must be objects")

        product_id = raw.get("product_id")
        if product_id in (None, ""):
            raise InvalidArgumentError(f"Line {idx + 1}: product_id is required")

        unit_price = raw.get("unit_price")
        if unit_price in (None, ""):
            price = Product.objects.filter(pk=product_id).values_list("price", flat=True).first()
            if price is None:
                raise NotFoundError(f"Product not found: {product_id}")
            unit_price = price

        normalized.append(
            {
                "product_id": product_id,
                "quantity": raw.get("quantity"),
                "unit_price": unit_price,
            }
        )
    return normalized


def _allocate_lines(sale: Sale, lines: list[dict], stamp: AuditStamp) -> list:
    items = []
    for line in lines:
        items.extend(
            allocate_fifo(
                sale=sale,
                product_id=line["product_id"],
                quantity=line["quantity"],
                unit_price=line["unit_price"],
                actor=stamp.actor,
                now=stamp.at,
            )
        )
    return items


@transaction.atomic
def create_sale(*, sale_date, lines, actor, now) -> Sale:
    stamp = AuditStamp.of(actor=actor, now=now)

    if sale_date is None:
        raise InvalidArgumentError("sale_date is required")

    normalized = _normalize_lines(lines)
    if not normalized:
        raise InvalidArgumentError("A sale needs at least one line")

    sale = stamp.apply_created(Sale(sale_date=sale_date))
    sale.save()
    sale.sale_code = Sale.code_for(sale.pk)
    sale.save(update_fields=["sale_code"])

    record_activity(
        activity=ActivityLog.Activity.CREATE,
        description=_sale_description(sale),
        actor=stamp.actor,
        timestamp=stamp.at,
    )

    items = _allocate_lines(sale, normalized, stamp)

    sale.refresh_from_db()
    logger.info(
        "Sale created",
        extra={
            "sale_id": sale.pk,
            "sale_code": sale.sale_code,
            "items": len(items),
            "total_amount": str(sale.total_amount),
        },
    )
    return sale


@transaction.atomic
def add_sale_lines(sale_id, *, lines, actor, now, sale_date=None) -> Sale:
    """
    Append lines to an existing sale (and optionally move its date).
    Existing SaleItems are never rewritten; reverse them instead.
    """
    stamp = AuditStamp.of(actor=actor, now=now)
    sale = _locked_sale(sale_id)

    normalized = _normalize_lines(lines)
    if not normalized and sale_date is None:
        raise InvalidArgumentError("Nothing to change")

    if sale_date is not None:
        sale.sale_date = sale_date
        stamp.apply_modified(sale)
        sale.save(update_fields=["sale_date", *AuditStamp.modified_fields()])

    _allocate_lines(sale, normalized, stamp)

    sale.refresh_from_db()
    record_activity(
        activity=ActivityLog.Activity.MODIFY,
        description=_sale_description(sale),
        actor=stamp.actor,
        timestamp=stamp.at,
    )
    return sale


@transaction.atomic
def delete_sale(sale_id, *, actor, now) -> None:
    stamp = AuditStamp.of(actor=actor, now=now)
    sale = _locked_sale(sale_id)

    item_ids = list(sale.items.order_by("pk").values_list("pk", flat=True))
    for item_id in item_ids:
        reverse_sale_item(sale_item_id=item_id, actor=stamp.actor, now=stamp.at)

    sale.refresh_from_db()
    description = _sale_description(sale)
    sale.delete()

    record_activity(
        activity=ActivityLog.Activity.DELETE,
        description=description,
        actor=stamp.actor,
        timestamp=stamp.at,
    )

    logger.info("Sale deleted", extra={"sale_id": sale_id, "items_reversed": len(item_ids)})


@transaction.atomic
def allocate_line(sale_id, *, line, actor, now) -> list:
    """
    Single-line FIFO allocation against an existing sale.
    """
    stamp = AuditStamp.of(actor=actor, now=now)
    sale = _locked_sale(sale_id)
    return _allocate_lines(sale, _normalize_lines([line]), stamp)
