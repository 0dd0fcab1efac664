# products/services/registry.py

"""
======================================================
PATH: products/services/registry.py
======================================================
PRODUCT REGISTRY SERVICES

Purpose:
- Create / edit / delete products and categories, each audited.
- Read-only stock queries (current_stock, is_low).

Rules:
- in_stock is NEVER edited here after creation. It changes only through
  receipts (purchases) and FIFO allocation / reversal (sales).
- Initial stock on creation is backed by a synthetic PurchaseOrder received
  with credit_stock=False, so the batch sum matches the stock set on the row.
- A product with sales history cannot be deleted.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from activity.models import ActivityLog
from activity.services import record_activity
from core.audit import AuditStamp
from core.exceptions import ConflictError, InvalidArgumentError, NotFoundError
from core.quantities import ZERO, money, qty
from products.models import Category, Product
from purchases.models import PurchaseOrderItem
from purchases.services.receiving_service import receive
from purchases.services.supplier_service import get_or_create_default_supplier

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = ("name", "description", "price", "unit", "warning_stock_level", "category_id")


# ============================================================
# HELPERS
# ============================================================

def _product_description(product: Product) -> str:
    return f"Product ID {product.pk} Name {product.name}"


def _category_description(category: Category) -> str:
    return f"Category ID {category.pk} Name {category.name}"


def _required_name(value, *, field_name="name") -> str:
    name = (value or "").strip()
    if not name:
        raise InvalidArgumentError(f"{field_name} is required")
    return name


def _non_negative_qty(value, *, field_name) -> Decimal:
    q = qty(value, field_name=field_name)
    if q < ZERO:
        raise InvalidArgumentError(f"{field_name} cannot be negative")
    return q


def _get_category(category_id):
    if category_id in (None, ""):
        return None
    try:
        return Category.objects.get(pk=category_id)
    except (Category.DoesNotExist, ValueError, TypeError) as exc:
        raise NotFoundError(f"Category not found: {category_id}") from exc


def get_product_or_404(product_id, *, lock: bool = False) -> Product:
    qs = Product.objects.select_for_update() if lock else Product.objects.all()
    try:
        return qs.get(pk=product_id)
    except (Product.DoesNotExist, ValueError, TypeError) as exc:
        raise NotFoundError(f"Product not found: {product_id}") from exc


def _receipt_date(now):
    if timezone.is_aware(now):
        return timezone.localdate(now)
    return now.date()


def _record(kind, description, stamp: AuditStamp) -> None:
    record_activity(
        activity=kind,
        description=description,
        actor=stamp.actor,
        timestamp=stamp.at,
    )


# ============================================================
# PRODUCTS
# ============================================================

@transaction.atomic
def create_product(
    *,
    name,
    price,
    actor,
    now,
    unit="",
    warning_stock_level=0,
    description="",
    category_id=None,
    initial_stock=0,
    supplier_id=None,
) -> Product:
    """
    Create a product, optionally with opening stock.

    initial_stock > 0 generates one synthetic order (one line, unit cost = price)
    so the opening quantity lives in a batch like any other receipt.
    """
    stamp = AuditStamp.of(actor=actor, now=now)

    product = stamp.apply_created(
        Product(
            name=_required_name(name),
            description=(description or "").strip(),
            price=money(price, field_name="price"),
            unit=(unit or "").strip(),
            warning_stock_level=_non_negative_qty(
                warning_stock_level, field_name="warning_stock_level"
            ),
            category=_get_category(category_id),
            in_stock=_non_negative_qty(initial_stock, field_name="initial_stock"),
        )
    )
    product.full_clean(exclude=["product_key", "category"])
    product.save()

    product.product_key = Product.key_for(product.pk)
    product.save(update_fields=["product_key"])

    _record(ActivityLog.Activity.CREATE, _product_description(product), stamp)

    if product.in_stock > ZERO:
        if supplier_id in (None, ""):
            supplier_id = get_or_create_default_supplier(actor=stamp.actor, now=stamp.at).pk

        order = receive(
            supplier_id=supplier_id,
            order_date=_receipt_date(stamp.at),
            items=[
                {
                    "product_id": product.pk,
                    "quantity": product.in_stock,
                    "unit_cost": product.price,
                }
            ],
            credit_stock=False,
            actor=stamp.actor,
            now=stamp.at,
        )
        logger.info(
            "Opening stock order generated",
            extra={"product_id": product.pk, "order_id": order.pk, "quantity": str(product.in_stock)},
        )

    return product


@transaction.atomic
def edit_product(product_id, *, actor, now, **changes) -> Product:
    """
    Metadata only: name, description, price, unit, warning_stock_level, category_id.
    """
    stamp = AuditStamp.of(actor=actor, now=now)

    if "in_stock" in changes:
        raise InvalidArgumentError("in_stock changes only through orders and sales")

    unknown = sorted(set(changes) - set(_EDITABLE_FIELDS))
    if unknown:
        raise InvalidArgumentError(f"Unknown product field: {unknown[0]}")

    product = get_product_or_404(product_id, lock=True)

    if "name" in changes:
        product.name = _required_name(changes["name"])
    if "description" in changes:
        product.description = (changes["description"] or "").strip()
    if "price" in changes:
        product.price = money(changes["price"], field_name="price")
    if "unit" in changes:
        product.unit = (changes["unit"] or "").strip()
    if "warning_stock_level" in changes:
        product.warning_stock_level = _non_negative_qty(
            changes["warning_stock_level"], field_name="warning_stock_level"
        )
    if "category_id" in changes:
        product.category = _get_category(changes["category_id"])

    stamp.apply_modified(product)
    product.save()

    _record(ActivityLog.Activity.MODIFY, _product_description(product), stamp)
    return product


@transaction.atomic
def delete_product(product_id, *, actor, now) -> None:
    """
    Remove a product together with its order lines and batches.

    Orders left without lines are deleted; other orders keep their header
    with the removed lines subtracted from the total.
    """
    stamp = AuditStamp.of(actor=actor, now=now)
    product = get_product_or_404(product_id, lock=True)

    if product.sale_items.exists():
        raise ConflictError(
            f"Product '{product.name}' has recorded sales; reverse them before deleting it."
        )

    lines = list(
        PurchaseOrderItem.objects.select_related("order")
        .filter(product=product)
        .order_by("pk")
    )
    touched_orders = {}
    for line in lines:
        order = touched_orders.setdefault(line.order_id, line.order)
        order.total_amount = max(Decimal("0.00"), Decimal(order.total_amount) - line.line_total)
        # cascades to the line's batch
        line.delete()

    for order in touched_orders.values():
        if not order.items.exists():
            order_description = f"Order ID {order.pk} Date {order.order_date}"
            order.delete()
            _record(ActivityLog.Activity.DELETE, order_description, stamp)
        else:
            stamp.apply_modified(order)
            order.save(update_fields=["total_amount", *AuditStamp.modified_fields()])

    description = _product_description(product)
    product.delete()

    _record(ActivityLog.Activity.DELETE, description, stamp)

    logger.info(
        "Product deleted",
        extra={"product_id": product_id, "order_lines_removed": len(lines)},
    )


# ============================================================
# READ-ONLY STOCK QUERIES
# ============================================================

def current_stock(product_id) -> Decimal:
    return Decimal(get_product_or_404(product_id).in_stock)


def is_low(product_id) -> bool:
    return get_product_or_404(product_id).is_low_stock


def batch_stock_total(product: Product) -> Decimal:
    return product.batch_stock_total


# ============================================================
# CATEGORIES
# ============================================================

@transaction.atomic
def create_category(*, name, actor, now) -> Category:
    stamp = AuditStamp.of(actor=actor, now=now)
    name = _required_name(name)

    if Category.objects.filter(name__iexact=name).exists():
        raise ConflictError(f"Category '{name}' already exists")

    category = stamp.apply_created(Category(name=name))
    category.save()

    _record(ActivityLog.Activity.CREATE, _category_description(category), stamp)
    return category


@transaction.atomic
def rename_category(category_id, *, name, actor, now) -> Category:
    stamp = AuditStamp.of(actor=actor, now=now)
    category = _get_category(category_id)
    if category is None:
        raise NotFoundError("Category not found")

    name = _required_name(name)
    if Category.objects.filter(name__iexact=name).exclude(pk=category.pk).exists():
        raise ConflictError(f"Category '{name}' already exists")

    category.name = name
    stamp.apply_modified(category)
    category.save()

    _record(ActivityLog.Activity.MODIFY, _category_description(category), stamp)
    return category


@transaction.atomic
def delete_category(category_id, *, actor, now) -> None:
    """
    Products in the category survive with category cleared (SET_NULL).
    """
    stamp = AuditStamp.of(actor=actor, now=now)
    category = _get_category(category_id)
    if category is None:
        raise NotFoundError("Category not found")

    description = _category_description(category)
    category.delete()

    _record(ActivityLog.Activity.DELETE, description, stamp)

