# purchases/services/supplier_service.py

from __future__ import annotations

from django.conf import settings
from django.db import transaction

from activity.models import ActivityLog
from activity.services import record_activity
from core.audit import AuditStamp
from core.exceptions import ConflictError, InvalidArgumentError, NotFoundError
from purchases.models import Supplier

_EDITABLE = ("name", "contact", "contact_person", "address")


def _description(supplier: Supplier) -> str:
    return f"Supplier ID {supplier.pk} Name {supplier.name}"


def _clean_fields(fields: dict) -> dict:
    cleaned = {}
    for key, value in fields.items():
        if key not in _EDITABLE:
            raise InvalidArgumentError(f"Unknown supplier field: {key}")
        cleaned[key] = (value or "").strip()
    if "name" in cleaned and not cleaned["name"]:
        raise InvalidArgumentError("name is required")
    return cleaned


def get_supplier_or_404(supplier_id) -> Supplier:
    try:
        return Supplier.objects.get(pk=supplier_id)
    except (Supplier.DoesNotExist, ValueError, TypeError) as exc:
        raise NotFoundError(f"Supplier not found: {supplier_id}") from exc


@transaction.atomic
def create_supplier(*, actor, now, **fields) -> Supplier:
    stamp = AuditStamp.of(actor=actor, now=now)
    data = _clean_fields(fields)
    if not data.get("name"):
        raise InvalidArgumentError("name is required")

    supplier = stamp.apply_created(Supplier(**data))
    supplier.save()

    record_activity(
        activity=ActivityLog.Activity.CREATE,
        description=_description(supplier),
        actor=stamp.actor,
        timestamp=stamp.at,
    )
    return supplier


@transaction.atomic
def edit_supplier(supplier_id, *, actor, now, **fields) -> Supplier:
    stamp = AuditStamp.of(actor=actor, now=now)
    supplier = get_supplier_or_404(supplier_id)

    for key, value in _clean_fields(fields).items():
        setattr(supplier, key, value)

    stamp.apply_modified(supplier)
    supplier.save()

    record_activity(
        activity=ActivityLog.Activity.MODIFY,
        description=_description(supplier),
        actor=stamp.actor,
        timestamp=stamp.at,
    )
    return supplier


@transaction.atomic
def delete_supplier(supplier_id, *, actor, now) -> None:
    stamp = AuditStamp.of(actor=actor, now=now)
    supplier = get_supplier_or_404(supplier_id)

    if supplier.orders.exists():
        raise ConflictError(
            f"Supplier '{supplier.name}' has orders; delete or reassign them first."
        )

    description = _description(supplier)
    supplier.delete()

    record_activity(
        activity=ActivityLog.Activity.DELETE,
        description=description,
        actor=stamp.actor,
        timestamp=stamp.at,
    )


def get_or_create_default_supplier(*, actor, now) -> Supplier:
    """
    Supplier used for synthetic initial-stock orders.
    """
    name = (getattr(settings, "DEFAULT_SUPPLIER_NAME", "") or "").strip() or "Opening Stock"
    existing = Supplier.objects.filter(name=name).order_by("pk").first()
    if existing is not None:
        return existing
    return create_supplier(name=name, actor=actor, now=now)
