# core/audit.py

"""
AUDIT STAMP (EXPLICIT ACTOR + CLOCK)

Every ledger entity carries four audit columns:
    created_at / created_by / modified_at / modified_by

They are populated from an AuditStamp built by the caller, never from
the request user or the wall clock inside a model hook.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from core.exceptions import InvalidArgumentError

SYSTEM_ACTOR = "System"


@dataclass(frozen=True)
class AuditStamp:
    actor: str
    at: datetime

    @classmethod
    def of(cls, *, actor, now) -> "AuditStamp":
        if now is None:
            raise InvalidArgumentError("now is required")
        name = (str(actor) if actor is not None else "").strip()
        return cls(actor=name or SYSTEM_ACTOR, at=now)

    def apply_created(self, obj):
        obj.created_at = self.at
        obj.created_by = self.actor
        obj.modified_at = self.at
        obj.modified_by = self.actor
        return obj

    def apply_modified(self, obj):
        obj.modified_at = self.at
        obj.modified_by = self.actor
        return obj

    @staticmethod
    def modified_fields() -> list[str]:
        return ["modified_at", "modified_by"]
