# activity/services/activity_log.py

"""
AUDIT LOG WRITER

record_activity() appends one ActivityLog row.

Transaction participation (settings.ACTIVITY_LOG_STRICT):
- True (default): the row is written in the caller's transaction.
  A failed write aborts the business mutation with it.
- False: the row is written in a savepoint. A DatabaseError is logged,
  reported to Sentry and the mutation continues (returns None).
"""

from __future__ import annotations

import logging

import sentry_sdk
from django.conf import settings
from django.db import DatabaseError, transaction

from activity.models import ActivityLog
from core.exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)


def _validate_activity(activity) -> str:
    value = getattr(activity, "value", activity)
    if value not in ActivityLog.Activity.values:
        raise InvalidArgumentError(f"Unknown activity kind: {activity!r}")
    return value


def record_activity(*, activity, description: str, actor: str, timestamp):
    kind = _validate_activity(activity)
    if timestamp is None:
        raise InvalidArgumentError("timestamp is required")

    fields = {
        "activity": kind,
        "description": (description or "").strip(),
        "actor": actor,
        "timestamp": timestamp,
    }

    if getattr(settings, "ACTIVITY_LOG_STRICT", True):
        entry = ActivityLog.objects.create(**fields)
    else:
        try:
            with transaction.atomic():
                entry = ActivityLog.objects.create(**fields)
        except DatabaseError as exc:
            logger.exception(
                "Activity log write failed; mutation continues",
                extra={"activity": kind, "actor": actor},
            )
            sentry_sdk.capture_exception(exc)
            return None

    logger.info(
        "Activity recorded",
        extra={"activity": kind, "actor": actor, "description": fields["description"]},
    )
    return entry
