# core/api.py

"""
DRF translation of ledger errors.

Views call ledger_error_response() inside `except LedgerError` so the
HTTP status follows the error kind instead of a blanket 400.
"""

from __future__ import annotations

from django.utils import timezone
from rest_framework import status
from rest_framework.response import Response

from core.exceptions import (
    ConflictError,
    InvalidArgumentError,
    LedgerError,
    NotFoundError,
    OutOfStockError,
)


def ledger_error_response(exc: LedgerError) -> Response:
    if isinstance(exc, OutOfStockError):
        return Response(
            {
                "detail": str(exc),
                "product": exc.product_name,
                "requested": str(exc.requested),
                "available": str(exc.available),
            },
            status=status.HTTP_409_CONFLICT,
        )

    if isinstance(exc, NotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, ConflictError):
        code = status.HTTP_409_CONFLICT
    elif isinstance(exc, InvalidArgumentError):
        code = status.HTTP_400_BAD_REQUEST
    else:
        code = status.HTTP_400_BAD_REQUEST

    return Response({"detail": str(exc)}, status=code)


def request_actor(request) -> dict:
    """
    Explicit actor/clock kwargs for service calls.
    """
    user = getattr(request, "user", None)
    actor = user.get_username() if user is not None and user.is_authenticated else ""
    return {"actor": actor, "now": timezone.now()}
