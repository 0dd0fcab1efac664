# core/exceptions.py

"""
LEDGER SERVICE ERRORS

Centralized domain errors for the stock ledger services.

Rules:
- Services raise these and never swallow them.
- Raising inside transaction.atomic rolls the whole operation back.
- The API layer translates them (core/api.py).
"""

from __future__ import annotations

from decimal import Decimal


class LedgerError(Exception):
    """Base exception for all ledger service failures."""


class NotFoundError(LedgerError):
    """Raised when a product / order / sale / batch id is unknown."""


class InvalidArgumentError(LedgerError):
    """Raised on non-positive quantities and malformed input."""


class ConflictError(LedgerError):
    """Raised when an operation would corrupt ledger integrity."""


class OutOfStockError(LedgerError):
    """
    Requested quantity exceeds available stock.

    Carries the display values so the outer layer can render them.
    """

    def __init__(self, product_name: str, requested, available):
        self.product_name = product_name
        self.requested = Decimal(str(requested))
        self.available = Decimal(str(available))
        super().__init__(
            f"Product '{product_name}' is out of stock. "
            f"Requested: {self.requested:.2f}, Available: {self.available:.2f}"
        )
