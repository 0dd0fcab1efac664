# products/tests/test_ledger_check.py

from datetime import date
from decimal import Decimal
from io import StringIO

from django.core.management import call_command
from django.test import TestCase
from django.utils import timezone

from products.models import Product
from products.services import create_product, verify_all_products, verify_ledger
from purchases.services import receive

ACTOR = "auditor"


class LedgerCheckTests(TestCase):
    """
    GUARANTEES:
    - A ledger built only through the services always balances
    - Drift is reported, never corrected
    """

    def setUp(self):
        self.now = timezone.now()
        self.good = create_product(name="Good", price="1.00", initial_stock="6", actor=ACTOR, now=self.now)
        self.bad = create_product(name="Bad", price="1.00", actor=ACTOR, now=self.now)
        receive(
            order_date=date(2024, 1, 1),
            items=[{"product_id": self.bad.pk, "quantity": "4", "unit_cost": "0.50"}],
            actor=ACTOR,
            now=self.now,
        )

    def _drift(self):
        Product.objects.filter(pk=self.bad.pk).update(in_stock=Decimal("9"))
        self.bad.refresh_from_db()

    def test_balanced_ledger(self):
        checks = verify_all_products()
        self.assertEqual(len(checks), 2)
        self.assertTrue(all(c.ok for c in checks))

    def test_drift_is_logged_and_left_alone(self):
        self._drift()

        with self.assertLogs("products.services.ledger_check", level="ERROR"):
            check = verify_ledger(self.bad)

        self.assertFalse(check.ok)
        self.assertEqual(check.batch_total, Decimal("4"))
        self.assertEqual(check.difference, Decimal("5"))

        self.bad.refresh_from_db()
        self.assertEqual(self.bad.in_stock, Decimal("9"))

    # ======================================================
    # MANAGEMENT COMMAND
    # ======================================================

    def test_command_reports_ok(self):
        out = StringIO()
        call_command("check_stock_ledger", "--strict", stdout=out)
        self.assertIn("[OK]", out.getvalue())

    def test_command_reports_mismatch(self):
        self._drift()
        out = StringIO()

        with self.assertLogs("products.services.ledger_check", level="ERROR"):
            call_command("check_stock_ledger", stdout=out)

        self.assertIn(f"[MISMATCH] product={self.bad.pk}", out.getvalue())

    def test_command_strict_exits_non_zero(self):
        self._drift()

        with self.assertLogs("products.services.ledger_check", level="ERROR"):
            with self.assertRaises(SystemExit):
                call_command("check_stock_ledger", "--strict", stdout=StringIO())
