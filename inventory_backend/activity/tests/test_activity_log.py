# activity/tests/test_activity_log.py

from datetime import date
from decimal import Decimal
from unittest import mock

from django.core.exceptions import ValidationError
from django.db import DatabaseError
from django.test import TestCase, override_settings
from django.utils import timezone

from activity.models import ActivityLog
from activity.services import record_activity
from core.exceptions import InvalidArgumentError
from products.models import Product
from products.services import create_product
from purchases.services import receive


class RecordActivityTests(TestCase):
    def setUp(self):
        self.now = timezone.now()

    def test_strict_write(self):
        entry = record_activity(
            activity=ActivityLog.Activity.CREATE,
            description="  Product ID 1 Name Tea  ",
            actor="auditor",
            timestamp=self.now,
        )

        self.assertIsNotNone(entry.pk)
        self.assertEqual(entry.activity, "CREATE")
        self.assertEqual(entry.description, "Product ID 1 Name Tea")
        self.assertEqual(entry.actor, "auditor")
        self.assertEqual(entry.timestamp, self.now)

    def test_plain_string_kind_is_accepted(self):
        entry = record_activity(activity="DELETE", description="x", actor="a", timestamp=self.now)
        self.assertEqual(entry.activity, ActivityLog.Activity.DELETE)

    def test_invalid_kind_and_missing_timestamp(self):
        with self.assertRaises(InvalidArgumentError):
            record_activity(activity="UPSERT", description="x", actor="a", timestamp=self.now)
        with self.assertRaises(InvalidArgumentError):
            record_activity(activity="CREATE", description="x", actor="a", timestamp=None)
        self.assertFalse(ActivityLog.objects.exists())

    def test_entries_are_immutable(self):
        entry = record_activity(activity="MODIFY", description="x", actor="a", timestamp=self.now)

        entry.description = "rewritten"
        with self.assertRaises(ValidationError):
            entry.save()
        with self.assertRaises(ValidationError):
            entry.delete()

        entry.refresh_from_db()
        self.assertEqual(entry.description, "x")

    def test_strict_failure_aborts_mutation(self):
        with mock.patch.object(ActivityLog.objects, "create", side_effect=DatabaseError("down")):
            with self.assertRaises(DatabaseError):
                create_product(name="Tea", price="1.00", actor="a", now=self.now)

        self.assertFalse(Product.objects.exists())


@override_settings(ACTIVITY_LOG_STRICT=False)
class LenientActivityTests(TestCase):
    """
    Lenient mode: a failed audit write is reported, the mutation commits.
    """

    def setUp(self):
        self.now = timezone.now()

    def test_failed_write_returns_none_and_reports(self):
        with mock.patch.object(ActivityLog.objects, "create", side_effect=DatabaseError("down")), \
                mock.patch("activity.services.activity_log.sentry_sdk.capture_exception") as capture:
            with self.assertLogs("activity.services.activity_log", level="ERROR"):
                result = record_activity(
                    activity="CREATE", description="x", actor="a", timestamp=self.now
                )

        self.assertIsNone(result)
        capture.assert_called_once()

    def test_mutation_continues_without_entry(self):
        product = create_product(name="Jam", price="2.00", actor="a", now=self.now)

        with mock.patch.object(ActivityLog.objects, "create", side_effect=DatabaseError("down")), \
                mock.patch("activity.services.activity_log.sentry_sdk.capture_exception"):
            order = receive(
                order_date=date(2024, 7, 1),
                items=[{"product_id": product.pk, "quantity": "3", "unit_cost": "1.00"}],
                actor="a",
                now=self.now,
            )

        product.refresh_from_db()
        self.assertIsNotNone(order.pk)
        self.assertEqual(product.in_stock, Decimal("3"))
        self.assertFalse(
            ActivityLog.objects.filter(description__startswith=f"Order ID {order.pk}").exists()
        )
