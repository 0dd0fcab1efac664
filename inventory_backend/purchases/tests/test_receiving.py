# purchases/tests/test_receiving.py

from datetime import date
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone

from activity.models import ActivityLog
from core.exceptions import ConflictError, InvalidArgumentError, NotFoundError
from products.models import StockBatch
from products.services import allocate_fifo, create_product, reverse_sale_item
from purchases.models import PurchaseOrder, PurchaseOrderItem
from purchases.services import (
    create_supplier,
    delete_order,
    delete_order_item,
    delete_supplier,
    edit_order,
    edit_supplier,
    receive,
)
from sales.models import Sale

ACTOR = "receiver"


class ReceiveOrderTests(TestCase):
    """
    Order/receipt manager.

    GUARANTEES:
    - One PurchaseOrderItem + one StockBatch per line
    - Product stock credited unless credit_stock=False
    - One CREATE entry per order (not per line)
    """

    def setUp(self):
        self.now = timezone.now()
        self.supplier = create_supplier(name="Wholesale Ltd", actor=ACTOR, now=self.now)
        self.rice = create_product(name="Rice", price="4.00", actor=ACTOR, now=self.now)
        self.oil = create_product(name="Oil", price="9.00", actor=ACTOR, now=self.now)

    def _receive(self, **overrides):
        kwargs = {
            "supplier_id": self.supplier.pk,
            "order_date": date(2024, 4, 1),
            "items": [
                {"product_id": self.rice.pk, "quantity": "10", "unit_cost": "2.00"},
                {"product_id": self.oil.pk, "quantity": "2.5", "unit_cost": "6.40"},
            ],
            "actor": ACTOR,
            "now": self.now,
        }
        kwargs.update(overrides)
        return receive(**kwargs)

    def test_receive_creates_items_batches_and_credits_stock(self):
        order = self._receive()

        self.assertEqual(order.order_code, f"OD{1000 + order.pk}")
        self.assertEqual(order.total_amount, Decimal("36.00"))
        self.assertEqual(order.items.count(), 2)
        self.assertEqual(order.batches.count(), 2)

        rice_batch = StockBatch.objects.get(order=order, product=self.rice)
        self.assertEqual(rice_batch.quantity_received, Decimal("10"))
        self.assertEqual(rice_batch.stock_left, Decimal("10"))
        self.assertEqual(rice_batch.order_price, Decimal("2.00"))
        self.assertEqual(rice_batch.order_item.quantity, Decimal("10"))

        self.rice.refresh_from_db()
        self.oil.refresh_from_db()
        self.assertEqual(self.rice.in_stock, Decimal("10"))
        self.assertEqual(self.oil.in_stock, Decimal("2.5"))

    def test_single_create_entry_per_order(self):
        before = ActivityLog.objects.count()
        order = self._receive()

        entries = list(ActivityLog.objects.order_by("id")[before:])
        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0].activity, ActivityLog.Activity.CREATE)
        self.assertEqual(entries[0].description, f"Order ID {order.pk} Date 2024-04-01")

    def test_credit_stock_false_leaves_product_total(self):
        self._receive(credit_stock=False)

        self.rice.refresh_from_db()
        self.assertEqual(self.rice.in_stock, Decimal("0"))
        self.assertEqual(StockBatch.objects.get(product=self.rice).stock_left, Decimal("10"))

    def test_explicit_total_amount(self):
        order = self._receive(total_amount="30.00")
        self.assertEqual(order.total_amount, Decimal("30.00"))

    def test_header_only_order(self):
        order = self._receive(items=[])
        self.assertEqual(order.total_amount, Decimal("0.00"))
        self.assertFalse(order.batches.exists())

    def test_validation_rolls_back_everything(self):
        bad_lines = [
            {"product_id": self.rice.pk, "quantity": "3", "unit_cost": "2.00"},
            {"product_id": 99999, "quantity": "1", "unit_cost": "1.00"},
        ]
        with self.assertRaises(NotFoundError):
            self._receive(items=bad_lines)

        with self.assertRaises(InvalidArgumentError):
            self._receive(items=[{"product_id": self.rice.pk, "quantity": "0", "unit_cost": "1"}])

        with self.assertRaises(NotFoundError):
            self._receive(supplier_id=4242)

        self.assertFalse(PurchaseOrder.objects.exists())
        self.rice.refresh_from_db()
        self.assertEqual(self.rice.in_stock, Decimal("0"))

    # ======================================================
    # EDIT
    # ======================================================

    def test_edit_order_appends_credited_lines(self):
        order = self._receive()

        edit_order(
            order.pk,
            order_date=date(2024, 4, 2),
            items=[{"product_id": self.rice.pk, "quantity": "5", "unit_cost": "2.20"}],
            actor="editor",
            now=self.now,
        )
        order.refresh_from_db()
        self.rice.refresh_from_db()

        self.assertEqual(order.order_date, date(2024, 4, 2))
        self.assertEqual(order.batches.count(), 3)
        self.assertEqual(order.total_amount, Decimal("47.00"))
        self.assertEqual(self.rice.in_stock, Decimal("15"))
        self.assertEqual(order.modified_by, "editor")
        self.assertEqual(
            ActivityLog.objects.order_by("-id").first().activity,
            ActivityLog.Activity.MODIFY,
        )


class DeleteOrderTests(TestCase):
    """
    GUARANTEES:
    - Deleting an unsold order removes its stock from the product total
    - Deleting an order (or line) whose batch has been sold from is a Conflict
    """

    def setUp(self):
        self.now = timezone.now()
        self.product = create_product(name="Soap", price="1.50", actor=ACTOR, now=self.now)
        self.order = receive(
            order_date=date(2024, 5, 1),
            items=[
                {"product_id": self.product.pk, "quantity": "6", "unit_cost": "0.80"},
                {"product_id": self.product.pk, "quantity": "4", "unit_cost": "0.90"},
            ],
            actor=ACTOR,
            now=self.now,
        )

    def _sell(self, quantity):
        sale = Sale.objects.create(
            sale_date=date(2024, 5, 2),
            created_at=self.now, created_by=ACTOR,
            modified_at=self.now, modified_by=ACTOR,
        )
        return allocate_fifo(
            sale=sale, product_id=self.product.pk, quantity=quantity, unit_price="1.50",
            actor=ACTOR, now=self.now,
        )

    def test_delete_unsold_order(self):
        delete_order(self.order.pk, actor=ACTOR, now=self.now)

        self.product.refresh_from_db()
        self.assertEqual(self.product.in_stock, Decimal("0"))
        self.assertFalse(PurchaseOrder.objects.exists())
        self.assertFalse(StockBatch.objects.exists())
        self.assertFalse(PurchaseOrderItem.objects.exists())

        last = ActivityLog.objects.order_by("-id").first()
        self.assertEqual(last.activity, ActivityLog.Activity.DELETE)
        self.assertTrue(last.description.startswith(f"Order ID {self.order.pk}"))

    def test_delete_sold_order_is_conflict(self):
        self._sell("2")

        with self.assertRaises(ConflictError):
            delete_order(self.order.pk, actor=ACTOR, now=self.now)

        self.product.refresh_from_db()
        self.assertEqual(self.product.in_stock, Decimal("8"))
        self.assertEqual(StockBatch.objects.count(), 2)

    def test_delete_after_reversal(self):
        items = self._sell("7")
        for item in items:
            reverse_sale_item(sale_item_id=item.pk, actor=ACTOR, now=self.now)

        delete_order(self.order.pk, actor=ACTOR, now=self.now)
        self.product.refresh_from_db()
        self.assertEqual(self.product.in_stock, Decimal("0"))

    def test_delete_single_line(self):
        line = self.order.items.order_by("pk").last()

        delete_order_item(line.pk, actor=ACTOR, now=self.now)

        self.order.refresh_from_db()
        self.product.refresh_from_db()
        self.assertEqual(self.order.items.count(), 1)
        self.assertEqual(self.order.total_amount, Decimal("4.80"))
        self.assertEqual(self.product.in_stock, Decimal("6"))
        self.assertTrue(
            ActivityLog.objects.filter(
                activity=ActivityLog.Activity.DELETE,
                description__startswith=f"OrderItem ID {line.pk} Product Soap",
            ).exists()
        )

    def test_delete_sold_line_is_conflict(self):
        self._sell("1")
        first = self.order.items.order_by("pk").first()

        with self.assertRaises(ConflictError):
            delete_order_item(first.pk, actor=ACTOR, now=self.now)

    def test_unknown_ids(self):
        with self.assertRaises(NotFoundError):
            delete_order(31337, actor=ACTOR, now=self.now)
        with self.assertRaises(NotFoundError):
            delete_order_item(31337, actor=ACTOR, now=self.now)


class SupplierTests(TestCase):
    def setUp(self):
        self.now = timezone.now()

    def test_supplier_lifecycle(self):
        supplier = create_supplier(name="  Farm Co ", contact="555-0101", actor=ACTOR, now=self.now)
        self.assertEqual(supplier.name, "Farm Co")

        edit_supplier(supplier.pk, contact_person="Ada", actor=ACTOR, now=self.now)
        supplier.refresh_from_db()
        self.assertEqual(supplier.contact_person, "Ada")

        delete_supplier(supplier.pk, actor=ACTOR, now=self.now)
        kinds = list(
            ActivityLog.objects.filter(description__startswith="Supplier ID")
            .order_by("id")
            .values_list("activity", flat=True)
        )
        self.assertEqual(kinds, ["CREATE", "MODIFY", "DELETE"])

    def test_supplier_with_orders_cannot_be_deleted(self):
        supplier = create_supplier(name="Busy", actor=ACTOR, now=self.now)
        receive(supplier_id=supplier.pk, order_date=date(2024, 1, 1), items=[], actor=ACTOR, now=self.now)

        with self.assertRaises(ConflictError):
            delete_supplier(supplier.pk, actor=ACTOR, now=self.now)

    def test_supplier_requires_name(self):
        with self.assertRaises(InvalidArgumentError):
            create_supplier(name=" ", actor=ACTOR, now=self.now)
