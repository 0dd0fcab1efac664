# products/tests/test_fifo.py

from datetime import date
from decimal import Decimal
from unittest import mock

from django.test import TestCase
from django.utils import timezone

from activity.models import ActivityLog
from core.exceptions import InvalidArgumentError, NotFoundError, OutOfStockError
from products.models import Product, StockBatch
from products.services import allocate_fifo, create_product, reverse_sale_item
from products.services import stock_fifo
from purchases.services import receive
from sales.models import Sale, SaleItem

ACTOR = "clerk"


def _empty_sale(now, sale_date=date(2024, 2, 1)):
    return Sale.objects.create(
        sale_date=sale_date,
        created_at=now,
        created_by=ACTOR,
        modified_at=now,
        modified_by=ACTOR,
    )


class FifoAllocationTests(TestCase):
    """
    Allocation engine.

    GUARANTEES:
    - Oldest batch first, split across batches when needed
    - Batch stock and product stock move together
    - Any failure leaves no SaleItems and no stock change
    """

    def setUp(self):
        self.now = timezone.now()
        self.product = create_product(name="Rice", price="4.00", actor=ACTOR, now=self.now)

        # B1 (older, 5 units) and B2 (newer, 10 units)
        receive(
            order_date=date(2024, 1, 1),
            items=[{"product_id": self.product.pk, "quantity": "5", "unit_cost": "2.00"}],
            actor=ACTOR,
            now=self.now,
        )
        receive(
            order_date=date(2024, 1, 5),
            items=[{"product_id": self.product.pk, "quantity": "10", "unit_cost": "2.50"}],
            actor=ACTOR,
            now=self.now,
        )

        batches = list(StockBatch.objects.filter(product=self.product).order_by("order__order_date"))
        self.b1, self.b2 = batches
        self.sale = _empty_sale(self.now)

    def _allocate(self, quantity, price="6.00"):
        return allocate_fifo(
            sale=self.sale,
            product_id=self.product.pk,
            quantity=quantity,
            unit_price=price,
            actor=ACTOR,
            now=self.now,
        )

    # ======================================================
    # FIFO SPLIT
    # ======================================================

    def test_allocation_splits_oldest_batch_first(self):
        items = self._allocate("8")

        self.assertEqual(len(items), 2)
        self.assertEqual(items[0].batch_id, self.b1.pk)
        self.assertEqual(items[0].amount, Decimal("5"))
        self.assertEqual(items[1].batch_id, self.b2.pk)
        self.assertEqual(items[1].amount, Decimal("3"))

        self.b1.refresh_from_db()
        self.b2.refresh_from_db()
        self.product.refresh_from_db()

        self.assertEqual(self.b1.stock_left, Decimal("0"))
        self.assertEqual(self.b2.stock_left, Decimal("7"))
        self.assertEqual(self.product.in_stock, Decimal("7"))

    def test_receipt_date_wins_over_batch_id(self):
        # Received later but dated earlier: consumed first.
        receive(
            order_date=date(2023, 12, 1),
            items=[{"product_id": self.product.pk, "quantity": "2", "unit_cost": "1.00"}],
            actor=ACTOR,
            now=self.now,
        )
        backdated = StockBatch.objects.get(order__order_date=date(2023, 12, 1))

        items = self._allocate("3")

        self.assertEqual([i.batch_id for i in items], [backdated.pk, self.b1.pk])
        self.assertEqual([i.amount for i in items], [Decimal("2"), Decimal("1")])

    def test_sale_total_is_recomputed(self):
        self._allocate("8", price="6.00")
        self.sale.refresh_from_db()
        self.assertEqual(self.sale.total_amount, Decimal("48.00"))

    def test_one_create_entry_per_sale_item(self):
        before = ActivityLog.objects.count()
        self._allocate("8")

        entries = ActivityLog.objects.order_by("id")[before:]
        self.assertEqual(len(entries), 2)
        for entry in entries:
            self.assertEqual(entry.activity, ActivityLog.Activity.CREATE)
            self.assertTrue(entry.description.startswith("SaleItem ID"))
            self.assertIn("Product Rice", entry.description)
            self.assertEqual(entry.actor, ACTOR)

    # ======================================================
    # GUARDS / ATOMICITY
    # ======================================================

    def test_zero_and_negative_quantities_are_rejected(self):
        with self.assertRaises(InvalidArgumentError):
            self._allocate("0")
        with self.assertRaises(InvalidArgumentError):
            self._allocate("-1")

    def test_unknown_product(self):
        with self.assertRaises(NotFoundError):
            allocate_fifo(
                sale=self.sale,
                product_id=999999,
                quantity="1",
                unit_price="1.00",
                actor=ACTOR,
                now=self.now,
            )

    def test_over_allocation_changes_nothing(self):
        with self.assertRaises(OutOfStockError) as ctx:
            self._allocate("16")

        self.assertEqual(ctx.exception.product_name, "Rice")
        self.assertEqual(ctx.exception.requested, Decimal("16"))
        self.assertEqual(ctx.exception.available, Decimal("15"))

        self.b1.refresh_from_db()
        self.b2.refresh_from_db()
        self.product.refresh_from_db()

        self.assertEqual(self.b1.stock_left, Decimal("5"))
        self.assertEqual(self.b2.stock_left, Decimal("10"))
        self.assertEqual(self.product.in_stock, Decimal("15"))
        self.assertFalse(SaleItem.objects.exists())

    def test_batch_shortfall_rolls_back_partial_items(self):
        # Product total claims more than the batches hold (drifted ledger).
        Product.objects.filter(pk=self.product.pk).update(in_stock=Decimal("20"))

        with self.assertLogs("products.services.stock_fifo", level="ERROR"):
            with self.assertRaises(OutOfStockError) as ctx:
                self._allocate("18")

        self.assertEqual(ctx.exception.requested, Decimal("3"))

        self.b1.refresh_from_db()
        self.b2.refresh_from_db()
        self.product.refresh_from_db()

        self.assertEqual(self.b1.stock_left, Decimal("5"))
        self.assertEqual(self.b2.stock_left, Decimal("10"))
        self.assertEqual(self.product.in_stock, Decimal("20"))
        self.assertFalse(SaleItem.objects.exists())

    # ======================================================
    # REVERSAL
    # ======================================================

    def test_reverse_round_trip_restores_every_batch(self):
        items = self._allocate("8")

        for item in items:
            reverse_sale_item(sale_item_id=item.pk, actor=ACTOR, now=self.now)

        self.b1.refresh_from_db()
        self.b2.refresh_from_db()
        self.product.refresh_from_db()
        self.sale.refresh_from_db()

        self.assertEqual(self.b1.stock_left, Decimal("5"))
        self.assertEqual(self.b2.stock_left, Decimal("10"))
        self.assertEqual(self.product.in_stock, Decimal("15"))
        self.assertEqual(self.sale.total_amount, Decimal("0.00"))
        self.assertFalse(SaleItem.objects.exists())

    def test_reverse_writes_delete_entry(self):
        item = self._allocate("2")[0]
        reverse_sale_item(sale_item_id=item.pk, actor=ACTOR, now=self.now)

        last = ActivityLog.objects.order_by("-id").first()
        self.assertEqual(last.activity, ActivityLog.Activity.DELETE)
        self.assertTrue(last.description.startswith(f"SaleItem ID {item.pk}"))

    def test_reverse_unknown_item(self):
        with self.assertRaises(NotFoundError):
            reverse_sale_item(sale_item_id=424242, actor=ACTOR, now=self.now)

    def test_allocation_and_reversal_lock_sale_before_product(self):
        order = []
        real_lock_sale = stock_fifo._lock_sale
        real_lock_product = stock_fifo._lock_product

        def lock_sale(sale):
            order.append("sale")
            return real_lock_sale(sale)

        def lock_product(product_id):
            order.append("product")
            return real_lock_product(product_id)

        with mock.patch.object(stock_fifo, "_lock_sale", side_effect=lock_sale), mock.patch.object(
            stock_fifo, "_lock_product", side_effect=lock_product
        ):
            item = self._allocate("1")[0]
            reverse_sale_item(sale_item_id=item.pk, actor=ACTOR, now=self.now)

        self.assertEqual(order, ["sale", "product", "sale", "product"])

    def test_second_reversal_from_stale_read_credits_nothing(self):
        # Both callers read the item before either took the locks.
        first, second = self._allocate("1")[0], self._allocate("3")[0]
        stale_refs = stock_fifo._sale_item_refs(first.pk)

        reverse_sale_item(sale_item_id=first.pk, actor=ACTOR, now=self.now)

        with mock.patch.object(stock_fifo, "_sale_item_refs", return_value=stale_refs):
            with self.assertRaises(NotFoundError):
                reverse_sale_item(sale_item_id=first.pk, actor=ACTOR, now=self.now)

        self.b1.refresh_from_db()
        self.product.refresh_from_db()
        self.sale.refresh_from_db()

        self.assertEqual(self.b1.stock_left, Decimal("2"))
        self.assertEqual(self.product.in_stock, Decimal("12"))
        self.assertEqual(self.sale.total_amount, Decimal("18.00"))
        self.assertTrue(SaleItem.objects.filter(pk=second.pk).exists())
        self.assertEqual(
            ActivityLog.objects.filter(
                activity=ActivityLog.Activity.DELETE,
                description__startswith=f"SaleItem ID {first.pk} ",
            ).count(),
            1,
        )


class ConcreteScenarioTests(TestCase):
    """
    Product P: receive 20, sell 15, fail to sell 8, reverse the 15.
    """

    def setUp(self):
        self.now = timezone.now()
        self.product = create_product(name="P", price="3.00", actor=ACTOR, now=self.now)
        self.order = receive(
            order_date=date(2024, 3, 1),
            items=[{"product_id": self.product.pk, "quantity": "20", "unit_cost": "2.0"}],
            credit_stock=True,
            actor=ACTOR,
            now=self.now,
        )
        self.batch = StockBatch.objects.get(order=self.order)

    def test_scenario(self):
        self.product.refresh_from_db()
        self.assertEqual(self.batch.stock_left, Decimal("20"))
        self.assertEqual(self.product.in_stock, Decimal("20"))

        s1 = _empty_sale(self.now)
        items = allocate_fifo(
            sale=s1, product_id=self.product.pk, quantity="15", unit_price="3.0",
            actor=ACTOR, now=self.now,
        )
        self.assertEqual(len(items), 1)
        self.assertEqual(items[0].amount, Decimal("15"))
        self.assertEqual(items[0].batch_id, self.batch.pk)

        self.batch.refresh_from_db()
        self.product.refresh_from_db()
        self.assertEqual(self.batch.stock_left, Decimal("5"))
        self.assertEqual(self.product.in_stock, Decimal("5"))

        s2 = _empty_sale(self.now)
        with self.assertRaises(OutOfStockError) as ctx:
            allocate_fifo(
                sale=s2, product_id=self.product.pk, quantity="8", unit_price="3.0",
                actor=ACTOR, now=self.now,
            )
        self.assertEqual(
            str(ctx.exception),
            "Product 'P' is out of stock. Requested: 8.00, Available: 5.00",
        )

        self.batch.refresh_from_db()
        self.product.refresh_from_db()
        self.assertEqual(self.batch.stock_left, Decimal("5"))
        self.assertEqual(self.product.in_stock, Decimal("5"))

        reverse_sale_item(sale_item_id=items[0].pk, actor=ACTOR, now=self.now)

        self.batch.refresh_from_db()
        self.product.refresh_from_db()
        self.assertEqual(self.batch.stock_left, Decimal("20"))
        self.assertEqual(self.product.in_stock, Decimal("20"))
