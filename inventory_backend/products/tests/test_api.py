# products/tests/test_api.py

from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from products.models import Product, StockBatch
from products.services import create_product
from purchases.services import receive

User = get_user_model()


class ProductApiTests(APITestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="stock-manager", password="pass12345")
        self.client.force_authenticate(self.user)
        self.now = timezone.now()

    def test_create_with_initial_stock(self):
        res = self.client.post(
            "/api/products/",
            {"name": "Honey", "price": "6.00", "unit": "jar", "initial_stock": "9"},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_201_CREATED, res.data)
        self.assertEqual(Decimal(res.data["in_stock"]), Decimal("9"))
        self.assertEqual(res.data["created_by"], "stock-manager")
        self.assertTrue(res.data["product_key"].startswith("PR"))
        self.assertEqual(StockBatch.objects.get(product_id=res.data["id"]).stock_left, Decimal("9"))

    def test_patch_rejects_stock(self):
        product = create_product(name="Ham", price="4.00", actor="a", now=self.now)

        res = self.client.patch(f"/api/products/{product.pk}/", {"in_stock": "50"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

        res = self.client.patch(f"/api/products/{product.pk}/", {"price": "4.25"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_200_OK, res.data)
        self.assertEqual(res.data["price"], "4.25")
        self.assertEqual(res.data["modified_by"], "stock-manager")

    def test_put_not_allowed(self):
        product = create_product(name="Ham", price="4.00", actor="a", now=self.now)
        res = self.client.put(f"/api/products/{product.pk}/", {"name": "X"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)

    def test_stock_endpoint(self):
        product = create_product(
            name="Eggs", price="0.30", warning_stock_level="12", actor="a", now=self.now
        )
        receive(
            order_date=date(2024, 9, 1),
            items=[{"product_id": product.pk, "quantity": "10", "unit_cost": "0.20"}],
            actor="a",
            now=self.now,
        )

        res = self.client.get(f"/api/products/{product.pk}/stock/")

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(Decimal(res.data["in_stock"]), Decimal("10"))
        self.assertEqual(Decimal(res.data["batch_total"]), Decimal("10"))
        self.assertTrue(res.data["is_low"])
        self.assertTrue(res.data["ledger_ok"])

        res = self.client.get("/api/products/alerts/low-stock/")
        self.assertEqual(res.data["count"], 1)

    def test_unknown_product_is_404(self):
        self.assertEqual(
            self.client.get("/api/products/424242/stock/").status_code,
            status.HTTP_404_NOT_FOUND,
        )
        self.assertEqual(
            self.client.delete("/api/products/424242/").status_code,
            status.HTTP_404_NOT_FOUND,
        )

    def test_delete(self):
        product = create_product(name="Tofu", price="2.00", initial_stock="2", actor="a", now=self.now)
        res = self.client.delete(f"/api/products/{product.pk}/")
        self.assertEqual(res.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Product.objects.filter(pk=product.pk).exists())

    def test_batches_listing(self):
        product = create_product(name="Rice", price="2.00", initial_stock="5", actor="a", now=self.now)

        res = self.client.get("/api/products/batches/", {"product_id": product.pk})

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["count"], 1)
        self.assertEqual(res.data["results"][0]["product_name"], "Rice")

    def test_categories(self):
        res = self.client.post("/api/products/categories/", {"name": "Bakery"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_201_CREATED, res.data)

        res = self.client.post("/api/products/categories/", {"name": "bakery"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
