# products/management/commands/check_stock_ledger.py

from __future__ import annotations

from django.core.management.base import BaseCommand

from products.models import Product
from products.services.ledger_check import verify_all_products, verify_ledger


class Command(BaseCommand):
    help = "Check Product.in_stock against the sum of its batches' stock_left (read-only)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--product",
            dest="product_id",
            type=int,
            help="Check a single product id (optional)",
        )
        parser.add_argument(
            "--strict",
            action="store_true",
            help="Fail (non-zero exit) if any mismatch is found.",
        )

    def handle(self, *args, **options):
        strict = bool(options.get("strict"))
        product_id = options.get("product_id")

        self.stdout.write(self.style.MIGRATE_HEADING("Stock Ledger Check"))

        if product_id is not None:
            product = Product.objects.filter(pk=product_id).first()
            if product is None:
                self.stderr.write(self.style.ERROR(f"Unknown product id: {product_id}"))
                return self._exit(strict)
            checks = [verify_ledger(product)]
        else:
            checks = verify_all_products()

        mismatches = [c for c in checks if not c.ok]

        self.stdout.write(f"Products checked: {len(checks)}")

        for check in mismatches:
            self.stdout.write(
                self.style.ERROR(
                    f"[MISMATCH] product={check.product_id} in_stock={check.in_stock} "
                    f"batch_total={check.batch_total} diff={check.difference}"
                )
            )

        if mismatches:
            self.stdout.write(self.style.ERROR(f"{len(mismatches)} product(s) out of balance"))
        else:
            self.stdout.write(self.style.SUCCESS("[OK] Every product matches its batch total"))

        return self._exit(strict and bool(mismatches))

    def _exit(self, fail: bool):
        if fail:
            raise SystemExit(1)
