from decimal import Decimal

from django.db import transaction
from django.test import TestCase

from apps.catalog.models import Product
from apps.utils.exceptions import ConcurrencyError, NotFoundError, ValidationError
from .services import InventoryService


def make_product(**overrides):
    data = {
        "name": "Golden Hoop Earrings",
        "description": "Lightweight golden hoops for daily wear.",
        "price": Decimal("899.00"),
        "discount": Decimal("10"),
        "category": "earrings",
        "stock": 5,
        "images": ["https://img.example.com/hoops.jpg"],
    }
    data.update(overrides)
    return Product.objects.create(**data)


class InventoryServiceTests(TestCase):
    def setUp(self):
        self.product = make_product()

    def test_lock_product_returns_row(self):
        with transaction.atomic():
            locked = InventoryService.lock_product(str(self.product.id))
        self.assertEqual(locked.pk, self.product.pk)

    def test_lock_missing_or_malformed_id_raises_not_found(self):
        with transaction.atomic():
            with self.assertRaisesMessage(NotFoundError, "Product not-a-uuid not found"):
                InventoryService.lock_product("not-a-uuid")
            with self.assertRaises(NotFoundError):
                InventoryService.lock_product("00000000-0000-0000-0000-000000000000")

    def test_decrement_stock(self):
        with transaction.atomic():
            product = InventoryService.lock_product(self.product.id)
            InventoryService.decrement_stock(product, 3)
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 2)

    def test_decrement_detects_stock_changed_since_read(self):
        stale = Product.objects.get(pk=self.product.pk)
        Product.objects.filter(pk=self.product.pk).update(stock=1)

        with self.assertRaises(ConcurrencyError):
            InventoryService.decrement_stock(stale, 3)

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 1)

    def test_set_stock(self):
        InventoryService.set_stock(self.product.id, 42)
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 42)

    def test_set_stock_rejects_negative(self):
        with self.assertRaises(ValidationError):
            InventoryService.set_stock(self.product.id, -1)
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 5)

    def test_low_stock_lists_lowest_first(self):
        make_product(name="Pearl Drop Earrings", stock=0)
        make_product(name="Chain Necklace", stock=40, category="necklaces")
        names = [p.name for p in InventoryService.low_stock(threshold=10)]
        self.assertEqual(names, ["Pearl Drop Earrings", "Golden Hoop Earrings"])
