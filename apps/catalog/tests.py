# apps/catalog/tests.py
from decimal import Decimal
from io import StringIO

from django.core.cache import cache
from django.core.management import call_command
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from apps.accounts.models import Role, User
from apps.inventory.tests import make_product
from apps.orders.models import Order, OrderItem
from apps.reviews.models import Review
from .models import Product

PASSWORD = "Sparkle#2024x"


class ProductModelTests(TestCase):
    def test_sale_price_applies_percentage_discount(self):
        product = make_product(price=Decimal("899.00"), discount=Decimal("10"))
        self.assertEqual(product.sale_price, Decimal("809.1000"))

    def test_in_stock(self):
        self.assertTrue(make_product(stock=1).in_stock)
        self.assertFalse(make_product(name="Sold out", stock=0).in_stock)


class PublicProductAPITests(TestCase):
    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.hoops = make_product(name="Golden Hoops", price=Decimal("899.00"), featured=True)
        self.ring = make_product(name="Diamond-Cut Ring", category="rings", price=Decimal("1799.00"))
        self.set = make_product(name="Bridal Set", category="sets", price=Decimal("4999.00"))

    def _names(self, resp):
        return [p["name"] for p in resp.data]

    def test_list_is_public_and_newest_first(self):
        resp = self.client.get("/api/v1/catalog/products/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(self._names(resp), ["Bridal Set", "Diamond-Cut Ring", "Golden Hoops"])

    def test_filter_by_category(self):
        resp = self.client.get("/api/v1/catalog/products/", {"category": "rings"})
        self.assertEqual(self._names(resp), ["Diamond-Cut Ring"])

        resp = self.client.get("/api/v1/catalog/products/", {"category": "all"})
        self.assertEqual(len(resp.data), 3)

    def test_filter_by_price_range_and_sort(self):
        resp = self.client.get(
            "/api/v1/catalog/products/",
            {"minPrice": "1000", "maxPrice": "5000", "sort": "price-asc"},
        )
        self.assertEqual(self._names(resp), ["Diamond-Cut Ring", "Bridal Set"])

        resp = self.client.get("/api/v1/catalog/products/", {"sort": "price-desc"})
        self.assertEqual(self._names(resp), ["Bridal Set", "Diamond-Cut Ring", "Golden Hoops"])

    def test_invalid_price_filter_is_rejected(self):
        for params in ({"minPrice": "abc"}, {"maxPrice": "-5"}):
            resp = self.client.get("/api/v1/catalog/products/", params)
            self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
            self.assertEqual(resp.data["code"], "validation_error")

    def test_featured_filter(self):
        resp = self.client.get("/api/v1/catalog/products/", {"featured": "true"})
        self.assertEqual(self._names(resp), ["Golden Hoops"])

    def test_ratings_only_count_approved_reviews(self):
        alice = User.objects.create_user(email="alice@example.com", password=PASSWORD, name="Alice")
        bob = User.objects.create_user(email="bob@example.com", password=PASSWORD, name="Bob")
        carol = User.objects.create_user(email="carol@example.com", password=PASSWORD, name="Carol")
        Review.objects.create(product=self.hoops, user=alice, rating=5, comment="Gorgeous and light.", approved=True)
        Review.objects.create(product=self.hoops, user=bob, rating=4, comment="Lovely everyday pair.", approved=True)
        Review.objects.create(product=self.hoops, user=carol, rating=1, comment="Pending moderation.")

        resp = self.client.get("/api/v1/catalog/products/", {"featured": "true"})
        self.assertEqual(resp.data[0]["review_count"], 2)
        self.assertEqual(resp.data[0]["average_rating"], 4.5)

        detail = self.client.get(f"/api/v1/catalog/products/{self.hoops.id}/")
        self.assertEqual(detail.status_code, status.HTTP_200_OK)
        self.assertEqual([r["user"]["name"] for r in detail.data["reviews"]], ["Bob", "Alice"])

    def test_detail_missing_product_is_404(self):
        for pk in ("00000000-0000-0000-0000-000000000000", "nope"):
            resp = self.client.get(f"/api/v1/catalog/products/{pk}/")
            self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
            self.assertEqual(resp.data["error"], "Product not found")


class AdminProductAPITests(TestCase):
    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.admin = User.objects.create_user(
            email="admin@example.com", password=PASSWORD, name="Admin", role=Role.ADMIN
        )
        self.customer = User.objects.create_user(email="asha@example.com", password=PASSWORD, name="Asha")
        self.client.force_authenticate(self.admin)

    def _payload(self, **overrides):
        payload = {
            "name": "Pearl Drop Earrings",
            "description": "Elegant pearl drops for evening wear.",
            "price": "1299.00",
            "discount": "15",
            "category": "earrings",
            "stock": 30,
            "images": ["https://img.example.com/pearl.jpg"],
            "material": "Sterling Silver",
        }
        payload.update(overrides)
        return payload

    def test_customers_cannot_manage_products(self):
        self.client.force_authenticate(self.customer)
        resp = self.client.post("/api/v1/admin/products/", self._payload(), format="json")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(None)
        resp = self.client.get("/api/v1/admin/products/")
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_create_product(self):
        resp = self.client.post("/api/v1/admin/products/", self._payload(), format="json")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertTrue(resp.data["success"])
        self.assertEqual(resp.data["product"]["sale_price"], "1104.15")
        self.assertEqual(Product.objects.get().stock, 30)

    def test_create_validates_fields(self):
        cases = [
            {"price": "0"},
            {"price": "1000001"},
            {"discount": "101"},
            {"stock": -1},
            {"category": "anklets"},
            {"images": []},
            {"images": [f"https://img.example.com/{i}.jpg" for i in range(11)]},
        ]
        for overrides in cases:
            resp = self.client.post("/api/v1/admin/products/", self._payload(**overrides), format="json")
            self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST, overrides)
        self.assertEqual(Product.objects.count(), 0)

    def test_update_sets_stock(self):
        product = make_product(stock=5)
        resp = self.client.patch(
            f"/api/v1/admin/products/{product.id}/", {"stock": 12, "featured": True}, format="json"
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        product.refresh_from_db()
        self.assertEqual(product.stock, 12)
        self.assertTrue(product.featured)

    def test_update_missing_product_is_404(self):
        resp = self.client.put(
            "/api/v1/admin/products/00000000-0000-0000-0000-000000000000/", self._payload(), format="json"
        )
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_delete_unused_product(self):
        product = make_product()
        resp = self.client.delete(f"/api/v1/admin/products/{product.id}/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertFalse(Product.objects.filter(pk=product.pk).exists())

    def test_delete_refused_when_product_was_ordered(self):
        product = make_product()
        order = Order.objects.create(
            customer_name="Asha",
            customer_email="asha@example.com",
            customer_phone="9876543210",
            address_line1="12 MG Road",
            city="Pune",
            state="Maharashtra",
            pincode="411001",
            total_price=Decimal("809.10"),
        )
        OrderItem.objects.create(order=order, product=product, quantity=1, price=product.sale_price)

        resp = self.client.delete(f"/api/v1/admin/products/{product.id}/")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data["orderCount"], 1)
        self.assertTrue(Product.objects.filter(pk=product.pk).exists())

        listing = self.client.get("/api/v1/admin/products/")
        self.assertEqual(listing.data[0]["order_count"], 1)


class SeedStoreCommandTests(TestCase):
    def test_seed_is_idempotent(self):
        call_command("seed_store", stdout=StringIO())
        call_command("seed_store", stdout=StringIO())
        self.assertEqual(Product.objects.count(), 8)
        self.assertTrue(User.objects.get(email="admin@chulbulijewels.com").is_admin)
        self.assertEqual(User.objects.get(email="customer@example.com").role, Role.CUSTOMER)
