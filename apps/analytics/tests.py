# apps/analytics/tests.py
from datetime import timedelta
from decimal import Decimal

from django.core.cache import cache
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from apps.accounts.models import Role, User
from apps.inventory.tests import make_product
from apps.orders.models import Order
from apps.orders.services import CartLine, CheckoutRequest, OrderService
from .services import dashboard_stats


def place(*lines):
    return OrderService.create_order(CheckoutRequest(
        items=tuple(CartLine(product_id=str(p.id), quantity=q) for p, q in lines),
        customer_name="Asha Rao",
        customer_email="asha@example.com",
        customer_phone="9876543210",
        address_line1="12 MG Road",
        city="Pune",
        state="Maharashtra",
        pincode="411001",
    ))


class DashboardStatsTests(TestCase):
    def setUp(self):
        self.hoops = make_product(name="Golden Hoops", price=Decimal("100.00"), discount=Decimal("0"), stock=50)
        self.ring = make_product(name="Silver Band", price=Decimal("50.00"), discount=Decimal("0"), stock=12)
        self.set = make_product(name="Bridal Set", price=Decimal("400.00"), discount=Decimal("0"), stock=3)

        old = place((self.hoops, 1))
        Order.objects.filter(pk=old.pk).update(created_at=timezone.now() - timedelta(days=40))

        place((self.hoops, 2), (self.ring, 1))
        place((self.ring, 4))

    def test_sales_totals(self):
        stats = dashboard_stats()
        self.assertEqual(stats["total_orders"], 3)
        self.assertEqual(stats["total_sales"], Decimal("550.00"))
        self.assertEqual(stats["today_sales"], Decimal("450.00"))
        self.assertEqual(stats["month_sales"], Decimal("450.00"))

    def test_best_sellers_ranked_by_quantity(self):
        best = dashboard_stats()["best_selling_products"]
        self.assertEqual([(p["name"], p["total_sold"]) for p in best], [("Silver Band", 5), ("Golden Hoops", 3)])

    def test_low_stock_lowest_first(self):
        low = dashboard_stats()["low_stock_products"]
        self.assertEqual([(p["name"], p["stock"]) for p in low], [("Bridal Set", 3), ("Silver Band", 7)])

    def test_empty_store(self):
        Order.objects.all().delete()
        stats = dashboard_stats()
        self.assertEqual(stats["total_sales"], Decimal("0.00"))
        self.assertEqual(stats["best_selling_products"], [])


class DashboardAPITests(TestCase):
    def setUp(self):
        cache.clear()
        self.client = APIClient()

    def test_admin_only(self):
        customer = User.objects.create_user(email="asha@example.com", password="Sparkle#2024x", name="Asha")
        admin = User.objects.create_user(
            email="admin@example.com", password="Sparkle#2024x", name="Admin", role=Role.ADMIN
        )

        self.assertEqual(self.client.get("/api/v1/admin/dashboard/").status_code, status.HTTP_401_UNAUTHORIZED)

        self.client.force_authenticate(customer)
        self.assertEqual(self.client.get("/api/v1/admin/dashboard/").status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(admin)
        resp = self.client.get("/api/v1/admin/dashboard/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["total_sales"], "0.00")
        self.assertEqual(resp.data["total_orders"], 0)
