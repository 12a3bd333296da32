# apps/orders/tests.py
import concurrent.futures
import typing
from decimal import Decimal
from unittest import mock

from django.conf import settings
from django.core.cache import cache
from django.db import DatabaseError, OperationalError, connection
from django.test import TestCase, TransactionTestCase, skipUnlessDBFeature
from rest_framework import status
from rest_framework.test import APIClient

from apps.accounts.models import Role, User
from apps.catalog.models import Product
from apps.inventory.services import InventoryService
from apps.inventory.tests import make_product
from apps.utils.exceptions import (
    ConcurrencyError,
    InsufficientStockError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from .models import Order, OrderItem
from .serializers import CheckoutSerializer
from .services import CartLine, CheckoutRequest, OrderService

PASSWORD = "Sparkle#2024x"

SHIPPING = {
    "customerName": "Asha Rao",
    "customerEmail": "Asha@Example.com",
    "customerPhone": "9876543210",
    "addressLine1": "12 MG Road",
    "addressLine2": "Near the clock tower",
    "city": "Pune",
    "state": "Maharashtra",
    "pincode": "411001",
}


def checkout(*lines, user=None):
    return CheckoutRequest(
        items=tuple(CartLine(product_id=str(product.id), quantity=qty) for product, qty in lines),
        customer_name="Asha Rao",
        customer_email="asha@example.com",
        customer_phone="9876543210",
        address_line1="12 MG Road",
        city="Pune",
        state="Maharashtra",
        pincode="411001",
        user=user,
    )


def stock_of(product):
    return Product.objects.get(pk=product.pk).stock


class LockNotAvailable(Exception):
    sqlstate = "55P03"


class OrderServiceTests(TestCase):
    def setUp(self):
        self.earrings = make_product(name="Golden Hoops", price=Decimal("100.00"), discount=Decimal("10"), stock=5)
        self.ring = make_product(name="Silver Band", price=Decimal("50.00"), discount=Decimal("0"), stock=5)

    def test_large_total_fits_order_total_column(self):
        tiara = make_product(name="Bridal Tiara", price=Decimal("99999999.99"), discount=Decimal("0"), stock=200)

        order = OrderService.create_order(checkout((tiara, 100), (tiara, 100)))

        order.refresh_from_db()
        self.assertEqual(order.total_price, Decimal("19999999998.00"))

    def test_total_uses_discounted_prices(self):
        order = OrderService.create_order(checkout((self.earrings, 2), (self.ring, 1)))

        self.assertEqual(order.total_price, Decimal("230.00"))
        self.assertEqual(order.status, Order.Status.PLACED)
        self.assertEqual(order.payment_method, Order.PaymentMethod.COD)
        self.assertEqual(stock_of(self.earrings), 3)
        self.assertEqual(stock_of(self.ring), 4)

        prices = {item.product_id: item.price for item in order.items.all()}
        self.assertEqual(prices[self.earrings.id], Decimal("90.0000"))
        self.assertEqual(prices[self.ring.id], Decimal("50.0000"))

    def test_total_is_rounded_once_not_per_line(self):
        # 10.00 at 33.33% off is 6.667 per unit; per-line rounding would give 20.01
        charm = make_product(name="Charm", price=Decimal("10.00"), discount=Decimal("33.33"), stock=5)
        order = OrderService.create_order(checkout((charm, 3)))

        self.assertEqual(order.total_price, Decimal("20.00"))
        self.assertEqual(order.items.get().price, Decimal("6.6670"))

    def test_total_rounds_half_up(self):
        pin = make_product(name="Pin", price=Decimal("0.25"), discount=Decimal("50"), stock=5)
        order = OrderService.create_order(checkout((pin, 1)))
        self.assertEqual(order.total_price, Decimal("0.13"))

    def test_failure_on_later_line_rolls_back_earlier_lines(self):
        scarce = make_product(name="Bridal Set", stock=1)

        with self.assertRaises(InsufficientStockError) as ctx:
            OrderService.create_order(checkout((self.earrings, 2), (scarce, 2), (self.ring, 1)))

        self.assertEqual(ctx.exception.product_name, "Bridal Set")
        self.assertEqual(ctx.exception.available, 1)
        self.assertEqual(ctx.exception.requested, 2)
        self.assertEqual(stock_of(self.earrings), 5)
        self.assertEqual(stock_of(self.ring), 5)
        self.assertEqual(stock_of(scarce), 1)
        self.assertFalse(Order.objects.exists())
        self.assertFalse(OrderItem.objects.exists())

    def test_unknown_product_is_not_found(self):
        request = CheckoutRequest(
            items=(
                CartLine(product_id=str(self.earrings.id), quantity=1),
                CartLine(product_id="00000000-0000-0000-0000-000000000000", quantity=1),
            ),
            customer_name="Asha Rao",
            customer_email="asha@example.com",
            customer_phone="9876543210",
            address_line1="12 MG Road",
            city="Pune",
            state="Maharashtra",
            pincode="411001",
        )
        with self.assertRaisesMessage(NotFoundError, "00000000-0000-0000-0000-000000000000"):
            OrderService.create_order(request)
        self.assertEqual(stock_of(self.earrings), 5)

    def test_duplicate_lines_see_each_others_decrement(self):
        with self.assertRaisesMessage(InsufficientStockError, "Available: 1, Requested: 2"):
            OrderService.create_order(checkout((self.ring, 4), (self.ring, 2)))
        self.assertEqual(stock_of(self.ring), 5)

        order = OrderService.create_order(checkout((self.ring, 3), (self.ring, 2)))
        self.assertEqual(order.items.count(), 2)
        self.assertEqual(stock_of(self.ring), 0)

    def test_stock_changed_after_lock_is_a_conflict(self):
        real_lock = InventoryService.lock_product

        def lock_then_drain(product_id):
            product = real_lock(product_id)
            Product.objects.filter(pk=product.pk).update(stock=0)
            return product

        with mock.patch.object(InventoryService, "lock_product", side_effect=lock_then_drain):
            with self.assertRaises(ConcurrencyError):
                OrderService.create_order(checkout((self.earrings, 1)))

        self.assertFalse(Order.objects.exists())

    def test_lock_timeout_is_a_conflict(self):
        error = OperationalError("canceling statement due to lock timeout")
        error.__cause__ = LockNotAvailable()

        with mock.patch.object(InventoryService, "lock_product", side_effect=error):
            with self.assertRaises(ConcurrencyError):
                OrderService.create_order(checkout((self.earrings, 1)))

    def test_other_database_errors_are_internal(self):
        with mock.patch.object(InventoryService, "lock_product", side_effect=DatabaseError("connection lost")):
            with self.assertLogs("apps.orders.services", level="ERROR"):
                with self.assertRaises(InternalError) as ctx:
                    OrderService.create_order(checkout((self.earrings, 1)))

        self.assertNotIn("connection lost", ctx.exception.message)
        self.assertFalse(Order.objects.exists())

    def test_guest_order_has_no_user(self):
        order = OrderService.create_order(checkout((self.ring, 1)))
        self.assertIsNone(order.user)

    def test_update_status(self):
        order = OrderService.create_order(checkout((self.ring, 1)))

        updated = OrderService.update_status(order.id, "shipped")
        self.assertEqual(updated.status, Order.Status.SHIPPED)

        with self.assertRaisesMessage(ValidationError, "Invalid status"):
            OrderService.update_status(order.id, "cancelled")
        with self.assertRaises(NotFoundError):
            OrderService.update_status("00000000-0000-0000-0000-000000000000", "packed")


class CheckoutSerializerTests(TestCase):
    def _payload(self, **overrides):
        payload = {**SHIPPING, "items": [{"productId": "00000000-0000-0000-0000-0000000000AB", "quantity": 1}]}
        payload.update(overrides)
        return payload

    def test_builds_typed_request_with_normalized_fields(self):
        serializer = CheckoutSerializer(data=self._payload(customerName="<b>Asha Rao</b>"))
        self.assertTrue(serializer.is_valid(), serializer.errors)

        request = serializer.to_checkout_request()
        self.assertEqual(request.customer_name, "Asha Rao")
        self.assertEqual(request.customer_email, "asha@example.com")
        self.assertEqual(request.items, (CartLine("00000000-0000-0000-0000-0000000000ab", 1),))
        self.assertIsNone(request.user)

    def test_invalid_payload_never_touches_the_database(self):
        for _ in range(2):
            with self.assertNumQueries(0):
                serializer = CheckoutSerializer(data=self._payload(pincode="011001"))
                self.assertFalse(serializer.is_valid())
            self.assertIn("pincode", serializer.errors)

    def test_field_rules(self):
        cases = [
            {"items": []},
            {"items": [{"productId": "x", "quantity": 0}]},
            {"items": [{"productId": "x", "quantity": 101}]},
            {"items": [{"productId": "x", "quantity": 2.5}]},
            {"customerName": "A"},
            {"customerEmail": "not-an-email"},
            {"customerPhone": "5876543210"},
            {"addressLine1": "abc"},
            {"city": "P"},
            {"pincode": "41100"},
        ]
        for overrides in cases:
            serializer = CheckoutSerializer(data=self._payload(**overrides))
            self.assertFalse(serializer.is_valid(), overrides)

    def test_quantity_must_be_a_json_integer(self):
        for quantity in ["3", 2.0, "2.0", True]:
            serializer = CheckoutSerializer(
                data=self._payload(items=[{"productId": "x", "quantity": quantity}])
            )
            self.assertFalse(serializer.is_valid(), quantity)
            self.assertEqual(
                serializer.errors["items"][0]["quantity"][0], "Quantity must be a whole number"
            )

    def test_cart_line_count_is_capped(self):
        line = {"productId": "00000000-0000-0000-0000-0000000000ab", "quantity": 100}

        limit = settings.ORDER_MAX_CART_LINES
        serializer = CheckoutSerializer(data=self._payload(items=[line] * limit))
        self.assertTrue(serializer.is_valid(), serializer.errors)

        serializer = CheckoutSerializer(data=self._payload(items=[line] * (limit + 1)))
        self.assertFalse(serializer.is_valid())
        self.assertEqual(
            serializer.errors["items"]["non_field_errors"][0],
            f"Cart cannot contain more than {limit} items",
        )

    def test_checkout_request_fields_are_typed(self):
        hints = typing.get_type_hints(CheckoutRequest)
        self.assertEqual(hints["items"], tuple[CartLine, ...])
        self.assertEqual(hints["address_line2"], str | None)
        self.assertEqual(hints["user"], User | None)


class CheckoutAPITests(TestCase):
    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.earrings = make_product(name="Golden Hoops", price=Decimal("100.00"), discount=Decimal("10"), stock=5)
        self.ring = make_product(name="Silver Band", price=Decimal("50.00"), discount=Decimal("0"), stock=5)
        self.user = User.objects.create_user(email="asha@example.com", password=PASSWORD, name="Asha")
        self.other = User.objects.create_user(email="ravi@example.com", password=PASSWORD, name="Ravi")

    def _post(self, items, **overrides):
        payload = {**SHIPPING, "items": items}
        payload.update(overrides)
        return self.client.post("/api/v1/orders/", payload, format="json")

    def test_guest_checkout_ignores_client_prices(self):
        resp = self._post([
            {"productId": str(self.earrings.id), "quantity": 2, "price": "1.00"},
            {"productId": str(self.ring.id), "quantity": 1, "price": "1.00"},
        ], totalPrice="2.00")

        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data["total_price"], "230.00")
        self.assertIsNone(resp.data["user"])
        self.assertEqual(resp.data["customer_email"], "asha@example.com")
        self.assertEqual(
            [item["product"]["name"] for item in resp.data["items"]], ["Golden Hoops", "Silver Band"]
        )
        self.assertEqual(resp.data["items"][0]["price"], "90.0000")

    def test_user_comes_from_authentication_not_body(self):
        self.client.force_authenticate(self.user)
        resp = self._post([{"productId": str(self.ring.id), "quantity": 1}], userId=str(self.other.id))
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Order.objects.get().user, self.user)

    def test_guest_cannot_claim_a_user(self):
        resp = self._post([{"productId": str(self.ring.id), "quantity": 1}], userId=str(self.other.id))
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertIsNone(Order.objects.get().user)

    def test_empty_cart(self):
        resp = self._post([])
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data["error"], "Cart is empty")

    def test_invalid_phone_is_reported(self):
        resp = self._post([{"productId": str(self.ring.id), "quantity": 1}], customerPhone="12345")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data["code"], "validation_error")
        self.assertIn("customerPhone", resp.data["fields"])
        self.assertEqual(stock_of(self.ring), 5)

    def test_unknown_product_is_404(self):
        resp = self._post([{"productId": "missing-product", "quantity": 1}])
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp.data["error"], "Product missing-product not found")

    def test_insufficient_stock_is_400(self):
        resp = self._post([{"productId": str(self.ring.id), "quantity": 6}])
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data["code"], "insufficient_stock")
        self.assertEqual(resp.data["error"], "Insufficient stock for Silver Band. Available: 5, Requested: 6")

    def test_conflict_is_409(self):
        with mock.patch.object(
            InventoryService, "decrement_stock", side_effect=ConcurrencyError("Stock changed during processing.")
        ):
            resp = self._post([{"productId": str(self.ring.id), "quantity": 1}])
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(resp.data["code"], "concurrency_conflict")
        self.assertFalse(Order.objects.exists())

    def test_list_own_orders_newest_first(self):
        self.client.force_authenticate(self.user)
        first = self._post([{"productId": str(self.ring.id), "quantity": 1}]).data["id"]
        second = self._post([{"productId": str(self.earrings.id), "quantity": 1}]).data["id"]

        self.client.force_authenticate(self.other)
        self._post([{"productId": str(self.ring.id), "quantity": 1}])

        self.client.force_authenticate(self.user)
        resp = self.client.get("/api/v1/orders/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual([o["id"] for o in resp.data], [second, first])
        self.assertEqual(resp.data[0]["items"][0]["product"]["name"], "Golden Hoops")

    def test_list_requires_authentication(self):
        resp = self.client.get("/api/v1/orders/")
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)


class AdminOrderAPITests(TestCase):
    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.admin = User.objects.create_user(
            email="admin@example.com", password=PASSWORD, name="Admin", role=Role.ADMIN
        )
        self.customer = User.objects.create_user(email="asha@example.com", password=PASSWORD, name="Asha")
        product = make_product(stock=5)
        self.order = OrderService.create_order(checkout((product, 1), user=self.customer))
        self.client.force_authenticate(self.admin)

    def test_list_all_orders(self):
        resp = self.client.get("/api/v1/admin/orders/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data[0]["account"], {"name": "Asha", "email": "asha@example.com"})

    def test_update_status(self):
        resp = self.client.put(f"/api/v1/admin/orders/{self.order.id}/", {"status": "packed"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.Status.PACKED)

    def test_invalid_status(self):
        resp = self.client.put(f"/api/v1/admin/orders/{self.order.id}/", {"status": "lost"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data["error"], "Invalid status")

    def test_missing_order(self):
        resp = self.client.put(
            "/api/v1/admin/orders/00000000-0000-0000-0000-000000000000/", {"status": "packed"}, format="json"
        )
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_customers_are_forbidden(self):
        self.client.force_authenticate(self.customer)
        resp = self.client.get("/api/v1/admin/orders/")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)


@skipUnlessDBFeature("has_select_for_update")
class ConcurrentCheckoutTests(TransactionTestCase):
    # Real transactions in separate connections; needs row locks.
    # Skipped on SQLite, run with a PostgreSQL DATABASE_URL (see README).

    def setUp(self):
        self.product = make_product(name="Last Pair", stock=1)

    def test_two_buyers_one_unit(self):
        """Two simultaneous checkouts for the last unit: exactly one wins."""
        def place_order():
            try:
                OrderService.create_order(checkout((self.product, 1)))
                return "SUCCESS"
            except (InsufficientStockError, ConcurrencyError):
                return "FAILED"
            finally:
                connection.close()

        with concurrent.futures.ThreadPoolExecutor(max_workers=2) as executor:
            futures = [executor.submit(place_order) for _ in range(2)]
            results = [f.result() for f in futures]

        self.assertEqual(results.count("SUCCESS"), 1)
        self.assertEqual(results.count("FAILED"), 1)
        self.assertEqual(stock_of(self.product), 0)
        self.assertEqual(Order.objects.count(), 1)

    def test_opposite_cart_orders_do_not_deadlock(self):
        other = make_product(name="Matching Ring", stock=10)
        self.product.stock = 10
        self.product.save()

        def place_order(lines):
            try:
                OrderService.create_order(checkout(*lines))
                return "SUCCESS"
            finally:
                connection.close()

        with concurrent.futures.ThreadPoolExecutor(max_workers=4) as executor:
            futures = [
                executor.submit(place_order, [(self.product, 1), (other, 1)]),
                executor.submit(place_order, [(other, 1), (self.product, 1)]),
                executor.submit(place_order, [(self.product, 1), (other, 1)]),
                executor.submit(place_order, [(other, 1), (self.product, 1)]),
            ]
            results = [f.result() for f in futures]

        self.assertEqual(results, ["SUCCESS"] * 4)
        self.assertEqual(stock_of(self.product), 6)
        self.assertEqual(stock_of(other), 6)
