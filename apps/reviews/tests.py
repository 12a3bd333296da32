from decimal import Decimal

from django.core.cache import cache
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from apps.accounts.models import Role, User
from apps.inventory.tests import make_product
from apps.orders.models import Order, OrderItem
from .models import Review

PASSWORD = "Sparkle#2024x"


def place_order_for(user, product, quantity=1):
    order = Order.objects.create(
        user=user,
        customer_name=user.name,
        customer_email=user.email,
        customer_phone="9876543210",
        address_line1="12 MG Road",
        city="Pune",
        state="Maharashtra",
        pincode="411001",
        total_price=product.sale_price * quantity,
    )
    OrderItem.objects.create(order=order, product=product, quantity=quantity, price=product.sale_price)
    return order


class ReviewSubmitAPITests(TestCase):
    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.user = User.objects.create_user(email="asha@example.com", password=PASSWORD, name="Asha")
        self.product = make_product()
        self.client.force_authenticate(self.user)

    def _submit(self, **overrides):
        payload = {"productId": str(self.product.id), "rating": 5, "comment": "Absolutely love these hoops!"}
        payload.update(overrides)
        return self.client.post("/api/v1/reviews/", payload, format="json")

    def test_verified_buyer_review_is_pending(self):
        place_order_for(self.user, self.product)

        resp = self._submit(comment="<script>x</script>Absolutely love these hoops!")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertIn("after admin approval", resp.data["message"])

        review = Review.objects.get()
        self.assertFalse(review.approved)
        self.assertEqual(review.comment, "xAbsolutely love these hoops!")

    def test_requires_authentication(self):
        self.client.force_authenticate(None)
        resp = self._submit()
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_non_buyer_is_forbidden(self):
        resp = self._submit()
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(resp.data["error"], "You can only review products you have purchased")
        self.assertFalse(Review.objects.exists())

    def test_unknown_product_is_404(self):
        resp = self._submit(productId="00000000-0000-0000-0000-000000000000")
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_duplicate_review_rejected(self):
        place_order_for(self.user, self.product)
        self._submit()
        resp = self._submit(rating=3, comment="Changed my mind about these.")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data["error"], "You have already reviewed this product")
        self.assertEqual(Review.objects.count(), 1)

    def test_rating_and_comment_bounds(self):
        place_order_for(self.user, self.product)
        for overrides in ({"rating": 0}, {"rating": 6}, {"comment": "too short"}, {"comment": "x" * 1001}):
            resp = self._submit(**overrides)
            self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST, overrides)
        self.assertFalse(Review.objects.exists())


class AdminReviewAPITests(TestCase):
    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.admin = User.objects.create_user(
            email="admin@example.com", password=PASSWORD, name="Admin", role=Role.ADMIN
        )
        self.customer = User.objects.create_user(email="asha@example.com", password=PASSWORD, name="Asha")
        self.product = make_product()
        self.review = Review.objects.create(
            product=self.product, user=self.customer, rating=4, comment="Lovely everyday pair."
        )
        self.client.force_authenticate(self.admin)

    def test_list_includes_pending_reviews(self):
        resp = self.client.get("/api/v1/admin/reviews/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data[0]["user"]["email"], "asha@example.com")
        self.assertEqual(resp.data[0]["product"]["name"], self.product.name)
        self.assertFalse(resp.data[0]["approved"])

    def test_approve_and_reject(self):
        resp = self.client.put(f"/api/v1/admin/reviews/{self.review.id}/", {"approved": True}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.review.refresh_from_db()
        self.assertTrue(self.review.approved)

        self.client.put(f"/api/v1/admin/reviews/{self.review.id}/", {"approved": False}, format="json")
        self.review.refresh_from_db()
        self.assertFalse(self.review.approved)

    def test_delete(self):
        resp = self.client.delete(f"/api/v1/admin/reviews/{self.review.id}/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertFalse(Review.objects.exists())

    def test_missing_review_is_404(self):
        resp = self.client.delete("/api/v1/admin/reviews/00000000-0000-0000-0000-000000000000/")
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_customers_cannot_moderate(self):
        self.client.force_authenticate(self.customer)
        resp = self.client.put(f"/api/v1/admin/reviews/{self.review.id}/", {"approved": True}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
