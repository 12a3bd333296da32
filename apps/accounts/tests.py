from django.core.cache import cache
from django.test import TestCase
from rest_framework.test import APIClient
from rest_framework import status

from apps.accounts.models import User, Role

STRONG_PASSWORD = "Sparkle#2024x"


class UserManagerTests(TestCase):
    def test_create_user_normalizes_email_and_defaults_to_customer(self):
        user = User.objects.create_user(email="Asha@Example.com", password=STRONG_PASSWORD, name="Asha")
        self.assertEqual(user.email, "asha@example.com")
        self.assertEqual(user.role, Role.CUSTOMER)
        self.assertFalse(user.is_admin)
        self.assertTrue(user.check_password(STRONG_PASSWORD))

    def test_create_superuser_is_admin(self):
        admin = User.objects.create_superuser(email="admin@example.com", password=STRONG_PASSWORD, name="Admin")
        self.assertTrue(admin.is_staff)
        self.assertEqual(admin.role, Role.ADMIN)
        self.assertTrue(admin.is_admin)


class AuthAPITests(TestCase):

    def setUp(self):
        cache.clear()
        self.client = APIClient()

    def _signup(self, **overrides):
        payload = {"name": "Asha", "email": "asha@example.com", "password": STRONG_PASSWORD}
        payload.update(overrides)
        return self.client.post("/api/v1/auth/signup/", payload, format="json")

    def test_signup_creates_customer_and_returns_tokens(self):
        resp = self._signup()
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertIn("access", resp.data)
        self.assertIn("refresh", resp.data)
        self.assertEqual(resp.data["user"]["role"], "customer")
        self.assertEqual(User.objects.count(), 1)

    def test_signup_rejects_role_injection(self):
        resp = self._signup(role="admin")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("Invalid fields provided: role", resp.data["error"])
        self.assertEqual(User.objects.count(), 0)

    def test_signup_rejects_duplicate_email(self):
        self._signup()
        resp = self._signup(email="ASHA@example.com")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(User.objects.count(), 1)

    def test_signup_rejects_weak_password(self):
        resp = self._signup(password="12345678")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(User.objects.count(), 0)

    def test_signup_sanitizes_name(self):
        resp = self._signup(name="<b>Asha</b>")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(User.objects.get().name, "Asha")

    def test_login_uses_generic_error_for_unknown_email_and_bad_password(self):
        User.objects.create_user(email="asha@example.com", password=STRONG_PASSWORD, name="Asha")

        wrong_pw = self.client.post(
            "/api/v1/auth/login/", {"email": "asha@example.com", "password": "nope"}, format="json"
        )
        unknown = self.client.post(
            "/api/v1/auth/login/", {"email": "ghost@example.com", "password": "nope"}, format="json"
        )
        self.assertEqual(wrong_pw.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(unknown.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(wrong_pw.data["error"], unknown.data["error"])
        self.assertEqual(wrong_pw.data["code"], "authentication_failed")

    def test_failed_login_is_audited_and_returns_401(self):
        User.objects.create_user(email="asha@example.com", password=STRONG_PASSWORD, name="Asha")
        with self.assertLogs("apps.audit", level="INFO") as logs:
            resp = self.client.post(
                "/api/v1/auth/login/", {"email": "asha@example.com", "password": "nope"}, format="json"
            )
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(resp.data, {"error": "Invalid email or password", "code": "authentication_failed"})
        self.assertTrue(any("LOGIN_FAILED" in line for line in logs.output))

    def test_login_then_me_then_logout(self):
        User.objects.create_user(email="asha@example.com", password=STRONG_PASSWORD, name="Asha")
        with self.assertLogs("apps.audit", level="INFO") as logs:
            resp = self.client.post(
                "/api/v1/auth/login/", {"email": "Asha@Example.com", "password": STRONG_PASSWORD}, format="json"
            )
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertTrue(any("LOGIN_SUCCESS" in line for line in logs.output))

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {resp.data['access']}")
        me = self.client.get("/api/v1/auth/me/")
        self.assertEqual(me.status_code, status.HTTP_200_OK)
        self.assertEqual(me.data["email"], "asha@example.com")

        out = self.client.post("/api/v1/auth/logout/", {"refresh": resp.data["refresh"]}, format="json")
        self.assertEqual(out.status_code, status.HTTP_200_OK)

        again = self.client.post("/api/v1/auth/logout/", {"refresh": resp.data["refresh"]}, format="json")
        self.assertEqual(again.status_code, status.HTTP_400_BAD_REQUEST)

    def test_me_requires_authentication(self):
        resp = self.client.get("/api/v1/auth/me/")
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
