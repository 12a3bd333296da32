# apps/utils/tests.py
import json
import logging
from decimal import Decimal

from django.test import SimpleTestCase, TestCase
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework import status

from .exceptions import (
    AuthenticationError,
    ConcurrencyError,
    InsufficientStockError,
    InternalError,
    NotFoundError,
    ValidationError,
    custom_exception_handler,
)
from .logging import JSONFormatter
from .utils import effective_price, parse_uuid, quantize_money, quantize_unit_price
from .validators import (
    sanitize_text,
    validate_email,
    validate_phone,
    validate_pincode,
)


class ValidatorTests(SimpleTestCase):
    def test_sanitize_text_strips_markup_and_whitespace(self):
        self.assertEqual(sanitize_text("  <b>Asha</b> <script>x</script> "), "Asha x")
        self.assertEqual(sanitize_text(None), "")
        self.assertEqual(sanitize_text(42), "")

    def test_email_validator(self):
        self.assertEqual(validate_email("  Asha@Example.COM "), "asha@example.com")
        with self.assertRaises(DRFValidationError):
            validate_email("not-an-email")
        with self.assertRaises(DRFValidationError):
            validate_email("")
        with self.assertRaises(DRFValidationError):
            validate_email("a" * 250 + "@x.com")

    def test_phone_validator(self):
        self.assertEqual(validate_phone("9876543210"), "9876543210")
        for bad in ["5876543210", "987654321", "98765432100", "98765abcde", "+919876543210"]:
            with self.assertRaises(DRFValidationError):
                validate_phone(bad)

    def test_pincode_validator(self):
        self.assertEqual(validate_pincode(" 560001 "), "560001")
        for bad in ["060001", "56001", "5600011", "56000a"]:
            with self.assertRaises(DRFValidationError):
                validate_pincode(bad)

    def test_validators_are_deterministic(self):
        for _ in range(3):
            with self.assertRaisesMessage(DRFValidationError, "6 digits"):
                validate_pincode("012345")


class MoneyTests(SimpleTestCase):
    def test_effective_price_applies_percentage_discount(self):
        self.assertEqual(effective_price(Decimal("100.00"), Decimal("10")), Decimal("90"))
        self.assertEqual(effective_price(Decimal("50.00"), 0), Decimal("50"))
        self.assertEqual(effective_price(Decimal("899.00"), Decimal("10")), Decimal("809.1"))

    def test_quantize_money_rounds_half_up_to_two_places(self):
        self.assertEqual(quantize_money(Decimal("233.3333")), Decimal("233.33"))
        self.assertEqual(quantize_money(Decimal("0.125")), Decimal("0.13"))
        self.assertEqual(quantize_money(Decimal("230")), Decimal("230.00"))

    def test_unit_price_keeps_four_places(self):
        self.assertEqual(quantize_unit_price(Decimal("6.667")), Decimal("6.6670"))
        self.assertEqual(quantize_unit_price(Decimal("33.326667")), Decimal("33.3267"))

    def test_parse_uuid(self):
        self.assertEqual(
            str(parse_uuid("0000000000000000000000000000000A")), "00000000-0000-0000-0000-00000000000a"
        )
        self.assertIsNone(parse_uuid("ring-42"))
        self.assertIsNone(parse_uuid(None))


class ExceptionHandlerTests(SimpleTestCase):
    def test_business_errors_map_to_fixed_statuses(self):
        cases = [
            (ValidationError("Cart is empty"), status.HTTP_400_BAD_REQUEST, "validation_error"),
            (InsufficientStockError("Ring", 1, 2), status.HTTP_400_BAD_REQUEST, "insufficient_stock"),
            (NotFoundError("Product x not found"), status.HTTP_404_NOT_FOUND, "not_found"),
            (AuthenticationError("Invalid email or password"), status.HTTP_401_UNAUTHORIZED, "authentication_failed"),
            (ConcurrencyError("stock changed during processing"), status.HTTP_409_CONFLICT, "concurrency_conflict"),
            (InternalError(), status.HTTP_500_INTERNAL_SERVER_ERROR, "server_error"),
        ]
        for exc, expected_status, code in cases:
            response = custom_exception_handler(exc, {})
            self.assertEqual(response.status_code, expected_status)
            self.assertEqual(response.data["code"], code)
            self.assertEqual(response.data["error"], exc.message)

    def test_insufficient_stock_message_names_product_and_quantities(self):
        exc = InsufficientStockError("Pearl Drop Earrings", 3, 5)
        self.assertIn("Pearl Drop Earrings", exc.message)
        self.assertIn("Available: 3", exc.message)
        self.assertIn("Requested: 5", exc.message)

    def test_drf_validation_error_is_flattened(self):
        exc = DRFValidationError({"customerPhone": ["Invalid phone number."]})
        response = custom_exception_handler(exc, {})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "Invalid phone number.")
        self.assertIn("customerPhone", response.data["fields"])

    def test_nested_list_errors_skip_valid_entries(self):
        exc = DRFValidationError({"items": [{}, {"quantity": ["Quantity cannot exceed 100"]}]})
        response = custom_exception_handler(exc, {})
        self.assertEqual(response.data["error"], "Quantity cannot exceed 100")

    def test_unexpected_error_does_not_leak_detail(self):
        with self.assertLogs("apps.utils.exceptions", level="ERROR"):
            response = custom_exception_handler(RuntimeError("db password is hunter2"), {})
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertNotIn("hunter2", json.dumps(response.data))


class JSONFormatterTests(SimpleTestCase):
    def test_scrubs_sensitive_keys(self):
        record = logging.LogRecord("apps", logging.INFO, __file__, 1, "login", None, None)
        record.audit = {"email": "a@b.com", "password": "secret123"}
        out = json.loads(JSONFormatter().format(record))
        self.assertEqual(out["audit"]["password"], "***REDACTED***")
        self.assertEqual(out["audit"]["email"], "a@b.com")


class HealthCheckTests(TestCase):
    def test_health_reports_db_ok(self):
        resp = self.client.get("/api/v1/utils/health/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["components"]["db"], "ok")
