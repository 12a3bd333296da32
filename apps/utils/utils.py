import uuid
from decimal import Decimal, ROUND_HALF_UP

from django.utils import timezone

TWO_PLACES = Decimal("0.01")
FOUR_PLACES = Decimal("0.0001")


def now():
    return timezone.now()


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quantize_money(value) -> Decimal:
    """
    Round a money amount to paise, half-up. Applied once to a final total,
    never to individual lines.
    """
    return to_decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def quantize_unit_price(value) -> Decimal:
    """Stored precision of a per-unit line price."""
    return to_decimal(value).quantize(FOUR_PLACES, rounding=ROUND_HALF_UP)


def effective_price(price, discount) -> Decimal:
    """Unit price after applying a percentage discount."""
    price = to_decimal(price)
    return price - (price * to_decimal(discount)) / Decimal(100)


def parse_uuid(value):
    """
    Canonical UUID for a path or body id, or None when it cannot name a row.
    """
    try:
        return uuid.UUID(str(value))
    except (ValueError, TypeError, AttributeError):
        return None


def client_ip(request):
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.META.get("HTTP_X_REAL_IP") or request.META.get("REMOTE_ADDR") or "unknown"
