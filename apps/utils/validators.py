import re
from django.utils.html import strip_tags
from rest_framework import serializers

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^[6-9][0-9]{9}$")
PINCODE_PATTERN = re.compile(r"^[1-9][0-9]{5}$")

MAX_EMAIL_LENGTH = 255


def sanitize_text(value):
    """
    Strip markup and surrounding whitespace. Non-strings sanitize to "".
    """
    if not isinstance(value, str):
        return ""
    return strip_tags(value).strip()


def validate_email(value):
    email = sanitize_text(value).lower()
    if not email:
        raise serializers.ValidationError("Email is required.")
    if len(email) > MAX_EMAIL_LENGTH:
        raise serializers.ValidationError("Email too long.")
    if not EMAIL_PATTERN.match(email):
        raise serializers.ValidationError("Invalid email format.")
    return email


def validate_phone(value):
    phone = sanitize_text(value)
    if not PHONE_PATTERN.match(phone):
        raise serializers.ValidationError(
            "Invalid phone number. Must be 10 digits starting with 6-9."
        )
    return phone


def validate_pincode(value):
    pincode = sanitize_text(value)
    if not PINCODE_PATTERN.match(pincode):
        raise serializers.ValidationError(
            "Invalid pincode. Must be 6 digits not starting with 0."
        )
    return pincode


class SanitizedCharField(serializers.CharField):
    """
    CharField that strips markup before the length checks run.
    """

    def to_internal_value(self, data):
        if not isinstance(data, str):
            self.fail("invalid")
        return super().to_internal_value(sanitize_text(data))


class StrictIntegerField(serializers.IntegerField):
    """
    IntegerField that only accepts JSON integers: no numeric strings,
    floats or booleans.
    """

    def to_internal_value(self, data):
        if isinstance(data, bool) or not isinstance(data, int):
            self.fail("invalid")
        return super().to_internal_value(data)
