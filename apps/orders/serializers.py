from django.conf import settings
from rest_framework import serializers

from apps.catalog.serializers import ProductSnapshotSerializer
from apps.utils.utils import parse_uuid
from apps.utils.validators import (
    SanitizedCharField,
    StrictIntegerField,
    validate_email,
    validate_phone,
    validate_pincode,
)
from .models import Order, OrderItem
from .services import CartLine, CheckoutRequest

CART_EMPTY = "Cart is empty"


class CartLineSerializer(serializers.Serializer):
    productId = serializers.CharField(max_length=64)
    quantity = StrictIntegerField(
        min_value=1,
        max_value=settings.ORDER_MAX_ITEM_QUANTITY,
        error_messages={
            "min_value": "Quantity must be at least 1",
            "invalid": "Quantity must be a whole number",
            "max_value": f"Quantity cannot exceed {settings.ORDER_MAX_ITEM_QUANTITY}",
        },
    )

    def validate_productId(self, value):
        # Canonical form so equal ids sort and lock identically; anything
        # unparseable is passed through and reported as not found.
        pk = parse_uuid(value)
        return str(pk) if pk else value


class CheckoutSerializer(serializers.Serializer):
    """
    Checkout body. Any `userId` sent by the client is ignored; the buyer is
    whoever the request is authenticated as.
    """
    items = CartLineSerializer(
        many=True,
        allow_empty=False,
        max_length=settings.ORDER_MAX_CART_LINES,
        error_messages={
            "required": CART_EMPTY,
            "null": CART_EMPTY,
            "empty": CART_EMPTY,
            "max_length": f"Cart cannot contain more than {settings.ORDER_MAX_CART_LINES} items",
        },
    )
    customerName = SanitizedCharField(min_length=2, max_length=100)
    customerEmail = serializers.CharField()
    customerPhone = serializers.CharField()
    addressLine1 = SanitizedCharField(min_length=5, max_length=200)
    addressLine2 = SanitizedCharField(max_length=200, required=False, allow_blank=True, allow_null=True)
    city = SanitizedCharField(min_length=2, max_length=100)
    state = SanitizedCharField(min_length=2, max_length=100)
    pincode = serializers.CharField()

    def validate_customerEmail(self, value):
        return validate_email(value)

    def validate_customerPhone(self, value):
        return validate_phone(value)

    def validate_pincode(self, value):
        return validate_pincode(value)

    def to_checkout_request(self, user=None) -> CheckoutRequest:
        data = self.validated_data
        return CheckoutRequest(
            items=tuple(
                CartLine(product_id=line["productId"], quantity=line["quantity"])
                for line in data["items"]
            ),
            customer_name=data["customerName"],
            customer_email=data["customerEmail"],
            customer_phone=data["customerPhone"],
            address_line1=data["addressLine1"],
            address_line2=data.get("addressLine2") or None,
            city=data["city"],
            state=data["state"],
            pincode=data["pincode"],
            user=user if user is not None and user.is_authenticated else None,
        )


class OrderItemSerializer(serializers.ModelSerializer):
    product = ProductSnapshotSerializer(read_only=True)
    subtotal = serializers.DecimalField(max_digits=16, decimal_places=4, read_only=True)

    class Meta:
        model = OrderItem
        fields = ["id", "product", "quantity", "price", "subtotal"]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    status_display = serializers.CharField(source="get_status_display", read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "user",
            "status",
            "status_display",
            "total_price",
            "payment_method",
            "customer_name",
            "customer_email",
            "customer_phone",
            "address_line1",
            "address_line2",
            "city",
            "state",
            "pincode",
            "created_at",
            "updated_at",
            "items",
        ]
        read_only_fields = fields


class AdminOrderSerializer(OrderSerializer):
    account = serializers.SerializerMethodField()

    class Meta(OrderSerializer.Meta):
        fields = OrderSerializer.Meta.fields + ["account"]
        read_only_fields = fields

    def get_account(self, obj):
        if obj.user is None:
            return None
        return {"name": obj.user.name, "email": obj.user.email}


class OrderStatusSerializer(serializers.Serializer):
    status = serializers.CharField(error_messages={"required": "Invalid status", "blank": "Invalid status"})
