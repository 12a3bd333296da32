from django.conf import settings
from django.db import models

from apps.utils.models import TimestampedModel


class Order(TimestampedModel):
    class Status(models.TextChoices):
        PLACED = "placed", "Placed"
        PACKED = "packed", "Packed"
        SHIPPED = "shipped", "Shipped"
        DELIVERED = "delivered", "Delivered"

    class PaymentMethod(models.TextChoices):
        COD = "cod", "Cash on Delivery"

    # Null for guest checkouts
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )

    total_price = models.DecimalField(max_digits=14, decimal_places=2)

    # Contact + shipping snapshot, as entered at checkout
    customer_name = models.CharField(max_length=100)
    customer_email = models.EmailField(max_length=255)
    customer_phone = models.CharField(max_length=10)
    address_line1 = models.CharField(max_length=200)
    address_line2 = models.CharField(max_length=200, blank=True, null=True)
    city = models.CharField(max_length=100)
    state = models.CharField(max_length=100)
    pincode = models.CharField(max_length=6)

    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PLACED, db_index=True)
    payment_method = models.CharField(max_length=10, choices=PaymentMethod.choices, default=PaymentMethod.COD)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "-created_at"], name="order_user_recent_idx"),
        ]
        constraints = [
            models.CheckConstraint(condition=models.Q(total_price__gte=0), name="order_total_non_negative"),
        ]

    def __str__(self):
        return f"{self.id} [{self.status}]"
