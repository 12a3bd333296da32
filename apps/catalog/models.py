# apps/catalog/models.py
from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from apps.utils.models import TimestampedModel
from apps.utils.utils import effective_price


class Category(models.TextChoices):
    EARRINGS = "earrings", "Earrings"
    NECKLACES = "necklaces", "Necklaces"
    RINGS = "rings", "Rings"
    BANGLES = "bangles", "Bangles"
    SETS = "sets", "Sets"


class Product(TimestampedModel):
    """
    Sellable jewellery item.

    NOTE:
    - `stock` is the single source of truth for availability. Only the
      order transaction (decrement) and admin edits (direct set) touch it,
      both through InventoryService.
    - `price`/`discount` are live values; orders snapshot the effective
      unit price at purchase time.
    """
    name = models.CharField(max_length=200)
    description = models.TextField(max_length=5000)

    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    discount = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("100"))],
        help_text="Percentage off the list price (0-100)",
    )

    category = models.CharField(max_length=20, choices=Category.choices, db_index=True)
    stock = models.PositiveIntegerField(default=0)

    images = models.JSONField(default=list, blank=True, help_text="Ordered list of image URLs")
    material = models.CharField(max_length=100, blank=True, null=True)
    featured = models.BooleanField(default=False, db_index=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["category", "price"], name="product_category_price_idx"),
            models.Index(fields=["stock"], name="product_stock_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(stock__gte=0),
                name="product_stock_non_negative",
            ),
            models.CheckConstraint(
                condition=models.Q(price__gt=0),
                name="product_price_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(discount__gte=0) & models.Q(discount__lte=100),
                name="product_discount_percentage",
            ),
        ]

    def __str__(self):
        return self.name

    @property
    def sale_price(self) -> Decimal:
        return effective_price(self.price, self.discount)

    @property
    def in_stock(self) -> bool:
        return self.stock > 0
