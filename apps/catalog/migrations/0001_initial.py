import uuid
from decimal import Decimal

import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=200)),
                ("description", models.TextField(max_length=5000)),
                (
                    "price",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.01"))],
                    ),
                ),
                (
                    "discount",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0"),
                        help_text="Percentage off the list price (0-100)",
                        max_digits=5,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("0")),
                            django.core.validators.MaxValueValidator(Decimal("100")),
                        ],
                    ),
                ),
                (
                    "category",
                    models.CharField(
                        choices=[
                            ("earrings", "Earrings"),
                            ("necklaces", "Necklaces"),
                            ("rings", "Rings"),
                            ("bangles", "Bangles"),
                            ("sets", "Sets"),
                        ],
                        db_index=True,
                        max_length=20,
                    ),
                ),
                ("stock", models.PositiveIntegerField(default=0)),
                ("images", models.JSONField(blank=True, default=list, help_text="Ordered list of image URLs")),
                ("material", models.CharField(blank=True, max_length=100, null=True)),
                ("featured", models.BooleanField(db_index=True, default=False)),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["category", "price"], name="product_category_price_idx"),
                    models.Index(fields=["stock"], name="product_stock_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(stock__gte=0), name="product_stock_non_negative"),
                    models.CheckConstraint(condition=models.Q(price__gt=0), name="product_price_positive"),
                    models.CheckConstraint(
                        condition=models.Q(discount__gte=0) & models.Q(discount__lte=100),
                        name="product_discount_percentage",
                    ),
                ],
            },
        ),
    ]
