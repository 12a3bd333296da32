# apps/catalog/serializers.py
from decimal import Decimal, ROUND_HALF_UP

from django.conf import settings
from rest_framework import serializers

from apps.utils.validators import SanitizedCharField
from .models import Category, Product


class ProductSerializer(serializers.ModelSerializer):
    sale_price = serializers.DecimalField(
        max_digits=12, decimal_places=2, rounding=ROUND_HALF_UP, read_only=True
    )
    average_rating = serializers.SerializerMethodField()
    review_count = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "description",
            "price",
            "discount",
            "sale_price",
            "category",
            "stock",
            "images",
            "material",
            "featured",
            "average_rating",
            "review_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_average_rating(self, obj):
        avg = getattr(obj, "average_rating", None)
        if avg is None:
            return 0
        return round(float(avg), 1)

    def get_review_count(self, obj):
        return getattr(obj, "review_count", 0) or 0


class ProductDetailSerializer(ProductSerializer):
    reviews = serializers.SerializerMethodField()

    class Meta(ProductSerializer.Meta):
        fields = ProductSerializer.Meta.fields + ["reviews"]
        read_only_fields = fields

    def get_reviews(self, obj):
        from apps.reviews.serializers import PublicReviewSerializer

        qs = obj.reviews.filter(approved=True).select_related("user").order_by("-created_at")
        return PublicReviewSerializer(qs, many=True).data


class ProductSnapshotSerializer(serializers.ModelSerializer):
    """
    Compact product shape nested inside order items.
    """
    class Meta:
        model = Product
        fields = ["id", "name", "price", "discount", "category", "images", "material"]
        read_only_fields = fields


class ProductWriteSerializer(serializers.Serializer):
    name = SanitizedCharField(min_length=3, max_length=200)
    description = SanitizedCharField(min_length=10, max_length=5000)
    price = serializers.DecimalField(max_digits=10, decimal_places=2)
    discount = serializers.DecimalField(max_digits=5, decimal_places=2, required=False, default=Decimal("0"))
    category = serializers.ChoiceField(
        choices=Category.choices,
        error_messages={"invalid_choice": f"Category must be one of: {', '.join(Category.values)}"},
    )
    stock = serializers.IntegerField()
    images = serializers.ListField(child=serializers.URLField(max_length=500), allow_empty=False)
    material = SanitizedCharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    featured = serializers.BooleanField(required=False, default=False)

    def validate_price(self, value):
        if value <= 0 or value > settings.PRODUCT_MAX_PRICE:
            raise serializers.ValidationError(
                f"Price must be between 0 and {settings.PRODUCT_MAX_PRICE:,}"
            )
        return value

    def validate_discount(self, value):
        if value < 0 or value > 100:
            raise serializers.ValidationError("Discount must be between 0 and 100")
        return value

    def validate_stock(self, value):
        if value < 0 or value > settings.PRODUCT_MAX_STOCK:
            raise serializers.ValidationError(
                f"Stock must be between 0 and {settings.PRODUCT_MAX_STOCK:,}"
            )
        return value

    def validate_images(self, value):
        if len(value) > settings.PRODUCT_MAX_IMAGES:
            raise serializers.ValidationError(
                f"Maximum {settings.PRODUCT_MAX_IMAGES} images allowed per product"
            )
        return value

    def validate_material(self, value):
        return value or None


class AdminProductSerializer(ProductSerializer):
    order_count = serializers.SerializerMethodField()

    class Meta(ProductSerializer.Meta):
        fields = ProductSerializer.Meta.fields + ["order_count"]
        read_only_fields = fields

    def get_review_count(self, obj):
        return getattr(obj, "all_review_count", 0) or 0

    def get_order_count(self, obj):
        return getattr(obj, "order_count", 0) or 0
