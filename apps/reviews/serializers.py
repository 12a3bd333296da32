from rest_framework import serializers

from apps.utils.validators import SanitizedCharField
from .models import Review


class ReviewerSerializer(serializers.Serializer):
    name = serializers.CharField(read_only=True)


class PublicReviewSerializer(serializers.ModelSerializer):
    user = ReviewerSerializer(read_only=True)

    class Meta:
        model = Review
        fields = ["id", "rating", "comment", "user", "created_at"]
        read_only_fields = fields


class AdminReviewSerializer(serializers.ModelSerializer):
    user = serializers.SerializerMethodField()
    product = serializers.SerializerMethodField()

    class Meta:
        model = Review
        fields = ["id", "rating", "comment", "approved", "user", "product", "created_at", "updated_at"]
        read_only_fields = fields

    def get_user(self, obj):
        return {"name": obj.user.name, "email": obj.user.email}

    def get_product(self, obj):
        return {"id": str(obj.product_id), "name": obj.product.name}


class ReviewSubmitSerializer(serializers.Serializer):
    productId = serializers.CharField(max_length=64)
    rating = serializers.IntegerField(
        min_value=1,
        max_value=5,
        error_messages={
            "min_value": "Rating must be an integer between 1 and 5",
            "max_value": "Rating must be an integer between 1 and 5",
            "invalid": "Rating must be an integer between 1 and 5",
        },
    )
    comment = SanitizedCharField(
        min_length=10,
        max_length=1000,
        error_messages={
            "min_length": "Comment must be between 10 and 1000 characters",
            "max_length": "Comment must be between 10 and 1000 characters",
        },
    )


class ReviewModerationSerializer(serializers.Serializer):
    approved = serializers.BooleanField()
