import logging

from django.db import IntegrityError, transaction
from rest_framework.exceptions import PermissionDenied

from apps.catalog.services import ProductService
from apps.orders.models import Order
from apps.utils.exceptions import NotFoundError, ValidationError
from apps.utils.utils import parse_uuid
from .models import Review

logger = logging.getLogger(__name__)


class ReviewService:
    """
    Verified-buyer reviews with admin moderation.
    """

    @staticmethod
    def submit_review(user, product_id, rating, comment) -> Review:
        product = ProductService.get_product(product_id)

        purchased = Order.objects.filter(user=user, items__product=product).exists()
        if not purchased:
            raise PermissionDenied("You can only review products you have purchased")

        if Review.objects.filter(product=product, user=user).exists():
            raise ValidationError("You have already reviewed this product")

        try:
            with transaction.atomic():
                review = Review.objects.create(
                    product=product,
                    user=user,
                    rating=rating,
                    comment=comment,
                    approved=False,
                )
        except IntegrityError:
            # Unique (product, user) lost a race with a parallel submit
            raise ValidationError("You have already reviewed this product")

        logger.info(
            "Review %s submitted for product %s", review.pk, product.pk,
            extra={"product_id": str(product.pk), "user_id": str(user.pk)},
        )
        return review

    @staticmethod
    def get_review(review_id) -> Review:
        pk = parse_uuid(review_id)
        if pk is None:
            raise NotFoundError("Review not found")
        try:
            return Review.objects.select_related("user", "product").get(pk=pk)
        except Review.DoesNotExist:
            raise NotFoundError("Review not found")

    @staticmethod
    def set_approval(review_id, approved: bool) -> Review:
        review = ReviewService.get_review(review_id)
        review.approved = approved
        review.save(update_fields=["approved", "updated_at"])
        return review

    @staticmethod
    def delete_review(review_id):
        review = ReviewService.get_review(review_id)
        review.delete()
