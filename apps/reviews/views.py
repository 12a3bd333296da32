from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView

from apps.accounts.permissions import IsAdmin
from apps.utils.audit import AuditAction, log_admin_action
from .models import Review
from .serializers import (
    AdminReviewSerializer,
    PublicReviewSerializer,
    ReviewModerationSerializer,
    ReviewSubmitSerializer,
)
from .services import ReviewService


class ReviewSubmitView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "reviews"

    def post(self, request):
        serializer = ReviewSubmitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        review = ReviewService.submit_review(
            user=request.user,
            product_id=data["productId"],
            rating=data["rating"],
            comment=data["comment"],
        )

        return Response({
            "success": True,
            "review": PublicReviewSerializer(review).data,
            "message": "Review submitted successfully. It will be visible after admin approval.",
        }, status=status.HTTP_201_CREATED)


class AdminReviewListView(APIView):
    permission_classes = [IsAuthenticated, IsAdmin]
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "admin"

    def get(self, request):
        reviews = Review.objects.select_related("user", "product").order_by("-created_at")
        return Response(AdminReviewSerializer(reviews, many=True).data)


class AdminReviewDetailView(APIView):
    permission_classes = [IsAuthenticated, IsAdmin]
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "admin"

    def put(self, request, pk):
        serializer = ReviewModerationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        approved = serializer.validated_data["approved"]

        review = ReviewService.set_approval(pk, approved)
        log_admin_action(
            AuditAction.ADMIN_REVIEW_APPROVE if approved else AuditAction.ADMIN_REVIEW_REJECT,
            request,
            review.pk,
        )
        return Response(AdminReviewSerializer(review).data)

    patch = put

    def delete(self, request, pk):
        ReviewService.delete_review(pk)
        log_admin_action(AuditAction.ADMIN_REVIEW_DELETE, request, pk)
        return Response({"message": "Review deleted successfully"})
