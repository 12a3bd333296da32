from django.db.models import Avg, Count, Q
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status, viewsets
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle

from apps.accounts.permissions import IsAdmin
from apps.utils.audit import AuditAction, log_admin_action
from apps.utils.exceptions import NotFoundError
from apps.utils.throttle import BurstRateThrottle
from apps.utils.utils import parse_uuid
from .filters import ProductFilter
from .models import Product
from .serializers import (
    AdminProductSerializer,
    ProductDetailSerializer,
    ProductSerializer,
    ProductWriteSerializer,
)
from .services import ProductInUseError, ProductService

SORT_OPTIONS = {
    "latest": ("-created_at",),
    "price-asc": ("price", "-created_at"),
    "price-desc": ("-price", "-created_at"),
}


def with_ratings(qs):
    approved = Q(reviews__approved=True)
    return qs.annotate(
        review_count=Count("reviews", filter=approved),
        average_rating=Avg("reviews__rating", filter=approved),
    )


class ProductViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Public storefront catalogue.
    Query params: category, minPrice, maxPrice, featured, sort.
    """
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [BurstRateThrottle]
    filter_backends = [DjangoFilterBackend]
    filterset_class = ProductFilter

    def get_serializer_class(self):
        if self.action == "retrieve":
            return ProductDetailSerializer
        return ProductSerializer

    def get_queryset(self):
        qs = with_ratings(Product.objects.all())
        if self.action == "retrieve":
            return qs

        sort = self.request.query_params.get("sort")
        ordering = SORT_OPTIONS.get(sort or "latest", SORT_OPTIONS["latest"])
        return qs.order_by(*ordering)

    def get_object(self):
        pk = parse_uuid(self.kwargs["pk"])
        if pk is None:
            raise NotFoundError("Product not found")
        try:
            return self.get_queryset().get(pk=pk)
        except Product.DoesNotExist:
            raise NotFoundError("Product not found")


class AdminProductViewSet(viewsets.ViewSet):
    """
    Back-office product management (admin only).
    """
    permission_classes = [IsAuthenticated, IsAdmin]
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "admin"

    def list(self, request):
        qs = Product.objects.annotate(
            all_review_count=Count("reviews", distinct=True),
            order_count=Count("order_items__order", distinct=True),
        ).order_by("-created_at")
        return Response(AdminProductSerializer(qs, many=True).data)

    def create(self, request):
        serializer = ProductWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        product = ProductService.create_product(serializer.validated_data)
        log_admin_action(AuditAction.ADMIN_PRODUCT_CREATE, request, product.pk, name=product.name)

        return Response({
            "success": True,
            "product": ProductSerializer(product).data,
        }, status=status.HTTP_201_CREATED)

    def update(self, request, pk=None):
        partial = request.method == "PATCH"
        serializer = ProductWriteSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        product = ProductService.update_product(pk, serializer.validated_data)
        log_admin_action(
            AuditAction.ADMIN_PRODUCT_UPDATE, request, product.pk,
            fields=sorted(serializer.validated_data),
        )

        return Response({
            "success": True,
            "product": ProductSerializer(product).data,
        })

    def partial_update(self, request, pk=None):
        return self.update(request, pk)

    def destroy(self, request, pk=None):
        try:
            ProductService.delete_product(pk)
        except ProductInUseError as e:
            return Response({
                "error": e.message,
                "code": e.code,
                "orderCount": e.order_count,
                "suggestion": "Set stock to 0 instead of deleting",
            }, status=status.HTTP_400_BAD_REQUEST)

        log_admin_action(AuditAction.ADMIN_PRODUCT_DELETE, request, pk)
        return Response({"success": True, "message": "Product deleted successfully"})
