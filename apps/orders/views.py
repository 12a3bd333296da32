from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView

from apps.accounts.permissions import IsAdmin
from apps.utils.audit import AuditAction, log_admin_action
from .serializers import (
    AdminOrderSerializer,
    CheckoutSerializer,
    OrderSerializer,
    OrderStatusSerializer,
)
from .services import OrderService


class OrderView(APIView):
    """
    POST: checkout (guests allowed).
    GET:  the caller's own orders, newest first.
    """
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "checkout"

    def get_permissions(self):
        if self.request.method == "POST":
            return [AllowAny()]
        return [IsAuthenticated()]

    def post(self, request):
        serializer = CheckoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = OrderService.create_order(serializer.to_checkout_request(request.user))

        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    def get(self, request):
        orders = OrderService.orders_for_user(request.user)
        return Response(OrderSerializer(orders, many=True).data)


class AdminOrderListView(APIView):
    permission_classes = [IsAuthenticated, IsAdmin]
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "admin"

    def get(self, request):
        return Response(AdminOrderSerializer(OrderService.all_orders(), many=True).data)


class AdminOrderDetailView(APIView):
    permission_classes = [IsAuthenticated, IsAdmin]
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "admin"

    def put(self, request, pk):
        serializer = OrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = OrderService.update_status(pk, serializer.validated_data["status"])
        log_admin_action(AuditAction.ADMIN_ORDER_UPDATE, request, order.pk, status=order.status)

        return Response(OrderSerializer(order).data)

    patch = put
