# apps/analytics/views.py
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView

from apps.accounts.permissions import IsAdmin
from .serializers import DashboardSerializer
from .services import dashboard_stats


class DashboardView(APIView):
    """
    Back-office sales summary, best sellers and low-stock alerts.
    """
    permission_classes = [IsAuthenticated, IsAdmin]
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "admin"

    def get(self, request):
        return Response(DashboardSerializer(dashboard_stats()).data)
