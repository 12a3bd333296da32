from django.urls import path, include
from rest_framework.routers import SimpleRouter

from .views import AdminProductViewSet

router = SimpleRouter()
router.register(r"products", AdminProductViewSet, basename="admin-product")

urlpatterns = [
    path("", include(router.urls)),
]
