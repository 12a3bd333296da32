from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from drf_spectacular.views import SpectacularAPIView

admin_url = settings.ADMIN_URL.strip("/") + "/"

urlpatterns = [
    path(admin_url, admin.site.urls),

    # Storefront
    path('api/v1/auth/', include('apps.accounts.urls')),
    path('api/v1/catalog/', include('apps.catalog.urls')),
    path('api/v1/orders/', include('apps.orders.urls')),
    path('api/v1/reviews/', include('apps.reviews.urls')),

    # Back-office
    path('api/v1/admin/', include('apps.catalog.urls_admin')),
    path('api/v1/admin/', include('apps.orders.urls_admin')),
    path('api/v1/admin/', include('apps.reviews.urls_admin')),
    path('api/v1/admin/', include('apps.analytics.urls')),

    path('api/v1/utils/', include('apps.utils.urls')),
    path('api/v1/schema/', SpectacularAPIView.as_view(), name='schema'),
]
