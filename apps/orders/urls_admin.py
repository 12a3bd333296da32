from django.urls import path

from .views import AdminOrderDetailView, AdminOrderListView

urlpatterns = [
    path("orders/", AdminOrderListView.as_view(), name="admin-order-list"),
    path("orders/<str:pk>/", AdminOrderDetailView.as_view(), name="admin-order-detail"),
]
