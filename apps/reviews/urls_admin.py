from django.urls import path

from .views import AdminReviewDetailView, AdminReviewListView

urlpatterns = [
    path("reviews/", AdminReviewListView.as_view(), name="admin-review-list"),
    path("reviews/<str:pk>/", AdminReviewDetailView.as_view(), name="admin-review-detail"),
]
