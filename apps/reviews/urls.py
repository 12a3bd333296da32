from django.urls import path

from .views import ReviewSubmitView

urlpatterns = [
    path("", ReviewSubmitView.as_view(), name="review-submit"),
]
