from django.contrib import admin

from .models import Review


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ("product", "user", "rating", "approved", "created_at")
    list_filter = ("approved", "rating")
    list_editable = ("approved",)
    search_fields = ("comment", "product__name", "user__email")
    raw_id_fields = ("product", "user")
