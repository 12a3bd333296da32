# apps/catalog/admin.py
from django.contrib import admin

from .models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "category",
        "price",
        "discount",
        "stock",
        "featured",
        "created_at",
    )
    search_fields = ("name", "description", "material")
    list_filter = ("category", "featured")
    list_editable = ("featured",)
    readonly_fields = ("stock", "created_at", "updated_at")
    ordering = ("-created_at",)
