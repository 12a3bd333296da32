from django.contrib import admin

from .models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ("product", "quantity", "price", "subtotal")

    def has_add_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Orders are immutable history apart from their fulfilment status.
    """
    list_display = (
        "id",
        "customer_name",
        "customer_email",
        "status",
        "total_price",
        "created_at",
    )
    list_filter = ("status", "created_at")
    search_fields = ("id", "customer_email", "customer_phone", "customer_name")

    inlines = [OrderItemInline]

    readonly_fields = (
        "id",
        "user",
        "total_price",
        "payment_method",
        "customer_name",
        "customer_email",
        "customer_phone",
        "address_line1",
        "address_line2",
        "city",
        "state",
        "pincode",
        "created_at",
        "updated_at",
    )

    fieldsets = (
        ("Order Details", {
            "fields": ("id", "status", "user", "created_at", "updated_at")
        }),
        ("Financials", {
            "fields": ("total_price", "payment_method")
        }),
        ("Customer & Shipping", {
            "fields": (
                "customer_name", "customer_email", "customer_phone",
                "address_line1", "address_line2", "city", "state", "pincode",
            )
        }),
    )

    def has_add_permission(self, request):
        return False
