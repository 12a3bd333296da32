# apps/analytics/services.py
import logging
from datetime import datetime, time
from decimal import Decimal

from django.db.models import Sum
from django.utils import timezone

from apps.catalog.models import Product
from apps.inventory.services import InventoryService
from apps.orders.models import Order, OrderItem

logger = logging.getLogger(__name__)

BEST_SELLER_LIMIT = 5
LOW_STOCK_LIMIT = 5


def _start_of_day(day):
    """
    Midnight at the start of `day`, in the current timezone.
    """
    return timezone.make_aware(datetime.combine(day, time.min))


def _sales_since(start=None) -> Decimal:
    qs = Order.objects.all()
    if start is not None:
        qs = qs.filter(created_at__gte=start)
    return qs.aggregate(s=Sum("total_price"))["s"] or Decimal("0.00")


def best_selling_products(limit: int = BEST_SELLER_LIMIT) -> list[dict]:
    """
    Products ranked by units sold across all orders.
    """
    rows = (
        OrderItem.objects.values("product_id")
        .annotate(total_sold=Sum("quantity"))
        .order_by("-total_sold", "product_id")[:limit]
    )
    sold = {row["product_id"]: row["total_sold"] for row in rows}
    products = Product.objects.in_bulk(list(sold))

    return [
        {
            "id": str(product_id),
            "name": products[product_id].name,
            "price": products[product_id].price,
            "images": products[product_id].images,
            "total_sold": total_sold,
        }
        for product_id, total_sold in sold.items()
        if product_id in products
    ]


def low_stock_products(limit: int = LOW_STOCK_LIMIT) -> list[dict]:
    return [
        {
            "id": str(product.id),
            "name": product.name,
            "stock": product.stock,
            "images": product.images,
        }
        for product in InventoryService.low_stock(limit=limit)
    ]


def dashboard_stats() -> dict:
    today = timezone.localdate()

    stats = {
        "total_sales": _sales_since(),
        "total_orders": Order.objects.count(),
        "today_sales": _sales_since(_start_of_day(today)),
        "month_sales": _sales_since(_start_of_day(today.replace(day=1))),
        "best_selling_products": best_selling_products(),
        "low_stock_products": low_stock_products(),
    }
    logger.debug("Dashboard stats computed: %s orders", stats["total_orders"])
    return stats
