import logging

from django.conf import settings
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from apps.catalog.models import Product
from apps.utils.exceptions import ConcurrencyError, NotFoundError, ValidationError
from apps.utils.utils import parse_uuid

logger = logging.getLogger(__name__)


class InventoryService:
    """
    Core Logic for Inventory Management.
    ALL stock changes must pass through here.
    """

    @staticmethod
    def lock_product(product_id) -> Product:
        """
        SELECT ... FOR UPDATE on one product row. The lock is held until the
        caller's transaction commits or rolls back, so this must run inside
        transaction.atomic().
        """
        pk = parse_uuid(product_id)
        if pk is None:
            raise NotFoundError(f"Product {product_id} not found")

        try:
            return Product.objects.select_for_update().get(pk=pk)
        except Product.DoesNotExist:
            raise NotFoundError(f"Product {product_id} not found")

    @staticmethod
    def decrement_stock(product: Product, quantity: int) -> Product:
        """
        Conditional decrement: the WHERE clause re-checks stock at write time,
        so a row that changed since it was read is never driven negative.
        """
        updated = Product.objects.filter(
            pk=product.pk,
            stock__gte=quantity,
        ).update(
            stock=F("stock") - quantity,
            updated_at=timezone.now(),
        )

        if updated == 0:
            logger.warning(
                "Stock decrement rejected for product %s (qty %s)", product.pk, quantity,
                extra={"product_id": str(product.pk)},
            )
            raise ConcurrencyError(
                f"Failed to update stock for {product.name}. Stock changed during processing."
            )

        product.stock -= quantity
        return product

    @staticmethod
    @transaction.atomic
    def set_stock(product_id, quantity: int) -> Product:
        """
        Admin override: set the on-hand count directly under a row lock.
        """
        if quantity is None or quantity < 0:
            raise ValidationError("Stock cannot be negative.")
        if quantity > settings.PRODUCT_MAX_STOCK:
            raise ValidationError(f"Stock must be between 0 and {settings.PRODUCT_MAX_STOCK:,}.")

        product = InventoryService.lock_product(product_id)
        previous = product.stock
        product.stock = quantity
        product.save(update_fields=["stock", "updated_at"])

        logger.info(
            "Stock set for product %s: %s -> %s", product.pk, previous, quantity,
            extra={"product_id": str(product.pk)},
        )
        return product

    @staticmethod
    def low_stock(threshold: int | None = None, limit: int = 5):
        """
        Products at or below the threshold, lowest stock first.
        """
        if threshold is None:
            threshold = settings.LOW_STOCK_THRESHOLD
        return Product.objects.filter(stock__lte=threshold).order_by("stock", "name")[:limit]
