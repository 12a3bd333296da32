import logging

from django.db import transaction

from apps.inventory.services import InventoryService
from apps.utils.exceptions import BusinessLogicException, NotFoundError
from apps.utils.utils import parse_uuid
from .models import Product

logger = logging.getLogger(__name__)


class ProductInUseError(BusinessLogicException):
    default_code = "product_in_use"

    def __init__(self, order_count):
        self.order_count = order_count
        super().__init__(
            f"Cannot delete product. It exists in {order_count} order(s). "
            "Consider marking it as out of stock instead."
        )


class ProductService:
    """
    Back-office product management. Stock always goes through
    InventoryService so the non-negative invariant holds.
    """

    @staticmethod
    def get_product(product_id) -> Product:
        pk = parse_uuid(product_id)
        if pk is None:
            raise NotFoundError("Product not found")
        try:
            return Product.objects.get(pk=pk)
        except Product.DoesNotExist:
            raise NotFoundError("Product not found")

    @staticmethod
    @transaction.atomic
    def create_product(data: dict) -> Product:
        product = Product.objects.create(**data)
        logger.info("Product created: %s", product.pk, extra={"product_id": str(product.pk)})
        return product

    @staticmethod
    @transaction.atomic
    def update_product(product_id, data: dict) -> Product:
        data = dict(data)
        stock = data.pop("stock", None)

        product = InventoryService.lock_product(product_id)
        for field, value in data.items():
            setattr(product, field, value)
        product.save()

        if stock is not None:
            product = InventoryService.set_stock(product.pk, stock)

        return product

    @staticmethod
    @transaction.atomic
    def delete_product(product_id):
        """
        Products referenced by any order are kept for order history.
        """
        product = InventoryService.lock_product(product_id)
        order_count = product.order_items.values("order_id").distinct().count()
        if order_count > 0:
            raise ProductInUseError(order_count)

        product.delete()
        logger.info("Product deleted: %s", product_id, extra={"product_id": str(product_id)})

