import logging
from dataclasses import dataclass, field
from decimal import Decimal

from django.conf import settings
from django.db import DatabaseError, connection, transaction

from apps.accounts.models import User
from apps.inventory.services import InventoryService
from apps.utils.exceptions import (
    ConcurrencyError,
    InsufficientStockError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from apps.utils.utils import effective_price, parse_uuid, quantize_money, quantize_unit_price
from .models import Order, OrderItem

logger = logging.getLogger(__name__)

# SQLSTATE lock_not_available, raised when lock_timeout expires
LOCK_NOT_AVAILABLE = "55P03"


@dataclass(frozen=True)
class CartLine:
    product_id: str
    quantity: int


@dataclass(frozen=True)
class CheckoutRequest:
    """
    A checkout that already passed input validation. Built by
    CheckoutSerializer; `user` is None for guest checkouts.
    """
    items: tuple[CartLine, ...]
    customer_name: str
    customer_email: str
    customer_phone: str
    address_line1: str
    city: str
    state: str
    pincode: str
    address_line2: str | None = None
    user: User | None = field(default=None, compare=False)


def _bound_lock_waits():
    """
    Cap how long this transaction may queue behind other row locks.
    set_config(..., true) is the parameterised form of SET LOCAL.
    """
    if connection.vendor != "postgresql":
        return
    with connection.cursor() as cursor:
        cursor.execute(
            "SELECT set_config('lock_timeout', %s, true), set_config('statement_timeout', %s, true)",
            [f"{settings.ORDER_LOCK_TIMEOUT_MS}ms", f"{settings.ORDER_STATEMENT_TIMEOUT_MS}ms"],
        )


def _is_lock_timeout(exc):
    cause = exc.__cause__
    code = getattr(cause, "sqlstate", None) or getattr(cause, "pgcode", None)
    return code == LOCK_NOT_AVAILABLE


class OrderService:

    @staticmethod
    def create_order(request: CheckoutRequest) -> Order:
        """
        Place an order as one all-or-nothing transaction:
        1. Lock every product row, in product-id order
        2. Re-check stock and price each line from the locked row
        3. Conditionally decrement stock
        4. Persist the order and its line items

        Any failure rolls back every decrement made so far.
        """
        try:
            with transaction.atomic():
                _bound_lock_waits()

                # Fixed lock order across transactions, so two carts sharing
                # products can never wait on each other in a cycle.
                lock_order = sorted(enumerate(request.items), key=lambda pair: pair[1].product_id)

                priced = [None] * len(request.items)
                total = Decimal("0")

                for index, line in lock_order:
                    product = InventoryService.lock_product(line.product_id)

                    if product.stock < line.quantity:
                        raise InsufficientStockError(product.name, product.stock, line.quantity)

                    unit_price = effective_price(product.price, product.discount)
                    total += unit_price * line.quantity

                    InventoryService.decrement_stock(product, line.quantity)
                    priced[index] = (product, line.quantity, unit_price)

                order = Order.objects.create(
                    user=request.user,
                    total_price=quantize_money(total),
                    customer_name=request.customer_name,
                    customer_email=request.customer_email,
                    customer_phone=request.customer_phone,
                    address_line1=request.address_line1,
                    address_line2=request.address_line2,
                    city=request.city,
                    state=request.state,
                    pincode=request.pincode,
                    status=Order.Status.PLACED,
                    payment_method=Order.PaymentMethod.COD,
                )

                OrderItem.objects.bulk_create([
                    OrderItem(
                        order=order,
                        product=product,
                        quantity=quantity,
                        price=quantize_unit_price(unit_price),
                    )
                    for product, quantity, unit_price in priced
                ])

        except DatabaseError as e:
            if _is_lock_timeout(e):
                logger.warning("Order aborted: timed out waiting for a stock lock")
                raise ConcurrencyError(
                    "Stock is being updated by another order. Please try again."
                ) from e
            logger.exception("Order transaction failed")
            raise InternalError() from e

        logger.info(
            "Order %s placed: %s line(s), total %s", order.pk, len(priced), order.total_price,
            extra={
                "order_id": str(order.pk),
                "user_id": str(request.user.pk) if request.user else None,
            },
        )
        return order

    @staticmethod
    def get_order(order_id) -> Order:
        pk = parse_uuid(order_id)
        if pk is None:
            raise NotFoundError("Order not found")
        try:
            return Order.objects.get(pk=pk)
        except Order.DoesNotExist:
            raise NotFoundError("Order not found")

    @staticmethod
    @transaction.atomic
    def update_status(order_id, new_status) -> Order:
        """
        Admin fulfilment update. Status is the only mutable field of an order.
        """
        if new_status not in Order.Status.values:
            raise ValidationError("Invalid status")

        order = OrderService.get_order(order_id)
        order = Order.objects.select_for_update().get(pk=order.pk)

        previous = order.status
        order.status = new_status
        order.save(update_fields=["status", "updated_at"])

        logger.info(
            "Order %s status %s -> %s", order.pk, previous, new_status,
            extra={"order_id": str(order.pk)},
        )
        return order

    @staticmethod
    def orders_for_user(user):
        return (
            Order.objects.filter(user=user)
            .prefetch_related("items__product")
            .order_by("-created_at")
        )

    @staticmethod
    def all_orders():
        return (
            Order.objects.select_related("user")
            .prefetch_related("items__product")
            .order_by("-created_at")
        )
