"""
Orders app models, split one model per module.

    from apps.orders.models import Order, OrderItem
"""

from .order import Order        # noqa: F401
from .item import OrderItem     # noqa: F401
