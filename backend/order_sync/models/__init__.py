"""
SQLAlchemy models package.
All models are imported here so table creation can discover them.
"""
from order_sync.models.order import GATEWAY_NAME, Order, OrderStatus

__all__ = [
    "Order",
    "OrderStatus",
    "GATEWAY_NAME",
]
