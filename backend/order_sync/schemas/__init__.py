"""
Pydantic schemas package.
"""
from order_sync.schemas.order import (
    CheckoutRequest,
    CheckoutResponse,
    ErrorResponse,
    OrderResponse,
    RepairRequest,
    RepairResponse,
    UserOrdersResponse,
)

__all__ = [
    "CheckoutRequest",
    "CheckoutResponse",
    "RepairRequest",
    "RepairResponse",
    "OrderResponse",
    "UserOrdersResponse",
    "ErrorResponse",
]
