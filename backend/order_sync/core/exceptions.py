"""
Exception hierarchy shared by services and routers.

Each error is handled by the router of the operation that raised it;
nothing here is retried.
"""
from typing import Any, Optional


class OrderSyncError(Exception):
    """Base class for all service errors."""


class OrderValidationError(OrderSyncError):
    """A required request field is missing or invalid."""


class SignatureError(OrderSyncError):
    """Webhook signature is missing or does not match."""


class NormalizationError(OrderSyncError):
    """Notification payload could not be mapped to an order and state."""


class GatewayError(OrderSyncError):
    """The payment gateway call failed."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class OrderStoreError(OrderSyncError):
    """Persistence failed."""


class OrderNotFoundError(OrderStoreError):
    """No order exists for the given id."""

    def __init__(self, order_id: str) -> None:
        super().__init__(f"Order not found: {order_id}")
        self.order_id = order_id


class OrderConflictError(OrderStoreError):
    """The order changed underneath us or is in a state that forbids the write."""
