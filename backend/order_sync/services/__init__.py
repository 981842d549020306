"""
Services package for business logic layer.
"""
from order_sync.services.ngenius_client import NGeniusClient, PaymentSession
from order_sync.services.orders import OrderService
from order_sync.services.payload_normalizer import (
    NormalizedNotification,
    normalize_notification,
)
from order_sync.services.reconciliation import (
    ReconciliationResult,
    ReconciliationService,
)
from order_sync.services.state_mapper import StatusMapping, map_payment_state

__all__ = [
    "NGeniusClient",
    "PaymentSession",
    "OrderService",
    "NormalizedNotification",
    "normalize_notification",
    "ReconciliationResult",
    "ReconciliationService",
    "StatusMapping",
    "map_payment_state",
]
