"""
API routers package.
"""
from order_sync.routers.health import router as health_router
from order_sync.routers.orders import router as orders_router
from order_sync.routers.payments import router as payments_router

__all__ = [
    "health_router",
    "payments_router",
    "orders_router",
]
