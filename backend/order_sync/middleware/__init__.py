"""
Middleware package.
"""
from order_sync.middleware.error_handler import ErrorHandlerMiddleware
from order_sync.middleware.request_id import RequestIdMiddleware

__all__ = [
    "ErrorHandlerMiddleware",
    "RequestIdMiddleware",
]
