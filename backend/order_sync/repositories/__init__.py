"""
Repository package for data access layer.
"""
from order_sync.repositories.base import BaseRepository
from order_sync.repositories.order import OrderRepository

__all__ = [
    "BaseRepository",
    "OrderRepository",
]
