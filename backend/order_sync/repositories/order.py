"""
Order repository for data access operations.
"""
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from order_sync.core.exceptions import OrderStoreError
from order_sync.models.order import Order
from order_sync.repositories.base import BaseRepository


class OrderRepository(BaseRepository[Order]):
    """Repository for Order model operations."""

    model = Order

    async def list_for_user(self, user_id: str) -> list[Order]:
        """Get all orders owned by a user, newest first."""
        stmt = (
            select(Order)
            .where(Order.user_id == user_id)
            .order_by(Order.created_at.desc())
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise OrderStoreError(f"Query failed: {e}") from e
        return list(result.scalars().all())
