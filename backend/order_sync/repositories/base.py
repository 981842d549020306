"""
Base repository with common persistence operations.
Implements the Repository pattern for data access abstraction.
"""
from typing import Any, Generic, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from order_sync.core.database import Base
from order_sync.core.exceptions import OrderConflictError, OrderStoreError

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Generic repository providing common database operations.

    Subclasses should set the `model` class attribute to the SQLAlchemy model.
    Driver errors are re-raised as OrderStoreError so callers never see
    SQLAlchemy types.
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id(self, id: str) -> ModelType | None:
        """Get a single record by its primary key, bypassing the identity map."""
        try:
            return await self.session.get(self.model, id, populate_existing=True)
        except SQLAlchemyError as e:
            raise OrderStoreError(f"Read failed: {e}") from e

    async def create(self, obj_in: dict[str, Any]) -> ModelType:
        """Create a new record."""
        db_obj = self.model(**obj_in)
        self.session.add(db_obj)
        await self.flush()
        return db_obj

    async def update(
        self,
        db_obj: ModelType,
        obj_in: dict[str, Any],
    ) -> ModelType:
        """Apply a partial update; keys not present are left untouched."""
        for field, value in obj_in.items():
            setattr(db_obj, field, value)
        await self.flush()
        return db_obj

    async def flush(self) -> None:
        try:
            await self.session.flush()
        except IntegrityError as e:
            await self.session.rollback()
            raise OrderConflictError("Record already exists") from e
        except StaleDataError as e:
            await self.session.rollback()
            raise OrderConflictError("Record was modified concurrently") from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise OrderStoreError(f"Write failed: {e}") from e

    async def commit(self) -> None:
        try:
            await self.session.commit()
        except StaleDataError as e:
            await self.session.rollback()
            raise OrderConflictError("Record was modified concurrently") from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise OrderStoreError(f"Commit failed: {e}") from e

    async def rollback(self) -> None:
        await self.session.rollback()
