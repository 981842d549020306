"""
FastAPI dependencies wiring settings, repositories and services.

Settings come from the `get_settings` dependency so tests can override
them per app.
"""
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from order_sync.core.config import Settings, get_settings
from order_sync.core.database import get_db_session
from order_sync.repositories.order import OrderRepository
from order_sync.services.ngenius_client import NGeniusClient
from order_sync.services.orders import OrderService
from order_sync.services.reconciliation import ReconciliationService

AppSettings = Annotated[Settings, Depends(get_settings)]


async def get_order_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> OrderRepository:
    """Dependency to get order repository."""
    return OrderRepository(session)


async def get_order_service(
    repo: Annotated[OrderRepository, Depends(get_order_repository)],
    settings: AppSettings,
) -> OrderService:
    return OrderService(repo, settings)


async def get_reconciliation_service(
    repo: Annotated[OrderRepository, Depends(get_order_repository)],
    settings: AppSettings,
) -> ReconciliationService:
    return ReconciliationService(repo, settings)


async def get_gateway_client(settings: AppSettings) -> NGeniusClient:
    return NGeniusClient(settings)
