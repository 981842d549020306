"""
Order repair and lookup routes.
"""
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from order_sync.core.exceptions import (
    OrderConflictError,
    OrderStoreError,
    OrderValidationError,
)
from order_sync.core.logging import get_logger
from order_sync.routers.dependencies import get_order_service
from order_sync.schemas.order import (
    ErrorResponse,
    OrderResponse,
    RepairRequest,
    RepairResponse,
    UserOrdersResponse,
)
from order_sync.services.orders import OrderService

logger = get_logger(__name__)

router = APIRouter(tags=["orders"])


@router.post("/fix-missing-order", response_model=RepairResponse)
async def fix_missing_order(
    repair: RepairRequest,
    service: Annotated[OrderService, Depends(get_order_service)],
):
    """
    Recreate an order lost during checkout, or complete a partial one.

    Existing fields are only overwritten by non-empty values.
    """
    try:
        _, created = await service.repair_order(repair)
    except OrderValidationError as e:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorResponse(error=str(e)).model_dump(),
        )
    except OrderConflictError as e:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content=ErrorResponse(error=str(e)).model_dump(),
        )
    except OrderStoreError as e:
        logger.error("Repair failed", order_id=repair.order_id, error=str(e))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(error=str(e)).model_dump(),
        )

    if created:
        return RepairResponse(message="Order created", action="created")
    return RepairResponse(message="Order updated", action="updated")


@router.get("/user-orders/{user_id}", response_model=UserOrdersResponse)
async def get_user_orders(
    user_id: str,
    service: Annotated[OrderService, Depends(get_order_service)],
):
    """List a user's orders, newest first."""
    try:
        orders = await service.list_user_orders(user_id)
    except OrderStoreError as e:
        logger.error("Order lookup failed", user_id=user_id, error=str(e))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(error=str(e)).model_dump(),
        )

    return UserOrdersResponse(
        count=len(orders),
        orders=[OrderResponse.model_validate(order) for order in orders],
    )
