"""
Checkout and gateway webhook routes.
"""
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Header, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse

from order_sync.core.exceptions import (
    GatewayError,
    NormalizationError,
    OrderConflictError,
    OrderStoreError,
    OrderValidationError,
    SignatureError,
)
from order_sync.core.logging import get_logger
from order_sync.core.security import SIGNATURE_HEADER
from order_sync.routers.dependencies import (
    get_gateway_client,
    get_order_service,
    get_reconciliation_service,
)
from order_sync.schemas.order import CheckoutRequest, CheckoutResponse, ErrorResponse
from order_sync.services.ngenius_client import NGeniusClient
from order_sync.services.orders import OrderService
from order_sync.services.reconciliation import ReconciliationService

logger = get_logger(__name__)

router = APIRouter(tags=["payments"])


def _error(status_code: int, error: str, details=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, details=details).model_dump(),
    )


@router.post("/create-payment", response_model=CheckoutResponse)
async def create_payment(
    checkout: CheckoutRequest,
    service: Annotated[OrderService, Depends(get_order_service)],
    gateway: Annotated[NGeniusClient, Depends(get_gateway_client)],
):
    """
    Start a checkout.

    The order is stored as pending before the gateway is called, so a
    gateway failure leaves a record that /fix-missing-order can complete.
    """
    try:
        order, session = await service.checkout(checkout, gateway)
    except OrderValidationError as e:
        return _error(status.HTTP_400_BAD_REQUEST, str(e))
    except OrderConflictError as e:
        return _error(status.HTTP_409_CONFLICT, str(e))
    except GatewayError as e:
        logger.error(
            "Checkout failed at gateway",
            order_id=checkout.order_id,
            error=str(e),
            details=e.details,
        )
        return _error(status.HTTP_502_BAD_GATEWAY, str(e), e.details)
    except OrderStoreError as e:
        logger.error("Checkout failed at order store", order_id=checkout.order_id, error=str(e))
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e))

    return CheckoutResponse(
        payment_url=session.payment_url,
        reference=session.reference,
        order_id=order.id,
        raw=session.raw,
    )


@router.post("/webhook/ngenius", response_class=PlainTextResponse)
async def ngenius_webhook(
    request: Request,
    service: Annotated[ReconciliationService, Depends(get_reconciliation_service)],
    signature: Optional[str] = Header(None, alias=SIGNATURE_HEADER),
) -> PlainTextResponse:
    """
    Receive a payment notification.

    The gateway only reads the status code: 200 applied or ignored,
    400 unusable payload, 401 bad signature, 500 store failure.
    """
    body = await request.body()
    logger.info(
        "Webhook received",
        signature_present=bool(signature),
        body_size=len(body),
    )

    try:
        await service.process_webhook(body, signature)
    except SignatureError as e:
        return PlainTextResponse(str(e), status_code=status.HTTP_401_UNAUTHORIZED)
    except NormalizationError as e:
        logger.error("Invalid webhook payload", error=str(e))
        return PlainTextResponse("Invalid payload", status_code=status.HTTP_400_BAD_REQUEST)
    except OrderStoreError as e:
        logger.error("Webhook could not be stored", error=str(e))
        return PlainTextResponse(
            "Server error",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return PlainTextResponse("OK")
