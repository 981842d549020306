"""
Order creation, checkout and repair.

Orders are written before the gateway is contacted, so a failed gateway
call leaves a pending order that the repair path can later complete.
"""
from datetime import datetime, timezone
from typing import Any

from order_sync.core.config import Settings
from order_sync.core.exceptions import OrderConflictError, OrderValidationError
from order_sync.core.logging import get_logger
from order_sync.models.order import GATEWAY_NAME, Order, OrderStatus
from order_sync.repositories.order import OrderRepository
from order_sync.schemas.order import CheckoutRequest, RepairRequest
from order_sync.services.ngenius_client import NGeniusClient, PaymentSession

logger = get_logger(__name__)


def is_empty(value: Any) -> bool:
    """Values a repair request must never write over stored data."""
    if value is None:
        return True
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return value == 0
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, dict, tuple)):
        return len(value) == 0
    return False


class OrderService:
    """Creates, repairs and lists orders."""

    def __init__(self, repository: OrderRepository, settings: Settings) -> None:
        self.repository = repository
        self.settings = settings

    async def create_order(self, request: CheckoutRequest) -> Order:
        """
        Write a pending order for a checkout.

        A retried checkout for a pending order with the same owner and amount
        reuses the stored record unchanged. Any other checkout for an existing
        order id is a conflict.

        Raises:
            OrderValidationError: If amount, orderId or userId is missing, or
                amount is not positive
            OrderConflictError: If the order exists and the retry does not match
        """
        if request.amount is None or not request.order_id or not request.user_id:
            logger.error(
                "Checkout missing required fields",
                order_id=request.order_id,
                user_id=request.user_id,
                amount=request.amount,
            )
            raise OrderValidationError("Missing required fields: amount, orderId, userId")
        if request.amount <= 0:
            logger.error(
                "Checkout with non-positive amount",
                order_id=request.order_id,
                amount=request.amount,
            )
            raise OrderValidationError("amount must be greater than zero")

        existing = await self.repository.get_by_id(request.order_id)
        if existing is not None:
            return self._checkout_retry(existing, request)

        now = datetime.now(timezone.utc)
        order = await self.repository.create({
            "id": request.order_id,
            "user_id": request.user_id,
            "items": list(request.items),
            "items_count": len(request.items),
            "total": request.amount,
            "subtotal": request.subtotal or (request.amount - request.shipping_cost),
            "shipping_cost": request.shipping_cost,
            "tax": 0,
            "discount": 0,
            "status": OrderStatus.PENDING.value,
            "payment_method": request.payment_method,
            "gateway": GATEWAY_NAME,
            "shipping_details": request.shipping_details,
            "promo_code": request.promo_code,
            "created_at": now,
            "updated_at": now,
        })
        await self.repository.commit()
        logger.info(
            "Order created",
            order_id=order.id,
            user_id=order.user_id,
            amount=request.amount,
            items_count=order.items_count,
        )
        return order

    @staticmethod
    def _checkout_retry(existing: Order, request: CheckoutRequest) -> Order:
        if existing.status != OrderStatus.PENDING.value:
            raise OrderConflictError(f"Order {existing.id} is already {existing.status}")

        if existing.user_id != request.user_id or (
            round(float(existing.total), 2) != round(float(request.amount), 2)
        ):
            logger.warning(
                "Checkout retry does not match stored order",
                order_id=existing.id,
                user_id=request.user_id,
                amount=request.amount,
            )
            raise OrderConflictError(
                f"Order {existing.id} already exists with a different owner or amount"
            )

        logger.info("Reusing pending order on checkout retry", order_id=existing.id)
        return existing

    async def checkout(
        self,
        request: CheckoutRequest,
        gateway: NGeniusClient,
    ) -> tuple[Order, PaymentSession]:
        """
        Persist the order, then open a payment session for it.

        Raises:
            GatewayError: After the order is committed, if the gateway fails
        """
        order = await self.create_order(request)
        session = await gateway.create_payment_session(order.id, request.amount)
        return order, session

    async def repair_order(self, request: RepairRequest) -> tuple[Order, bool]:
        """
        Create a missing order or fill in the gaps of an existing one.

        Existing values are only replaced by supplied, non-empty values.
        Status and payment data are never touched on an existing order.
        Returns (order, created) tuple.

        Raises:
            OrderValidationError: If orderId or userId is missing
            OrderConflictError: If the order changed between read and write
        """
        if not request.order_id or not request.user_id:
            raise OrderValidationError("Missing orderId or userId")

        logger.info("Repairing order", order_id=request.order_id, user_id=request.user_id)
        now = datetime.now(timezone.utc)

        existing = await self.repository.get_by_id(request.order_id)
        if existing is None:
            items = request.items or []
            amount = request.amount or 0
            shipping_cost = request.shipping_cost or 0
            order = await self.repository.create({
                "id": request.order_id,
                "user_id": request.user_id,
                "items": items,
                "items_count": len(items),
                "status": request.status.value,
                "total": amount,
                "subtotal": amount - shipping_cost,
                "shipping_cost": shipping_cost,
                "tax": 0,
                "discount": 0,
                "shipping_details": (
                    "" if request.shipping_details is None else request.shipping_details
                ),
                "promo_code": request.promo_code or "",
                "payment_method": request.payment_method or "card",
                "gateway": GATEWAY_NAME,
                "created_at": now,
                "updated_at": now,
                "confirmed_at": now if request.status is OrderStatus.CONFIRMED else None,
            })
            await self.repository.commit()
            logger.info("Order created by repair", order_id=order.id, status=order.status)
            return order, True

        candidates = {
            "items": request.items,
            "total": request.amount,
            "shipping_cost": request.shipping_cost,
            "shipping_details": request.shipping_details,
            "promo_code": request.promo_code,
            "payment_method": request.payment_method,
        }
        updates: dict[str, Any] = {
            field: value for field, value in candidates.items() if not is_empty(value)
        }
        if "items" in updates:
            updates["items_count"] = len(updates["items"])
        if "total" in updates or "shipping_cost" in updates:
            updates["subtotal"] = float(updates.get("total", existing.total)) - float(
                updates.get("shipping_cost", existing.shipping_cost)
            )
        updates["user_id"] = request.user_id
        updates["updated_at"] = now

        order = await self.repository.update(existing, updates)
        await self.repository.commit()
        logger.info(
            "Order updated by repair",
            order_id=order.id,
            fields=sorted(updates),
        )
        return order, False

    async def list_user_orders(self, user_id: str) -> list[Order]:
        """Orders owned by a user, newest first."""
        orders = await self.repository.list_for_user(user_id)
        logger.info("Orders listed", user_id=user_id, count=len(orders))
        return orders
