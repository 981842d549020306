"""
Reconciliation of gateway notifications with stored orders.

A notification flows signature check -> payload normalization -> state
mapping -> partial update of the existing order. Redelivering the same
notification rewrites the same values, so the stored state converges.
"""
import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from order_sync.core.config import Settings
from order_sync.core.exceptions import NormalizationError, OrderNotFoundError
from order_sync.core.logging import get_logger
from order_sync.core.security import verify_gateway_signature
from order_sync.models.order import GATEWAY_NAME, Order, OrderStatus
from order_sync.repositories.order import OrderRepository
from order_sync.services.payload_normalizer import (
    NormalizedNotification,
    normalize_notification,
)
from order_sync.services.state_mapper import StatusMapping, map_payment_state

logger = get_logger(__name__)


@dataclass(frozen=True)
class ReconciliationResult:
    """Outcome of applying one notification."""

    order_id: str
    payment_state: str
    status: OrderStatus
    applied: bool


def resolve_status(
    current: OrderStatus,
    mapped: OrderStatus,
    permissive: bool = False,
) -> Optional[OrderStatus]:
    """
    Decide the status to write, or None when the notification must be ignored.

    Confirmed orders never move. Cancelled orders only move to confirmed,
    since that means the gateway captured funds after all. In permissive
    mode the mapped status always wins.
    """
    if permissive or current is OrderStatus.PENDING or current is mapped:
        return mapped
    if current is OrderStatus.CANCELLED and mapped is OrderStatus.CONFIRMED:
        return mapped
    return None


class ReconciliationService:
    """Applies verified gateway notifications to orders."""

    def __init__(self, repository: OrderRepository, settings: Settings) -> None:
        self.repository = repository
        self.settings = settings

    async def process_webhook(
        self,
        body: bytes,
        signature: Optional[str],
    ) -> ReconciliationResult:
        """
        Verify, parse, normalize and apply a raw webhook delivery.

        Raises:
            SignatureError: Missing or invalid signature
            NormalizationError: Body is not JSON or lacks order id/state
            OrderStoreError: Order missing or the write failed
        """
        verify_gateway_signature(
            body,
            signature,
            self.settings.webhook_secret,
            self.settings.mode,
        )

        try:
            payload = json.loads(body)
        except (UnicodeDecodeError, ValueError) as e:
            raise NormalizationError("Notification body is not valid JSON") from e

        notification = normalize_notification(payload)
        logger.info(
            "Notification received",
            order_id=notification.order_id,
            state=notification.payment_state,
            gateway_reference=notification.gateway_reference,
        )
        return await self.apply(notification, payload)

    async def apply(
        self,
        notification: NormalizedNotification,
        payload: Any,
    ) -> ReconciliationResult:
        """Write the mapped status and payment sub-record to the order."""
        mapping = map_payment_state(notification.state_key)

        order = await self.repository.get_by_id(notification.order_id)
        if order is None:
            logger.error(
                "Notification for unknown order",
                order_id=notification.order_id,
                state=notification.payment_state,
            )
            raise OrderNotFoundError(notification.order_id)

        current = OrderStatus(order.status)
        target = resolve_status(current, mapping.status, self.settings.reconcile_permissive)

        if target is None:
            logger.warning(
                "Ignoring notification for finalized order",
                order_id=order.id,
                current_status=current.value,
                mapped_status=mapping.status.value,
                state=notification.payment_state,
            )
            return ReconciliationResult(
                order_id=order.id,
                payment_state=notification.payment_state,
                status=current,
                applied=False,
            )

        await self.repository.update(
            order,
            self._build_update(order, notification, mapping, target, payload),
        )
        await self.repository.commit()

        logger.info(
            "Order reconciled",
            order_id=order.id,
            state=notification.payment_state,
            previous_status=current.value,
            status=target.value,
        )
        return ReconciliationResult(
            order_id=order.id,
            payment_state=notification.payment_state,
            status=target,
            applied=True,
        )

    @staticmethod
    def _build_update(
        order: Order,
        notification: NormalizedNotification,
        mapping: StatusMapping,
        target: OrderStatus,
        payload: Any,
    ) -> dict[str, Any]:
        now = datetime.now(timezone.utc)
        previous = order.payment or {}

        payment: dict[str, Any] = {
            "gateway": GATEWAY_NAME,
            "gatewayReference": notification.gateway_reference,
            "state": notification.payment_state,
            "captured": mapping.captured or bool(previous.get("captured")),
            "raw": payload,
            "updatedAt": now.isoformat(),
        }

        paid_at = previous.get("paidAt")
        if paid_at is None and target is OrderStatus.CONFIRMED:
            paid_at = now.isoformat()
        if paid_at is not None:
            payment["paidAt"] = paid_at

        update: dict[str, Any] = {
            "status": target.value,
            "payment": payment,
            "updated_at": now,
        }
        if target is OrderStatus.CONFIRMED and order.confirmed_at is None:
            update["confirmed_at"] = now
        return update
