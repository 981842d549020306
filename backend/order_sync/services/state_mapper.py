"""
Maps gateway payment states to order statuses.
"""
from typing import NamedTuple

from order_sync.models.order import OrderStatus


class StatusMapping(NamedTuple):
    status: OrderStatus
    captured: bool


_CAPTURED = StatusMapping(OrderStatus.CONFIRMED, True)
_CANCELLED = StatusMapping(OrderStatus.CANCELLED, False)
_PENDING = StatusMapping(OrderStatus.PENDING, False)

STATE_MAP: dict[str, StatusMapping] = {
    "CAPTURED": _CAPTURED,
    "PURCHASED": _CAPTURED,
    "FAILED": _CANCELLED,
    "DECLINED": _CANCELLED,
    "CANCELLED": _CANCELLED,
    "AUTHORIZED": _PENDING,
}


def map_payment_state(state: str) -> StatusMapping:
    """Return (status, captured) for a gateway state; unknown states stay pending."""
    return STATE_MAP.get(state, _PENDING)
