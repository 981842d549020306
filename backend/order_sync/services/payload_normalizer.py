"""
Extracts the order id, payment state and gateway reference from a
gateway notification.

Notification shapes vary between gateway API versions, so each value is
probed through an ordered list of accessors; the first one yielding a
non-empty value wins. The order of each list is part of the contract.
"""
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

from order_sync.core.exceptions import NormalizationError

Accessor = Callable[[dict[str, Any]], Optional[str]]


@dataclass(frozen=True)
class NormalizedNotification:
    """Canonical view of a notification. `payment_state` keeps the gateway wording."""

    order_id: str
    payment_state: str
    gateway_reference: Optional[str] = None

    @property
    def state_key(self) -> str:
        """Case-insensitive lookup key for the state table."""
        return self.payment_state.upper()


def _path(*keys: str) -> Accessor:
    """Build an accessor that walks nested objects and returns a scalar as text."""

    def access(payload: dict[str, Any]) -> Optional[str]:
        current: Any = payload
        for key in keys:
            if not isinstance(current, dict):
                return None
            current = current.get(key)
        if isinstance(current, bool) or not isinstance(current, (str, int, float)):
            return None
        text = str(current).strip()
        return text or None

    access.__name__ = ".".join(keys)
    return access


ORDER_ID_ACCESSORS: tuple[Accessor, ...] = (
    _path("order", "reference"),
    _path("orderReference"),
    _path("reference"),
)

PAYMENT_STATE_ACCESSORS: tuple[Accessor, ...] = (
    _path("payment", "state"),
    _path("state"),
    _path("order", "state"),
)

GATEWAY_REFERENCE_ACCESSORS: tuple[Accessor, ...] = (
    _path("payment", "reference"),
    _path("reference"),
    _path("order", "reference"),
)


def first_present(payload: dict[str, Any], accessors: Sequence[Accessor]) -> Optional[str]:
    """Return the first non-empty value produced by the accessors."""
    for accessor in accessors:
        value = accessor(payload)
        if value is not None:
            return value
    return None


def normalize_notification(payload: Any) -> NormalizedNotification:
    """
    Normalize a parsed notification body.

    Raises:
        NormalizationError: If the payload is not an object or the order id
            or payment state cannot be found
    """
    if not isinstance(payload, dict):
        raise NormalizationError("Notification payload is not an object")

    order_id = first_present(payload, ORDER_ID_ACCESSORS)
    payment_state = first_present(payload, PAYMENT_STATE_ACCESSORS)

    if not order_id or not payment_state:
        raise NormalizationError("Missing order reference or payment state")

    return NormalizedNotification(
        order_id=order_id,
        payment_state=payment_state,
        gateway_reference=first_present(payload, GATEWAY_REFERENCE_ACCESSORS),
    )
