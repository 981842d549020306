"""
Tests for gateway state to order status mapping.
"""
import pytest

from order_sync.models.order import OrderStatus
from order_sync.services.state_mapper import map_payment_state


@pytest.mark.parametrize(
    ("state", "status", "captured"),
    [
        ("CAPTURED", OrderStatus.CONFIRMED, True),
        ("PURCHASED", OrderStatus.CONFIRMED, True),
        ("FAILED", OrderStatus.CANCELLED, False),
        ("DECLINED", OrderStatus.CANCELLED, False),
        ("CANCELLED", OrderStatus.CANCELLED, False),
        ("AUTHORIZED", OrderStatus.PENDING, False),
    ],
)
def test_known_states(state, status, captured):
    mapping = map_payment_state(state)

    assert mapping.status is status
    assert mapping.captured is captured


@pytest.mark.parametrize("state", ["STARTED", "REVERSED", "REFUNDED", "", "PARTIALLY_CAPTURED"])
def test_unknown_states_stay_pending(state):
    assert map_payment_state(state) == (OrderStatus.PENDING, False)
