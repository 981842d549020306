"""
Tests for notification payload normalization.
"""
import pytest

from order_sync.core.exceptions import NormalizationError
from order_sync.services.payload_normalizer import normalize_notification


def test_nested_order_reference_wins_over_top_level_reference():
    """The nested order reference is the order id even when `reference` differs."""
    result = normalize_notification({
        "order": {"reference": "O1"},
        "reference": "GW-999",
        "payment": {"state": "CAPTURED"},
    })

    assert result.order_id == "O1"
    assert result.gateway_reference == "GW-999"


def test_order_reference_field_precedes_reference():
    result = normalize_notification({
        "orderReference": "O2",
        "reference": "GW-2",
        "state": "PURCHASED",
    })

    assert result.order_id == "O2"
    assert result.payment_state == "PURCHASED"


def test_top_level_reference_used_as_last_resort():
    result = normalize_notification({"reference": "O3", "state": "FAILED"})

    assert result.order_id == "O3"
    assert result.gateway_reference == "O3"


def test_payment_state_precedence():
    result = normalize_notification({
        "reference": "O4",
        "payment": {"state": "CAPTURED", "reference": "PAY-4"},
        "state": "AUTHORIZED",
        "order": {"state": "STARTED"},
    })

    assert result.payment_state == "CAPTURED"
    assert result.gateway_reference == "PAY-4"


def test_order_state_used_when_no_other_state():
    result = normalize_notification({"order": {"reference": "O5", "state": "DECLINED"}})

    assert result.order_id == "O5"
    assert result.payment_state == "DECLINED"
    assert result.gateway_reference == "O5"


def test_blank_values_are_skipped():
    """A present-but-blank candidate does not shadow the next one."""
    result = normalize_notification({
        "order": {"reference": "   "},
        "orderReference": "",
        "reference": "O6",
        "payment": {"state": ""},
        "state": "CAPTURED",
    })

    assert result.order_id == "O6"
    assert result.payment_state == "CAPTURED"


def test_state_keeps_gateway_wording():
    result = normalize_notification({"reference": "O7", "state": " captured "})

    assert result.payment_state == "captured"
    assert result.state_key == "CAPTURED"


def test_numeric_reference_is_stringified():
    result = normalize_notification({"reference": 12345, "state": "CAPTURED"})

    assert result.order_id == "12345"


def test_non_scalar_candidates_are_ignored():
    result = normalize_notification({
        "order": "not-an-object",
        "orderReference": {"id": "x"},
        "reference": "O8",
        "state": "CAPTURED",
    })

    assert result.order_id == "O8"


@pytest.mark.parametrize(
    "payload",
    [
        {"state": "CAPTURED"},
        {"reference": "O9"},
        {"order": {"reference": "O9"}, "payment": {"state": None}},
        {},
        [],
        "CAPTURED",
        None,
    ],
)
def test_unresolvable_payload_raises(payload):
    with pytest.raises(NormalizationError):
        normalize_notification(payload)
