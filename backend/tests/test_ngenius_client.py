"""
Tests for the N-Genius gateway client.
"""
import json

import httpx
import pytest

from order_sync.core.exceptions import GatewayError
from order_sync.services.ngenius_client import NGeniusClient

from tests.conftest import GATEWAY_ORDERS_PATH, GATEWAY_TOKEN_PATH, gateway_ok


class RecordingHandler:
    """Mock transport handler that remembers the requests it served."""

    def __init__(self, handler=gateway_ok) -> None:
        self.handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)


def make_client(settings, handler) -> NGeniusClient:
    return NGeniusClient(settings, transport=httpx.MockTransport(handler))


async def test_access_token_uses_basic_auth(test_settings):
    recorder = RecordingHandler()

    token = await make_client(test_settings, recorder).get_access_token()

    assert token == "gw-token"
    request = recorder.requests[0]
    assert request.method == "POST"
    assert request.url.path == GATEWAY_TOKEN_PATH
    assert request.headers["Authorization"] == "Basic test-api-key"
    assert request.headers["Content-Type"] == "application/vnd.ni-identity.v1+json"
    assert request.headers["Accept"] == "application/vnd.ni-identity.v1+json"


async def test_create_payment_session(test_settings):
    recorder = RecordingHandler()

    session = await make_client(test_settings, recorder).create_payment_session("O1", 1000)

    assert session.payment_url == "https://pay.sandbox.test/GW-REF-1"
    assert session.reference == "GW-REF-1"
    assert session.raw["reference"] == "GW-REF-1"

    token_request, order_request = recorder.requests
    assert token_request.url.path == GATEWAY_TOKEN_PATH
    assert order_request.url.path == GATEWAY_ORDERS_PATH
    assert order_request.headers["Authorization"] == "Bearer gw-token"
    assert order_request.headers["Content-Type"] == "application/vnd.ni-payment.v2+json"
    assert json.loads(order_request.content) == {
        "action": "SALE",
        "amount": {"currencyCode": "XOF", "value": 1000},
        "merchantAttributes": {
            "redirectUrl": test_settings.redirect_url,
            "cancelUrl": test_settings.cancel_url,
        },
        "reference": "O1",
    }


async def test_configured_currency_is_sent(test_settings):
    recorder = RecordingHandler()
    settings = test_settings.model_copy(update={"currency": "AED"})

    await make_client(settings, recorder).create_payment_session("O1", 250)

    assert json.loads(recorder.requests[1].content)["amount"]["currencyCode"] == "AED"


async def test_http_error_carries_upstream_details(test_settings):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == GATEWAY_TOKEN_PATH:
            return httpx.Response(200, json={"access_token": "gw-token"})
        return httpx.Response(422, json={"errors": [{"message": "Invalid amount"}]})

    with pytest.raises(GatewayError) as exc_info:
        await make_client(test_settings, handler).create_payment_session("O1", -5)

    assert exc_info.value.status_code == 422
    assert exc_info.value.details == {"errors": [{"message": "Invalid amount"}]}


async def test_transport_error_raises_gateway_error(test_settings):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(GatewayError, match="Request failed"):
        await make_client(test_settings, handler).get_access_token()


async def test_token_response_without_token(test_settings):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"token_type": "bearer"})

    with pytest.raises(GatewayError, match="access_token"):
        await make_client(test_settings, handler).get_access_token()


async def test_missing_payment_link(test_settings):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == GATEWAY_TOKEN_PATH:
            return httpx.Response(200, json={"access_token": "gw-token"})
        return httpx.Response(201, json={"reference": "GW-REF-1", "_links": {}})

    with pytest.raises(GatewayError, match="payment link"):
        await make_client(test_settings, handler).create_payment_session("O1", 1000)


async def test_non_json_response(test_settings):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>maintenance</html>")

    with pytest.raises(GatewayError, match="non-JSON"):
        await make_client(test_settings, handler).get_access_token()
