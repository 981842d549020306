"""
N-Genius gateway client.
Handles token exchange and hosted payment-page order creation.
"""
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx

from order_sync.core.config import Settings
from order_sync.core.exceptions import GatewayError
from order_sync.core.logging import get_logger

logger = get_logger(__name__)

IDENTITY_MEDIA_TYPE = "application/vnd.ni-identity.v1+json"
PAYMENT_MEDIA_TYPE = "application/vnd.ni-payment.v2+json"


@dataclass
class PaymentSession:
    """Hosted payment page created for an order."""

    payment_url: str
    reference: Optional[str]
    raw: dict[str, Any] = field(default_factory=dict)


class NGeniusClient:
    """
    Async N-Genius REST client.

    Calls are not retried: a failure is raised as GatewayError and the
    caller decides what to do with the pending order.
    """

    TOKEN_PATH = "/identity/auth/access-token"
    ORDERS_PATH = "/transactions/outlets/{outlet}/orders"

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings
        self.base_url = settings.gateway_url.rstrip("/")
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.settings.gateway_timeout,
            transport=self.transport,
        )

    async def _post(
        self,
        client: httpx.AsyncClient,
        url: str,
        headers: dict[str, str],
        json: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        try:
            response = await client.post(url, json=json, headers=headers)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            details = _response_details(e.response)
            logger.error(
                "Gateway returned an error",
                url=url,
                status_code=e.response.status_code,
                details=details,
            )
            raise GatewayError(
                f"HTTP error: {e.response.status_code}",
                status_code=e.response.status_code,
                details=details,
            ) from e
        except httpx.RequestError as e:
            logger.error("Gateway request failed", url=url, error=str(e))
            raise GatewayError(f"Request failed: {e}") from e
        except ValueError as e:
            raise GatewayError("Gateway returned a non-JSON body") from e

        if not isinstance(data, dict):
            raise GatewayError("Gateway returned an unexpected body", details=data)
        return data

    async def get_access_token(self, client: Optional[httpx.AsyncClient] = None) -> str:
        """Exchange the API key for a short-lived access token."""
        headers = {
            "Authorization": f"Basic {self.settings.api_key}",
            "Content-Type": IDENTITY_MEDIA_TYPE,
            "Accept": IDENTITY_MEDIA_TYPE,
        }
        url = f"{self.base_url}{self.TOKEN_PATH}"

        if client is None:
            async with self._client() as own_client:
                data = await self._post(own_client, url, headers)
        else:
            data = await self._post(client, url, headers)

        token = data.get("access_token")
        if not token:
            raise GatewayError("Token response without access_token", details=data)
        return token

    async def create_payment_session(self, order_id: str, amount: int | float) -> PaymentSession:
        """
        Create a SALE order on the gateway and return its payment page.

        Args:
            order_id: Local order id, sent as the gateway `reference`
            amount: Amount in the configured currency's minor units

        Raises:
            GatewayError: On any upstream failure
        """
        payload = {
            "action": "SALE",
            "amount": {
                "currencyCode": self.settings.currency,
                "value": amount,
            },
            "merchantAttributes": {
                "redirectUrl": self.settings.redirect_url,
                "cancelUrl": self.settings.cancel_url,
            },
            "reference": order_id,
        }
        url = f"{self.base_url}{self.ORDERS_PATH.format(outlet=self.settings.outlet_id)}"

        async with self._client() as client:
            token = await self.get_access_token(client)
            headers = {
                "Authorization": f"Bearer {token}",
                "Content-Type": PAYMENT_MEDIA_TYPE,
                "Accept": PAYMENT_MEDIA_TYPE,
            }
            data = await self._post(client, url, headers, json=payload)

        try:
            payment_url = data["_links"]["payment"]["href"]
        except (KeyError, TypeError) as e:
            raise GatewayError("Gateway response has no payment link", details=data) from e

        logger.info(
            "Payment session created",
            order_id=order_id,
            reference=data.get("reference"),
        )
        return PaymentSession(
            payment_url=payment_url,
            reference=data.get("reference"),
            raw=data,
        )


def _response_details(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text
