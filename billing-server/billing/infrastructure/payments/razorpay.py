"""HTTP client for the Razorpay Orders API."""

from __future__ import annotations

import logging
from collections.abc import Mapping

import httpx

from billing.core.config import PaymentSettings
from billing.modules.purchases.gateway import PaymentProviderError, ProviderOrder

logger = logging.getLogger(__name__)


class RazorpayClient:
    """Thin async wrapper around ``POST /orders``.

    The client owns an ``httpx.AsyncClient`` and must be closed with
    :meth:`aclose`; the application container does this on shutdown.

    Parameters
    ----------
    key_id:
        Public key id, also handed to the browser checkout.
    key_secret:
        Secret used for HTTP basic auth against the API.
    base_url:
        API root, e.g. ``https://api.razorpay.com/v1``.
    timeout:
        Per-request timeout in seconds.
    http_client:
        Pre-built client, used by tests to inject a mock transport.
    """

    def __init__(
        self,
        *,
        key_id: str,
        key_secret: str,
        base_url: str = "https://api.razorpay.com/v1",
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._key_id = key_id
        self._client = http_client or httpx.AsyncClient(
            base_url=base_url,
            auth=(key_id, key_secret),
            timeout=timeout,
        )

    @classmethod
    def from_settings(cls, settings: PaymentSettings) -> "RazorpayClient":
        return cls(
            key_id=settings.provider_key_id,
            key_secret=settings.provider_key_secret.get_secret_value(),
            base_url=settings.api_base_url,
            timeout=settings.provider_timeout,
        )

    @property
    def public_key(self) -> str:
        return self._key_id

    async def create_order(
        self,
        *,
        amount: int,
        currency: str,
        receipt: str,
        notes: Mapping[str, str],
    ) -> ProviderOrder:
        payload = {
            "amount": amount,
            "currency": currency,
            "receipt": receipt,
            "notes": dict(notes),
        }
        try:
            response = await self._client.post("/orders", json=payload)
        except httpx.HTTPError as exc:
            logger.error("Razorpay order request failed: %s", exc)
            raise PaymentProviderError(f"order request failed: {exc}") from exc

        if response.status_code >= 400:
            logger.error("Razorpay rejected order (%s): %s", response.status_code, _error_description(response))
            raise PaymentProviderError(f"provider returned HTTP {response.status_code}")

        try:
            body = response.json()
            return ProviderOrder(
                id=body["id"],
                amount=int(body.get("amount", amount)),
                currency=body.get("currency", currency),
                receipt=body.get("receipt", receipt),
                status=body.get("status", "created"),
            )
        except (ValueError, KeyError, TypeError) as exc:
            raise PaymentProviderError("malformed order response") from exc

    async def aclose(self) -> None:
        await self._client.aclose()


def _error_description(response: httpx.Response) -> str:
    try:
        return str(response.json().get("error", {}).get("description", ""))
    except ValueError:
        return response.text[:200]
