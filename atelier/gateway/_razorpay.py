"""
Razorpay adapter over httpx.

    gateway = RazorpayGateway(key_id, key_secret)
    match await gateway.create_intent(249900, "INR", receipt=order_id):
        case Ok(intent): ...
        case Error(e): ...   # GATEWAY_UNAVAILABLE

Any transport failure, non-2xx answer or malformed body becomes
GATEWAY_UNAVAILABLE; a 404 on fetch becomes NOT_FOUND.
"""

from typing import Any

import httpx
import structlog
from combinators import lift as L
from kungfu import LazyCoroResult

from atelier._types import Paise
from atelier.errors import Errors, ShopError
from atelier.gateway._types import PaymentIntent

log = structlog.get_logger(__name__)

DEFAULT_BASE_URL = "https://api.razorpay.com/v1"


def _as_shop_error(exc: Exception) -> ShopError:
    if isinstance(exc, ShopError):
        return exc
    log.warning("gateway.call_failed", gateway="razorpay", error=repr(exc))
    return Errors.gateway_unavailable()


def _parse_intent(body: Any) -> PaymentIntent:
    if not isinstance(body, dict):
        raise ValueError("unexpected gateway response")
    return PaymentIntent(
        id=str(body["id"]),
        amount=int(body["amount"]),
        currency=str(body["currency"]),
        receipt=str(body.get("receipt") or ""),
    )


class RazorpayGateway:
    def __init__(
        self,
        key_id: str,
        key_secret: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._key_id = key_id
        self._key_secret = key_secret
        self._base_url = base_url
        self._timeout = timeout
        self._transport = transport

    @property
    def name(self) -> str:
        return "razorpay"

    @property
    def key_id(self) -> str:
        return self._key_id

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            auth=(self._key_id, self._key_secret),
            timeout=self._timeout,
            transport=self._transport,
        )

    # ───────────────────────────────────────────────────────────────────────────
    # Intents
    # ───────────────────────────────────────────────────────────────────────────

    def create_intent(
        self, amount: Paise, currency: str, receipt: str
    ) -> LazyCoroResult[PaymentIntent, ShopError]:
        return L.catching_async(
            lambda: self._post_order(amount, currency, receipt),
            on_error=_as_shop_error,
        )

    def fetch_intent(self, intent_id: str) -> LazyCoroResult[PaymentIntent, ShopError]:
        return L.catching_async(
            lambda: self._get_order(intent_id),
            on_error=_as_shop_error,
        )

    async def _post_order(
        self, amount: Paise, currency: str, receipt: str
    ) -> PaymentIntent:
        if not self._key_id or not self._key_secret:
            raise Errors.gateway_unavailable("Razorpay keys not configured")

        async with self._client() as client:
            response = await client.post(
                "/orders",
                json={
                    "amount": amount,
                    "currency": currency,
                    "receipt": receipt,
                    "payment_capture": 1,
                },
            )
            response.raise_for_status()
            intent = _parse_intent(response.json())

        if intent.amount != amount or intent.currency != currency:
            log.error(
                "gateway.amount_mismatch",
                requested=amount,
                echoed=intent.amount,
                currency=currency,
            )
            raise Errors.gateway_unavailable("Gateway returned a different amount")

        log.info("gateway.intent_created", intent_id=intent.id, amount=amount)
        return intent

    async def _get_order(self, intent_id: str) -> PaymentIntent:
        if not self._key_id or not self._key_secret:
            raise Errors.gateway_unavailable("Razorpay keys not configured")

        async with self._client() as client:
            response = await client.get(f"/orders/{intent_id}")
            if response.status_code == 404:
                raise Errors.not_found("Payment intent", intent_id)
            response.raise_for_status()
            return _parse_intent(response.json())


__all__ = ("RazorpayGateway", "DEFAULT_BASE_URL")
