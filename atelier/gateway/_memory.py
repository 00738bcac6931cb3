"""
In-memory gateway for local runs and tests.

Behaves like the hosted provider: intents are remembered, the customer
"pays" with `pay()`, which returns a correctly signed callback.
"""

import uuid

import structlog
from kungfu import LazyCoroResult, Ok, Error, Result

from atelier._types import Paise
from atelier.domain import PaymentCallback
from atelier.errors import Errors, ShopError
from atelier.gateway._types import PaymentIntent
from atelier.gateway.signature import sign_payment

log = structlog.get_logger(__name__)


class MemoryGateway:
    def __init__(self, key_id: str = "rzp_test_memory", secret: str = "memory-secret") -> None:
        self._key_id = key_id
        self._secret = secret
        self._intents: dict[str, PaymentIntent] = {}
        self.unavailable = False
        self.created = 0

    @property
    def name(self) -> str:
        return "memory"

    @property
    def key_id(self) -> str:
        return self._key_id

    @property
    def secret(self) -> str:
        return self._secret

    def create_intent(
        self, amount: Paise, currency: str, receipt: str
    ) -> LazyCoroResult[PaymentIntent, ShopError]:
        async def execute() -> Result[PaymentIntent, ShopError]:
            if self.unavailable:
                return Error(Errors.gateway_unavailable())
            intent = PaymentIntent(
                id=f"order_{uuid.uuid4().hex[:14]}",
                amount=amount,
                currency=currency,
                receipt=receipt,
            )
            self._intents[intent.id] = intent
            self.created += 1
            log.debug("gateway.intent_created", gateway="memory", intent_id=intent.id)
            return Ok(intent)

        return LazyCoroResult(execute)

    def fetch_intent(self, intent_id: str) -> LazyCoroResult[PaymentIntent, ShopError]:
        async def execute() -> Result[PaymentIntent, ShopError]:
            if self.unavailable:
                return Error(Errors.gateway_unavailable())
            intent = self._intents.get(intent_id)
            if intent is None:
                return Error(Errors.not_found("Payment intent", intent_id))
            return Ok(intent)

        return LazyCoroResult(execute)

    def pay(self, intent_id: str) -> PaymentCallback:
        """Simulate the customer completing payment in the hosted UI."""
        payment_id = f"pay_{uuid.uuid4().hex[:14]}"
        return PaymentCallback(
            intent_id=intent_id,
            payment_id=payment_id,
            signature=sign_payment(self._secret, intent_id, payment_id),
        )


__all__ = ("MemoryGateway",)
