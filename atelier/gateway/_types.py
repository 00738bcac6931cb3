"""
Gateway protocol — what checkout needs from a payment provider.
"""

from dataclasses import dataclass
from typing import Protocol

from kungfu import LazyCoroResult

from atelier._types import Paise
from atelier.errors import ShopError


@dataclass(frozen=True, slots=True)
class PaymentIntent:
    """Gateway-side order the customer pays against."""

    id: str
    amount: Paise
    currency: str
    receipt: str


class PaymentGateway(Protocol):
    @property
    def name(self) -> str: ...

    @property
    def key_id(self) -> str:
        """Public key the client needs to open the hosted payment UI."""
        ...

    def create_intent(
        self, amount: Paise, currency: str, receipt: str
    ) -> LazyCoroResult[PaymentIntent, ShopError]:
        """
        Register a payable intent for exactly `amount`.

        A provider that echoes a different amount is treated as unavailable.
        """
        ...

    def fetch_intent(self, intent_id: str) -> LazyCoroResult[PaymentIntent, ShopError]:
        """Read an intent back; NOT_FOUND if the gateway does not know it."""
        ...


__all__ = ("PaymentIntent", "PaymentGateway")
