"""
Context — everything the checkout graph needs, injected as one value.
"""

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from atelier.catalog import CatalogStore
from atelier.gateway import PaymentGateway


@dataclass(frozen=True, slots=True)
class CheckoutContext:
    sessions: async_sessionmaker[AsyncSession]
    catalog: CatalogStore
    gateway: PaymentGateway
    signing_secret: str
    currency: str = "INR"
    min_payable: int = 100


__all__ = ("CheckoutContext",)
