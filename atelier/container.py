"""
Container — the wired object graph for one running application.
"""

from dataclasses import dataclass
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from atelier.accounts import AccountStore, TokenIssuer
from atelier.accounts.passwords import ROUNDS
from atelier.catalog import CatalogStore
from atelier.checkout import CheckoutContext, CheckoutService, OrderStore
from atelier.config import Settings
from atelier.gateway import MemoryGateway, PaymentGateway, RazorpayGateway


@dataclass(frozen=True, slots=True)
class Container:
    settings: Settings
    sessions: async_sessionmaker[AsyncSession]
    gateway: PaymentGateway
    catalog: CatalogStore
    accounts: AccountStore
    orders: OrderStore
    checkout: CheckoutService
    tokens: TokenIssuer


def make_gateway(settings: Settings) -> PaymentGateway:
    if settings.payment_gateway == "memory":
        return MemoryGateway(
            key_id=settings.razorpay_key_id or "rzp_test_memory",
            secret=settings.razorpay_key_secret or "memory-secret",
        )
    return RazorpayGateway(
        settings.razorpay_key_id,
        settings.razorpay_key_secret,
        base_url=settings.razorpay_base_url,
        timeout=settings.gateway_timeout,
    )


def build_container(
    settings: Settings,
    sessions: async_sessionmaker[AsyncSession],
    gateway: PaymentGateway | None = None,
    hash_rounds: int = ROUNDS,
) -> Container:
    gateway = gateway if gateway is not None else make_gateway(settings)
    signing_secret = (
        gateway.secret
        if isinstance(gateway, MemoryGateway)
        else settings.razorpay_key_secret
    )

    catalog = CatalogStore(sessions)
    orders = OrderStore(sessions)
    ctx = CheckoutContext(
        sessions=sessions,
        catalog=catalog,
        gateway=gateway,
        signing_secret=signing_secret,
        currency=settings.currency,
        min_payable=settings.min_payable,
    )

    return Container(
        settings=settings,
        sessions=sessions,
        gateway=gateway,
        catalog=catalog,
        accounts=AccountStore(sessions, hash_rounds=hash_rounds),
        orders=orders,
        checkout=CheckoutService(ctx, orders),
        tokens=TokenIssuer(
            settings.jwt_secret, ttl=timedelta(days=settings.jwt_ttl_days)
        ),
    )


__all__ = ("Container", "make_gateway", "build_container")
