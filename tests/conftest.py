from collections.abc import AsyncIterator

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from atelier import Ok, Error
from atelier._types import ById, BySlug
from atelier.accounts import Registration
from atelier.app import create_app
from atelier.config import Settings
from atelier.container import Container, build_container
from atelier.db import create_database
from atelier.errors import ShopError
from atelier.domain import OrderLine, PlacedOrder, PlaceOrderRequest, Product, User
from atelier.gateway import MemoryGateway
from atelier.seed import seed

ADMIN_TOKEN = "admin-token"
GATEWAY_SECRET = "rzp-test-secret"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'atelier.db'}",
        payment_gateway="memory",
        razorpay_key_id="rzp_test_key",
        razorpay_key_secret=GATEWAY_SECRET,
        jwt_secret="jwt-test-secret",
        admin_token=ADMIN_TOKEN,
    )


@pytest.fixture
async def sessions(settings: Settings) -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    factory, engine = await create_database(settings.database_url)
    yield factory
    await engine.dispose()


@pytest.fixture
def gateway() -> MemoryGateway:
    return MemoryGateway(key_id="rzp_test_key", secret=GATEWAY_SECRET)


@pytest.fixture
def container(
    settings: Settings,
    sessions: async_sessionmaker[AsyncSession],
    gateway: MemoryGateway,
) -> Container:
    return build_container(settings, sessions, gateway=gateway, hash_rounds=4)


@pytest.fixture
async def products(sessions: async_sessionmaker[AsyncSession]) -> dict[str, Product]:
    return await seed(sessions)


@pytest.fixture
async def user(container: Container) -> User:
    result = await container.accounts.register(
        Registration(name="Asha", email="asha@example.com", password="s3cret-pass")
    )
    match result:
        case Ok(created):
            return created
        case Error(e):
            raise e


@pytest.fixture
async def client(container: Container) -> AsyncIterator[httpx.AsyncClient]:
    app = create_app(container=container)
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://test"
    ) as c:
        yield c


# ═══════════════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════════════


def ok(result):
    match result:
        case Ok(value):
            return value
        case Error(e):
            pytest.fail(f"expected Ok, got {e!r}")


def err(result) -> ShopError:
    match result:
        case Error(e):
            return e
        case Ok(value):
            pytest.fail(f"expected Error, got Ok({value!r})")


def by_slug(slug: str, quantity: int = 1) -> OrderLine:
    return OrderLine(ref=BySlug(slug), quantity=quantity)


def by_id(product_id: str, quantity: int = 1) -> OrderLine:
    return OrderLine(ref=ById(product_id), quantity=quantity)


def request_for(user: User, *lines: OrderLine) -> PlaceOrderRequest:
    return PlaceOrderRequest(
        user_id=user.id,
        lines=lines,
        email=user.email,
        phone="9999999999",
        address="12 MG Road, Bengaluru",
    )


async def place(container: Container, user: User, *lines: OrderLine) -> PlacedOrder:
    return ok(await container.checkout.place_order(request_for(user, *lines)))


async def inventory(container: Container, slug: str) -> int:
    return ok(await container.catalog.get(BySlug(slug))).inventory


def admin() -> dict[str, str]:
    return {"X-Admin-Token": ADMIN_TOKEN}
