"""
Seed data — two collections and three products.

    sessions, engine = await create_database(url)
    await seed(sessions)
"""

from dataclasses import dataclass, replace

import structlog
from kungfu import Ok, Error, Result
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from atelier.catalog import CatalogStore, ImageDraft, ProductDraft
from atelier.db import (
    CollectionTable,
    OrderItemTable,
    OrderTable,
    ProductImageTable,
    ProductTable,
)
from atelier.domain import Product
from atelier.errors import ShopError

log = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class SeedProduct:
    draft: ProductDraft
    collection: str
    images: tuple[str, ...]


COLLECTIONS: tuple[tuple[str, str], ...] = (
    ("Bridal", "bridal"),
    ("Daily Wear", "daily-wear"),
)

PRODUCTS: tuple[SeedProduct, ...] = (
    SeedProduct(
        draft=ProductDraft(
            name="Kundan Necklace Set",
            slug="kundan-necklace-set",
            description="Classic kundan set with earrings.",
            price=249900,
            compare_at=299900,
            inventory=25,
            tags=("kundan", "necklace", "set", "bridal"),
        ),
        collection="bridal",
        images=(
            "https://picsum.photos/seed/kundan1/800/800",
            "https://picsum.photos/seed/kundan2/800/800",
        ),
    ),
    SeedProduct(
        draft=ProductDraft(
            name="Pearl Drop Earrings",
            slug="pearl-drop-earrings",
            description="Lightweight daily-wear pearl drops.",
            price=99900,
            compare_at=129900,
            inventory=40,
            tags=("pearls", "earrings", "daily"),
        ),
        collection="daily-wear",
        images=(
            "https://picsum.photos/seed/pearls1/800/800",
            "https://picsum.photos/seed/pearls2/800/800",
        ),
    ),
    SeedProduct(
        draft=ProductDraft(
            name="Temple Pendant",
            slug="temple-pendant",
            description="Antique-finish temple pendant.",
            price=149900,
            compare_at=179900,
            inventory=15,
            tags=("temple", "pendant", "antique"),
        ),
        collection="daily-wear",
        images=(
            "https://picsum.photos/seed/temple1/800/800",
            "https://picsum.photos/seed/temple2/800/800",
        ),
    ),
)


def _unwrap[T](result: Result[T, ShopError]) -> T:
    match result:
        case Ok(value):
            return value
        case Error(e):
            raise e


async def wipe(sessions: async_sessionmaker[AsyncSession]) -> None:
    """Remove orders and the whole catalog. Accounts are kept."""
    async with sessions() as session, session.begin():
        for table in (
            OrderItemTable,
            OrderTable,
            ProductImageTable,
            ProductTable,
            CollectionTable,
        ):
            await session.execute(delete(table))


async def seed(
    sessions: async_sessionmaker[AsyncSession], reset: bool = True
) -> dict[str, Product]:
    """Load the demo catalog. Returns products by slug."""
    if reset:
        await wipe(sessions)

    catalog = CatalogStore(sessions)

    collections: dict[str, str] = {}
    for name, slug in COLLECTIONS:
        collection = _unwrap(await catalog.create_collection(name, slug))
        collections[slug] = collection.id

    products: dict[str, Product] = {}
    for item in PRODUCTS:
        draft = replace(item.draft, collection_id=collections[item.collection])
        created = _unwrap(await catalog.create_product(draft))
        product = _unwrap(
            await catalog.add_images(
                created.id, [ImageDraft(url=url) for url in item.images]
            )
        )
        products[product.slug] = product

    log.info("seed.complete", collections=len(collections), products=len(products))
    return products


__all__ = ("COLLECTIONS", "PRODUCTS", "seed", "wipe")
