"""
CatalogStore — collections, products and their images.

All reads hand out immutable `Product` records. Inventory is only ever
decremented through `decrement_inventory`, inside the caller's transaction.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, cast

import structlog
from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.engine import CursorResult
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from kungfu import Result, Ok, Error

from atelier._types import (
    SLUG_PATTERN,
    ById,
    BySlug,
    CollectionId,
    ProductId,
    ProductRef,
)
from atelier.db import (
    CollectionTable,
    OrderItemTable,
    ProductImageTable,
    ProductTable,
)
from atelier.domain import Collection, Product, ProductImage
from atelier.errors import Errors, ShopError

log = structlog.get_logger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# Drafts
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ProductDraft:
    name: str
    slug: str
    price: int
    description: str = ""
    compare_at: int | None = None
    inventory: int = 0
    active: bool = True
    collection_id: CollectionId | None = None
    tags: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ProductPatch:
    """Only fields that are not None are applied."""

    name: str | None = None
    slug: str | None = None
    description: str | None = None
    price: int | None = None
    compare_at: int | None = None
    inventory: int | None = None
    active: bool | None = None
    collection_id: CollectionId | None = None
    tags: tuple[str, ...] | None = None


@dataclass(frozen=True, slots=True)
class ImageDraft:
    url: str
    alt: str | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Mapping
# ═══════════════════════════════════════════════════════════════════════════════


def to_product(row: ProductTable) -> Product:
    return Product(
        id=row.id,
        name=row.name,
        slug=row.slug,
        description=row.description,
        price=row.price,
        compare_at=row.compare_at,
        inventory=row.inventory,
        active=row.active,
        collection_id=row.collection_id,
        tags=tuple(row.tags or ()),
        images=tuple(
            ProductImage(id=img.id, url=img.url, alt=img.alt, position=img.position)
            for img in row.images
        ),
        created_at=row.created_at,
    )


def to_collection(row: CollectionTable) -> Collection:
    return Collection(id=row.id, name=row.name, slug=row.slug)


def _validate_draft(draft: ProductDraft) -> ShopError | None:
    if not draft.name.strip():
        return Errors.invalid_input("Product name is required")
    if not SLUG_PATTERN.match(draft.slug):
        return Errors.invalid_input(f"Invalid slug: {draft.slug}")
    if draft.price <= 0:
        return Errors.invalid_input("Price must be a positive integer")
    if draft.compare_at is not None and draft.compare_at < 0:
        return Errors.invalid_input("Compare-at price cannot be negative")
    if draft.inventory < 0:
        return Errors.invalid_input("Inventory cannot be negative")
    return None


# ═══════════════════════════════════════════════════════════════════════════════
# Store
# ═══════════════════════════════════════════════════════════════════════════════


class CatalogStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session = session_factory

    # ───────────────────────────────────────────────────────────────────────────
    # Products: reads
    # ───────────────────────────────────────────────────────────────────────────

    async def list_products(
        self,
        collection_id: CollectionId | None = None,
        include_inactive: bool = False,
    ) -> list[Product]:
        stmt = select(ProductTable).order_by(ProductTable.created_at.desc())
        if collection_id is not None:
            stmt = stmt.where(ProductTable.collection_id == collection_id)
        if not include_inactive:
            stmt = stmt.where(ProductTable.active.is_(True))

        async with self._session() as session:
            rows = (await session.scalars(stmt)).all()
            return [to_product(row) for row in rows]

    async def get(self, ref: ProductRef) -> Result[Product, ShopError]:
        match ref:
            case ById(value):
                clause = ProductTable.id == value
            case BySlug(value):
                clause = ProductTable.slug == value

        async with self._session() as session:
            row = (
                await session.scalars(select(ProductTable).where(clause))
            ).one_or_none()
            if row is None:
                return Error(Errors.not_found("Product", ref.value))
            return Ok(to_product(row))

    async def resolve(self, refs: Iterable[ProductRef]) -> dict[ProductRef, Product]:
        """
        Batch-resolve references in a single query.

        Unknown references are simply absent from the result.
        """
        wanted = set(refs)
        ids = [r.value for r in wanted if isinstance(r, ById)]
        slugs = [r.value for r in wanted if isinstance(r, BySlug)]
        if not ids and not slugs:
            return {}

        stmt = select(ProductTable).where(
            or_(ProductTable.id.in_(ids), ProductTable.slug.in_(slugs))
        )
        async with self._session() as session:
            rows = (await session.scalars(stmt)).all()

        by_id = {row.id: to_product(row) for row in rows}
        by_slug = {p.slug: p for p in by_id.values()}

        found: dict[ProductRef, Product] = {}
        for ref in wanted:
            match ref:
                case ById(value) if value in by_id:
                    found[ref] = by_id[value]
                case BySlug(value) if value in by_slug:
                    found[ref] = by_slug[value]
                case _:
                    pass
        return found

    # ───────────────────────────────────────────────────────────────────────────
    # Products: writes
    # ───────────────────────────────────────────────────────────────────────────

    async def create_product(self, draft: ProductDraft) -> Result[Product, ShopError]:
        if (problem := _validate_draft(draft)) is not None:
            return Error(problem)

        async with self._session() as session:
            row = ProductTable(
                name=draft.name.strip(),
                slug=draft.slug,
                description=draft.description,
                price=draft.price,
                compare_at=draft.compare_at,
                inventory=draft.inventory,
                active=draft.active,
                collection_id=draft.collection_id,
                tags=list(draft.tags),
            )
            session.add(row)
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                return Error(Errors.conflict(f"Slug {draft.slug} already exists"))
            await session.refresh(row, attribute_names=["images"])
            log.info("catalog.product_created", product_id=row.id, slug=row.slug)
            return Ok(to_product(row))

    async def update_product(
        self, product_id: ProductId, patch: ProductPatch
    ) -> Result[Product, ShopError]:
        async with self._session() as session:
            row = await session.get(ProductTable, product_id)
            if row is None:
                return Error(Errors.not_found("Product", product_id))

            merged = ProductDraft(
                name=patch.name if patch.name is not None else row.name,
                slug=patch.slug if patch.slug is not None else row.slug,
                price=patch.price if patch.price is not None else row.price,
                compare_at=(
                    patch.compare_at if patch.compare_at is not None else row.compare_at
                ),
                inventory=(
                    patch.inventory if patch.inventory is not None else row.inventory
                ),
            )
            if (problem := _validate_draft(merged)) is not None:
                return Error(problem)

            row.name = merged.name.strip()
            row.slug = merged.slug
            row.price = merged.price
            row.compare_at = merged.compare_at
            row.inventory = merged.inventory
            if patch.description is not None:
                row.description = patch.description
            if patch.active is not None:
                row.active = patch.active
            if patch.collection_id is not None:
                row.collection_id = patch.collection_id or None
            if patch.tags is not None:
                row.tags = list(patch.tags)

            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                return Error(Errors.conflict(f"Slug {merged.slug} already exists"))
            return Ok(to_product(row))

    async def delete_product(self, product_id: ProductId) -> Result[None, ShopError]:
        """Delete a product that no order references."""
        async with self._session() as session, session.begin():
            row = await session.get(ProductTable, product_id)
            if row is None:
                return Error(Errors.not_found("Product", product_id))

            referenced = await session.scalar(
                select(func.count())
                .select_from(OrderItemTable)
                .where(OrderItemTable.product_id == product_id)
            )
            if referenced:
                return Error(
                    Errors.conflict(
                        "Product cannot be deleted because it appears in one or "
                        "more orders. Set inventory to 0 or hide it, or force "
                        "delete to remove related order items."
                    )
                )
            await session.delete(row)

        log.info("catalog.product_deleted", product_id=product_id)
        return Ok(None)

    async def force_delete_product(
        self, product_id: ProductId
    ) -> Result[int, ShopError]:
        """
        Delete a product together with its images and every order item that
        references it. Returns the number of order items removed.
        """
        async with self._session() as session, session.begin():
            row = await session.get(ProductTable, product_id)
            if row is None:
                return Error(Errors.not_found("Product", product_id))

            removed = cast(
                CursorResult[Any],
                await session.execute(
                    delete(OrderItemTable)
                    .where(OrderItemTable.product_id == product_id)
                    .execution_options(synchronize_session=False)
                ),
            ).rowcount
            await session.delete(row)

        log.warning(
            "catalog.product_force_deleted",
            product_id=product_id,
            order_items_removed=removed,
        )
        return Ok(removed)

    # ───────────────────────────────────────────────────────────────────────────
    # Images
    # ───────────────────────────────────────────────────────────────────────────

    async def add_images(
        self, product_id: ProductId, images: Sequence[ImageDraft]
    ) -> Result[Product, ShopError]:
        """Append image records; positions continue after the current max."""
        async with self._session() as session:
            row = await session.get(ProductTable, product_id)
            if row is None:
                return Error(Errors.not_found("Product", product_id))

            start = max((img.position for img in row.images), default=-1) + 1
            for offset, image in enumerate(images):
                if not image.url.strip():
                    return Error(Errors.invalid_input("Image URL is required"))
                row.images.append(
                    ProductImageTable(
                        url=image.url.strip(), alt=image.alt, position=start + offset
                    )
                )
            await session.commit()
            await session.refresh(row, attribute_names=["images"])
            return Ok(to_product(row))

    async def delete_image(
        self, product_id: ProductId, image_id: int
    ) -> Result[None, ShopError]:
        async with self._session() as session, session.begin():
            image = (
                await session.scalars(
                    select(ProductImageTable).where(
                        ProductImageTable.product_id == product_id,
                        ProductImageTable.id == image_id,
                    )
                )
            ).one_or_none()
            if image is None:
                return Error(Errors.not_found("Image", str(image_id)))
            await session.delete(image)
        return Ok(None)

    # ───────────────────────────────────────────────────────────────────────────
    # Inventory
    # ───────────────────────────────────────────────────────────────────────────

    @staticmethod
    async def decrement_inventory(
        session: AsyncSession, product_id: ProductId, delta: int
    ) -> bool:
        """
        Conditionally subtract `delta` units inside the caller's transaction.

        Returns False (and changes nothing) when fewer than `delta` units
        remain, so inventory can never go negative.
        """
        result = cast(
            CursorResult[Any],
            await session.execute(
                update(ProductTable)
                .where(ProductTable.id == product_id, ProductTable.inventory >= delta)
                .values(inventory=ProductTable.inventory - delta)
                .execution_options(synchronize_session=False)
            ),
        )
        return result.rowcount == 1

    # ───────────────────────────────────────────────────────────────────────────
    # Collections
    # ───────────────────────────────────────────────────────────────────────────

    async def list_collections(self) -> list[Collection]:
        async with self._session() as session:
            rows = (
                await session.scalars(
                    select(CollectionTable).order_by(CollectionTable.name)
                )
            ).all()
            return [to_collection(row) for row in rows]

    async def create_collection(
        self, name: str, slug: str
    ) -> Result[Collection, ShopError]:
        if not name.strip():
            return Error(Errors.invalid_input("Collection name is required"))
        if not SLUG_PATTERN.match(slug):
            return Error(Errors.invalid_input(f"Invalid slug: {slug}"))

        async with self._session() as session:
            row = CollectionTable(name=name.strip(), slug=slug)
            session.add(row)
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                return Error(Errors.conflict(f"Slug {slug} already exists"))
            return Ok(to_collection(row))

    async def update_collection(
        self, collection_id: CollectionId, name: str | None, slug: str | None
    ) -> Result[Collection, ShopError]:
        if slug is not None and not SLUG_PATTERN.match(slug):
            return Error(Errors.invalid_input(f"Invalid slug: {slug}"))

        async with self._session() as session:
            row = await session.get(CollectionTable, collection_id)
            if row is None:
                return Error(Errors.not_found("Collection", collection_id))
            if name is not None and name.strip():
                row.name = name.strip()
            if slug is not None:
                row.slug = slug
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                return Error(Errors.conflict(f"Slug {slug} already exists"))
            return Ok(to_collection(row))

    async def delete_collection(
        self, collection_id: CollectionId
    ) -> Result[None, ShopError]:
        async with self._session() as session, session.begin():
            row = await session.get(CollectionTable, collection_id)
            if row is None:
                return Error(Errors.not_found("Collection", collection_id))
            # Products stay, they just lose their collection.
            await session.execute(
                update(ProductTable)
                .where(ProductTable.collection_id == collection_id)
                .values(collection_id=None)
                .execution_options(synchronize_session=False)
            )
            await session.delete(row)
        return Ok(None)


__all__ = (
    "CatalogStore",
    "ProductDraft",
    "ProductPatch",
    "ImageDraft",
    "to_product",
    "to_collection",
)
