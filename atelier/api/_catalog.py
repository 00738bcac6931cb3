"""Collections, products and product images."""

from typing import Annotated

from fastapi import APIRouter, Header, Query

from atelier._types import ById, parse_ref
from atelier.api._codecs import (
    CollectionIn,
    CollectionOut,
    CollectionPatchIn,
    ForceDeleteOut,
    ImagesIn,
    OkOut,
    ProductIn,
    ProductOut,
    ProductPatchIn,
)
from atelier.api._deps import AdminOnly, ContainerDep, is_admin
from atelier.api._errors import unwrap

router = APIRouter(prefix="/api", tags=["catalog"])


# ═══════════════════════════════════════════════════════════════════════════════
# Collections
# ═══════════════════════════════════════════════════════════════════════════════


@router.get("/collections")
async def list_collections(container: ContainerDep) -> list[CollectionOut]:
    return [
        CollectionOut.from_domain(c) for c in await container.catalog.list_collections()
    ]


@router.post("/collections", dependencies=[AdminOnly])
async def create_collection(
    body: CollectionIn, container: ContainerDep
) -> CollectionOut:
    collection = unwrap(await container.catalog.create_collection(body.name, body.slug))
    return CollectionOut.from_domain(collection)


@router.put("/collections/{collection_id}", dependencies=[AdminOnly])
async def update_collection(
    collection_id: str, body: CollectionPatchIn, container: ContainerDep
) -> CollectionOut:
    collection = unwrap(
        await container.catalog.update_collection(collection_id, body.name, body.slug)
    )
    return CollectionOut.from_domain(collection)


@router.delete("/collections/{collection_id}", dependencies=[AdminOnly])
async def delete_collection(collection_id: str, container: ContainerDep) -> OkOut:
    unwrap(await container.catalog.delete_collection(collection_id))
    return OkOut()


# ═══════════════════════════════════════════════════════════════════════════════
# Products
# ═══════════════════════════════════════════════════════════════════════════════


@router.get("/products")
async def list_products(
    container: ContainerDep,
    collection_id: Annotated[str | None, Query(alias="collectionId")] = None,
    x_admin_token: Annotated[str | None, Header()] = None,
) -> list[ProductOut]:
    # Hidden products are only listed for admins.
    products = await container.catalog.list_products(
        collection_id=collection_id or None,
        include_inactive=is_admin(container, x_admin_token),
    )
    return [ProductOut.from_domain(p) for p in products]


@router.get("/products/id/{product_id}")
async def get_product_by_id(product_id: str, container: ContainerDep) -> ProductOut:
    return ProductOut.from_domain(unwrap(await container.catalog.get(ById(product_id))))


@router.get("/products/{id_or_slug}")
async def get_product(id_or_slug: str, container: ContainerDep) -> ProductOut:
    product = unwrap(await container.catalog.get(parse_ref(id_or_slug)))
    return ProductOut.from_domain(product)


@router.post("/products", dependencies=[AdminOnly])
async def create_product(body: ProductIn, container: ContainerDep) -> ProductOut:
    product = unwrap(await container.catalog.create_product(body.to_domain()))
    return ProductOut.from_domain(product)


@router.put("/products/{product_id}", dependencies=[AdminOnly])
async def update_product(
    product_id: str, body: ProductPatchIn, container: ContainerDep
) -> ProductOut:
    product = unwrap(
        await container.catalog.update_product(product_id, body.to_domain())
    )
    return ProductOut.from_domain(product)


@router.delete("/products/{product_id}", dependencies=[AdminOnly])
async def delete_product(product_id: str, container: ContainerDep) -> ForceDeleteOut:
    unwrap(await container.catalog.delete_product(product_id))
    return ForceDeleteOut(forced=False)


@router.delete("/products/{product_id}/force", dependencies=[AdminOnly])
async def force_delete_product(
    product_id: str, container: ContainerDep
) -> ForceDeleteOut:
    removed = unwrap(await container.catalog.force_delete_product(product_id))
    return ForceDeleteOut(forced=True, order_items_removed=removed)


@router.post("/products/{product_id}/images", dependencies=[AdminOnly])
async def add_images(
    product_id: str, body: ImagesIn, container: ContainerDep
) -> ProductOut:
    product = unwrap(await container.catalog.add_images(product_id, body.to_domain()))
    return ProductOut.from_domain(product)


@router.delete("/products/{product_id}/images/{image_id}", dependencies=[AdminOnly])
async def delete_image(
    product_id: str, image_id: int, container: ContainerDep
) -> OkOut:
    unwrap(await container.catalog.delete_image(product_id, image_id))
    return OkOut()
