"""
Catalog — products, images and collections.

    from atelier.catalog import CatalogStore, ProductDraft

    catalog = CatalogStore(sessions)
    match await catalog.create_product(ProductDraft(name="Temple Pendant", slug="temple-pendant", price=149900)):
        case Ok(product): ...
        case Error(e): ...
"""

from atelier.catalog._store import (
    CatalogStore,
    ProductDraft,
    ProductPatch,
    ImageDraft,
    to_product,
    to_collection,
)

__all__ = (
    "CatalogStore",
    "ProductDraft",
    "ProductPatch",
    "ImageDraft",
    "to_product",
    "to_collection",
)
