"""
Core types for atelier.

Re-exports from kungfu + identifier aliases and the tagged product reference.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

# Re-export from kungfu
from kungfu import Result, Ok, Error, LazyCoroResult

# ═══════════════════════════════════════════════════════════════════════════════
# Identifiers
# ═══════════════════════════════════════════════════════════════════════════════

type ProductId = str
type OrderId = str
type UserId = str
type CollectionId = str
type AddressId = str

type Paise = int
"""Money in minor currency units. Never float."""

PRODUCT_ID_PREFIX = "prod_"

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

# ═══════════════════════════════════════════════════════════════════════════════
# Product Reference: ById | BySlug
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ById:
    value: ProductId


@dataclass(frozen=True, slots=True)
class BySlug:
    value: str


type ProductRef = ById | BySlug


def parse_ref(raw: str) -> ProductRef:
    """
    Tag a raw cart reference.

    Product ids carry the `prod_` prefix; slugs can never contain an
    underscore, so the two namespaces cannot collide.
    """
    raw = raw.strip()
    if raw.startswith(PRODUCT_ID_PREFIX):
        return ById(raw)
    return BySlug(raw)


def ref_label(ref: ProductRef) -> str:
    match ref:
        case ById(value):
            return value
        case BySlug(value):
            return value


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
    # Identifiers
    "ProductId",
    "OrderId",
    "UserId",
    "CollectionId",
    "AddressId",
    "Paise",
    "PRODUCT_ID_PREFIX",
    "SLUG_PATTERN",
    # References
    "ById",
    "BySlug",
    "ProductRef",
    "parse_ref",
    "ref_label",
)
