"""
Domain — jewelry storefront records.

Plain immutable records handed out by the stores. Rows never leave the
storage layer; everything above it works with these.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from atelier._types import (
    AddressId,
    CollectionId,
    OrderId,
    Paise,
    ProductId,
    ProductRef,
    UserId,
)


# ═══════════════════════════════════════════════════════════════════════════════
# Catalog
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Collection:
    id: CollectionId
    name: str
    slug: str


@dataclass(frozen=True, slots=True)
class ProductImage:
    id: int
    url: str
    alt: str | None
    position: int


@dataclass(frozen=True, slots=True)
class Product:
    id: ProductId
    name: str
    slug: str
    description: str
    price: Paise
    compare_at: Paise | None
    inventory: int
    active: bool
    collection_id: CollectionId | None
    tags: tuple[str, ...]
    images: tuple[ProductImage, ...]
    created_at: datetime


# ═══════════════════════════════════════════════════════════════════════════════
# Accounts
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class User:
    id: UserId
    email: str
    name: str | None
    phone: str | None


@dataclass(frozen=True, slots=True)
class Address:
    id: AddressId
    user_id: UserId
    full_name: str
    phone: str
    line1: str
    line2: str | None
    city: str
    state: str
    pincode: str
    country: str
    is_default: bool


# ═══════════════════════════════════════════════════════════════════════════════
# Orders
# ═══════════════════════════════════════════════════════════════════════════════


class OrderStatus(Enum):
    PLACED = "PLACED"
    PAID = "PAID"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"


@dataclass(frozen=True, slots=True)
class OrderItem:
    product_id: ProductId
    name: str
    quantity: int
    unit_price: Paise


@dataclass(frozen=True, slots=True)
class Order:
    id: OrderId
    user_id: UserId | None
    email: str | None
    phone: str | None
    address: str | None
    status: OrderStatus
    total: Paise
    currency: str
    gateway_order_id: str | None
    gateway_payment_id: str | None
    items: tuple[OrderItem, ...]
    created_at: datetime
    paid_at: datetime | None


# ═══════════════════════════════════════════════════════════════════════════════
# Checkout
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class OrderLine:
    """One requested cart line: what and how many."""

    ref: ProductRef
    quantity: int


@dataclass(frozen=True, slots=True)
class PlaceOrderRequest:
    user_id: UserId | None
    lines: tuple[OrderLine, ...]
    email: str | None = None
    phone: str | None = None
    address: str | None = None


@dataclass(frozen=True, slots=True)
class PlacedOrder:
    order_id: OrderId
    intent_id: str
    amount: Paise
    currency: str
    key_id: str


@dataclass(frozen=True, slots=True)
class PaymentCallback:
    intent_id: str
    payment_id: str
    signature: str


@dataclass(frozen=True, slots=True)
class Settlement:
    order_id: OrderId
    already_settled: bool


__all__ = (
    "Collection",
    "ProductImage",
    "Product",
    "User",
    "Address",
    "OrderStatus",
    "OrderItem",
    "Order",
    "OrderLine",
    "PlaceOrderRequest",
    "PlacedOrder",
    "PaymentCallback",
    "Settlement",
)
