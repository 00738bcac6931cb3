"""
Codecs — HTTP request/response models.

Requests know how to become domain values (`to_domain`), responses know how to
be built from them (`from_domain`). JSON keys are camelCase; the payment
callback keeps the gateway's own snake_case field names.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from atelier._types import UserId, parse_ref
from atelier.accounts import AddressDraft, Profile, Registration
from atelier.catalog import ImageDraft, ProductDraft, ProductPatch
from atelier.domain import (
    Address,
    Collection,
    Order,
    OrderLine,
    PaymentCallback,
    PlacedOrder,
    PlaceOrderRequest,
    Product,
    Settlement,
    User,
)


class Schema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _split_tags(value: object) -> object:
    if isinstance(value, str):
        return [tag.strip() for tag in value.split(",") if tag.strip()]
    return value


# ═══════════════════════════════════════════════════════════════════════════════
# Common
# ═══════════════════════════════════════════════════════════════════════════════


class OkOut(Schema):
    ok: bool = True


class ErrorOut(Schema):
    ok: Literal[False] = False
    code: str
    error: str


class HealthOut(Schema):
    ok: bool = True
    time: datetime


class KeyOut(Schema):
    ok: bool = True
    key_id: str


# ═══════════════════════════════════════════════════════════════════════════════
# Accounts
# ═══════════════════════════════════════════════════════════════════════════════


class RegisterIn(Schema):
    name: str = ""
    email: str = ""
    password: str = ""
    phone: str | None = None

    def to_domain(self) -> Registration:
        return Registration(
            name=self.name, email=self.email, password=self.password, phone=self.phone
        )


class LoginIn(Schema):
    email: str = ""
    password: str = ""


class ProfileIn(Schema):
    name: str | None = None
    phone: str | None = None


class UserOut(Schema):
    id: str
    name: str | None
    email: str
    phone: str | None

    @classmethod
    def from_domain(cls, user: User) -> "UserOut":
        return cls(id=user.id, name=user.name, email=user.email, phone=user.phone)


class AuthOut(Schema):
    ok: bool = True
    token: str
    user: UserOut


class AddressIn(Schema):
    full_name: str
    phone: str
    line1: str
    line2: str | None = None
    city: str
    state: str
    pincode: str
    country: str = "India"
    is_default: bool = False

    def to_domain(self) -> AddressDraft:
        return AddressDraft(
            full_name=self.full_name,
            phone=self.phone,
            line1=self.line1,
            line2=self.line2,
            city=self.city,
            state=self.state,
            pincode=self.pincode,
            country=self.country,
            is_default=self.is_default,
        )


class AddressOut(Schema):
    id: str
    full_name: str
    phone: str
    line1: str
    line2: str | None
    city: str
    state: str
    pincode: str
    country: str
    is_default: bool

    @classmethod
    def from_domain(cls, address: Address) -> "AddressOut":
        return cls(
            id=address.id,
            full_name=address.full_name,
            phone=address.phone,
            line1=address.line1,
            line2=address.line2,
            city=address.city,
            state=address.state,
            pincode=address.pincode,
            country=address.country,
            is_default=address.is_default,
        )


class ProfileOut(UserOut):
    addresses: list[AddressOut]

    @classmethod
    def from_profile(cls, profile: Profile) -> "ProfileOut":
        user = profile.user
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            phone=user.phone,
            addresses=[AddressOut.from_domain(a) for a in profile.addresses],
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Catalog
# ═══════════════════════════════════════════════════════════════════════════════


class CollectionIn(Schema):
    name: str
    slug: str


class CollectionPatchIn(Schema):
    name: str | None = None
    slug: str | None = None


class CollectionOut(Schema):
    id: str
    name: str
    slug: str

    @classmethod
    def from_domain(cls, collection: Collection) -> "CollectionOut":
        return cls(id=collection.id, name=collection.name, slug=collection.slug)


class ProductIn(Schema):
    name: str
    slug: str
    price: int
    description: str = ""
    compare_at: int | None = None
    inventory: int = 0
    active: bool = True
    collection_id: str | None = None
    tags: list[str] = Field(default_factory=list)

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, value: object) -> object:
        return _split_tags(value)

    def to_domain(self) -> ProductDraft:
        return ProductDraft(
            name=self.name,
            slug=self.slug,
            price=self.price,
            description=self.description,
            compare_at=self.compare_at,
            inventory=self.inventory,
            active=self.active,
            collection_id=self.collection_id or None,
            tags=tuple(self.tags),
        )


class ProductPatchIn(Schema):
    name: str | None = None
    slug: str | None = None
    description: str | None = None
    price: int | None = None
    compare_at: int | None = None
    inventory: int | None = None
    active: bool | None = None
    collection_id: str | None = None
    tags: list[str] | None = None

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, value: object) -> object:
        return _split_tags(value)

    def to_domain(self) -> ProductPatch:
        return ProductPatch(
            name=self.name,
            slug=self.slug,
            description=self.description,
            price=self.price,
            compare_at=self.compare_at,
            inventory=self.inventory,
            active=self.active,
            collection_id=self.collection_id,
            tags=tuple(self.tags) if self.tags is not None else None,
        )


class ImageIn(Schema):
    url: str
    alt: str | None = None


class ImagesIn(Schema):
    images: list[ImageIn]

    def to_domain(self) -> list[ImageDraft]:
        return [ImageDraft(url=image.url, alt=image.alt) for image in self.images]


class ImageOut(Schema):
    id: int
    url: str
    alt: str | None
    position: int


class ProductOut(Schema):
    id: str
    name: str
    slug: str
    description: str
    price: int
    compare_at: int | None
    inventory: int
    active: bool
    collection_id: str | None
    tags: list[str]
    image_url: str | None
    images: list[ImageOut]
    created_at: datetime

    @classmethod
    def from_domain(cls, product: Product) -> "ProductOut":
        return cls(
            id=product.id,
            name=product.name,
            slug=product.slug,
            description=product.description,
            price=product.price,
            compare_at=product.compare_at,
            inventory=product.inventory,
            active=product.active,
            collection_id=product.collection_id,
            tags=list(product.tags),
            image_url=product.images[0].url if product.images else None,
            images=[
                ImageOut(id=img.id, url=img.url, alt=img.alt, position=img.position)
                for img in product.images
            ],
            created_at=product.created_at,
        )


class ForceDeleteOut(Schema):
    ok: bool = True
    forced: bool
    order_items_removed: int = 0


# ═══════════════════════════════════════════════════════════════════════════════
# Checkout
# ═══════════════════════════════════════════════════════════════════════════════


class CheckoutItemIn(Schema):
    product_id: str
    quantity: int = 1


class CheckoutOrderIn(Schema):
    items: list[CheckoutItemIn] = Field(default_factory=list)
    email: str | None = None
    phone: str | None = None
    address: str | None = None

    def to_domain(self, user_id: UserId) -> PlaceOrderRequest:
        return PlaceOrderRequest(
            user_id=user_id,
            lines=tuple(
                OrderLine(ref=parse_ref(item.product_id), quantity=item.quantity)
                for item in self.items
            ),
            email=self.email,
            phone=self.phone,
            address=self.address,
        )


class PlacedOrderOut(Schema):
    ok: bool = True
    order_id: str
    razorpay_order_id: str
    amount: int
    currency: str
    key_id: str

    @classmethod
    def from_domain(cls, placed: PlacedOrder) -> "PlacedOrderOut":
        return cls(
            order_id=placed.order_id,
            razorpay_order_id=placed.intent_id,
            amount=placed.amount,
            currency=placed.currency,
            key_id=placed.key_id,
        )


class VerifyIn(BaseModel):
    razorpay_order_id: str = ""
    razorpay_payment_id: str = ""
    razorpay_signature: str = ""

    def to_domain(self) -> PaymentCallback:
        return PaymentCallback(
            intent_id=self.razorpay_order_id,
            payment_id=self.razorpay_payment_id,
            signature=self.razorpay_signature,
        )


class SettlementOut(Schema):
    ok: bool = True
    order_id: str
    already_settled: bool

    @classmethod
    def from_domain(cls, settlement: Settlement) -> "SettlementOut":
        return cls(
            order_id=settlement.order_id,
            already_settled=settlement.already_settled,
        )


class OrderItemOut(Schema):
    product_id: str
    name: str
    quantity: int
    price: int


class OrderOut(Schema):
    id: str
    user_id: str | None
    email: str | None
    phone: str | None
    address: str | None
    status: str
    total: int
    currency: str
    razorpay_order_id: str | None
    razorpay_payment_id: str | None
    items: list[OrderItemOut]
    created_at: datetime
    paid_at: datetime | None

    @classmethod
    def from_domain(cls, order: Order) -> "OrderOut":
        return cls(
            id=order.id,
            user_id=order.user_id,
            email=order.email,
            phone=order.phone,
            address=order.address,
            status=order.status.value,
            total=order.total,
            currency=order.currency,
            razorpay_order_id=order.gateway_order_id,
            razorpay_payment_id=order.gateway_payment_id,
            items=[
                OrderItemOut(
                    product_id=item.product_id,
                    name=item.name,
                    quantity=item.quantity,
                    price=item.unit_price,
                )
                for item in order.items
            ],
            created_at=order.created_at,
            paid_at=order.paid_at,
        )
