"""Checkout, payment verification and orders."""

from fastapi import APIRouter

from atelier.api._codecs import (
    CheckoutOrderIn,
    OrderOut,
    PlacedOrderOut,
    SettlementOut,
    VerifyIn,
)
from atelier.api._deps import AdminOnly, ContainerDep, CurrentUser
from atelier.api._errors import unwrap

router = APIRouter(prefix="/api", tags=["checkout"])


@router.post("/checkout/order")
async def create_order(
    body: CheckoutOrderIn, user_id: CurrentUser, container: ContainerDep
) -> PlacedOrderOut:
    placed = unwrap(await container.checkout.place_order(body.to_domain(user_id)))
    return PlacedOrderOut.from_domain(placed)


@router.post("/checkout/verify")
async def verify_payment(body: VerifyIn, container: ContainerDep) -> SettlementOut:
    settled = unwrap(await container.checkout.settle_payment(body.to_domain()))
    return SettlementOut.from_domain(settled)


@router.get("/orders/{order_id}")
async def get_order(order_id: str, container: ContainerDep) -> OrderOut:
    return OrderOut.from_domain(unwrap(await container.orders.get(order_id)))


@router.get("/my/orders")
async def my_orders(user_id: CurrentUser, container: ContainerDep) -> list[OrderOut]:
    return [
        OrderOut.from_domain(o) for o in await container.orders.list_for_user(user_id)
    ]


@router.get("/admin/orders", dependencies=[AdminOnly])
async def all_orders(container: ContainerDep) -> list[OrderOut]:
    return [OrderOut.from_domain(o) for o in await container.orders.list_all()]


@router.post("/orders/{order_id}/ship", dependencies=[AdminOnly])
async def ship_order(order_id: str, container: ContainerDep) -> OrderOut:
    return OrderOut.from_domain(unwrap(await container.checkout.mark_shipped(order_id)))


@router.post("/orders/{order_id}/deliver", dependencies=[AdminOnly])
async def deliver_order(order_id: str, container: ContainerDep) -> OrderOut:
    order = unwrap(await container.checkout.mark_delivered(order_id))
    return OrderOut.from_domain(order)
