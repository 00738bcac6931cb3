"""
CheckoutService — the public face of checkout.

    service = CheckoutService(ctx, orders)
    placed = await service.place_order(request)      # Result[PlacedOrder, ShopError]
    settled = await service.settle_payment(callback)  # Result[Settlement, ShopError]
"""

from kungfu import Result

from atelier._types import OrderId
from atelier.checkout._context import CheckoutContext
from atelier.checkout._orders import OrderStore
from atelier.checkout._place import PlaceOrderNode
from atelier.checkout._settle import SettleNode
from atelier.domain import (
    Order,
    PaymentCallback,
    PlacedOrder,
    PlaceOrderRequest,
    Settlement,
)
from atelier.errors import ShopError


class CheckoutService:
    def __init__(self, ctx: CheckoutContext, orders: OrderStore) -> None:
        self._ctx = ctx
        self._orders = orders

    @property
    def context(self) -> CheckoutContext:
        return self._ctx

    async def place_order(
        self, request: PlaceOrderRequest
    ) -> Result[PlacedOrder, ShopError]:
        return await PlaceOrderNode.execute(request, self._ctx)

    async def settle_payment(
        self, callback: PaymentCallback
    ) -> Result[Settlement, ShopError]:
        return await SettleNode.execute(callback, self._ctx)

    async def mark_shipped(self, order_id: OrderId) -> Result[Order, ShopError]:
        return await self._orders.mark_shipped(order_id)

    async def mark_delivered(self, order_id: OrderId) -> Result[Order, ShopError]:
        return await self._orders.mark_delivered(order_id)


__all__ = ("CheckoutService",)
