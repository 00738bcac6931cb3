"""
Place order — cart lines in, a persisted PLACED order and a payment intent out.

Graph:

    RequestNode ──► ResolvedItemsNode ──► TotalNode ──┐
         │                  │                         │
         └──────────────────┴──► PersistedOrderNode ──┴──► IntentNode ──► PlaceOrderNode

Stock is only checked here, never reserved. The authoritative decrement
happens at settlement.
"""

from dataclasses import dataclass

import structlog
from kungfu import Ok, Error, Result

from atelier import graph as G
from atelier._types import OrderId, ref_label
from atelier.checkout._context import CheckoutContext
from atelier.db import OrderItemTable, OrderTable, new_id
from atelier.domain import (
    OrderStatus,
    PlacedOrder,
    PlaceOrderRequest,
    Product,
)
from atelier.errors import Errors, ShopError
from atelier.gateway import PaymentIntent

log = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class PricedLine:
    product: Product
    quantity: int

    @property
    def unit_price(self) -> int:
        return self.product.price

    @property
    def line_total(self) -> int:
        return self.product.price * self.quantity


# ═══════════════════════════════════════════════════════════════════════════════
# Nodes
# ═══════════════════════════════════════════════════════════════════════════════


@G.node
class RequestNode:
    """Entry point: reject anonymous and malformed requests."""

    def __init__(self, data: PlaceOrderRequest) -> None:
        self.data = data

    @classmethod
    def __compose__(cls, request: PlaceOrderRequest) -> "RequestNode":
        if not request.user_id:
            raise Errors.unauthorized()
        if not request.lines:
            raise Errors.invalid_input("Cart is empty")
        for line in request.lines:
            if line.quantity <= 0:
                raise Errors.invalid_input(
                    f"Quantity for {ref_label(line.ref)} must be positive"
                )
        return cls(request)


@G.node
class ResolvedItemsNode:
    """
    One batched catalog lookup, then the advisory stock check.

    Stock is compared per line, not per product: two lines of 3 against an
    inventory of 5 are accepted here and rejected at settlement.
    """

    def __init__(self, lines: tuple[PricedLine, ...]) -> None:
        self.lines = lines

    @classmethod
    async def __compose__(
        cls, request: RequestNode, ctx: CheckoutContext
    ) -> "ResolvedItemsNode":
        lines = request.data.lines
        found = await ctx.catalog.resolve(line.ref for line in lines)

        priced: list[PricedLine] = []
        for line in lines:
            product = found.get(line.ref)
            if product is None or not product.active:
                raise Errors.invalid_product(ref_label(line.ref))
            if line.quantity > product.inventory:
                raise Errors.insufficient_stock(product.name, product.inventory)
            priced.append(PricedLine(product=product, quantity=line.quantity))

        return cls(tuple(priced))


@G.node
class TotalNode:
    """Σ unit price × quantity, floored by the gateway minimum."""

    def __init__(self, amount: int) -> None:
        self.amount = amount

    @classmethod
    async def __compose__(
        cls, items: ResolvedItemsNode, ctx: CheckoutContext
    ) -> "TotalNode":
        amount = sum(line.line_total for line in items.lines)
        if amount < ctx.min_payable:
            raise Errors.invalid_amount(ctx.min_payable)
        return cls(amount)


@G.node
class PersistedOrderNode:
    """Write the PLACED order and its frozen line items."""

    def __init__(self, order_id: OrderId) -> None:
        self.order_id = order_id

    @classmethod
    async def __compose__(
        cls,
        request: RequestNode,
        items: ResolvedItemsNode,
        total: TotalNode,
        ctx: CheckoutContext,
    ) -> "PersistedOrderNode":
        data = request.data
        order_id = new_id("ord_")

        async with ctx.sessions() as session, session.begin():
            order = OrderTable(
                id=order_id,
                user_id=data.user_id,
                email=data.email,
                phone=data.phone,
                address=data.address,
                status=OrderStatus.PLACED.value,
                total=total.amount,
                currency=ctx.currency,
            )
            # Repeated lines for one product stay separate items.
            order.items = [
                OrderItemTable(
                    product_id=line.product.id,
                    name=line.product.name,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                )
                for line in items.lines
            ]
            session.add(order)

        log.info(
            "checkout.order_placed",
            order_id=order_id,
            user_id=data.user_id,
            total=total.amount,
            lines=len(items.lines),
        )
        return cls(order_id)


@G.node
class IntentNode:
    """Ask the gateway for an intent of exactly the order total."""

    def __init__(self, data: PaymentIntent) -> None:
        self.data = data

    @classmethod
    async def __compose__(
        cls, order: PersistedOrderNode, total: TotalNode, ctx: CheckoutContext
    ) -> "IntentNode":
        result = await ctx.gateway.create_intent(
            total.amount, ctx.currency, order.order_id
        )
        match result:
            case Ok(intent):
                async with ctx.sessions() as session, session.begin():
                    row = await session.get(OrderTable, order.order_id)
                    if row is not None:
                        row.gateway_order_id = intent.id
                return cls(intent)
            case Error(e):
                # The PLACED order is left behind; nothing was charged.
                log.error(
                    "checkout.intent_failed",
                    order_id=order.order_id,
                    gateway=ctx.gateway.name,
                    error=e.message,
                )
                raise e


@G.node
class PlaceOrderNode:
    """Terminal node: what the client needs to open the payment UI."""

    def __init__(self, data: PlacedOrder) -> None:
        self.data = data

    @classmethod
    async def __compose__(
        cls, order: PersistedOrderNode, intent: IntentNode, ctx: CheckoutContext
    ) -> "PlaceOrderNode":
        return cls(
            PlacedOrder(
                order_id=order.order_id,
                intent_id=intent.data.id,
                amount=intent.data.amount,
                currency=intent.data.currency,
                key_id=ctx.gateway.key_id,
            )
        )

    @classmethod
    async def execute(
        cls, request: PlaceOrderRequest, ctx: CheckoutContext
    ) -> Result[PlacedOrder, ShopError]:
        try:
            placed = await G.compose(cls, request, ctx)
            return Ok(placed.data)
        except ShopError as e:
            log.info("checkout.rejected", code=e.code, reason=e.message)
            return Error(e)


__all__ = (
    "PricedLine",
    "RequestNode",
    "ResolvedItemsNode",
    "TotalNode",
    "PersistedOrderNode",
    "IntentNode",
    "PlaceOrderNode",
)
