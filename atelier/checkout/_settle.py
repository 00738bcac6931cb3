"""
Settlement — turn a signed payment callback into a PAID order.

Graph:

    CallbackNode ──► SignatureNode ──► ReceiptNode ──► SettleNode

The order id comes from the gateway's own record of the intent, never from
the callback. Claiming the order and decrementing stock happen in one
transaction: either the order is PAID and every product was decremented, or
nothing changed.
"""

from typing import Any, cast

import structlog
from kungfu import Ok, Error, Result
from sqlalchemy import select, update
from sqlalchemy.engine import CursorResult

from atelier import graph as G
from atelier._types import OrderId
from atelier.catalog import CatalogStore
from atelier.checkout._context import CheckoutContext
from atelier.checkout._status import SETTLED
from atelier.db import OrderItemTable, OrderTable, ProductTable, utcnow
from atelier.domain import OrderStatus, PaymentCallback, Settlement
from atelier.errors import ErrorKind, Errors, ShopError
from atelier.gateway import verify_signature

log = structlog.get_logger(__name__)

# Failures that happen before we know the payment is genuine.
_PRE_CAPTURE = frozenset({ErrorKind.INVALID_INPUT, ErrorKind.SIGNATURE_MISMATCH})


# ═══════════════════════════════════════════════════════════════════════════════
# Nodes
# ═══════════════════════════════════════════════════════════════════════════════


@G.node
class CallbackNode:
    """Entry point: all three gateway references must be present."""

    def __init__(self, data: PaymentCallback) -> None:
        self.data = data

    @classmethod
    def __compose__(cls, callback: PaymentCallback) -> "CallbackNode":
        missing = [
            name
            for name, value in (
                ("razorpay_order_id", callback.intent_id),
                ("razorpay_payment_id", callback.payment_id),
                ("razorpay_signature", callback.signature),
            )
            if not value or not value.strip()
        ]
        if missing:
            raise Errors.invalid_input(f"Missing fields: {', '.join(missing)}")
        return cls(callback)


@G.node
class SignatureNode:
    """HMAC check. Nothing is read or written before it passes."""

    def __init__(self, verified: bool) -> None:
        self.verified = verified

    @classmethod
    def __compose__(
        cls, callback: CallbackNode, ctx: CheckoutContext
    ) -> "SignatureNode":
        data = callback.data
        if not verify_signature(
            ctx.signing_secret, data.intent_id, data.payment_id, data.signature
        ):
            log.warning(
                "settlement.signature_mismatch",
                intent_id=data.intent_id,
                payment_id=data.payment_id,
            )
            raise Errors.signature_mismatch()
        return cls(True)


@G.node
class ReceiptNode:
    """Recover the internal order id from the gateway's intent record."""

    def __init__(self, order_id: OrderId) -> None:
        self.order_id = order_id

    @classmethod
    async def __compose__(
        cls,
        signature: SignatureNode,
        callback: CallbackNode,
        ctx: CheckoutContext,
    ) -> "ReceiptNode":
        intent_id = callback.data.intent_id
        match await ctx.gateway.fetch_intent(intent_id):
            case Ok(intent):
                if not intent.receipt:
                    raise Errors.not_found("Order for intent", intent_id)
                return cls(intent.receipt)
            case Error(e):
                raise e


@G.node
class SettleNode:
    """Terminal node: claim the order and decrement stock atomically."""

    def __init__(self, data: Settlement) -> None:
        self.data = data

    @classmethod
    async def __compose__(
        cls,
        receipt: ReceiptNode,
        callback: CallbackNode,
        ctx: CheckoutContext,
    ) -> "SettleNode":
        return cls(await _settle(ctx, receipt.order_id, callback.data))

    @classmethod
    async def execute(
        cls, callback: PaymentCallback, ctx: CheckoutContext
    ) -> Result[Settlement, ShopError]:
        try:
            settled = await G.compose(cls, callback, ctx)
            return Ok(settled.data)
        except ShopError as e:
            if e.kind not in _PRE_CAPTURE:
                # The customer has paid but the order could not be settled.
                log.error(
                    "settlement.failed_after_capture",
                    intent_id=callback.intent_id,
                    payment_id=callback.payment_id,
                    code=e.code,
                    reason=e.message,
                )
            return Error(e)


# ═══════════════════════════════════════════════════════════════════════════════
# Transaction
# ═══════════════════════════════════════════════════════════════════════════════


async def _settle(
    ctx: CheckoutContext, order_id: OrderId, callback: PaymentCallback
) -> Settlement:
    async with ctx.sessions() as session, session.begin():
        # The write comes first so the transaction holds the write lock
        # before it reads anything it depends on.
        claim = cast(
            CursorResult[Any],
            await session.execute(
                update(OrderTable)
                .where(
                    OrderTable.id == order_id,
                    OrderTable.status == OrderStatus.PLACED.value,
                )
                .values(
                    status=OrderStatus.PAID.value,
                    gateway_order_id=callback.intent_id,
                    gateway_payment_id=callback.payment_id,
                    gateway_signature=callback.signature,
                    paid_at=utcnow(),
                )
                .execution_options(synchronize_session=False)
            ),
        )

        if claim.rowcount != 1:
            raw = await session.scalar(
                select(OrderTable.status).where(OrderTable.id == order_id)
            )
            if raw is None:
                raise Errors.not_found("Order", order_id)
            if OrderStatus(raw) in SETTLED:
                log.info("settlement.already_settled", order_id=order_id, status=raw)
                return Settlement(order_id=order_id, already_settled=True)
            raise Errors.invalid_transition(raw, OrderStatus.PAID.value)

        items = (
            await session.execute(
                select(OrderItemTable.product_id, OrderItemTable.quantity).where(
                    OrderItemTable.order_id == order_id
                )
            )
        ).all()

        for product_id, quantity in items:
            decremented = await CatalogStore.decrement_inventory(
                session, product_id, quantity
            )
            if not decremented:
                name = await session.scalar(
                    select(ProductTable.name).where(ProductTable.id == product_id)
                )
                # Raising inside the transaction rolls back the claim too.
                raise Errors.out_of_stock(name or product_id)

    log.info(
        "settlement.paid",
        order_id=order_id,
        intent_id=callback.intent_id,
        payment_id=callback.payment_id,
    )
    return Settlement(order_id=order_id, already_settled=False)


__all__ = (
    "CallbackNode",
    "SignatureNode",
    "ReceiptNode",
    "SettleNode",
)
