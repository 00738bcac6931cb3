"""
OrderStore — order reads and the admin fulfilment transitions.

`PLACED → PAID` is not here: only settlement may pay an order.
"""

from typing import Any, cast

import structlog
from sqlalchemy import select, update
from sqlalchemy.engine import CursorResult
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from kungfu import Result, Ok, Error

from atelier._types import OrderId, UserId
from atelier.checkout._status import advance
from atelier.db import OrderTable
from atelier.domain import Order, OrderItem, OrderStatus
from atelier.errors import Errors, ShopError

log = structlog.get_logger(__name__)


def to_order(row: OrderTable) -> Order:
    return Order(
        id=row.id,
        user_id=row.user_id,
        email=row.email,
        phone=row.phone,
        address=row.address,
        status=OrderStatus(row.status),
        total=row.total,
        currency=row.currency,
        gateway_order_id=row.gateway_order_id,
        gateway_payment_id=row.gateway_payment_id,
        items=tuple(
            OrderItem(
                product_id=item.product_id,
                name=item.name,
                quantity=item.quantity,
                unit_price=item.unit_price,
            )
            for item in row.items
        ),
        created_at=row.created_at,
        paid_at=row.paid_at,
    )


class OrderStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session = session_factory

    async def get(self, order_id: OrderId) -> Result[Order, ShopError]:
        async with self._session() as session:
            row = await session.get(OrderTable, order_id)
            if row is None:
                return Error(Errors.not_found("Order", order_id))
            return Ok(to_order(row))

    async def list_for_user(self, user_id: UserId) -> list[Order]:
        return await self._list(OrderTable.user_id == user_id)

    async def list_all(self) -> list[Order]:
        return await self._list()

    async def _list(self, *criteria: Any) -> list[Order]:
        stmt = select(OrderTable).order_by(OrderTable.created_at.desc())
        if criteria:
            stmt = stmt.where(*criteria)
        async with self._session() as session:
            rows = (await session.scalars(stmt)).all()
            return [to_order(row) for row in rows]

    # ───────────────────────────────────────────────────────────────────────────
    # Fulfilment
    # ───────────────────────────────────────────────────────────────────────────

    async def mark_shipped(self, order_id: OrderId) -> Result[Order, ShopError]:
        return await self._transition(order_id, OrderStatus.SHIPPED)

    async def mark_delivered(self, order_id: OrderId) -> Result[Order, ShopError]:
        return await self._transition(order_id, OrderStatus.DELIVERED)

    async def _transition(
        self, order_id: OrderId, target: OrderStatus
    ) -> Result[Order, ShopError]:
        async with self._session() as session, session.begin():
            raw = await session.scalar(
                select(OrderTable.status).where(OrderTable.id == order_id)
            )
            if raw is None:
                return Error(Errors.not_found("Order", order_id))

            current = OrderStatus(raw)
            match advance(current, target):
                case Error(e):
                    return Error(e)
                case Ok(_) if current is target:
                    pass
                case Ok(_):
                    # Guarded on the status we read; a concurrent change loses.
                    cursor = cast(
                        CursorResult[Any],
                        await session.execute(
                            update(OrderTable)
                            .where(
                                OrderTable.id == order_id,
                                OrderTable.status == current.value,
                            )
                            .values(status=target.value)
                            .execution_options(synchronize_session=False)
                        ),
                    )
                    if cursor.rowcount != 1:
                        return Error(
                            Errors.invalid_transition(current.value, target.value)
                        )
                    log.info(
                        "orders.status_changed",
                        order_id=order_id,
                        from_status=current.value,
                        to_status=target.value,
                    )

        return await self.get(order_id)


__all__ = ("OrderStore", "to_order")
