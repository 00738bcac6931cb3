"""
Order status machine.

    PLACED → PAID → SHIPPED → DELIVERED

Never backward, never skipping. Asking for the state an order is already in
is a successful no-op.
"""

from kungfu import Result, Ok, Error

from atelier.domain import OrderStatus
from atelier.errors import Errors, ShopError

NEXT: dict[OrderStatus, OrderStatus] = {
    OrderStatus.PLACED: OrderStatus.PAID,
    OrderStatus.PAID: OrderStatus.SHIPPED,
    OrderStatus.SHIPPED: OrderStatus.DELIVERED,
}

SETTLED = frozenset({OrderStatus.PAID, OrderStatus.SHIPPED, OrderStatus.DELIVERED})


def advance(
    current: OrderStatus, target: OrderStatus
) -> Result[OrderStatus, ShopError]:
    if current is target:
        return Ok(current)
    if NEXT.get(current) is not target:
        return Error(Errors.invalid_transition(current.value, target.value))
    return Ok(target)


__all__ = ("NEXT", "SETTLED", "advance")
