"""Admin fulfilment transitions: PAID → SHIPPED → DELIVERED."""

import pytest

from atelier.domain import OrderStatus
from atelier.errors import ErrorKind

from .conftest import by_slug, err, ok, place


@pytest.fixture
async def paid(container, products, user, gateway):
    placed = await place(container, user, by_slug("pearl-drop-earrings", 1))
    ok(await container.checkout.settle_payment(gateway.pay(placed.intent_id)))
    return placed.order_id


class TestTransitions:
    async def test_ship_then_deliver(self, container, paid):
        shipped = ok(await container.checkout.mark_shipped(paid))
        assert shipped.status is OrderStatus.SHIPPED

        delivered = ok(await container.checkout.mark_delivered(paid))
        assert delivered.status is OrderStatus.DELIVERED

    async def test_repeating_the_current_state_is_a_no_op(self, container, paid):
        ok(await container.checkout.mark_shipped(paid))
        again = ok(await container.checkout.mark_shipped(paid))
        assert again.status is OrderStatus.SHIPPED

    async def test_unpaid_order_cannot_ship(self, container, products, user):
        placed = await place(container, user, by_slug("temple-pendant", 1))

        e = err(await container.checkout.mark_shipped(placed.order_id))

        assert e.kind is ErrorKind.INVALID_TRANSITION
        assert e.message == "Cannot move order from PLACED to SHIPPED"
        assert ok(await container.orders.get(placed.order_id)).status is OrderStatus.PLACED

    async def test_paid_order_cannot_skip_to_delivered(self, container, paid):
        e = err(await container.checkout.mark_delivered(paid))
        assert e.kind is ErrorKind.INVALID_TRANSITION

    async def test_delivered_order_cannot_go_back(self, container, paid):
        ok(await container.checkout.mark_shipped(paid))
        ok(await container.checkout.mark_delivered(paid))

        e = err(await container.checkout.mark_shipped(paid))
        assert e.kind is ErrorKind.INVALID_TRANSITION

    async def test_unknown_order_is_not_found(self, container):
        e = err(await container.checkout.mark_shipped("ord_missing"))
        assert e.kind is ErrorKind.NOT_FOUND


class TestListing:
    async def test_orders_are_listed_newest_first_and_scoped(
        self, container, products, user
    ):
        first = await place(container, user, by_slug("temple-pendant", 1))
        second = await place(container, user, by_slug("pearl-drop-earrings", 1))

        mine = await container.orders.list_for_user(user.id)
        assert [o.id for o in mine] == [second.order_id, first.order_id]
        assert await container.orders.list_for_user("usr_someone_else") == []
        assert len(await container.orders.list_all()) == 2

