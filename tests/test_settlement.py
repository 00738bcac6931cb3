"""Settlement: signature, receipt lookup, atomic claim + stock decrement."""

import asyncio

import pytest
from kungfu import Error, Ok

from atelier.catalog import ProductPatch
from atelier.domain import OrderStatus, PaymentCallback
from atelier.errors import ErrorKind

from .conftest import by_slug, err, inventory, ok, place


class TestHappyPath:
    async def test_paid_order_decrements_every_line(self, container, products, user, gateway):
        placed = await place(
            container,
            user,
            by_slug("temple-pendant", 2),
            by_slug("pearl-drop-earrings", 3),
        )
        callback = gateway.pay(placed.intent_id)

        settled = ok(await container.checkout.settle_payment(callback))

        assert settled.order_id == placed.order_id
        assert settled.already_settled is False
        assert await inventory(container, "temple-pendant") == 13
        assert await inventory(container, "pearl-drop-earrings") == 37

        order = ok(await container.orders.get(placed.order_id))
        assert order.status is OrderStatus.PAID
        assert order.gateway_order_id == placed.intent_id
        assert order.gateway_payment_id == callback.payment_id
        assert order.paid_at is not None

    async def test_order_id_comes_from_the_gateway_receipt(self, container, products, user, gateway):
        first = await place(container, user, by_slug("temple-pendant", 1))
        second = await place(container, user, by_slug("kundan-necklace-set", 1))

        settled = ok(await container.checkout.settle_payment(gateway.pay(second.intent_id)))

        assert settled.order_id == second.order_id
        assert ok(await container.orders.get(first.order_id)).status is OrderStatus.PLACED


class TestVerification:
    async def test_bad_signature_changes_nothing(self, container, products, user, gateway):
        placed = await place(container, user, by_slug("temple-pendant", 1))
        genuine = gateway.pay(placed.intent_id)
        forged = PaymentCallback(
            intent_id=genuine.intent_id,
            payment_id=genuine.payment_id,
            signature="0" * 64,
        )

        e = err(await container.checkout.settle_payment(forged))

        assert e.kind is ErrorKind.SIGNATURE_MISMATCH
        assert await inventory(container, "temple-pendant") == 15
        assert ok(await container.orders.get(placed.order_id)).status is OrderStatus.PLACED

    @pytest.mark.parametrize(
        "mangle",
        [
            lambda sig: sig.upper(),
            lambda sig: f"  {sig} ",
            lambda sig: "ü",
            lambda sig: "é" * 64,
            lambda sig: "z" * 64,
        ],
        ids=["uppercase", "padded", "non-ascii", "non-ascii-full-length", "non-hex"],
    )
    async def test_signature_must_match_exactly(
        self, container, products, user, gateway, mangle
    ):
        placed = await place(container, user, by_slug("temple-pendant", 1))
        genuine = gateway.pay(placed.intent_id)
        altered = PaymentCallback(
            intent_id=genuine.intent_id,
            payment_id=genuine.payment_id,
            signature=mangle(genuine.signature),
        )

        e = err(await container.checkout.settle_payment(altered))

        assert e.kind is ErrorKind.SIGNATURE_MISMATCH
        assert await inventory(container, "temple-pendant") == 15
        assert ok(await container.orders.get(placed.order_id)).status is OrderStatus.PLACED

    async def test_missing_fields_are_invalid_input(self, container, products):
        e = err(
            await container.checkout.settle_payment(
                PaymentCallback(intent_id="order_x", payment_id="", signature="abc")
            )
        )
        assert e.kind is ErrorKind.INVALID_INPUT
        assert "razorpay_payment_id" in e.message

    async def test_unknown_intent_is_not_found(self, container, products, gateway):
        e = err(await container.checkout.settle_payment(gateway.pay("order_unknown")))
        assert e.kind is ErrorKind.NOT_FOUND

    async def test_gateway_outage_during_lookup(self, container, products, user, gateway):
        placed = await place(container, user, by_slug("temple-pendant", 1))
        callback = gateway.pay(placed.intent_id)
        gateway.unavailable = True

        e = err(await container.checkout.settle_payment(callback))

        assert e.kind is ErrorKind.GATEWAY_UNAVAILABLE
        assert ok(await container.orders.get(placed.order_id)).status is OrderStatus.PLACED


class TestIdempotence:
    async def test_replayed_callback_does_not_decrement_twice(self, container, products, user, gateway):
        placed = await place(container, user, by_slug("temple-pendant", 4))
        callback = gateway.pay(placed.intent_id)

        first = ok(await container.checkout.settle_payment(callback))
        second = ok(await container.checkout.settle_payment(callback))

        assert first.already_settled is False
        assert second.already_settled is True
        assert second.order_id == placed.order_id
        assert await inventory(container, "temple-pendant") == 11

    async def test_replay_after_shipping_keeps_status(self, container, products, user, gateway):
        placed = await place(container, user, by_slug("temple-pendant", 1))
        callback = gateway.pay(placed.intent_id)
        ok(await container.checkout.settle_payment(callback))
        ok(await container.checkout.mark_shipped(placed.order_id))

        again = ok(await container.checkout.settle_payment(callback))

        assert again.already_settled is True
        assert ok(await container.orders.get(placed.order_id)).status is OrderStatus.SHIPPED
        assert await inventory(container, "temple-pendant") == 14


class TestStock:
    async def test_second_order_for_last_units_fails_out_of_stock(
        self, container, products, user, gateway
    ):
        # Placement only checks stock, so both orders are accepted.
        a = await place(container, user, by_slug("temple-pendant", 15))
        b = await place(container, user, by_slug("temple-pendant", 15))

        ok(await container.checkout.settle_payment(gateway.pay(a.intent_id)))
        e = err(await container.checkout.settle_payment(gateway.pay(b.intent_id)))

        assert e.kind is ErrorKind.OUT_OF_STOCK
        assert "Temple Pendant" in e.message
        assert await inventory(container, "temple-pendant") == 0
        assert ok(await container.orders.get(b.order_id)).status is OrderStatus.PLACED

    async def test_failure_on_one_line_rolls_back_the_others(
        self, container, products, user, gateway
    ):
        placed = await place(
            container,
            user,
            by_slug("pearl-drop-earrings", 2),
            by_slug("temple-pendant", 15),
        )
        pendant = products["temple-pendant"]
        ok(await container.catalog.update_product(pendant.id, ProductPatch(inventory=14)))

        e = err(await container.checkout.settle_payment(gateway.pay(placed.intent_id)))

        assert e.kind is ErrorKind.OUT_OF_STOCK
        assert await inventory(container, "pearl-drop-earrings") == 40
        assert await inventory(container, "temple-pendant") == 14
        order = ok(await container.orders.get(placed.order_id))
        assert order.status is OrderStatus.PLACED
        assert order.gateway_payment_id is None

    async def test_concurrent_settlements_never_oversell(self, container, products, user, gateway):
        a = await place(container, user, by_slug("temple-pendant", 10))
        b = await place(container, user, by_slug("temple-pendant", 10))

        results = await asyncio.gather(
            container.checkout.settle_payment(gateway.pay(a.intent_id)),
            container.checkout.settle_payment(gateway.pay(b.intent_id)),
        )

        outcomes = []
        for result in results:
            match result:
                case Ok(_):
                    outcomes.append("paid")
                case Error(e):
                    outcomes.append(e.kind.name)
        assert sorted(outcomes) == ["OUT_OF_STOCK", "paid"]
        assert await inventory(container, "temple-pendant") == 5
