"""HTTP surface: the full checkout flow and the error envelope."""

import pytest

from .conftest import admin


async def _register(client, email="meera@example.com") -> dict[str, str]:
    response = await client.post(
        "/api/auth/register",
        json={"name": "Meera", "email": email, "password": "s3cret-pass"},
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


async def _checkout(client, auth, *items) -> dict:
    response = await client.post(
        "/api/checkout/order",
        headers=auth,
        json={"items": list(items), "address": "7 Park Street, Kolkata"},
    )
    assert response.status_code == 200, response.text
    return response.json()


class TestCheckoutFlow:
    async def test_register_order_pay_verify(self, client, products, gateway):
        auth = await _register(client)

        placed = await _checkout(
            client,
            auth,
            {"productId": "temple-pendant", "quantity": 2},
            {"productId": products["pearl-drop-earrings"].id},
        )
        assert placed["ok"] is True
        assert placed["amount"] == 2 * 149900 + 99900
        assert placed["keyId"] == "rzp_test_key"

        callback = gateway.pay(placed["razorpayOrderId"])
        verified = await client.post(
            "/api/checkout/verify",
            json={
                "razorpay_order_id": callback.intent_id,
                "razorpay_payment_id": callback.payment_id,
                "razorpay_signature": callback.signature,
            },
        )
        assert verified.status_code == 200, verified.text
        assert verified.json() == {
            "ok": True,
            "orderId": placed["orderId"],
            "alreadySettled": False,
        }

        order = (await client.get(f"/api/orders/{placed['orderId']}")).json()
        assert order["status"] == "PAID"
        assert order["razorpayPaymentId"] == callback.payment_id
        assert [i["quantity"] for i in order["items"]] == [2, 1]

        mine = (await client.get("/api/my/orders", headers=auth)).json()
        assert [o["id"] for o in mine] == [placed["orderId"]]

        product = (await client.get("/api/products/temple-pendant")).json()
        assert product["inventory"] == 13

    async def test_forged_signature_is_rejected(self, client, products):
        auth = await _register(client)
        placed = await _checkout(client, auth, {"productId": "temple-pendant"})

        response = await client.post(
            "/api/checkout/verify",
            json={
                "razorpay_order_id": placed["razorpayOrderId"],
                "razorpay_payment_id": "pay_forged",
                "razorpay_signature": "deadbeef",
            },
        )

        assert response.status_code == 400
        assert response.json() == {
            "ok": False,
            "code": "SIGNATURE_MISMATCH",
            "error": "Invalid signature",
        }

    async def test_admin_ships_paid_order(self, client, products, gateway):
        auth = await _register(client)
        placed = await _checkout(client, auth, {"productId": "temple-pendant"})
        callback = gateway.pay(placed["razorpayOrderId"])
        await client.post(
            "/api/checkout/verify",
            json={
                "razorpay_order_id": callback.intent_id,
                "razorpay_payment_id": callback.payment_id,
                "razorpay_signature": callback.signature,
            },
        )

        denied = await client.post(f"/api/orders/{placed['orderId']}/ship")
        assert denied.status_code == 401

        shipped = await client.post(f"/api/orders/{placed['orderId']}/ship", headers=admin())
        assert shipped.status_code == 200
        assert shipped.json()["status"] == "SHIPPED"

        again = await client.post(f"/api/orders/{placed['orderId']}/ship", headers=admin())
        assert again.status_code == 200

        listed = (await client.get("/api/admin/orders", headers=admin())).json()
        assert [o["status"] for o in listed] == ["SHIPPED"]


class TestErrors:
    @pytest.mark.parametrize(
        "signature", ["ü", "é" * 64, "z" * 64], ids=["short", "full-length", "non-hex"]
    )
    async def test_unusual_signature_is_a_mismatch(self, client, products, signature):
        auth = await _register(client)
        placed = await _checkout(client, auth, {"productId": "temple-pendant"})

        response = await client.post(
            "/api/checkout/verify",
            json={
                "razorpay_order_id": placed["razorpayOrderId"],
                "razorpay_payment_id": "pay_any",
                "razorpay_signature": signature,
            },
        )

        assert response.status_code == 400
        assert response.json()["code"] == "SIGNATURE_MISMATCH"
        order = (await client.get(f"/api/orders/{placed['orderId']}")).json()
        assert order["status"] == "PLACED"

    async def test_checkout_requires_a_token(self, client, products):
        response = await client.post(
            "/api/checkout/order", json={"items": [{"productId": "temple-pendant"}]}
        )
        assert response.status_code == 401
        assert response.json()["code"] == "UNAUTHORIZED"

    async def test_insufficient_stock_is_conflict(self, client, products):
        auth = await _register(client)
        response = await client.post(
            "/api/checkout/order",
            headers=auth,
            json={"items": [{"productId": "temple-pendant", "quantity": 99}]},
        )
        assert response.status_code == 409
        assert response.json()["error"] == '"Temple Pendant" only has 15 left'

    async def test_unknown_product_is_bad_request(self, client, products):
        auth = await _register(client)
        response = await client.post(
            "/api/checkout/order",
            headers=auth,
            json={"items": [{"productId": "ghost"}]},
        )
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_PRODUCT"

    async def test_malformed_body_is_invalid_input(self, client, products):
        auth = await _register(client)
        response = await client.post(
            "/api/checkout/order", headers=auth, json={"items": "nope"}
        )
        assert response.status_code == 400
        body = response.json()
        assert body["ok"] is False
        assert body["code"] == "INVALID_INPUT"

    async def test_missing_order_is_not_found(self, client):
        response = await client.get("/api/orders/ord_missing")
        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    async def test_duplicate_registration_is_conflict(self, client):
        await _register(client)
        response = await client.post(
            "/api/auth/register",
            json={"name": "Meera", "email": "meera@example.com", "password": "s3cret-pass"},
        )
        assert response.status_code == 409


class TestCatalogRoutes:
    async def test_public_listing_hides_inactive_products(self, client, products):
        pendant = products["temple-pendant"]
        hidden = await client.put(
            f"/api/products/{pendant.id}", headers=admin(), json={"active": False}
        )
        assert hidden.status_code == 200

        public = (await client.get("/api/products")).json()
        everything = (await client.get("/api/products", headers=admin())).json()

        assert "temple-pendant" not in [p["slug"] for p in public]
        assert "temple-pendant" in [p["slug"] for p in everything]

    async def test_product_carries_cover_image(self, client, products):
        product = (await client.get("/api/products/kundan-necklace-set")).json()
        assert product["imageUrl"] == product["images"][0]["url"]
        assert product["compareAt"] == 299900

    async def test_create_requires_admin(self, client):
        body = {"name": "Jhumka", "slug": "jhumka", "price": 59900, "tags": "gold, festive"}

        assert (await client.post("/api/products", json=body)).status_code == 401

        created = await client.post("/api/products", json=body, headers=admin())
        assert created.status_code == 200
        assert created.json()["tags"] == ["gold", "festive"]

    async def test_force_delete_reports_removed_items(self, client, products):
        auth = await _register(client)
        await _checkout(client, auth, {"productId": "temple-pendant"})
        pendant_id = products["temple-pendant"].id

        blocked = await client.delete(f"/api/products/{pendant_id}", headers=admin())
        assert blocked.status_code == 409

        forced = await client.delete(f"/api/products/{pendant_id}/force", headers=admin())
        assert forced.json() == {"ok": True, "forced": True, "orderItemsRemoved": 1}


class TestSystem:
    async def test_health(self, client):
        body = (await client.get("/api/health")).json()
        assert body["ok"] is True

    async def test_gateway_key(self, client):
        assert (await client.get("/api/razorpay/key")).json() == {
            "ok": True,
            "keyId": "rzp_test_key",
        }

    @pytest.mark.parametrize(("token", "status"), [("admin-token", 200), ("nope", 401)])
    async def test_admin_verify(self, client, token, status):
        response = await client.get("/api/admin/verify", headers={"X-Admin-Token": token})
        assert response.status_code == status
