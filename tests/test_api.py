# ==============================================================================
# API TESTS
# ==============================================================================

from __future__ import annotations

import pytest

from smartcow.core.constants import Topics
from smartcow.core.settings import settings

API = settings.API_V1_PREFIX
SELLER = "seller:alice"
BUYER = "buyer:bob"
ADMIN = "admin:admin"


class TestAuthAPI:
    """Registration and login."""

    @pytest.mark.asyncio
    async def test_register_and_login(self, client):
        response = await client.post(f"{API}/auth/register", json={
            "name": "alice",
            "email": "alice@farm.id",
            "password": "secret123",
            "role": "seller",
        })
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["role"] == "seller"
        assert "password" not in body["data"]

        response = await client.post(f"{API}/auth/login", json={"email": "alice@farm.id", "password": "secret123"})
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["identity"] == SELLER

        me = await client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {data['accessToken']}"})
        assert me.json()["data"] == {"identity": SELLER, "role": "seller", "username": "alice"}

    @pytest.mark.asyncio
    async def test_form_token(self, client):
        response = await client.post(
            f"{API}/auth/token",
            data={"username": settings.ADMIN_EMAIL, "password": settings.ADMIN_PASSWORD},
        )
        assert response.status_code == 200
        assert response.json()["token_type"] == "bearer"

    @pytest.mark.asyncio
    async def test_bad_credentials_envelope(self, client):
        response = await client.post(f"{API}/auth/login", json={"email": "x@farm.id", "password": "nope"})
        assert response.status_code == 401
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "AUTHENTICATION_ERROR"

    @pytest.mark.asyncio
    async def test_duplicate_registration_conflict(self, client):
        payload = {"name": "alice", "email": "alice@farm.id", "password": "secret123", "role": "seller"}
        await client.post(f"{API}/auth/register", json=payload)
        response = await client.post(f"{API}/auth/register", json=payload)
        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_admin_registration_forbidden(self, client):
        response = await client.post(f"{API}/auth/register", json={
            "name": "root", "email": "root@farm.id", "password": "secret123", "role": "admin",
        })
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_missing_or_invalid_token(self, client):
        assert (await client.get(f"{API}/auth/me")).status_code == 401
        response = await client.get(f"{API}/auth/me", headers={"Authorization": "Bearer garbage"})
        assert response.status_code == 401


class TestMarketplaceAPI:
    """Catalog, marketplace, orders and revenue over HTTP."""

    @pytest.mark.asyncio
    async def test_sale_flow(self, client, auth_headers, sample_product_data):
        seller, buyer = auth_headers(SELLER), auth_headers(BUYER)

        created = await client.post(f"{API}/products", json=sample_product_data, headers=seller)
        assert created.status_code == 201
        product = created.json()["data"]
        assert product["sellerId"] == SELLER

        listing = (await client.get(f"{API}/marketplace/products")).json()["data"]
        assert [(p["name"], p["price"], p["sellerId"]) for p in listing] == [("Compost A", 50000, SELLER)]

        order = await client.post(f"{API}/orders", headers=buyer, json={
            "productId": product["id"],
            "productName": product["name"],
            "sellerId": SELLER,
            "quantity": 1,
            "totalIdr": 50000,
        })
        assert order.status_code == 201
        order_id = order.json()["data"]["id"]

        for status in ("processing", "completed", "completed"):
            response = await client.patch(
                f"{API}/orders/{order_id}/status", json={"status": status}, headers=seller
            )
            assert response.status_code == 200

        revenue = (await client.get(f"{API}/revenue", headers=seller)).json()["data"]
        assert revenue == {"role": "seller", "userId": "alice", "total": 50000}

        history = (await client.get(f"{API}/orders/buyer", headers=buyer)).json()["data"]
        assert [o["status"] for o in history] == ["completed"]

    @pytest.mark.asyncio
    async def test_buyer_cannot_create_product(self, client, auth_headers, sample_product_data):
        response = await client.post(f"{API}/products", json=sample_product_data, headers=auth_headers(BUYER))
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_backward_status_rejected(self, client, auth_headers):
        seller = auth_headers(SELLER)
        order = await client.post(f"{API}/orders", headers=auth_headers(BUYER), json={
            "productId": "prod-1", "productName": "Compost A", "sellerId": SELLER,
            "quantity": 1, "totalIdr": 1000,
        })
        order_id = order.json()["data"]["id"]
        await client.patch(f"{API}/orders/{order_id}/status", json={"status": "completed"}, headers=seller)

        response = await client.patch(f"{API}/orders/{order_id}/status", json={"status": "pending"}, headers=seller)
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "BUSINESS_RULE_VIOLATION"

    @pytest.mark.asyncio
    async def test_order_hidden_from_strangers(self, client, auth_headers):
        order = await client.post(f"{API}/orders", headers=auth_headers(BUYER), json={
            "productId": "prod-1", "productName": "Compost A", "sellerId": SELLER,
            "quantity": 1, "totalIdr": 1000,
        })
        order_id = order.json()["data"]["id"]
        assert (await client.get(f"{API}/orders/{order_id}", headers=auth_headers(SELLER))).status_code == 200
        assert (await client.get(f"{API}/orders/{order_id}", headers=auth_headers("buyer:erin"))).status_code == 404

    @pytest.mark.asyncio
    async def test_update_and_delete_product(self, client, auth_headers, sample_product_data):
        seller = auth_headers(SELLER)
        product = (await client.post(f"{API}/products", json=sample_product_data, headers=seller)).json()["data"]

        patched = await client.patch(f"{API}/products/{product['id']}", json={"status": "inactive"}, headers=seller)
        assert patched.json()["data"]["status"] == "inactive"
        assert (await client.get(f"{API}/marketplace/products")).json()["data"] == []

        other = await client.delete(f"{API}/products/{product['id']}", headers=auth_headers("seller:carol"))
        assert other.status_code == 404
        deleted = await client.delete(f"{API}/products/{product['id']}", headers=seller)
        assert deleted.json()["data"] == {"deleted": True}
        assert (await client.get(f"{API}/products/{product['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_like_toggle(self, client, auth_headers):
        buyer = auth_headers(BUYER)
        first = await client.post(f"{API}/products/prod-1/like", headers=buyer)
        assert first.json()["data"] == {"productId": "prod-1", "liked": True}
        assert (await client.get(f"{API}/products/liked", headers=buyer)).json()["data"] == ["prod-1"]

    @pytest.mark.asyncio
    async def test_overview(self, client, auth_headers, sample_product_data):
        seller = auth_headers(SELLER)
        await client.post(f"{API}/products", json=sample_product_data, headers=seller)
        data = (await client.get(f"{API}/overview", headers=seller)).json()["data"]
        assert data["totalProducts"] == 1
        assert data["totalSalesIdr"] == 0


class TestArticlesAPI:
    @pytest.mark.asyncio
    async def test_moderation_flow(self, client, auth_headers, sample_article_data):
        author, admin = auth_headers("compost_processor:dana"), auth_headers(ADMIN)

        draft = (await client.post(f"{API}/articles", json=sample_article_data, headers=author)).json()["data"]
        assert draft["status"] == "draft"
        assert (await client.get(f"{API}/articles")).json()["data"] == []

        await client.post(f"{API}/articles/{draft['id']}/submit", headers=author)
        pending = (await client.get(f"{API}/articles/pending", headers=admin)).json()["data"]
        assert [a["id"] for a in pending] == [draft["id"]]
        assert (await client.get(f"{API}/articles/pending", headers=author)).status_code == 403

        assert (await client.post(f"{API}/articles/{draft['id']}/publish", headers=author)).status_code == 403
        published = await client.post(f"{API}/articles/{draft['id']}/publish", headers=admin)
        assert published.json()["data"]["status"] == "published"

        listed = (await client.get(f"{API}/articles")).json()["data"]
        assert [a["title"] for a in listed] == [sample_article_data["title"]]

        viewed = await client.post(f"{API}/articles/{draft['id']}/view")
        assert viewed.json()["data"]["views"] == 1


class TestCommunityAPI:
    @pytest.mark.asyncio
    async def test_chat(self, client, auth_headers):
        await client.post(
            f"{API}/chat/messages",
            json={"receiverId": SELLER, "message": "Is it dry?"},
            headers=auth_headers(BUYER),
        )
        conversation = await client.get(f"{API}/chat/conversations/{BUYER}", headers=auth_headers(SELLER))
        assert [m["message"] for m in conversation.json()["data"]] == ["Is it dry?"]

    @pytest.mark.asyncio
    async def test_forum(self, client, auth_headers):
        author = auth_headers("farmer:budi")
        discussion = (await client.post(
            f"{API}/forum/discussions", json={"title": "Manure", "content": "Tips?"}, headers=author,
        )).json()["data"]

        liked = await client.post(f"{API}/forum/discussions/{discussion['id']}/like", headers=auth_headers(BUYER))
        assert liked.json()["data"]["likedUsers"] == [BUYER]

        await client.post(
            f"{API}/forum/discussions/{discussion['id']}/comments", json={"content": "Dry it."}, headers=author,
        )
        comments = await client.get(f"{API}/forum/discussions/{discussion['id']}/comments")
        assert [c["content"] for c in comments.json()["data"]] == ["Dry it."]

        missing = await client.post(f"{API}/forum/discussions/disc-missing/like", headers=author)
        assert missing.status_code == 404


class TestAccountsAPI:
    @pytest.mark.asyncio
    async def test_user_administration(self, client, auth_headers):
        registered = await client.post(f"{API}/auth/register", json={
            "name": "bob", "email": "bob@farm.id", "password": "secret123", "role": "buyer",
        })
        user_id = registered.json()["data"]["id"]
        admin = auth_headers(ADMIN)

        users = (await client.get(f"{API}/users", headers=admin)).json()["data"]
        assert [u["name"] for u in users] == ["bob"]
        assert (await client.get(f"{API}/users", headers=auth_headers(BUYER))).status_code == 403

        banned = await client.patch(f"{API}/users/{user_id}/status", json={"status": "banned"}, headers=admin)
        assert banned.json()["data"]["status"] == "banned"
        login = await client.post(f"{API}/auth/login", json={"email": "bob@farm.id", "password": "secret123"})
        assert login.status_code == 401

        found = (await client.get(f"{API}/users/search", params={"q": "BOB"}, headers=admin)).json()["data"]
        assert [u["email"] for u in found] == ["bob@farm.id"]

    @pytest.mark.asyncio
    async def test_settings_and_notifications(self, client, auth_headers):
        seller = auth_headers(SELLER)
        defaults = (await client.get(f"{API}/settings", headers=seller)).json()["data"]
        assert defaults["profile"]["username"] == "alice"

        patched = await client.patch(f"{API}/settings", json={"darkMode": True}, headers=seller)
        assert patched.json()["data"]["darkMode"] is True

        await client.post(f"{API}/notifications", json={"type": "system", "message": "Welcome"}, headers=seller)
        items = (await client.get(f"{API}/notifications", headers=seller)).json()["data"]
        assert [(i["message"], i["read"]) for i in items] == [("Welcome", False)]
        read = (await client.post(f"{API}/notifications/read", headers=seller)).json()["data"]
        assert read[0]["read"] is True


class TestRobotAPI:
    @pytest.mark.asyncio
    async def test_status_and_activity(self, client, auth_headers):
        operator = auth_headers("farmer:budi")
        assert (await client.get(f"{API}/robot/status")).json()["data"] is None

        await client.put(f"{API}/robot/status", json={"online": True, "battery": 80, "state": "cleaning"}, headers=operator)
        status = (await client.get(f"{API}/robot/status")).json()["data"]
        assert (status["online"], status["battery"], status["state"]) == (True, 80, "cleaning")

        created = await client.post(f"{API}/robot/activities", json={"wasteCollected": 2.5}, headers=operator)
        assert created.status_code == 201
        chart = (await client.get(f"{API}/robot/chart")).json()["data"]
        assert [p["collectedKg"] for p in chart] == [2.5]


class TestEventsAPI:
    @pytest.mark.asyncio
    async def test_sequences_follow_mutations(self, client, auth_headers, sample_product_data):
        before = (await client.get(f"{API}/events/{Topics.MARKETPLACE}")).json()["data"]["sequence"]
        await client.post(f"{API}/products", json=sample_product_data, headers=auth_headers(SELLER))
        after = (await client.get(f"{API}/events/{Topics.MARKETPLACE}")).json()["data"]["sequence"]
        assert after == before + 1

        everything = (await client.get(f"{API}/events")).json()["data"]
        assert set(everything) == set(Topics.all_topics())

    @pytest.mark.asyncio
    async def test_unknown_topic(self, client):
        assert (await client.get(f"{API}/events/nope")).status_code == 404
