# ==============================================================================
# MARKETPLACE TESTS
# ==============================================================================

from __future__ import annotations

import pytest

from smartcow.core.constants import StorageKeys, Topics
from smartcow.core.exceptions import AuthorizationError
from smartcow.schemas.articles import ArticleCreate
from smartcow.schemas.community import ChatMessageCreate
from smartcow.schemas.marketplace import ProductCreate, ProductUpdate
from smartcow.services.product_service import build_snapshot
from smartcow.utils.helpers import dedupe_keep_last


class TestSnapshotRules:
    """Pure snapshot derivation."""

    def test_dedupe_keeps_last_occurrence(self):
        class Item:
            def __init__(self, id, label):
                self.id = id
                self.label = label

        items = [Item("a", 1), Item("b", 2), Item("a", 3)]
        assert [(i.id, i.label) for i in dedupe_keep_last(items, "id")] == [("b", 2), ("a", 3)]

    @pytest.mark.asyncio
    async def test_only_active_products(self, facade):
        await facade.products.create_product("seller:alice", ProductCreate(name="On", price=1, status=" Active "))
        await facade.products.create_product("seller:alice", ProductCreate(name="Off", price=1, status="inactive"))
        catalog = await facade.products.list_products("seller:alice")
        assert [p.name for p in catalog] == ["On", "Off"]
        assert [p.name for p in build_snapshot(catalog)] == ["On"]


class TestProductCatalog:
    """Catalog CRUD and snapshot maintenance."""

    @pytest.mark.asyncio
    async def test_create_appears_in_marketplace(self, facade, sample_product_data):
        seen = []
        facade.bus.subscribe(Topics.MARKETPLACE, seen.append)

        product = await facade.products.create_product(
            "seller:alice", ProductCreate(**sample_product_data)
        )

        assert product.seller_id == "seller:alice"
        assert product.product_owner_role == "seller"
        assert product.owner_user_id == "alice"
        listing = await facade.products.get_marketplace_products()
        assert [(p.name, p.price, p.seller_id) for p in listing] == [
            ("Compost A", 50000, "seller:alice")
        ]
        assert seen[-1].payload == {"cpId": "seller:alice"}

    @pytest.mark.asyncio
    async def test_compost_processor_can_sell(self, facade):
        product = await facade.products.create_product(
            "compost_processor:dana", ProductCreate(name="Vermicompost", price=30000)
        )
        assert product.product_owner_role == "compost_processor"

    @pytest.mark.asyncio
    async def test_buyer_cannot_create(self, facade):
        with pytest.raises(AuthorizationError):
            await facade.products.create_product("buyer:bob", ProductCreate(name="X", price=1))
        assert facade.products.read_snapshot() == []

    @pytest.mark.asyncio
    async def test_deactivate_removes_from_marketplace(self, facade, sample_product_data):
        product = await facade.products.create_product("seller:alice", ProductCreate(**sample_product_data))
        await facade.products.update_product("seller:alice", product.id, ProductUpdate(status="inactive"))

        assert await facade.products.get_marketplace_products() == []
        assert len(await facade.products.list_products("seller:alice")) == 1

    @pytest.mark.asyncio
    async def test_update_keeps_unset_fields(self, facade, sample_product_data):
        product = await facade.products.create_product("seller:alice", ProductCreate(**sample_product_data))
        updated = await facade.products.update_product(
            "seller:alice", product.id, ProductUpdate(price=45000)
        )
        assert updated.price == 45000
        assert updated.stock == 10
        assert (await facade.products.get_marketplace_products())[0].price == 45000

    @pytest.mark.asyncio
    async def test_delete_removes_from_marketplace(self, facade, sample_product_data):
        product = await facade.products.create_product("seller:alice", ProductCreate(**sample_product_data))
        assert await facade.products.delete_product("seller:alice", product.id) is True
        assert await facade.products.get_marketplace_products() == []
        assert await facade.products.delete_product("seller:alice", product.id) is False

    @pytest.mark.asyncio
    async def test_other_owner_cannot_change_product(self, facade, sample_product_data):
        product = await facade.products.create_product("seller:alice", ProductCreate(**sample_product_data))
        assert await facade.products.update_product("seller:carol", product.id, ProductUpdate(price=1)) is None
        assert await facade.products.delete_product("seller:carol", product.id) is False

    @pytest.mark.asyncio
    async def test_owner_match_is_exact(self, facade, sample_product_data):
        await facade.products.create_product("seller:alice", ProductCreate(**sample_product_data))
        assert await facade.products.list_products("Seller:alice") == []
        assert await facade.products.list_products("seller:Alice") == []

    @pytest.mark.asyncio
    async def test_recompute_only_touches_one_owner(self, facade):
        await facade.products.create_product("seller:alice", ProductCreate(name="A", price=1))
        await facade.products.create_product("seller:carol", ProductCreate(name="C", price=1))

        first = [p.id for p in await facade.products.recompute_marketplace("seller:alice")]
        second = [p.id for p in await facade.products.recompute_marketplace("seller:alice")]
        assert first == second
        assert {p.seller_id for p in facade.products.read_snapshot()} == {"seller:alice", "seller:carol"}

    @pytest.mark.asyncio
    async def test_rebuild_from_all_catalogs(self, facade):
        await facade.products.create_product("seller:alice", ProductCreate(name="A", price=1))
        await facade.products.create_product("compost_processor:dana", ProductCreate(name="D", price=1))
        facade.store.remove(StorageKeys.MARKETPLACE_PRODUCTS)

        rebuilt = await facade.products.rebuild_marketplace()
        assert sorted(p.name for p in rebuilt) == ["A", "D"]

    @pytest.mark.asyncio
    async def test_corrupted_snapshot_reads_empty(self, facade):
        facade.store.medium.set_item(StorageKeys.MARKETPLACE_PRODUCTS, "not json")
        assert facade.products.read_snapshot() == []


class TestReadBack:
    """A written product reads back unchanged on every storage path."""

    @pytest.mark.asyncio
    async def test_local_path(self, facade, sample_product_data):
        product = await facade.products.create_product(
            "seller:alice", ProductCreate(**sample_product_data)
        )
        assert await facade.products.get_product(product.id) == product
        assert await facade.products.list_products("seller:alice") == [product]

    @pytest.mark.asyncio
    async def test_sql_remote_path(self, sql_facade, sample_product_data):
        product = await sql_facade.products.create_product(
            "seller:alice", ProductCreate(**sample_product_data)
        )
        assert await sql_facade.products.get_product(product.id) == product

    @pytest.mark.asyncio
    async def test_rest_remote_path(self, rest_facade, sample_product_data):
        product = await rest_facade.products.create_product(
            "seller:alice", ProductCreate(**sample_product_data)
        )
        assert await rest_facade.products.get_product(product.id) == product

    @pytest.mark.asyncio
    async def test_local_fallback_path(self, rest_facade, postgrest, sample_product_data):
        postgrest.down = True
        product = await rest_facade.products.create_product(
            "seller:alice", ProductCreate(**sample_product_data)
        )
        assert await rest_facade.products.get_product(product.id) == product


class TestLikedProducts:
    """Per-user liked sets."""

    def test_toggle(self, facade):
        assert facade.liked.toggle("buyer:bob", "prod-1") is True
        assert facade.liked.get_liked("buyer:bob") == ["prod-1"]
        assert facade.liked.toggle("buyer:bob", "prod-1") is False
        assert facade.liked.get_liked("buyer:bob") == []

    def test_like_is_idempotent(self, facade):
        facade.liked.like("buyer:bob", "prod-1")
        facade.liked.like("buyer:bob", "prod-1")
        assert facade.liked.get_liked("buyer:bob") == ["prod-1"]

    def test_duplicates_in_storage_are_collapsed(self, facade):
        facade.store.write(facade.liked.key("buyer:bob"), ["p1", "p2", "p1"])
        assert facade.liked.get_liked("buyer:bob") == ["p1", "p2"]

    def test_sets_are_per_identity(self, facade):
        facade.liked.like("buyer:bob", "prod-1")
        assert facade.liked.get_liked("seller:bob") == []


class TestOverview:
    """Per-owner dashboard totals."""

    @pytest.mark.asyncio
    async def test_counts(self, facade, sample_product_data, sample_article_data):
        await facade.products.create_product("seller:alice", ProductCreate(**sample_product_data))
        await facade.articles.create_draft("seller:alice", ArticleCreate(**sample_article_data))
        await facade.chat.send_message("buyer:bob", ChatMessageCreate(receiver_id="seller:alice", message="Hi"))
        await facade.ledger.credit("seller", "alice", 50000)

        overview = await facade.overview.get_overview("seller:alice")
        assert overview.total_products == 1
        assert overview.total_sales_idr == 50000
        assert overview.educational_posts == 1
        assert overview.inquiries == 1
