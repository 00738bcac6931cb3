"""Catalog: references, batch resolution, product and collection writes."""

import pytest

from atelier._types import ById, BySlug, parse_ref, ref_label
from atelier.catalog import ImageDraft, ProductDraft, ProductPatch
from atelier.errors import ErrorKind

from .conftest import by_slug, err, ok, place


class TestRefs:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("prod_1a2b3c", ById("prod_1a2b3c")),
            ("temple-pendant", BySlug("temple-pendant")),
            ("  temple-pendant ", BySlug("temple-pendant")),
        ],
    )
    def test_parse_ref(self, raw, expected):
        assert parse_ref(raw) == expected

    def test_label_is_the_raw_value(self):
        assert ref_label(BySlug("temple-pendant")) == "temple-pendant"


class TestReads:
    async def test_get_by_id_and_slug(self, container, products):
        pendant = products["temple-pendant"]

        assert ok(await container.catalog.get(ById(pendant.id))).slug == "temple-pendant"
        assert ok(await container.catalog.get(BySlug("temple-pendant"))).id == pendant.id

    async def test_missing_product_is_not_found(self, container, products):
        e = err(await container.catalog.get(BySlug("nope")))
        assert e.kind is ErrorKind.NOT_FOUND

    async def test_resolve_mixes_ids_and_slugs_and_skips_unknown(self, container, products):
        pendant = products["temple-pendant"]
        refs = [ById(pendant.id), BySlug("pearl-drop-earrings"), BySlug("ghost")]

        found = await container.catalog.resolve(refs)

        assert set(found) == {ById(pendant.id), BySlug("pearl-drop-earrings")}
        assert found[ById(pendant.id)].name == "Temple Pendant"

    async def test_resolve_nothing(self, container, products):
        assert await container.catalog.resolve([]) == {}

    async def test_collection_filter(self, container, products):
        daily = next(
            c for c in await container.catalog.list_collections() if c.slug == "daily-wear"
        )

        listed = await container.catalog.list_products(collection_id=daily.id)

        assert {p.slug for p in listed} == {"pearl-drop-earrings", "temple-pendant"}

    async def test_hidden_products_only_listed_on_request(self, container, products):
        pendant = products["temple-pendant"]
        ok(await container.catalog.update_product(pendant.id, ProductPatch(active=False)))

        public = {p.slug for p in await container.catalog.list_products()}
        everything = {
            p.slug for p in await container.catalog.list_products(include_inactive=True)
        }

        assert "temple-pendant" not in public
        assert "temple-pendant" in everything

    async def test_seeded_product_exposes_cover_image_first(self, container, products):
        product = ok(await container.catalog.get(BySlug("kundan-necklace-set")))
        assert [img.position for img in product.images] == [0, 1]
        assert product.tags


class TestWrites:
    async def test_duplicate_slug_is_conflict(self, container, products):
        e = err(
            await container.catalog.create_product(
                ProductDraft(name="Copy", slug="temple-pendant", price=100)
            )
        )
        assert e.kind is ErrorKind.CONFLICT

    @pytest.mark.parametrize(
        "draft",
        [
            ProductDraft(name=" ", slug="blank", price=100),
            ProductDraft(name="Bad slug", slug="Bad_Slug", price=100),
            ProductDraft(name="Free", slug="free", price=0),
            ProductDraft(name="Negative", slug="negative", price=100, inventory=-1),
        ],
    )
    async def test_invalid_drafts_are_rejected(self, container, draft):
        e = err(await container.catalog.create_product(draft))
        assert e.kind is ErrorKind.INVALID_INPUT

    async def test_patch_applies_only_given_fields(self, container, products):
        pendant = products["temple-pendant"]

        updated = ok(
            await container.catalog.update_product(
                pendant.id, ProductPatch(inventory=3, tags=("gold",))
            )
        )

        assert updated.inventory == 3
        assert updated.tags == ("gold",)
        assert updated.price == pendant.price
        assert updated.name == pendant.name

    async def test_update_unknown_is_not_found(self, container):
        e = err(await container.catalog.update_product("prod_missing", ProductPatch(price=1)))
        assert e.kind is ErrorKind.NOT_FOUND

    async def test_images_continue_after_current_positions(self, container, products):
        pendant = products["temple-pendant"]

        updated = ok(
            await container.catalog.add_images(
                pendant.id, [ImageDraft(url="https://img/3.jpg", alt="side")]
            )
        )

        assert [img.position for img in updated.images] == [0, 1, 2]
        assert updated.images[-1].url == "https://img/3.jpg"

    async def test_delete_image(self, container, products):
        pendant = products["temple-pendant"]
        first = pendant.images[0]

        ok(await container.catalog.delete_image(pendant.id, first.id))

        remaining = ok(await container.catalog.get(ById(pendant.id))).images
        assert first.id not in [img.id for img in remaining]
        e = err(await container.catalog.delete_image(pendant.id, first.id))
        assert e.kind is ErrorKind.NOT_FOUND


class TestDeletion:
    async def test_unreferenced_product_is_deleted(self, container, products):
        pendant = products["temple-pendant"]

        ok(await container.catalog.delete_product(pendant.id))

        e = err(await container.catalog.get(ById(pendant.id)))
        assert e.kind is ErrorKind.NOT_FOUND

    async def test_ordered_product_cannot_be_deleted(self, container, products, user):
        pendant = products["temple-pendant"]
        await place(container, user, by_slug("temple-pendant", 1))

        e = err(await container.catalog.delete_product(pendant.id))

        assert e.kind is ErrorKind.CONFLICT
        assert ok(await container.catalog.get(ById(pendant.id))).id == pendant.id

    async def test_force_delete_removes_order_items(self, container, products, user):
        pendant = products["temple-pendant"]
        placed = await place(
            container, user, by_slug("temple-pendant", 1), by_slug("pearl-drop-earrings", 1)
        )

        removed = ok(await container.catalog.force_delete_product(pendant.id))

        assert removed == 1
        order = ok(await container.orders.get(placed.order_id))
        assert [i.product_id for i in order.items] == [products["pearl-drop-earrings"].id]


class TestCollections:
    async def test_crud(self, container):
        created = ok(await container.catalog.create_collection("Festive", "festive"))
        renamed = ok(
            await container.catalog.update_collection(created.id, "Festive Edit", None)
        )
        assert renamed.name == "Festive Edit"
        assert renamed.slug == "festive"

        ok(await container.catalog.delete_collection(created.id))
        assert await container.catalog.list_collections() == []

    async def test_deleting_collection_keeps_its_products(self, container, products):
        bridal = next(
            c for c in await container.catalog.list_collections() if c.slug == "bridal"
        )

        ok(await container.catalog.delete_collection(bridal.id))

        necklace = ok(await container.catalog.get(BySlug("kundan-necklace-set")))
        assert necklace.collection_id is None

    async def test_duplicate_collection_slug_is_conflict(self, container, products):
        e = err(await container.catalog.create_collection("Again", "bridal"))
        assert e.kind is ErrorKind.CONFLICT
