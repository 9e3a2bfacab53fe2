from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from inventra.core.errors import (
    ConflictError,
    LimitExceededError,
    LocationNotFoundError,
    NotFoundError,
    ProductNotFoundError,
)
from inventra.domain.catalog import service as catalog_service
from inventra.domain.catalog.schemas import BalanceSet, NamedEntityCreate, NamedEntityUpdate, ProductCreate, ProductUpdate
from inventra.domain.catalog.service import (
    create_named,
    create_product,
    delete_named,
    delete_product,
    find_or_create,
    get_product,
    list_inventory,
    list_location_balances,
    list_named,
    list_products,
    set_opening_balance,
    update_named,
    update_product,
)

from conftest import seed_location, seed_product, subscribe


class TestProducts:
    async def test_create_with_new_category(self, db, ctx):
        product = await create_product(
            db, ctx, ProductCreate(sku="W-1", name="Widget", category_name="Hardware", unit_price="2.50")
        )

        assert product.sku == "W-1"
        assert product.category_name == "Hardware"
        assert product.quantity == 0
        categories = await list_named(db, ctx, "categories")
        assert [c.name for c in categories] == ["Hardware"]

    async def test_duplicate_sku_conflicts(self, db, ctx):
        await create_product(db, ctx, ProductCreate(sku="W-1", name="Widget"))

        with pytest.raises(ConflictError):
            await create_product(db, ctx, ProductCreate(sku="W-1", name="Other"))

    async def test_same_sku_in_another_tenant_is_fine(self, db, ctx, other_ctx):
        await create_product(db, ctx, ProductCreate(sku="W-1", name="Widget"))

        product = await create_product(db, other_ctx, ProductCreate(sku="W-1", name="Widget"))

        assert product.sku == "W-1"

    async def test_update_changes_descriptive_fields_only(self, db, ctx):
        seeded = await seed_product(db, ctx, sku="W-1", quantity=12)

        updated = await update_product(
            db, ctx, seeded.id, ProductUpdate(name="Renamed", low_stock_threshold=4, category_name="Tools")
        )

        assert updated.name == "Renamed"
        assert updated.low_stock_threshold == 4
        assert updated.category_name == "Tools"
        assert updated.quantity == 12

    def test_update_has_no_quantity_field(self):
        assert "quantity" not in ProductUpdate.model_fields

    async def test_update_to_taken_sku_conflicts(self, db, ctx):
        await seed_product(db, ctx, sku="A")
        second = await seed_product(db, ctx, sku="B")

        with pytest.raises(ConflictError) as exc_info:
            await update_product(db, ctx, second.id, ProductUpdate(sku="A"))

        assert exc_info.value.message == "SKU 'A' already exists"

    async def test_conflict_without_sku_change_does_not_blame_the_sku(self, db, ctx, monkeypatch):
        seeded = await seed_product(db, ctx, sku="A")

        async def racing_find_or_create(*args, **kwargs):
            raise IntegrityError("INSERT INTO categories", {}, Exception("duplicate key"))

        monkeypatch.setattr(catalog_service, "find_or_create", racing_find_or_create)

        with pytest.raises(ConflictError) as exc_info:
            await update_product(db, ctx, seeded.id, ProductUpdate(category_name="Tools"))

        assert "SKU" not in exc_info.value.message
        assert "None" not in exc_info.value.message

    async def test_delete_then_get(self, db, ctx):
        seeded = await seed_product(db, ctx)

        await delete_product(db, ctx, seeded.id)

        with pytest.raises(ProductNotFoundError):
            await get_product(db, ctx, seeded.id)

    async def test_other_tenant_cannot_read(self, db, ctx, other_ctx):
        seeded = await seed_product(db, ctx)

        with pytest.raises(ProductNotFoundError):
            await get_product(db, other_ctx, seeded.id)
        assert await list_products(db, other_ctx) == []

    async def test_inventory_overview(self, db, ctx):
        await seed_product(db, ctx, sku="B", quantity=3, low_stock_threshold=5)
        await seed_product(db, ctx, sku="A", quantity=9)

        rows = await list_inventory(db, ctx)

        assert [(r.sku, r.on_hand, r.low_stock_threshold) for r in rows] == [("A", 9, 0), ("B", 3, 5)]


class TestNamedEntities:
    async def test_create_and_list(self, db, ctx):
        await create_named(db, ctx, "suppliers", NamedEntityCreate(name="Zeta", email="z@example.test"))
        await create_named(db, ctx, "suppliers", NamedEntityCreate(name="Acme"))

        suppliers = await list_named(db, ctx, "suppliers")

        assert [s.name for s in suppliers] == ["Acme", "Zeta"]
        assert suppliers[1].email == "z@example.test"

    async def test_duplicate_name_conflicts(self, db, ctx):
        await create_named(db, ctx, "customers", NamedEntityCreate(name="Bob"))

        with pytest.raises(ConflictError):
            await create_named(db, ctx, "customers", NamedEntityCreate(name="Bob"))

    async def test_find_or_create_reuses_existing(self, db, ctx):
        location = await seed_location(db, ctx, "Main")

        found = await find_or_create(db, ctx, "locations", "  Main ")

        assert found.id == location.id

    async def test_find_or_create_is_gated(self, db, ctx):
        await subscribe(db, ctx, {"categories": 0})

        with pytest.raises(LimitExceededError):
            await find_or_create(db, ctx, "categories", "New")


    async def test_update_renames_and_edits_details(self, db, ctx):
        supplier = await create_named(db, ctx, "suppliers", NamedEntityCreate(name="Acme", phone="1"))

        updated = await update_named(
            db, ctx, "suppliers", supplier.id, NamedEntityUpdate(name="Acme Ltd", email="sales@acme.test")
        )

        assert (updated.name, updated.email, updated.phone) == ("Acme Ltd", "sales@acme.test", "1")
        assert [s.name for s in await list_named(db, ctx, "suppliers")] == ["Acme Ltd"]

    async def test_rename_onto_taken_name_conflicts(self, db, ctx):
        await seed_location(db, ctx, "Main")
        annex = await seed_location(db, ctx, "Annex")

        with pytest.raises(ConflictError) as exc_info:
            await update_named(db, ctx, "locations", annex.id, NamedEntityUpdate(name="Main"))

        assert exc_info.value.message == "Location 'Main' already exists"
        assert sorted(loc.name for loc in await list_named(db, ctx, "locations")) == ["Annex", "Main"]

    async def test_update_unknown_or_foreign_entity_is_not_found(self, db, ctx, other_ctx):
        location = await seed_location(db, ctx, "Main")

        with pytest.raises(NotFoundError):
            await update_named(db, ctx, "locations", uuid4(), NamedEntityUpdate(name="X"))
        with pytest.raises(NotFoundError):
            await update_named(db, other_ctx, "locations", location.id, NamedEntityUpdate(name="X"))

    async def test_delete(self, db, ctx):
        category = await create_named(db, ctx, "categories", NamedEntityCreate(name="Tools"))
        category_id = category.id

        assert await delete_named(db, ctx, "categories", category_id) == category_id

        assert await list_named(db, ctx, "categories") == []
        with pytest.raises(NotFoundError):
            await delete_named(db, ctx, "categories", category_id)

    async def test_delete_category_keeps_its_products(self, db, ctx):
        product = await create_product(db, ctx, ProductCreate(sku="W-1", name="Widget", category_name="Tools"))
        (category,) = await list_named(db, ctx, "categories")

        await delete_named(db, ctx, "categories", category.id)

        assert (await get_product(db, ctx, product.id)).sku == "W-1"


class TestBalances:
    async def test_set_and_list(self, db, ctx):
        await seed_product(db, ctx, sku="P1")
        await seed_location(db, ctx, "Main")

        row = await set_opening_balance(db, ctx, BalanceSet(product_sku="P1", location_name="Main", quantity=30))
        await set_opening_balance(db, ctx, BalanceSet(product_sku="P1", location_name="Main", quantity=25))

        assert row.quantity == 30
        rows = await list_location_balances(db, ctx, "P1")
        assert [(r.location_name, r.quantity) for r in rows] == [("Main", 25)]

    async def test_location_must_exist(self, db, ctx):
        await seed_product(db, ctx, sku="P1")

        with pytest.raises(LocationNotFoundError):
            await set_opening_balance(db, ctx, BalanceSet(product_sku="P1", location_name="Ghost", quantity=1))

    def test_negative_balance_is_invalid(self):
        with pytest.raises(ValueError):
            BalanceSet(product_sku="P1", location_name="Main", quantity=-1)
