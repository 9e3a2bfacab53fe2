"""Stock adjustments keep products.quantity equal to its starting value plus every live delta."""

from uuid import uuid4

import pytest
from sqlalchemy import select

from inventra.core.errors import AdjustmentNotFoundError, LimitExceededError, ProductNotFoundError
from inventra.db.models.audit_logs import AuditLog
from inventra.db.models.locations import Location
from inventra.db.models.stock_adjustments import StockAdjustment
from inventra.db.repositories.products import get_product_by_sku, get_quantity
from inventra.domain.stock.adjustments import (
    create_adjustment,
    delete_adjustment,
    get_adjustment_detail,
    list_adjustments,
    update_adjustment,
)
from inventra.domain.stock.schemas import AdjustmentIn

from conftest import seed_location, seed_product, subscribe


def adj(sku="P1", delta=0, location="Main", reason=None) -> AdjustmentIn:
    return AdjustmentIn(product_sku=sku, location_name=location, quantity_delta=delta, reason=reason)


class TestCreate:
    async def test_applies_delta(self, db, ctx):
        product = await seed_product(db, ctx, quantity=10)

        adjustment = await create_adjustment(db, ctx, adj(delta=5, reason="recount"))

        assert await get_quantity(db, ctx, product.id) == 15
        assert adjustment.product_id == product.id
        assert adjustment.quantity_delta == 5
        assert adjustment.reason == "recount"
        assert adjustment.created_at is not None

    async def test_zero_delta_is_accepted(self, db, ctx):
        product = await seed_product(db, ctx, quantity=4)

        adjustment = await create_adjustment(db, ctx, adj(delta=0))

        assert adjustment.quantity_delta == 0
        assert await get_quantity(db, ctx, product.id) == 4

    async def test_quantity_may_go_negative(self, db, ctx):
        product = await seed_product(db, ctx, quantity=2)

        await create_adjustment(db, ctx, adj(delta=-7))

        assert await get_quantity(db, ctx, product.id) == -5

    async def test_location_is_created_when_missing(self, db, ctx):
        await seed_product(db, ctx)

        adjustment = await create_adjustment(db, ctx, adj(delta=1, location="Back room"))

        result = await db.execute(select(Location).where(Location.tenant_id == ctx.tenant_id))
        locations = result.scalars().all()
        assert [loc.name for loc in locations] == ["Back room"]
        assert adjustment.location_id == locations[0].id

    async def test_existing_location_is_reused(self, db, ctx):
        await seed_product(db, ctx)
        location = await seed_location(db, ctx, "Main")

        adjustment = await create_adjustment(db, ctx, adj(delta=1, location="Main"))

        assert adjustment.location_id == location.id

    async def test_unknown_sku_changes_nothing(self, db, ctx):
        product = await seed_product(db, ctx, quantity=3)

        with pytest.raises(ProductNotFoundError) as exc_info:
            await create_adjustment(db, ctx, adj(sku="NOPE", delta=5, location="New place"))

        assert exc_info.value.sku == "NOPE"
        assert await get_quantity(db, ctx, product.id) == 3
        count = await db.execute(select(StockAdjustment))
        assert count.scalars().all() == []
        locations = await db.execute(select(Location))
        assert locations.scalars().all() == []

    async def test_limit_gate_runs_before_any_change(self, db, ctx):
        product = await seed_product(db, ctx, quantity=10)
        await subscribe(db, ctx, {"stock_adjustments": 1})

        await create_adjustment(db, ctx, adj(delta=1))
        with pytest.raises(LimitExceededError):
            await create_adjustment(db, ctx, adj(delta=1))

        assert await get_quantity(db, ctx, product.id) == 11

    async def test_location_gate_failure_rolls_back_the_adjustment(self, db, ctx):
        product = await seed_product(db, ctx, quantity=10)
        await seed_location(db, ctx, "Main")
        await subscribe(db, ctx, {"locations": 1})

        with pytest.raises(LimitExceededError) as exc_info:
            await create_adjustment(db, ctx, adj(delta=5, location="Overflow"))

        assert exc_info.value.resource_key == "locations"
        assert await get_quantity(db, ctx, product.id) == 10

    async def test_writes_audit_entry(self, db, ctx):
        await seed_product(db, ctx)

        adjustment = await create_adjustment(db, ctx, adj(delta=3))

        result = await db.execute(select(AuditLog).where(AuditLog.entity_id == str(adjustment.id)))
        entry = result.scalar_one()
        assert entry.action == "create"
        assert entry.entity_type == "stock_adjustment"
        assert entry.actor_id == ctx.actor_id
        assert entry.details["quantity_delta"] == 3

    async def test_logs_creation(self, db, ctx, captured_logs):
        await seed_product(db, ctx)

        await create_adjustment(db, ctx, adj(delta=2))

        records = [r for r in captured_logs() if r["message"] == "stock_adjustment_created"]
        assert len(records) == 1
        assert records[0]["quantity_delta"] == 2

    async def test_logs_location_auto_creation(self, db, ctx, captured_logs):
        await seed_product(db, ctx)

        adjustment = await create_adjustment(db, ctx, adj(delta=1, location="Dock"))

        records = [r for r in captured_logs() if r["message"] == "locations_auto_created"]
        assert len(records) == 1
        assert records[0]["entity_name"] == "Dock"
        assert records[0]["entity_id"] == str(adjustment.location_id)


class TestUpdate:
    async def test_same_product_applies_difference(self, db, ctx):
        product = await seed_product(db, ctx, quantity=10)
        adjustment = await create_adjustment(db, ctx, adj(delta=4))

        updated = await update_adjustment(db, ctx, adjustment.id, adj(delta=-1, reason="typo"))

        assert updated.quantity_delta == -1
        assert updated.reason == "typo"
        # same result as if only the final delta had ever been applied
        assert await get_quantity(db, ctx, product.id) == 9

    async def test_moving_to_another_product(self, db, ctx):
        first = await seed_product(db, ctx, sku="A", quantity=10)
        second = await seed_product(db, ctx, sku="B", quantity=20)
        adjustment = await create_adjustment(db, ctx, adj(sku="A", delta=5))

        updated = await update_adjustment(db, ctx, adjustment.id, adj(sku="B", delta=-3))

        assert updated.product_id == second.id
        assert await get_quantity(db, ctx, first.id) == 10
        assert await get_quantity(db, ctx, second.id) == 17

    async def test_location_change_does_not_touch_quantity(self, db, ctx):
        product = await seed_product(db, ctx, quantity=10)
        adjustment = await create_adjustment(db, ctx, adj(delta=2, location="Main"))

        updated = await update_adjustment(db, ctx, adjustment.id, adj(delta=2, location="Annex"))

        assert await get_quantity(db, ctx, product.id) == 12
        detail = await get_adjustment_detail(db, ctx, updated.id)
        assert detail.location_name == "Annex"

    async def test_unknown_adjustment(self, db, ctx):
        await seed_product(db, ctx)

        with pytest.raises(AdjustmentNotFoundError):
            await update_adjustment(db, ctx, uuid4(), adj(delta=1))

    async def test_unknown_new_sku_leaves_everything(self, db, ctx):
        product = await seed_product(db, ctx, quantity=10)
        adjustment = await create_adjustment(db, ctx, adj(delta=5))
        adjustment_id = adjustment.id

        with pytest.raises(ProductNotFoundError):
            await update_adjustment(db, ctx, adjustment_id, adj(sku="GONE", delta=1))

        assert await get_quantity(db, ctx, product.id) == 15
        detail = await get_adjustment_detail(db, ctx, adjustment_id)
        assert detail.quantity_delta == 5


class TestDelete:
    async def test_reverses_only_its_own_delta(self, db, ctx):
        product = await seed_product(db, ctx, quantity=0)
        first = await create_adjustment(db, ctx, adj(delta=7))
        await create_adjustment(db, ctx, adj(delta=-2))
        await create_adjustment(db, ctx, adj(delta=11))

        await delete_adjustment(db, ctx, first.id)

        assert await get_quantity(db, ctx, product.id) == 9

    async def test_second_delete_is_not_found_and_not_reapplied(self, db, ctx):
        product = await seed_product(db, ctx, quantity=10)
        adjustment = await create_adjustment(db, ctx, adj(delta=4))
        await delete_adjustment(db, ctx, adjustment.id)

        with pytest.raises(AdjustmentNotFoundError):
            await delete_adjustment(db, ctx, adjustment.id)

        assert await get_quantity(db, ctx, product.id) == 10


class TestLedger:
    async def test_documented_scenario(self, db, ctx):
        product = await seed_product(db, ctx, sku="P1", quantity=10)

        a1 = await create_adjustment(db, ctx, adj(delta=5))
        assert await get_quantity(db, ctx, product.id) == 15

        a2 = await create_adjustment(db, ctx, adj(delta=-3))
        assert await get_quantity(db, ctx, product.id) == 12

        await update_adjustment(db, ctx, a1.id, adj(delta=2))
        assert await get_quantity(db, ctx, product.id) == 9

        await delete_adjustment(db, ctx, a2.id)
        assert await get_quantity(db, ctx, product.id) == 12

    async def test_quantity_conservation_over_mixed_operations(self, db, ctx):
        product = await seed_product(db, ctx, quantity=100)
        live = {}

        for delta in (3, -8, 15, 0, -40, 22):
            created = await create_adjustment(db, ctx, adj(delta=delta))
            live[created.id] = delta
        ids = list(live)

        for adjustment_id, new_delta in ((ids[0], -6), (ids[3], 9), (ids[5], 1)):
            await update_adjustment(db, ctx, adjustment_id, adj(delta=new_delta))
            live[adjustment_id] = new_delta
        for adjustment_id in (ids[1], ids[4]):
            await delete_adjustment(db, ctx, adjustment_id)
            del live[adjustment_id]

        assert await get_quantity(db, ctx, product.id) == 100 + sum(live.values())
        listed = await list_adjustments(db, ctx)
        assert sorted(row.quantity_delta for row in listed) == sorted(live.values())

    async def test_stale_reader_does_not_lose_an_update(self, session_factory, db, ctx):
        product = await seed_product(db, ctx, quantity=10)

        async with session_factory() as first, session_factory() as second:
            # both sessions hold the product at quantity 10 before either writes
            assert (await get_product_by_sku(first, ctx, "P1")).quantity == 10
            assert (await get_product_by_sku(second, ctx, "P1")).quantity == 10

            await create_adjustment(first, ctx, adj(delta=5))
            await create_adjustment(second, ctx, adj(delta=7))

        assert await get_quantity(db, ctx, product.id) == 22


class TestTenantIsolation:
    async def test_other_tenant_cannot_see_or_touch_adjustment(self, db, ctx, other_ctx):
        product = await seed_product(db, ctx, quantity=10)
        adjustment = await create_adjustment(db, ctx, adj(delta=5))

        with pytest.raises(AdjustmentNotFoundError):
            await get_adjustment_detail(db, other_ctx, adjustment.id)
        with pytest.raises(AdjustmentNotFoundError):
            await delete_adjustment(db, other_ctx, adjustment.id)
        assert await list_adjustments(db, other_ctx) == []
        assert await get_quantity(db, ctx, product.id) == 15

    async def test_sku_resolves_per_tenant(self, db, ctx, other_ctx):
        mine = await seed_product(db, ctx, sku="SHARED", quantity=1)
        theirs = await seed_product(db, other_ctx, sku="SHARED", quantity=1)

        await create_adjustment(db, other_ctx, adj(sku="SHARED", delta=4))

        assert await get_quantity(db, ctx, mine.id) == 1
        assert await get_quantity(db, other_ctx, theirs.id) == 5
