# inventra/domain/stock/adjustments.py
"""Stock adjustments and their effect on ``products.quantity``.

While an adjustment row exists, its ``quantity_delta`` is included in the
product's on-hand quantity. Every operation here moves that effect with
atomic increments and writes the adjustment row in the same transaction, so
a failure leaves neither half behind.
"""
from typing import List
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from inventra.core.errors import AdjustmentNotFoundError, ProductNotFoundError
from inventra.core.logging_config import get_logger
from inventra.core.tenancy import TenantContext
from inventra.db.base import transaction
from inventra.db.models.stock_adjustments import StockAdjustment
from inventra.db.repositories.products import apply_quantity_delta, get_product_by_sku
from inventra.db.repositories.stock_adjustments import (
    get_adjustment,
    get_adjustment_with_names,
    list_adjustments_with_names,
)
from inventra.domain.audit.service import record_audit
from inventra.domain.billing.service import enforce_limit
from inventra.domain.catalog.service import find_or_create
from .schemas import AdjustmentDetail, AdjustmentIn

logger = get_logger("stock.adjustments")


async def _resolve_product(db: AsyncSession, ctx: TenantContext, sku: str):
    product = await get_product_by_sku(db, ctx, sku)
    if product is None:
        raise ProductNotFoundError(sku=sku)
    return product


async def create_adjustment(
    db: AsyncSession,
    ctx: TenantContext,
    data: AdjustmentIn,
) -> StockAdjustment:
    async with transaction(db):
        await enforce_limit(db, ctx, "stock_adjustments")
        product = await _resolve_product(db, ctx, data.product_sku)
        location = await find_or_create(db, ctx, "locations", data.location_name)

        await apply_quantity_delta(db, ctx, product.id, data.quantity_delta)

        adjustment = StockAdjustment(
            tenant_id=ctx.tenant_id,
            product_id=product.id,
            location_id=location.id,
            quantity_delta=data.quantity_delta,
            reason=data.reason,
        )
        db.add(adjustment)

    await db.refresh(adjustment)
    logger.info(
        "stock_adjustment_created",
        extra={"adjustment_id": adjustment.id, "product_id": product.id, "quantity_delta": data.quantity_delta},
    )
    await record_audit(
        db, ctx, "stock_adjustment", adjustment.id, "create",
        {"product_sku": data.product_sku, "location_name": data.location_name, "quantity_delta": data.quantity_delta},
    )
    return adjustment


async def update_adjustment(
    db: AsyncSession,
    ctx: TenantContext,
    adjustment_id: UUID,
    data: AdjustmentIn,
) -> StockAdjustment:
    async with transaction(db):
        existing = await get_adjustment(db, ctx, adjustment_id, for_update=True)
        if existing is None:
            raise AdjustmentNotFoundError(adjustment_id)

        product = await _resolve_product(db, ctx, data.product_sku)
        location = await find_or_create(db, ctx, "locations", data.location_name)

        old_product_id = existing.product_id
        old_delta = existing.quantity_delta
        new_delta = data.quantity_delta

        if old_product_id == product.id:
            if new_delta != old_delta:
                await apply_quantity_delta(db, ctx, product.id, new_delta - old_delta)
        else:
            await apply_quantity_delta(db, ctx, old_product_id, -old_delta)
            await apply_quantity_delta(db, ctx, product.id, new_delta)

        existing.product_id = product.id
        existing.location_id = location.id
        existing.quantity_delta = new_delta
        existing.reason = data.reason

    await db.refresh(existing)
    logger.info(
        "stock_adjustment_updated",
        extra={
            "adjustment_id": adjustment_id,
            "old_product_id": old_product_id,
            "new_product_id": product.id,
            "old_delta": old_delta,
            "new_delta": new_delta,
        },
    )
    await record_audit(
        db, ctx, "stock_adjustment", adjustment_id, "update",
        {"product_sku": data.product_sku, "location_name": data.location_name, "quantity_delta": new_delta},
    )
    return existing


async def delete_adjustment(db: AsyncSession, ctx: TenantContext, adjustment_id: UUID) -> UUID:
    async with transaction(db):
        existing = await get_adjustment(db, ctx, adjustment_id, for_update=True)
        if existing is None:
            raise AdjustmentNotFoundError(adjustment_id)

        product_id = existing.product_id
        quantity_delta = existing.quantity_delta
        await apply_quantity_delta(db, ctx, product_id, -quantity_delta)
        await db.delete(existing)

    logger.info(
        "stock_adjustment_deleted",
        extra={"adjustment_id": adjustment_id, "product_id": product_id, "quantity_delta": quantity_delta},
    )
    await record_audit(db, ctx, "stock_adjustment", adjustment_id, "delete")
    return adjustment_id


async def get_adjustment_detail(db: AsyncSession, ctx: TenantContext, adjustment_id: UUID) -> AdjustmentDetail:
    row = await get_adjustment_with_names(db, ctx, adjustment_id)
    if row is None:
        raise AdjustmentNotFoundError(adjustment_id)
    return _detail(row)


async def list_adjustments(db: AsyncSession, ctx: TenantContext) -> List[AdjustmentDetail]:
    return [_detail(row) for row in await list_adjustments_with_names(db, ctx)]


def _detail(row) -> AdjustmentDetail:
    adjustment, sku, product_name, location_name = row
    return AdjustmentDetail(
        id=adjustment.id,
        created_at=adjustment.created_at,
        quantity_delta=adjustment.quantity_delta,
        reason=adjustment.reason,
        product_sku=sku or "",
        product_name=product_name or "",
        location_name=location_name or "",
    )
