from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from inventra.core.tenancy import TenantContext
from inventra.db.models.locations import Location
from inventra.db.models.products import Product
from inventra.db.models.stock_adjustments import StockAdjustment


async def get_adjustment(
    db: AsyncSession,
    ctx: TenantContext,
    adjustment_id: UUID,
    for_update: bool = False,
) -> Optional[StockAdjustment]:
    stmt = select(StockAdjustment).where(
        StockAdjustment.tenant_id == ctx.tenant_id,
        StockAdjustment.id == adjustment_id,
    )
    if for_update:
        # serializes concurrent edits/deletes of the same adjustment
        stmt = stmt.with_for_update()
    result = await db.execute(stmt.execution_options(populate_existing=True))
    return result.scalar_one_or_none()


def _with_names():
    return (
        select(StockAdjustment, Product.sku, Product.name, Location.name)
        .join(Product, Product.id == StockAdjustment.product_id)
        .outerjoin(Location, Location.id == StockAdjustment.location_id)
    )


async def get_adjustment_with_names(
    db: AsyncSession,
    ctx: TenantContext,
    adjustment_id: UUID,
) -> Optional[tuple]:
    result = await db.execute(
        _with_names().where(
            StockAdjustment.tenant_id == ctx.tenant_id,
            StockAdjustment.id == adjustment_id,
        )
    )
    return result.one_or_none()


async def list_adjustments_with_names(db: AsyncSession, ctx: TenantContext) -> List[tuple]:
    """(StockAdjustment, sku, product name, location name) rows, newest first."""
    result = await db.execute(
        _with_names()
        .where(StockAdjustment.tenant_id == ctx.tenant_id)
        .order_by(StockAdjustment.created_at.desc())
    )
    return list(result.all())
