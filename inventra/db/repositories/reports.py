from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from inventra.core.tenancy import TenantContext
from inventra.db.models.stock_adjustments import StockAdjustment


async def list_adjustment_movements(db: AsyncSession, ctx: TenantContext) -> List[tuple]:
    """(product_id, quantity_delta, created_at) for every live adjustment of the tenant."""
    result = await db.execute(
        select(StockAdjustment.product_id, StockAdjustment.quantity_delta, StockAdjustment.created_at)
        .where(StockAdjustment.tenant_id == ctx.tenant_id)
        .order_by(StockAdjustment.created_at)
    )
    return list(result.all())
