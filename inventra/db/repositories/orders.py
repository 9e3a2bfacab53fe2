from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from inventra.core.tenancy import TenantContext


async def get_order(
    db: AsyncSession,
    ctx: TenantContext,
    model,
    order_id: UUID,
    for_update: bool = False,
):
    stmt = select(model).where(model.tenant_id == ctx.tenant_id, model.id == order_id)
    if for_update:
        stmt = stmt.with_for_update()
    result = await db.execute(stmt.execution_options(populate_existing=True))
    return result.scalar_one_or_none()


async def list_orders_with_party(
    db: AsyncSession,
    ctx: TenantContext,
    model,
    party_model,
    party_column,
    order_id: Optional[UUID] = None,
) -> List[tuple]:
    """(order, party name or None) rows, newest first."""
    stmt = (
        select(model, party_model.name)
        .outerjoin(party_model, party_model.id == party_column)
        .where(model.tenant_id == ctx.tenant_id)
        .order_by(model.created_at.desc())
    )
    if order_id is not None:
        stmt = stmt.where(model.id == order_id)
    result = await db.execute(stmt)
    return list(result.all())
