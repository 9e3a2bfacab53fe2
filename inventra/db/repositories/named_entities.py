"""Lookups for the tenant entities that are addressed by name (categories, suppliers, customers, locations)."""

from typing import List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from inventra.core.tenancy import TenantContext


async def get_by_name(db: AsyncSession, ctx: TenantContext, model, name: str):
    result = await db.execute(
        select(model).where(model.tenant_id == ctx.tenant_id, model.name == name)
    )
    return result.scalar_one_or_none()


async def get_many_by_name(
    db: AsyncSession,
    ctx: TenantContext,
    model,
    names: Sequence[str],
) -> dict:
    result = await db.execute(
        select(model).where(model.tenant_id == ctx.tenant_id, model.name.in_(list(names)))
    )
    return {row.name: row for row in result.scalars().all()}


async def get_by_id(db: AsyncSession, ctx: TenantContext, model, entity_id, for_update: bool = False) -> Optional[object]:
    stmt = select(model).where(model.tenant_id == ctx.tenant_id, model.id == entity_id)
    if for_update:
        stmt = stmt.with_for_update()
    result = await db.execute(stmt.execution_options(populate_existing=True))
    return result.scalar_one_or_none()


async def list_by_name(db: AsyncSession, ctx: TenantContext, model) -> List:
    result = await db.execute(
        select(model).where(model.tenant_id == ctx.tenant_id).order_by(model.name)
    )
    return list(result.scalars().all())
