from typing import Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from inventra.db.models.plans import Plan, TenantSubscription


async def get_subscription_with_plan(db: AsyncSession, tenant_id: UUID) -> Optional[tuple]:
    """(TenantSubscription, Plan) for the tenant, or None without a subscribed plan."""
    result = await db.execute(
        select(TenantSubscription, Plan)
        .join(Plan, Plan.id == TenantSubscription.plan_id)
        .where(TenantSubscription.tenant_id == tenant_id)
    )
    return result.one_or_none()


async def count_tenant_rows(db: AsyncSession, tenant_id: UUID, model) -> int:
    result = await db.execute(
        select(func.count(model.id)).where(model.tenant_id == tenant_id)
    )
    return result.scalar_one()


async def get_plan_by_name(db: AsyncSession, name: str) -> Optional[Plan]:
    result = await db.execute(select(Plan).where(Plan.name == name))
    return result.scalar_one_or_none()
