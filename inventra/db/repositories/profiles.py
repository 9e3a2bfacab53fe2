from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from inventra.db.models.organizations import Organization
from inventra.db.models.profiles import Profile


async def get_profile(db: AsyncSession, user_id: UUID) -> Optional[Profile]:
    result = await db.execute(select(Profile).where(Profile.id == user_id))
    return result.scalar_one_or_none()


async def get_profile_by_email(db: AsyncSession, email: str) -> Optional[Profile]:
    result = await db.execute(
        select(Profile).where(func.lower(Profile.email) == email.lower()).order_by(Profile.created_at).limit(1)
    )
    return result.scalar_one_or_none()


async def get_organization(db: AsyncSession, tenant_id: UUID) -> Optional[Organization]:
    result = await db.execute(select(Organization).where(Organization.id == tenant_id))
    return result.scalar_one_or_none()


async def list_profile_emails(db: AsyncSession, tenant_id: UUID, roles: List[str]) -> List[str]:
    result = await db.execute(
        select(Profile.email)
        .where(Profile.tenant_id == tenant_id, Profile.role.in_(roles), Profile.email.is_not(None))
        .order_by(Profile.created_at, Profile.email)
    )
    return [email for email in result.scalars().all() if email]


async def list_tenant_profiles(db: AsyncSession, tenant_id: UUID) -> List[Profile]:
    result = await db.execute(
        select(Profile)
        .where(Profile.tenant_id == tenant_id)
        .order_by(Profile.created_at, Profile.email)
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())
