# inventra/domain/organizations/service.py
"""Organization onboarding and profile.

A signed-in user without an organization creates one and becomes its owner.
The new tenant starts on the stored "Free" plan when one exists; without it
the built-in Free limits apply.
"""
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from inventra.core.errors import NotFoundError, ValidationError
from inventra.core.logging_config import get_logger
from inventra.core.tenancy import Role, TenantContext
from inventra.db.base import transaction
from inventra.db.models.organizations import Organization
from inventra.db.models.plans import TenantSubscription
from inventra.db.models.profiles import Profile
from inventra.db.repositories.plans import get_plan_by_name
from inventra.db.repositories.profiles import get_organization, get_profile
from inventra.domain.audit.service import record_audit
from inventra.domain.billing.service import DEFAULT_PLAN
from .schemas import OrganizationCreate, OrganizationOut, OrganizationUpdate

logger = get_logger("organizations")

_EDITABLE = ("name", "email", "phone", "address", "website", "logo_url")


async def get_user_organization(db: AsyncSession, user_id: UUID) -> Optional[OrganizationOut]:
    """The caller's organization, or None before onboarding."""
    profile = await get_profile(db, user_id)
    if profile is None or profile.tenant_id is None:
        return None
    org = await get_organization(db, profile.tenant_id)
    return OrganizationOut.model_validate(org) if org is not None else None


async def create_organization(db: AsyncSession, user_id: UUID, data: OrganizationCreate) -> OrganizationOut:
    async with transaction(db):
        profile = await get_profile(db, user_id)
        if profile is not None and profile.tenant_id is not None:
            raise ValidationError("Organization already set")

        org = Organization(id=uuid4(), **{attr: getattr(data, attr) for attr in _EDITABLE})
        db.add(org)
        await db.flush()

        free_plan = await get_plan_by_name(db, DEFAULT_PLAN.name)
        if free_plan is not None:
            db.add(TenantSubscription(tenant_id=org.id, plan_id=free_plan.id, status=DEFAULT_PLAN.status))

        if profile is None:
            profile = Profile(id=user_id)
            db.add(profile)
        profile.tenant_id = org.id
        profile.role = Role.OWNER.value

    await db.refresh(org)
    logger.info("organization_created", extra={"organization_id": org.id, "owner_id": user_id})
    ctx = TenantContext(tenant_id=org.id, actor_id=user_id, role=Role.OWNER)
    await record_audit(db, ctx, "organization", org.id, "create", {"name": org.name})
    return OrganizationOut.model_validate(org)


async def update_organization(db: AsyncSession, ctx: TenantContext, data: OrganizationUpdate) -> OrganizationOut:
    changes = data.model_dump(exclude_unset=True)
    if changes.get("name", "") is None:
        changes.pop("name")

    async with transaction(db):
        org = await get_organization(db, ctx.tenant_id)
        if org is None:
            raise NotFoundError("Organization not found")
        for attr, value in changes.items():
            setattr(org, attr, value)

    await db.refresh(org)
    logger.info("organization_updated", extra={"fields": sorted(changes)})
    await record_audit(db, ctx, "organization", org.id, "update", {"fields": sorted(changes)})
    return OrganizationOut.model_validate(org)
