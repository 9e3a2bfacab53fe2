# inventra/domain/members/service.py
"""Tenant membership: inviting users through the auth provider, listing and managing them."""
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from inventra.core.auth import SupabaseAuth
from inventra.core.errors import ConflictError, ForbiddenError, ValidationError
from inventra.core.logging_config import get_logger
from inventra.core.tenancy import Role, TenantContext
from inventra.db.base import transaction
from inventra.db.models.profiles import Profile
from inventra.db.repositories.profiles import get_profile, get_profile_by_email, list_tenant_profiles
from inventra.domain.audit.service import record_audit
from inventra.domain.billing.service import enforce_limit
from .schemas import MemberInvite, MemberOut, MemberUpdate

logger = get_logger("members")


def _ensure_not_member(profile: Optional[Profile], ctx: TenantContext) -> None:
    if profile is None or profile.tenant_id is None:
        return
    if profile.tenant_id == ctx.tenant_id:
        raise ConflictError("User is already a member of this organization")
    raise ConflictError("User already belongs to another organization")


async def invite_member(
    db: AsyncSession,
    ctx: TenantContext,
    provider: SupabaseAuth,
    data: MemberInvite,
    redirect_to: Optional[str] = None,
) -> MemberOut:
    """Invite ``data.email`` into the caller's tenant with ``data.role``.

    A caller can hand out at most their own role. The ``users`` gate and
    the existing-member check run before the provider is contacted.
    """
    if not ctx.can(data.role):
        raise ForbiddenError("Cannot grant a role above your own")
    await enforce_limit(db, ctx, "users")
    _ensure_not_member(await get_profile_by_email(db, data.email), ctx)

    user_id = await run_in_threadpool(provider.invite_user, data.email, redirect_to)

    async with transaction(db):
        profile = await get_profile(db, user_id)
        if profile is not None and profile.tenant_id not in (None, ctx.tenant_id):
            raise ConflictError("User already belongs to another organization")
        if profile is None:
            profile = Profile(id=user_id)
            db.add(profile)
        profile.tenant_id = ctx.tenant_id
        profile.role = data.role.value
        profile.email = data.email

    await db.refresh(profile)
    logger.info("member_invited", extra={"member_id": user_id, "role": data.role.value})
    await record_audit(db, ctx, "member", user_id, "invite", {"email": data.email, "role": data.role.value})
    return MemberOut.model_validate(profile)


async def list_members(db: AsyncSession, ctx: TenantContext) -> List[MemberOut]:
    return [MemberOut.model_validate(profile) for profile in await list_tenant_profiles(db, ctx.tenant_id)]


async def update_member(
    db: AsyncSession,
    ctx: TenantContext,
    provider: SupabaseAuth,
    member_id: UUID,
    data: MemberUpdate,
) -> MemberOut:
    """Change a member's role and/or block them at the auth provider.

    Only members of the caller's tenant whose role does not outrank the
    caller's can be changed, and the new role is capped at the caller's own.
    """
    profile = await get_profile(db, member_id)
    if profile is None or profile.tenant_id != ctx.tenant_id:
        raise ForbiddenError("Member is not in your organization")
    if not ctx.can(Role.parse(profile.role)):
        raise ForbiddenError("Cannot change a member who outranks you")
    if data.role is not None and not ctx.can(data.role):
        raise ForbiddenError("Cannot grant a role above your own")
    if data.blocked and member_id == ctx.actor_id:
        raise ValidationError("Cannot block yourself", field="blocked")

    if data.blocked is not None:
        await run_in_threadpool(provider.set_blocked, member_id, data.blocked)

    if data.role is not None:
        async with transaction(db):
            profile = await get_profile(db, member_id)
            profile.role = data.role.value
        await db.refresh(profile)

    changes = data.model_dump(exclude_none=True, mode="json")
    logger.info("member_updated", extra={"member_id": member_id, **changes})
    await record_audit(db, ctx, "member", member_id, "update", changes)
    return MemberOut.model_validate(profile)
