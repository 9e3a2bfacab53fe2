# inventra/api/deps.py
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from inventra.core.auth import get_auth_provider
from inventra.core.errors import ForbiddenError, UnauthorizedError
from inventra.core.logging_config import LogContext
from inventra.core.tenancy import Role, TenantContext
from inventra.db.base import get_db
from inventra.db.repositories.profiles import get_profile

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
) -> UUID:
    """The auth provider's user id for the bearer token, whether or not it has a tenant yet."""
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError()

    provider = get_auth_provider()
    user_id = await run_in_threadpool(provider.user_id_for, credentials.credentials)
    if user_id is None:
        raise UnauthorizedError()
    LogContext.set(actor_id=str(user_id))
    return user_id


async def get_tenant_context(
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> TenantContext:
    profile = await get_profile(db, user_id)
    if profile is None:
        raise ForbiddenError()
    if profile.tenant_id is None:
        raise ForbiddenError("Organization not set")
    try:
        role = Role.parse(profile.role)
    except ValueError:
        raise ForbiddenError() from None

    ctx = TenantContext(tenant_id=profile.tenant_id, actor_id=profile.id, role=role)
    LogContext.set(tenant_id=str(ctx.tenant_id), actor_id=str(ctx.actor_id))
    return ctx


def require_role(required: Role):
    """Dependency that admits callers whose role is ``required`` or higher."""

    async def dependency(ctx: TenantContext = Depends(get_tenant_context)) -> TenantContext:
        if not ctx.can(required):
            raise ForbiddenError()
        return ctx

    return dependency


# Common guards.
reader = require_role(Role.STAFF)
editor = require_role(Role.MANAGER)
administrator = require_role(Role.ADMIN)
