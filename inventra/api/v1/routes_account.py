# inventra/api/v1/routes_account.py
from fastapi import APIRouter, Depends
from typing import List
from sqlalchemy.ext.asyncio import AsyncSession

from inventra.api.deps import administrator, get_tenant_context, reader
from inventra.core.tenancy import TenantContext
from inventra.db.base import get_db
from inventra.db.repositories.audit_logs import list_audit_logs
from inventra.domain.audit.schemas import AuditLogOut
from inventra.domain.billing.schemas import PlanOut, UsageOut
from inventra.domain.billing.service import get_tenant_plan, get_usage


router = APIRouter(prefix="/api/v1", tags=["account"])


@router.get("/me")
async def me_endpoint(ctx: TenantContext = Depends(get_tenant_context)):
    return {"user_id": ctx.actor_id, "tenant_id": ctx.tenant_id, "role": ctx.role.value}

@router.get("/billing/usage", response_model=UsageOut)
async def usage_endpoint(
    ctx: TenantContext = Depends(reader),
    db: AsyncSession = Depends(get_db),
):
    plan = await get_tenant_plan(db, ctx)
    usage = await get_usage(db, ctx)
    return UsageOut(plan=PlanOut.model_validate(plan), usage=usage)

@router.get("/audit-logs", response_model=List[AuditLogOut])
async def audit_logs_endpoint(
    limit: int = 100,
    ctx: TenantContext = Depends(administrator),
    db: AsyncSession = Depends(get_db),
):
    return await list_audit_logs(db, ctx, min(max(limit, 1), 500))
