from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from inventra.core.tenancy import TenantContext
from inventra.db.models.audit_logs import AuditLog


async def list_audit_logs(db: AsyncSession, ctx: TenantContext, limit: int = 100) -> List[AuditLog]:
    result = await db.execute(
        select(AuditLog)
        .where(AuditLog.tenant_id == ctx.tenant_id)
        .order_by(AuditLog.created_at.desc())
        .limit(limit)
    )
    return list(result.scalars().all())
