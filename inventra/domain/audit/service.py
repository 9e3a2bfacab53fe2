# inventra/domain/audit/service.py
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from inventra.core.logging_config import get_logger
from inventra.core.tenancy import TenantContext
from inventra.db.models.audit_logs import AuditLog

logger = get_logger("audit")


async def record_audit(
    db: AsyncSession,
    ctx: TenantContext,
    entity_type: str,
    entity_id: Any,
    action: str,
    metadata: Optional[Dict[str, Any]] = None,
) -> bool:
    """Append an audit entry in its own transaction.

    Called after the audited change has been committed. A storage failure
    here is logged and reported as False; it never undoes the change.
    """
    entry = AuditLog(
        tenant_id=ctx.tenant_id,
        actor_id=ctx.actor_id,
        entity_type=entity_type,
        entity_id=str(entity_id) if entity_id is not None else None,
        action=action,
        details=metadata or {},
    )
    try:
        db.add(entry)
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.warning(
            "audit_write_failed",
            exc_info=True,
            extra={"entity_type": entity_type, "entity_id": entry.entity_id, "action": action},
        )
        return False
    return True
