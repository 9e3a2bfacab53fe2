from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Uuid
from sqlalchemy.sql import func
import uuid

from inventra.db.base import Base, JSONType


class AuditLog(Base):
    __tablename__ = "audit_logs"

    """Append-only record of a create/update/delete/approve on a tenant-scoped entity."""

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False)
    actor_id = Column(Uuid, nullable=False)

    entity_type = Column(String, nullable=False)
    entity_id = Column(String, nullable=True)
    action = Column(String, nullable=False)
    # "metadata" is reserved on declarative classes
    details = Column("metadata", JSONType, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        Index("ix_audit_logs_tenant_created", "tenant_id", "created_at"),
    )
