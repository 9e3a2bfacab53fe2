from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Uuid
from sqlalchemy.sql import func

from inventra.db.base import Base


class Profile(Base):
    __tablename__ = "profiles"

    """Membership of an auth-provider user in a tenant.

    ``id`` is the user id issued by the hosted auth provider, so there is no
    local default. ``role`` holds one of owner/admin/manager/staff.
    """

    id = Column(Uuid, primary_key=True)
    tenant_id = Column(Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=True)
    role = Column(String, nullable=False, default="staff")
    email = Column(String, nullable=True)
    full_name = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        Index("ix_profiles_tenant_role", "tenant_id", "role"),
    )
