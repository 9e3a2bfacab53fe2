from sqlalchemy import Column, DateTime, ForeignKey, Index, Numeric, String, Uuid
from sqlalchemy.sql import func
import uuid

from inventra.db.base import Base
from inventra.db.models.approval import ApprovalStatus, approval_status_type


class SalesOrder(Base):
    __tablename__ = "sales_orders"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False)
    reference = Column(String, nullable=False)
    customer_id = Column(Uuid, ForeignKey("customers.id", ondelete="SET NULL"), nullable=True)

    status = Column(String, nullable=False, default="draft")
    total_amount = Column(Numeric(18, 2), nullable=False, default=0)

    approval_status = Column(approval_status_type, nullable=False, default=ApprovalStatus.PENDING)
    approved_by = Column(Uuid, nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index("ix_sales_orders_tenant_created", "tenant_id", "created_at"),
    )
