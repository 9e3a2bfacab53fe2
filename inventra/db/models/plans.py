from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Uuid
from sqlalchemy.sql import func
import uuid

from inventra.db.base import Base, JSONType


class Plan(Base):
    __tablename__ = "plans"

    """A billing tier and its named limits, e.g. ``{"products": 50, "reports": false}``."""

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False, unique=True)
    limits = Column(JSONType, nullable=False, default=dict)
    stripe_price_id = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class TenantSubscription(Base):
    __tablename__ = "tenant_subscriptions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, unique=True)
    plan_id = Column(Uuid, ForeignKey("plans.id"), nullable=True)

    status = Column(String, nullable=False, default="active")
    cancel_at_period_end = Column(Boolean, nullable=False, default=False)
    current_period_end = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
