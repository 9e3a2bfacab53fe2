from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, Text, Uuid
from sqlalchemy.sql import func
import uuid

from inventra.db.base import Base


class StockAdjustment(Base):
    __tablename__ = "stock_adjustments"

    """A manual, reason-coded change to a product's on-hand quantity.

    While the row exists its ``quantity_delta`` is counted in
    ``products.quantity``; editing or deleting the row moves that effect.
    """

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(Uuid, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    location_id = Column(Uuid, ForeignKey("locations.id", ondelete="SET NULL"), nullable=True)

    quantity_delta = Column(Integer, nullable=False)
    reason = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index("ix_stock_adjustments_tenant_created", "tenant_id", "created_at"),
    )
