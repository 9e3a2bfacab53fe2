from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, UniqueConstraint, Uuid
from sqlalchemy.sql import func
import uuid

from inventra.db.base import Base


class InventoryBalance(Base):
    __tablename__ = "inventory_balances"

    """On-hand quantity of one product at one location.

    Rows are created lazily by the first deposit; a missing row reads as 0.
    """

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(Uuid, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    location_id = Column(Uuid, ForeignKey("locations.id", ondelete="CASCADE"), nullable=False)

    quantity = Column(Integer, nullable=False, default=0)

    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("tenant_id", "product_id", "location_id", name="uq_inventory_balances_tenant_product_location"),
        CheckConstraint("quantity >= 0", name="ck_inventory_balances_quantity_non_negative"),
    )
