from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, Numeric, String, Text, UniqueConstraint, Uuid
from sqlalchemy.sql import func
import uuid

from inventra.db.base import Base


class Product(Base):
    __tablename__ = "products"

    """A sellable SKU of a tenant and its aggregate on-hand quantity.

    ``quantity`` is only ever changed through stock adjustments (as an atomic
    increment) after the product is created. Per-location stock lives in
    ``inventory_balances`` and is maintained separately by transfers.
    """

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False)

    sku = Column(String, nullable=False)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    category_id = Column(Uuid, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)

    quantity = Column(Integer, nullable=False, default=0)
    unit_price = Column(Numeric(18, 2), nullable=False, default=0)
    low_stock_threshold = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("tenant_id", "sku", name="uq_products_tenant_sku"),
        Index("ix_products_tenant_name", "tenant_id", "name"),
    )
