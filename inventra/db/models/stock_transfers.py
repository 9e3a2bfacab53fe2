import enum
from sqlalchemy import CheckConstraint, Column, DateTime, Enum, ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.sql import func
import uuid

from inventra.db.base import Base


class TransferStatus(str, enum.Enum):
    COMPLETED = "completed"


class StockTransfer(Base):
    __tablename__ = "stock_transfers"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False)
    reference = Column(String, nullable=True)

    product_id = Column(Uuid, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    from_location_id = Column(Uuid, ForeignKey("locations.id"), nullable=False)
    to_location_id = Column(Uuid, ForeignKey("locations.id"), nullable=False)

    quantity = Column(Integer, nullable=False)
    status = Column(
        Enum(TransferStatus, name="transfer_status_enum", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=TransferStatus.COMPLETED,
    )

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_stock_transfers_quantity_positive"),
        Index("ix_stock_transfers_tenant_created", "tenant_id", "created_at"),
    )
