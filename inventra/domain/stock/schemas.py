# inventra/domain/stock/schemas.py
from datetime import datetime
from pydantic import BaseModel, Field, StringConstraints
from typing import Annotated, Optional
from uuid import UUID

from inventra.db.models.stock_transfers import TransferStatus

Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

class AdjustmentIn(BaseModel):
    product_sku: Name
    location_name: Name
    # signed; zero is accepted and leaves the quantity unchanged
    quantity_delta: int
    reason: Optional[str] = None

class AdjustmentOut(BaseModel):
    id: UUID
    product_id: UUID
    location_id: Optional[UUID]
    quantity_delta: int
    reason: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True

class AdjustmentDetail(BaseModel):
    id: UUID
    created_at: datetime
    quantity_delta: int
    reason: Optional[str]
    product_sku: str
    product_name: str
    location_name: str

class TransferCreate(BaseModel):
    reference: Optional[str] = None
    product_sku: Name
    from_location: Name
    to_location: Name
    quantity: int = Field(gt=0)

class TransferOut(BaseModel):
    id: UUID
    reference: Optional[str]
    product_id: UUID
    from_location_id: UUID
    to_location_id: UUID
    quantity: int
    status: TransferStatus
    created_at: datetime

    class Config:
        from_attributes = True

class TransferDetail(BaseModel):
    id: UUID
    reference: str
    quantity: int
    status: TransferStatus
    created_at: datetime
    product_sku: str
    product_name: str
    from_location: str
    to_location: str
