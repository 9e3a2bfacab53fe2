# inventra/domain/orders/schemas.py
from datetime import datetime
from decimal import Decimal
from enum import Enum
from pydantic import BaseModel, Field, StringConstraints
from typing import Annotated, ClassVar, Optional
from uuid import UUID

from inventra.db.models.approval import ApprovalStatus

class ApprovalAction(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"

class OrderCreate(BaseModel):
    reference: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
    status: str = "draft"
    total_amount: Decimal = Field(default=Decimal("0"), ge=0)

    @property
    def party_name(self) -> Optional[str]:
        return None

class PurchaseOrderCreate(OrderCreate):
    supplier_name: Optional[str] = None

    @property
    def party_name(self) -> Optional[str]:
        return self.supplier_name

class SalesOrderCreate(OrderCreate):
    customer_name: Optional[str] = None

    @property
    def party_name(self) -> Optional[str]:
        return self.customer_name

class OrderUpdate(BaseModel):
    # approval_status is not editable here; it only moves through the approval endpoint
    party_field: ClassVar[Optional[str]] = None

    reference: Optional[Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]] = None
    status: Optional[str] = None
    total_amount: Optional[Decimal] = Field(default=None, ge=0)

class PurchaseOrderUpdate(OrderUpdate):
    party_field: ClassVar[Optional[str]] = "supplier_name"

    supplier_name: Optional[str] = None

class SalesOrderUpdate(OrderUpdate):
    party_field: ClassVar[Optional[str]] = "customer_name"

    customer_name: Optional[str] = None

class ApprovalDecision(BaseModel):
    action: ApprovalAction

class OrderOut(BaseModel):
    id: UUID
    reference: str
    status: str
    total_amount: Decimal
    approval_status: ApprovalStatus
    approved_by: Optional[UUID] = None
    approved_at: Optional[datetime] = None
    party_name: str = ""

    class Config:
        from_attributes = True
