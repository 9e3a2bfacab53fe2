# inventra/domain/catalog/schemas.py
from decimal import Decimal
from pydantic import BaseModel, Field
from typing import Annotated, Optional
from uuid import UUID

from pydantic import StringConstraints

Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

class ProductCreate(BaseModel):
    sku: Name
    name: Name
    category_name: Optional[str] = None
    description: Optional[str] = None
    quantity: int = 0
    unit_price: Decimal = Field(default=Decimal("0"), ge=0)
    low_stock_threshold: int = Field(default=0, ge=0)

class ProductUpdate(BaseModel):
    # quantity is deliberately absent: on-hand stock only moves through adjustments
    sku: Optional[Name] = None
    name: Optional[Name] = None
    category_name: Optional[str] = None
    description: Optional[str] = None
    unit_price: Optional[Decimal] = Field(default=None, ge=0)
    low_stock_threshold: Optional[int] = Field(default=None, ge=0)

class ProductOut(BaseModel):
    id: UUID
    sku: str
    name: str
    description: Optional[str]
    quantity: int
    unit_price: Decimal
    low_stock_threshold: int
    category_name: str = ""

    class Config:
        from_attributes = True

class NamedEntityCreate(BaseModel):
    name: Name
    description: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

class NamedEntityUpdate(BaseModel):
    name: Optional[Name] = None
    description: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

class NamedEntityOut(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    class Config:
        from_attributes = True

class InventoryRow(BaseModel):
    sku: str
    name: str
    category_name: str
    unit_price: Decimal
    low_stock_threshold: int
    on_hand: int

class BalanceSet(BaseModel):
    product_sku: Name
    location_name: Name
    quantity: int = Field(ge=0)

class BalanceRow(BaseModel):
    product_sku: str
    product_name: str
    location_name: str
    quantity: int
