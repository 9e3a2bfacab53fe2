# inventra/domain/organizations/schemas.py
from datetime import datetime
from pydantic import BaseModel, StringConstraints
from typing import Annotated, Optional
from uuid import UUID

Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

class OrganizationCreate(BaseModel):
    name: Name
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    website: Optional[str] = None
    logo_url: Optional[str] = None

class OrganizationUpdate(BaseModel):
    name: Optional[Name] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    website: Optional[str] = None
    logo_url: Optional[str] = None

class OrganizationOut(BaseModel):
    id: UUID
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    website: Optional[str] = None
    logo_url: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
