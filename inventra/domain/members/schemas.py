# inventra/domain/members/schemas.py
from datetime import datetime
from pydantic import BaseModel, StringConstraints
from typing import Annotated, Optional
from uuid import UUID

from inventra.core.tenancy import Role

class MemberInvite(BaseModel):
    email: Annotated[str, StringConstraints(strip_whitespace=True, to_lower=True, min_length=3)]
    role: Role = Role.STAFF

class MemberUpdate(BaseModel):
    role: Optional[Role] = None
    blocked: Optional[bool] = None

class MemberOut(BaseModel):
    id: UUID
    email: Optional[str]
    full_name: Optional[str]
    role: Role
    created_at: datetime

    class Config:
        from_attributes = True
