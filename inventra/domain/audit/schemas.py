# inventra/domain/audit/schemas.py
from datetime import datetime
from pydantic import BaseModel, Field
from typing import Any, Dict, Optional
from uuid import UUID

class AuditLogOut(BaseModel):
    id: UUID
    actor_id: UUID
    entity_type: str
    entity_id: Optional[str]
    action: str
    metadata: Dict[str, Any] = Field(validation_alias="details")
    created_at: datetime

    class Config:
        from_attributes = True
