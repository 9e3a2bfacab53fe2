# inventra/domain/billing/schemas.py
from pydantic import BaseModel
from typing import Dict, Optional, Union

class PlanOut(BaseModel):
    id: Optional[str]
    name: str
    status: str
    limits: Dict[str, Union[bool, int, float]]
    cancel_at_period_end: bool

    class Config:
        from_attributes = True

class UsageOut(BaseModel):
    plan: PlanOut
    usage: Dict[str, int]
