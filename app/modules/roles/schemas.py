from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime


class RoleResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RoleWithCapabilitiesResponse(RoleResponse):
    capabilities: List[str] = []


class RoleResolveResponse(BaseModel):
    name: str
    status: str  # found | not_found | transient_failure
    role_id: Optional[str] = None
    message: Optional[str] = None
