from pydantic import BaseModel, EmailStr, field_validator, model_validator
from typing import Optional, List, Dict, Any
from datetime import datetime
from app.core.errors import required_text, optional_text


class ProjectCreate(BaseModel):
    name: str
    description: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def name_required(cls, v):
        return required_text(v, "Project name is required.")

    @field_validator("description")
    @classmethod
    def clean_description(cls, v):
        return optional_text(v)


class ProjectResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProjectCreateResponse(ProjectResponse):
    membership_id: str
    role_id: str
    redirect_to: str


class ProjectMemberAdd(BaseModel):
    user_id: Optional[str] = None
    email: Optional[EmailStr] = None
    role: str = "member"

    @field_validator("role", mode="before")
    @classmethod
    def role_required(cls, v):
        return required_text(v, "Role is required.")

    @model_validator(mode="after")
    def user_reference_required(self):
        if not self.user_id and not self.email:
            raise ValueError("Either user_id or email is required.")
        return self


class ProjectMemberResponse(BaseModel):
    id: str
    user_id: str
    project_id: str
    role_id: str
    role_name: Optional[str] = None
    user: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class DashboardResponse(BaseModel):
    user: Dict[str, Any]
    projects: List[ProjectResponse]
