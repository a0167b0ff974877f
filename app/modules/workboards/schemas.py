from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime
from app.core.errors import required_text, optional_text


class WorkboardCreate(BaseModel):
    name: str
    description: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def name_required(cls, v):
        return required_text(v, "Workboard name is required.")

    @field_validator("description")
    @classmethod
    def clean_description(cls, v):
        return optional_text(v)


class WorkboardResponse(BaseModel):
    id: str
    project_id: str
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class WorkboardCreateResponse(WorkboardResponse):
    redirect_to: str
