from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime
from app.core.errors import required_text, optional_text


class TaskCreate(BaseModel):
    title: str
    description: Optional[str] = None
    due_date: Optional[datetime] = None  # defaults to the creation time

    @field_validator("title", mode="before")
    @classmethod
    def title_required(cls, v):
        return required_text(v, "Task title is required.")

    @field_validator("description")
    @classmethod
    def clean_description(cls, v):
        return optional_text(v)


class TaskResponse(BaseModel):
    id: str
    workboard_id: str
    title: str
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
