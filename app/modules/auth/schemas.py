from pydantic import BaseModel, EmailStr, field_validator
from typing import Optional, Dict, Any
from app.core.errors import required_text, optional_text


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    email: str
    redirect_to: str


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str
    full_name: Optional[str] = None
    username: Optional[str] = None

    @field_validator("password")
    @classmethod
    def password_not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError("Password is required.")
        return v

    @field_validator("full_name")
    @classmethod
    def clean_full_name(cls, v):
        return optional_text(v)

    @field_validator("username")
    @classmethod
    def clean_username(cls, v):
        if v is None:
            return None
        return required_text(v, "Username must not be blank.")


class RegisterResponse(BaseModel):
    user_id: str
    email: str
    message: str
    redirect_to: str


class LogoutResponse(BaseModel):
    message: str
    redirect_to: str


class SessionResponse(BaseModel):
    authenticated: bool
    loading: bool
    user: Optional[Dict[str, Any]] = None
