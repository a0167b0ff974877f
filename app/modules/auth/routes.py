from fastapi import APIRouter, Depends
from app.modules.auth.schemas import (
    LoginRequest, RegisterRequest, TokenResponse, RegisterResponse,
    LogoutResponse, SessionResponse
)
from app.modules.auth.service import AuthService
from app.core.dependencies import get_auth_service, get_session, require_session, get_current_user_id
from app.core.session import SessionContext
from app.core import inflight
from app.config import settings
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=201)
def register(
    register_data: RegisterRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new user"""
    with inflight.guard("register", register_data.email.lower()):
        return service.register(register_data)


@router.post("/login", response_model=TokenResponse)
def login(
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login and get access token"""
    return service.login(login_data)


@router.post("/logout", response_model=LogoutResponse)
def logout(session: SessionContext = Depends(require_session)):
    """Logout and drop the session"""
    session.signed_out()
    return LogoutResponse(message="Logged out successfully", redirect_to=settings.login_route)


@router.get("/me")
def get_current_user(current_user: Dict = Depends(get_current_user_id)):
    """Get current authenticated user"""
    return current_user


@router.get("/session", response_model=SessionResponse)
def get_session_state(session: SessionContext = Depends(get_session)):
    """Report the session state without requiring authentication"""
    return session.to_dict()
