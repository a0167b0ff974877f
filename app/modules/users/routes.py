from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.users.schemas import UserResponse, UsernameAvailabilityResponse
from app.modules.users.service import UserService
from app.core.dependencies import get_current_user_id
from supabase import Client
from typing import Dict, Optional

router = APIRouter(prefix="/users", tags=["users"])


def get_user_service(supabase: Client = Depends(get_supabase)) -> UserService:
    return UserService(supabase)


@router.get("/check-username", response_model=UsernameAvailabilityResponse)
def check_username(
    username: Optional[str] = None,
    service: UserService = Depends(get_user_service)
):
    """Check whether a username is available (public; used by the registration form)"""
    return service.check_username(username)


@router.get("/me", response_model=UserResponse)
def get_my_profile(
    user_data: Dict = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service)
):
    """Get the users row of the authenticated user"""
    return service.get_user_by_id(user_data["id"])
