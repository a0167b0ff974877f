from supabase import Client
from app.modules.users.schemas import UserResponse, UsernameAvailabilityResponse
from app.core.results import is_no_rows_error, error_message
from app.core.errors import to_http_error
from typing import Optional
from fastapi import HTTPException


class UserService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_user_by_id(self, user_id: str) -> UserResponse:
        """Get user profile by ID"""
        try:
            result = self.supabase.table("users")\
                .select("*")\
                .eq("id", user_id)\
                .single()\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="User not found")

            return UserResponse(**result.data)
        except Exception as e:
            if is_no_rows_error(e):
                raise HTTPException(status_code=404, detail="User not found")
            raise to_http_error(e, "fetching user")

    def get_user_by_email(self, email: str) -> Optional[UserResponse]:
        """Get user profile by email, None when no profile matches"""
        try:
            result = self.supabase.table("users")\
                .select("*")\
                .eq("email", email)\
                .single()\
                .execute()
            if not result.data:
                return None
            return UserResponse(**result.data)
        except Exception as e:
            if is_no_rows_error(e):
                return None
            raise to_http_error(e, "fetching user by email")

    def check_username(self, username: Optional[str]) -> UsernameAvailabilityResponse:
        """Report whether a username is still free"""
        if not username or not username.strip():
            raise HTTPException(status_code=400, detail="Username is required.")
        try:
            self.supabase.table("users")\
                .select("id")\
                .eq("username", username.strip())\
                .single()\
                .execute()
        except Exception as e:
            if is_no_rows_error(e):
                return UsernameAvailabilityResponse(available=True, message="Username is available.")
            raise HTTPException(status_code=500, detail=error_message(e))
        return UsernameAvailabilityResponse(available=False, message="Username is already taken.")
