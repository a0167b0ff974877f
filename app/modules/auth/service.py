import hashlib
import time
import logging
from supabase import Client
from app.modules.auth.schemas import LoginRequest, RegisterRequest, TokenResponse, RegisterResponse
from app.core.results import is_no_rows_error, error_message
from app.config.settings import settings
from fastapi import HTTPException
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)

# In-memory cache for get_current_user to reduce Supabase auth calls (token hash -> (user_data, expiry))
_AUTH_USER_CACHE: Dict[str, tuple] = {}


def clear_auth_cache() -> None:
    _AUTH_USER_CACHE.clear()


def _cache_key(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


class AuthService:
    def __init__(self, supabase: Client, auth_client: Optional[Client] = None, admin_client: Optional[Client] = None):
        self.supabase = supabase
        self.auth_client = auth_client or supabase
        self.admin_client = admin_client or self.auth_client

    def _delete_identity(self, user_id: str) -> None:
        try:
            self.admin_client.auth.admin.delete_user(user_id)
            logger.warning(f"Deleted auth identity {user_id} after users row insert failed")
        except Exception as e:
            logger.error(f"Could not delete auth identity {user_id}, it has no users row: {e}")

    def _username_taken(self, username: str) -> bool:
        try:
            self.supabase.table("users")\
                .select("id")\
                .eq("username", username)\
                .single()\
                .execute()
            return True
        except Exception as e:
            if is_no_rows_error(e):
                return False
            raise HTTPException(status_code=500, detail=f"Registration failed: {e}")

    def register(self, register_data: RegisterRequest) -> RegisterResponse:
        """Register a new user with Supabase Auth and create their users row"""
        if register_data.username and self._username_taken(register_data.username):
            raise HTTPException(status_code=400, detail="Username is already taken.")
        try:
            user_metadata = {}
            if register_data.full_name:
                user_metadata["full_name"] = register_data.full_name

            auth_response = self.auth_client.auth.sign_up({
                "email": register_data.email,
                "password": register_data.password,
                "options": {
                    "data": user_metadata
                }
            })

            if not auth_response.user:
                raise HTTPException(status_code=400, detail="Failed to register user")
        except HTTPException:
            raise
        except Exception as e:
            msg = str(e)
            if "already registered" in msg.lower() or "already exists" in msg.lower():
                raise HTTPException(status_code=400, detail="User already exists")
            raise HTTPException(status_code=400, detail=msg)

        user = auth_response.user
        profile = {
            "id": user.id,
            "email": user.email or register_data.email,
            "full_name": register_data.full_name,
        }
        if register_data.username:
            profile["username"] = register_data.username
        try:
            self.supabase.table("users").insert(profile).execute()
        except Exception as e:
            # Remove the identity again so the same email can register once the backend recovers.
            logger.error(f"Failed to create users row for {user.id}: {e}")
            self._delete_identity(user.id)
            raise HTTPException(status_code=400, detail=error_message(e))

        logger.info(f"Registered user {user.id}")
        return RegisterResponse(
            user_id=user.id,
            email=profile["email"],
            message="User registered successfully",
            redirect_to=settings.dashboard_route
        )

    def login(self, login_data: LoginRequest) -> TokenResponse:
        """Authenticate user using Supabase Auth"""
        try:
            auth_response = self.auth_client.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })

            if not auth_response.user or not auth_response.session:
                raise HTTPException(status_code=401, detail="Invalid email or password")

            return TokenResponse(
                access_token=auth_response.session.access_token,
                token_type="bearer",
                user_id=auth_response.user.id,
                email=auth_response.user.email or login_data.email,
                redirect_to=settings.dashboard_route
            )
        except HTTPException:
            raise
        except Exception as e:
            error_message = str(e)
            if "invalid" in error_message.lower() or "credentials" in error_message.lower():
                raise HTTPException(status_code=401, detail="Invalid email or password")
            raise HTTPException(status_code=500, detail=f"Login failed: {error_message}")

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current user details from Supabase Auth token. Uses short TTL cache to reduce auth API calls."""
        try:
            cache_key = _cache_key(token)
            now = time.monotonic()
            if cache_key in _AUTH_USER_CACHE:
                user_data, expiry = _AUTH_USER_CACHE[cache_key]
                if now < expiry:
                    return user_data
                del _AUTH_USER_CACHE[cache_key]
            user_response = self.auth_client.auth.get_user(jwt=token)
            if not user_response or not user_response.user:
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            user = user_response.user
            user_data = {
                "id": user.id,
                "email": user.email,
                "user_metadata": user.user_metadata or {},
                "app_metadata": user.app_metadata or {},
                "created_at": user.created_at,
                "updated_at": user.updated_at
            }
            if len(_AUTH_USER_CACHE) < settings.auth_cache_max_size:
                _AUTH_USER_CACHE[cache_key] = (user_data, now + settings.auth_cache_ttl_seconds)
            return user_data
        except HTTPException:
            raise
        except Exception as e:
            error_msg = str(e)
            if "JWT" in error_msg or "expired" in error_msg.lower() or "invalid" in error_msg.lower():
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            raise HTTPException(status_code=401, detail="Authentication failed")

    def logout(self, token: str) -> bool:
        """Revoke this token's session and drop its cached identity. Other users' sessions are untouched."""
        _AUTH_USER_CACHE.pop(_cache_key(token), None)
        try:
            self.auth_client.auth.admin.sign_out(token)
            return True
        except Exception as e:
            logger.warning(f"Sign-out failed: {e}")
            return False
