"""
Core dependencies for route protection and project capability checks
"""

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPAuthorizationCredentials
from app.database.supabase_client import get_supabase, get_auth_supabase, get_service_supabase, bearer
from app.modules.auth.service import AuthService
from app.config.roles_config import get_role_capabilities
from app.core.session import SessionContext
from app.core.results import is_no_rows_error
from app.core.errors import to_http_error
from supabase import Client
from typing import List, Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)


def _get_request_cache(request: Request) -> Dict[str, Any]:
    """Return request-scoped cache for membership lookups (project_id -> capabilities)."""
    if not hasattr(request.state, "access_cache"):
        request.state.access_cache = {}
    return request.state.access_cache


def get_auth_service(
    supabase: Client = Depends(get_supabase),
    auth_client: Client = Depends(get_auth_supabase),
    admin_client: Client = Depends(get_service_supabase)
) -> AuthService:
    return AuthService(supabase, auth_client, admin_client)


def get_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer),
    auth_service: AuthService = Depends(get_auth_service)
) -> SessionContext:
    """Session for this request; anonymous when no valid bearer token was sent"""
    token = credentials.credentials if credentials else None
    return SessionContext(auth_service).start(token)


def require_session(session: SessionContext = Depends(get_session)) -> SessionContext:
    """Gate for protected views: raises AuthenticationRequired (401 + login redirect) when anonymous"""
    session.require_user()
    return session


def get_current_user_id(session: SessionContext = Depends(require_session)) -> dict:
    """Extract current user info from the authenticated session"""
    return session.user


def get_project_memberships(project_id: str, user_id: str, supabase: Client) -> List[Dict[str, Any]]:
    """Return user_roles rows binding user_id to project_id, each with its role name embedded."""
    try:
        result = supabase.table("user_roles")\
            .select("id, user_id, project_id, role_id, roles(name)")\
            .eq("project_id", project_id)\
            .eq("user_id", user_id)\
            .execute()
        return result.data or []
    except Exception as e:
        raise to_http_error(e, "checking project membership")


def get_project_capabilities(
    project_id: str,
    user_id: str,
    supabase: Client,
    cache: Optional[Dict[str, Any]] = None
) -> List[str]:
    """Union of the capabilities of every role the user holds in the project. Empty list means no membership."""
    cache_key = f"capabilities:{project_id}"
    if cache is not None and cache_key in cache:
        return cache[cache_key]
    capabilities = set()
    for membership in get_project_memberships(project_id, user_id, supabase):
        role = membership.get("roles") or {}
        capabilities.update(get_role_capabilities(role.get("name", "")))
        # Memberships with a role unknown to the catalogue still grant read access.
        capabilities.add("read")
    caps = sorted(capabilities)
    if cache is not None:
        cache[cache_key] = caps
    return caps


def check_project_capability(
    project_id: str,
    user_data: dict,
    supabase: Client,
    capability: str = "read",
    cache: Optional[Dict[str, Any]] = None
) -> dict:
    """Allow if the user holds a role in the project that grants capability"""
    capabilities = get_project_capabilities(project_id, user_data["id"], supabase, cache)
    if not capabilities:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You must be a member of this project to access it"
        )
    if capability not in capabilities:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Your role in this project does not allow this action. Required: {capability}"
        )
    return user_data


def check_workboard_access(
    workboard_id: str,
    user_data: dict,
    supabase: Client,
    capability: str = "read"
) -> Dict[str, Any]:
    """Check access to the workboard's project. Returns the workboard row so callers avoid a second fetch."""
    try:
        result = supabase.table("workboards")\
            .select("*")\
            .eq("id", workboard_id)\
            .single()\
            .execute()
    except Exception as e:
        if is_no_rows_error(e):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Workboard not found")
        raise to_http_error(e, "fetching workboard")
    if not result.data:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Workboard not found")
    workboard = result.data
    check_project_capability(workboard["project_id"], user_data, supabase, capability)
    return workboard


def require_project_capability(capability: str):
    """Factory for a dependency checking capability on the project_id path parameter"""
    def check_capability(
        project_id: str,
        request: Request,
        user_data: dict = Depends(get_current_user_id),
        supabase: Client = Depends(get_supabase)
    ) -> dict:
        cache = _get_request_cache(request)
        return check_project_capability(project_id, user_data, supabase, capability, cache)
    return check_capability
