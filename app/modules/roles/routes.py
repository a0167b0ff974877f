from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.roles.schemas import RoleResponse, RoleWithCapabilitiesResponse, RoleResolveResponse
from app.modules.roles.service import RoleService
from app.core.dependencies import get_current_user_id
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/roles", tags=["roles"])


def get_role_service(supabase: Client = Depends(get_supabase)) -> RoleService:
    return RoleService(supabase)


@router.get("", response_model=List[RoleResponse])
def list_roles(
    user_data: Dict = Depends(get_current_user_id),
    service: RoleService = Depends(get_role_service)
):
    """List all project roles"""
    return service.list_roles()


@router.get("/resolve/{role_name}", response_model=RoleResolveResponse)
def resolve_role(
    role_name: str,
    user_data: Dict = Depends(get_current_user_id),
    service: RoleService = Depends(get_role_service)
):
    """Resolve a role name to its id. Missing roles are reported in the body, not as an error status."""
    return service.describe_resolution(role_name)


@router.get("/{role_id}", response_model=RoleWithCapabilitiesResponse)
def get_role(
    role_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: RoleService = Depends(get_role_service)
):
    """Get role by ID with the capabilities it grants inside a project"""
    return service.get_role_by_id(role_id)
