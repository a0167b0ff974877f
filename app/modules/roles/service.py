from supabase import Client
from app.modules.roles.schemas import RoleResponse, RoleWithCapabilitiesResponse, RoleResolveResponse
from app.config.roles_config import get_role_capabilities
from app.core.results import Found, NotFound, TransientFailure, LookupResult, is_no_rows_error, error_message
from app.core.errors import to_http_error
from typing import List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class RoleService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def resolve_role(self, role_name: str) -> LookupResult:
        """Look up a role id by name. Never raises: absent rows are NotFound, anything else TransientFailure."""
        if not role_name or not role_name.strip():
            return NotFound()
        try:
            result = self.supabase.table("roles")\
                .select("id")\
                .eq("name", role_name.strip())\
                .single()\
                .execute()
            if not result.data:
                return NotFound()
            return Found(id=result.data["id"])
        except Exception as e:
            if is_no_rows_error(e):
                logger.warning(f"Role not found: {role_name}")
                return NotFound()
            logger.error(f"Error fetching role ID for {role_name}: {error_message(e)}")
            return TransientFailure(detail=error_message(e))

    def get_role_id_by_name(self, role_name: str) -> Optional[str]:
        """Return the role id, or None when it is absent or could not be looked up."""
        lookup = self.resolve_role(role_name)
        if isinstance(lookup, Found):
            return lookup.id
        return None

    def describe_resolution(self, role_name: str) -> RoleResolveResponse:
        lookup = self.resolve_role(role_name)
        if isinstance(lookup, Found):
            return RoleResolveResponse(name=role_name, status="found", role_id=lookup.id)
        if isinstance(lookup, NotFound):
            return RoleResolveResponse(
                name=role_name,
                status="not_found",
                message=f"Role '{role_name}' not found. Please contact support."
            )
        return RoleResolveResponse(
            name=role_name,
            status="transient_failure",
            message=f"Could not look up role '{role_name}'. Please try again."
        )

    def get_role_by_id(self, role_id: str) -> RoleWithCapabilitiesResponse:
        """Get role by ID"""
        try:
            result = self.supabase.table("roles")\
                .select("*")\
                .eq("id", role_id)\
                .single()\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Role not found")

            return RoleWithCapabilitiesResponse(
                **result.data,
                capabilities=get_role_capabilities(result.data["name"])
            )
        except Exception as e:
            if is_no_rows_error(e):
                raise HTTPException(status_code=404, detail="Role not found")
            raise to_http_error(e, "fetching role")

    def list_roles(self) -> List[RoleResponse]:
        """List all roles ordered by name"""
        try:
            result = self.supabase.table("roles")\
                .select("*")\
                .order("name")\
                .execute()
            return [RoleResponse(**role) for role in result.data or []]
        except Exception as e:
            raise to_http_error(e, "listing roles")
