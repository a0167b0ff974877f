from supabase import Client
from app.modules.projects.schemas import (
    ProjectCreate, ProjectResponse, ProjectCreateResponse,
    ProjectMemberAdd, ProjectMemberResponse
)
from app.modules.roles.service import RoleService
from app.modules.users.service import UserService
from app.core.results import Found, NotFound, is_no_rows_error
from app.core.errors import to_http_error
from app.config import settings
from typing import List
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


def _project_sort_key(project: dict):
    return (project.get("created_at") or "", project.get("id") or "")


class ProjectService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.roles = RoleService(supabase)

    def _resolve_role_or_raise(self, role_name: str) -> str:
        lookup = self.roles.resolve_role(role_name)
        if isinstance(lookup, Found):
            return lookup.id
        if isinstance(lookup, NotFound):
            if role_name == settings.admin_role_name:
                raise HTTPException(status_code=400, detail="Admin role not found. Please contact support.")
            raise HTTPException(status_code=400, detail=f"Role '{role_name}' not found.")
        raise HTTPException(status_code=503, detail="Could not resolve role. Please try again.")

    def _delete_project(self, project_id: str) -> None:
        try:
            self.supabase.table("projects")\
                .delete()\
                .eq("id", project_id)\
                .execute()
            logger.warning(f"Rolled back project {project_id} after membership insert failed")
        except Exception as e:
            logger.error(f"Rollback of project {project_id} failed, project has no members: {e}")

    def create_project(self, project_data: ProjectCreate, user_id: str) -> ProjectCreateResponse:
        """Create a project and grant its creator the admin role.

        Both rows are written or neither is: if the membership insert fails the
        project row is deleted again before the error is surfaced.
        """
        admin_role_id = self._resolve_role_or_raise(settings.admin_role_name)

        insert_data = {
            "name": project_data.name,
            "status": settings.default_project_status,
        }
        if project_data.description is not None:
            insert_data["description"] = project_data.description
        try:
            result = self.supabase.table("projects").insert(insert_data).execute()
        except Exception as e:
            raise to_http_error(e, "creating project")
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to create project. Please try again.")
        project = result.data[0]

        try:
            membership_result = self.supabase.table("user_roles").insert({
                "user_id": user_id,
                "project_id": project["id"],
                "role_id": admin_role_id
            }).execute()
            if not membership_result.data:
                raise HTTPException(status_code=500, detail="Failed to assign project admin. Please try again.")
        except Exception as e:
            self._delete_project(project["id"])
            raise to_http_error(e, "assigning project admin")

        logger.info(f"User {user_id} created project {project['id']}")
        return ProjectCreateResponse(
            **project,
            membership_id=membership_result.data[0]["id"],
            role_id=admin_role_id,
            redirect_to=settings.project_route(project["id"])
        )

    def list_projects_for_user(self, user_id: str) -> List[ProjectResponse]:
        """Projects the user holds a membership in, newest first (ties broken by id)"""
        try:
            result = self.supabase.table("user_roles")\
                .select("project_id, role_id, projects(*)")\
                .eq("user_id", user_id)\
                .execute()
        except Exception as e:
            raise to_http_error(e, "listing projects")

        projects = {}
        for membership in result.data or []:
            project = membership.get("projects")
            if not project:
                continue
            projects[project["id"]] = project
        ordered = sorted(projects.values(), key=_project_sort_key, reverse=True)
        return [ProjectResponse(**project) for project in ordered]

    def get_project(self, project_id: str) -> ProjectResponse:
        """Get project by ID"""
        try:
            result = self.supabase.table("projects")\
                .select("*")\
                .eq("id", project_id)\
                .single()\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Project not found")
            return ProjectResponse(**result.data)
        except Exception as e:
            if is_no_rows_error(e):
                raise HTTPException(status_code=404, detail="Project not found")
            raise to_http_error(e, "fetching project")

    def list_members(self, project_id: str) -> List[ProjectMemberResponse]:
        """List memberships of a project with role name and user profile"""
        try:
            result = self.supabase.table("user_roles")\
                .select("*, roles(name), users(id, email, full_name, username)")\
                .eq("project_id", project_id)\
                .order("created_at")\
                .execute()
        except Exception as e:
            raise to_http_error(e, "listing project members")

        members = []
        for item in result.data or []:
            role = item.pop("roles", None) or {}
            user = item.pop("users", None)
            members.append(ProjectMemberResponse(**item, role_name=role.get("name"), user=user))
        return members

    def add_member(self, project_id: str, member_data: ProjectMemberAdd) -> ProjectMemberResponse:
        """Add a user to the project with the given role"""
        self.get_project(project_id)
        role_id = self._resolve_role_or_raise(member_data.role)

        user_id = member_data.user_id
        if not user_id:
            user = UserService(self.supabase).get_user_by_email(member_data.email)
            if user is None:
                raise HTTPException(status_code=404, detail="User not found")
            user_id = user.id

        try:
            existing = self.supabase.table("user_roles")\
                .select("id")\
                .eq("project_id", project_id)\
                .eq("user_id", user_id)\
                .execute()
            if existing.data:
                raise HTTPException(status_code=400, detail="User is already a member of this project")

            result = self.supabase.table("user_roles").insert({
                "user_id": user_id,
                "project_id": project_id,
                "role_id": role_id
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to add member")
        except Exception as e:
            raise to_http_error(e, "adding project member")

        logger.info(f"Added user {user_id} to project {project_id} as {member_data.role}")
        return ProjectMemberResponse(**result.data[0], role_name=member_data.role)
