from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.projects.schemas import (
    ProjectCreate, ProjectResponse, ProjectCreateResponse,
    ProjectMemberAdd, ProjectMemberResponse, DashboardResponse
)
from app.modules.projects.service import ProjectService
from app.core.dependencies import get_current_user_id, require_session, require_project_capability
from app.core.session import SessionContext
from app.core import inflight
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/projects", tags=["projects"])
dashboard_router = APIRouter(tags=["dashboard"])


def get_project_service(supabase: Client = Depends(get_supabase)) -> ProjectService:
    return ProjectService(supabase)


@router.post("", response_model=ProjectCreateResponse, status_code=201)
def create_project(
    project_data: ProjectCreate,
    user_data: Dict = Depends(get_current_user_id),
    service: ProjectService = Depends(get_project_service)
):
    """Create a project; the creator becomes its admin"""
    with inflight.guard("create_project", user_data["id"]):
        return service.create_project(project_data, user_data["id"])


@router.get("", response_model=List[ProjectResponse])
def list_projects(
    user_data: Dict = Depends(get_current_user_id),
    service: ProjectService = Depends(get_project_service)
):
    """List projects the current user is a member of"""
    return service.list_projects_for_user(user_data["id"])


@router.get("/{project_id}", response_model=ProjectResponse)
def get_project(
    project_id: str,
    user_data: Dict = Depends(require_project_capability("read")),
    service: ProjectService = Depends(get_project_service)
):
    """Get project by ID (members only)"""
    return service.get_project(project_id)


@router.get("/{project_id}/members", response_model=List[ProjectMemberResponse])
def list_members(
    project_id: str,
    user_data: Dict = Depends(require_project_capability("read")),
    service: ProjectService = Depends(get_project_service)
):
    """List project members and their roles (members only)"""
    return service.list_members(project_id)


@router.post("/{project_id}/members", response_model=ProjectMemberResponse, status_code=201)
def add_member(
    project_id: str,
    member_data: ProjectMemberAdd,
    user_data: Dict = Depends(require_project_capability("manage_members")),
    service: ProjectService = Depends(get_project_service)
):
    """Add a member to the project with a role (project admins only)"""
    return service.add_member(project_id, member_data)


@dashboard_router.get("/dashboard", response_model=DashboardResponse)
def dashboard(
    session: SessionContext = Depends(require_session),
    service: ProjectService = Depends(get_project_service)
):
    """Signed-in landing view: the user and their projects"""
    return DashboardResponse(
        user=session.user,
        projects=service.list_projects_for_user(session.user_id)
    )
