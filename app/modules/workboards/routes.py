from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.workboards.schemas import WorkboardCreate, WorkboardResponse, WorkboardCreateResponse
from app.modules.workboards.service import WorkboardService
from app.core.dependencies import get_current_user_id, require_project_capability, check_workboard_access
from app.core import inflight
from supabase import Client
from typing import List, Dict

router = APIRouter(tags=["workboards"])


def get_workboard_service(supabase: Client = Depends(get_supabase)) -> WorkboardService:
    return WorkboardService(supabase)


@router.post("/projects/{project_id}/workboards", response_model=WorkboardCreateResponse, status_code=201)
def create_workboard(
    project_id: str,
    workboard_data: WorkboardCreate,
    user_data: Dict = Depends(require_project_capability("write")),
    service: WorkboardService = Depends(get_workboard_service)
):
    """Create a workboard in a project (requires write access to the project)"""
    with inflight.guard("create_workboard", user_data["id"], project_id):
        return service.create_workboard(project_id, workboard_data)


@router.get("/projects/{project_id}/workboards", response_model=List[WorkboardResponse])
def list_workboards(
    project_id: str,
    user_data: Dict = Depends(require_project_capability("read")),
    service: WorkboardService = Depends(get_workboard_service)
):
    """List workboards of a project (members only)"""
    return service.list_workboards(project_id)


@router.get("/workboards/{workboard_id}", response_model=WorkboardResponse)
def get_workboard(
    workboard_id: str,
    user_data: Dict = Depends(get_current_user_id),
    supabase: Client = Depends(get_supabase)
):
    """Get workboard by ID (members of its project only)"""
    return WorkboardResponse(**check_workboard_access(workboard_id, user_data, supabase))
