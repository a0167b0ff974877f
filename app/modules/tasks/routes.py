from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.tasks.schemas import TaskCreate, TaskResponse
from app.modules.tasks.service import TaskService
from app.core.dependencies import get_current_user_id, require_project_capability, check_workboard_access
from app.core import inflight
from supabase import Client
from typing import List, Dict, Optional
from datetime import datetime

router = APIRouter(tags=["tasks"])


def get_task_service(supabase: Client = Depends(get_supabase)) -> TaskService:
    return TaskService(supabase)


@router.post("/workboards/{workboard_id}/tasks", response_model=TaskResponse, status_code=201)
def create_task(
    workboard_id: str,
    task_data: TaskCreate,
    user_data: Dict = Depends(get_current_user_id),
    service: TaskService = Depends(get_task_service),
    supabase: Client = Depends(get_supabase)
):
    """Create a task on a workboard (requires write access to its project)"""
    check_workboard_access(workboard_id, user_data, supabase, "write")
    with inflight.guard("create_task", user_data["id"], workboard_id):
        return service.create_task(workboard_id, task_data)


@router.get("/workboards/{workboard_id}/tasks", response_model=List[TaskResponse])
def list_tasks(
    workboard_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: TaskService = Depends(get_task_service),
    supabase: Client = Depends(get_supabase)
):
    """List tasks of a workboard (members of its project only)"""
    check_workboard_access(workboard_id, user_data, supabase)
    return service.list_tasks(workboard_id)


@router.get("/projects/{project_id}/calendar", response_model=List[TaskResponse])
def project_calendar(
    project_id: str,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    user_data: Dict = Depends(require_project_capability("read")),
    service: TaskService = Depends(get_task_service)
):
    """Tasks of every workboard in the project ordered by due date, optionally within [start, end]"""
    return service.list_project_tasks(project_id, start, end)
