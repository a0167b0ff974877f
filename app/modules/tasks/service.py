from supabase import Client
from app.modules.tasks.schemas import TaskCreate, TaskResponse
from app.modules.workboards.service import WorkboardService
from app.core.errors import to_http_error
from typing import List, Optional
from fastapi import HTTPException
from pydantic import TypeAdapter
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)

_TIMESTAMP = TypeAdapter(datetime)
_NO_DUE_DATE = datetime.max.replace(tzinfo=timezone.utc)


def _as_utc(value: datetime) -> datetime:
    """Convert to UTC; naive datetimes are taken to be UTC already"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _task_sort_key(task: dict):
    due = task.get("due_date")
    due_at = _as_utc(_TIMESTAMP.validate_python(due)) if due else _NO_DUE_DATE
    return (due_at, task.get("created_at") or "", task["id"])


class TaskService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_task(self, workboard_id: str, task_data: TaskCreate) -> TaskResponse:
        """Create a task on a workboard"""
        due_date = _as_utc(task_data.due_date) if task_data.due_date else datetime.now(timezone.utc)
        insert_data = {
            "workboard_id": workboard_id,
            "title": task_data.title,
            "due_date": due_date.isoformat(),
        }
        if task_data.description is not None:
            insert_data["description"] = task_data.description
        try:
            result = self.supabase.table("tasks").insert(insert_data).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create task")
        except Exception as e:
            raise to_http_error(e, "creating task")

        logger.info(f"Created task {result.data[0]['id']} on workboard {workboard_id}")
        return TaskResponse(**result.data[0])

    def list_tasks(self, workboard_id: str) -> List[TaskResponse]:
        """List a workboard's tasks by due date, then creation time"""
        try:
            result = self.supabase.table("tasks")\
                .select("*")\
                .eq("workboard_id", workboard_id)\
                .order("due_date")\
                .execute()
        except Exception as e:
            raise to_http_error(e, "listing tasks")
        rows = sorted(result.data or [], key=_task_sort_key)
        return [TaskResponse(**task) for task in rows]

    def list_project_tasks(
        self,
        project_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None
    ) -> List[TaskResponse]:
        """Tasks across all workboards of a project, optionally limited to a due-date window (calendar view)"""
        start = _as_utc(start) if start else None
        end = _as_utc(end) if end else None
        if start and end and start > end:
            raise HTTPException(status_code=400, detail="start must not be after end")
        workboard_ids = WorkboardService(self.supabase).list_workboard_ids(project_id)
        if not workboard_ids:
            return []
        try:
            query = self.supabase.table("tasks")\
                .select("*")\
                .in_("workboard_id", workboard_ids)
            if start:
                query = query.gte("due_date", start.isoformat())
            if end:
                query = query.lte("due_date", end.isoformat())
            result = query.order("due_date").execute()
        except Exception as e:
            raise to_http_error(e, "listing project tasks")
        rows = sorted(result.data or [], key=_task_sort_key)
        return [TaskResponse(**task) for task in rows]
