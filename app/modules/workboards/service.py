from supabase import Client
from app.modules.workboards.schemas import WorkboardCreate, WorkboardResponse, WorkboardCreateResponse
from app.core.errors import to_http_error
from app.config import settings
from typing import List
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class WorkboardService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_workboard(self, project_id: str, workboard_data: WorkboardCreate) -> WorkboardCreateResponse:
        """Create a workboard under a project"""
        insert_data = {
            "project_id": project_id,
            "name": workboard_data.name,
        }
        if workboard_data.description is not None:
            insert_data["description"] = workboard_data.description
        try:
            result = self.supabase.table("workboards").insert(insert_data).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create workboard")
        except Exception as e:
            raise to_http_error(e, "creating workboard")

        workboard = result.data[0]
        logger.info(f"Created workboard {workboard['id']} in project {project_id}")
        return WorkboardCreateResponse(
            **workboard,
            redirect_to=settings.workboard_route(project_id, workboard["id"])
        )

    def list_workboards(self, project_id: str) -> List[WorkboardResponse]:
        """List a project's workboards, oldest first"""
        try:
            result = self.supabase.table("workboards")\
                .select("*")\
                .eq("project_id", project_id)\
                .order("created_at")\
                .execute()
            rows = sorted(result.data or [], key=lambda w: (w.get("created_at") or "", w["id"]))
            return [WorkboardResponse(**workboard) for workboard in rows]
        except Exception as e:
            raise to_http_error(e, "listing workboards")

    def list_workboard_ids(self, project_id: str) -> List[str]:
        try:
            result = self.supabase.table("workboards")\
                .select("id")\
                .eq("project_id", project_id)\
                .execute()
            return [row["id"] for row in result.data or []]
        except Exception as e:
            raise to_http_error(e, "listing workboards")
