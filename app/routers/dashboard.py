"""
Dashboard router - task counters for the home page.
"""

from fastapi import APIRouter, Depends

from app.core.dependencies import get_current_user_id, get_task_service
from app.schemas.task import TaskStats
from app.services.task_service import TaskService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=TaskStats)
async def get_stats(
    user_id: str = Depends(get_current_user_id),
    service: TaskService = Depends(get_task_service),
):
    """Totals per status, high priority, overdue and assigned-to-me counts."""
    return await service.stats(user_id)
