"""
Tag router - the tag catalog.
"""

from typing import List

from fastapi import APIRouter, Depends

from app.core.dependencies import get_current_user_id, get_task_repository
from app.repositories.task_repository import TaskRepository

router = APIRouter(prefix="/tags", tags=["tags"])


@router.get("", response_model=List[str])
async def list_tags(
    user_id: str = Depends(get_current_user_id),
    repository: TaskRepository = Depends(get_task_repository),
):
    """List tag names offered when tagging a task."""
    return await repository.get_tags()
