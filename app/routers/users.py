"""
User router - assignee profiles.
"""

from typing import List

from fastapi import APIRouter, Depends

from app.core.dependencies import get_current_user_id, get_task_repository
from app.repositories.task_repository import TaskRepository
from app.schemas.user import UserProfile

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=List[UserProfile])
async def list_users(
    user_id: str = Depends(get_current_user_id),
    repository: TaskRepository = Depends(get_task_repository),
):
    """List users tasks can be assigned to."""
    return await repository.get_users()
