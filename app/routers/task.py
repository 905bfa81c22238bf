"""
Task router - API endpoints for tasks and the task board.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, status

from app.core.dependencies import get_current_user_id, get_task_service
from app.errors import AppError
from app.schemas.task import (
    Task,
    TaskBoard,
    TaskCreate,
    TaskCreated,
    TaskFilter,
    TaskPriority,
    TaskStatus,
    TaskStatusUpdate,
    TaskUpdate,
)
from app.services.task_service import TaskService
from app.services.task_view import validate_task_form

router = APIRouter(prefix="/tasks", tags=["tasks"])


def get_task_filter(
    tag: Optional[str] = None,
    status: Optional[TaskStatus] = None,
    priority: Optional[TaskPriority] = None,
    assigned_to: Optional[str] = None,
) -> TaskFilter:
    """Build board filter criteria from query parameters."""
    return TaskFilter(tag=tag, status=status, priority=priority, assigned_to=assigned_to)


def ensure_valid_form(data: TaskCreate) -> None:
    errors = validate_task_form(data)
    if errors:
        raise AppError(422, "validation_error", "Task form is invalid", {"fields": errors})


@router.get("", response_model=List[Task])
async def list_tasks(
    criteria: TaskFilter = Depends(get_task_filter),
    user_id: str = Depends(get_current_user_id),
    service: TaskService = Depends(get_task_service),
):
    """
    List tasks, overdue first and then by priority.

    Filters: tag, status, priority, assigned_to (all must match).
    """
    return await service.list_tasks(criteria)


@router.get("/board", response_model=TaskBoard)
async def get_board(
    criteria: TaskFilter = Depends(get_task_filter),
    user_id: str = Depends(get_current_user_id),
    service: TaskService = Depends(get_task_service),
):
    """
    Tasks grouped into Todo / InProgress / Done columns, plus users and tags.

    A failing users or tags lookup is reported under ``errors`` instead of
    failing the request.
    """
    return await service.board(user_id, criteria)


@router.post("", response_model=TaskCreated, status_code=status.HTTP_201_CREATED)
async def create_task(
    data: TaskCreate,
    user_id: str = Depends(get_current_user_id),
    service: TaskService = Depends(get_task_service),
):
    """
    Create a new task. Unassigned tasks go to the signed-in user.

    Returns the inserted row and the board re-read after the insert.
    """
    ensure_valid_form(data)
    return await service.create_task(data, user_id)


@router.put("/{task_id}", response_model=TaskBoard)
async def update_task(
    task_id: str,
    data: TaskUpdate,
    user_id: str = Depends(get_current_user_id),
    service: TaskService = Depends(get_task_service),
):
    """Update a task and return the refreshed board."""
    ensure_valid_form(data)
    return await service.update_task(task_id, data)


@router.patch("/{task_id}/status", response_model=TaskBoard)
async def update_task_status(
    task_id: str,
    data: TaskStatusUpdate,
    user_id: str = Depends(get_current_user_id),
    service: TaskService = Depends(get_task_service),
):
    """Move a task to another column and return the refreshed board."""
    return await service.update_task_status(task_id, data.status)


@router.delete("/{task_id}", response_model=TaskBoard)
async def delete_task(
    task_id: str,
    user_id: str = Depends(get_current_user_id),
    service: TaskService = Depends(get_task_service),
):
    """Delete a task and return the refreshed board."""
    return await service.delete_task(task_id)
