"""
Task business logic service.
"""

import logging
from typing import List, Optional

from app.errors import StoreError, TaskOperationError
from app.repositories.task_repository import TaskRepository
from app.schemas.task import (
    Task,
    TaskBoard,
    TaskCreate,
    TaskCreated,
    TaskFilter,
    TaskStats,
    TaskStatus,
    TaskUpdate,
)
from app.services.task_data import TaskDataLoader, TaskDataState
from app.services.task_view import (
    compute_task_stats,
    filter_tasks,
    group_by_status,
    sort_tasks,
)

logger = logging.getLogger(__name__)


class TaskService:
    """Service for task business logic.

    Every successful write is followed by a full refetch through the
    loader; failed writes raise a TaskOperationError naming the operation.
    """

    def __init__(self, repository: TaskRepository, loader: Optional[TaskDataLoader] = None):
        self.repository = repository
        self.loader = loader or TaskDataLoader(repository)

    async def list_tasks(self, criteria: Optional[TaskFilter] = None) -> List[Task]:
        """List tasks, filtered and in display order."""
        tasks = await self.repository.get_tasks()
        return sort_tasks(filter_tasks(tasks, criteria))

    async def board(self, user_id: str, criteria: Optional[TaskFilter] = None) -> TaskBoard:
        """Load everything and lay the tasks out in status columns."""
        state = await self.loader.set_session(user_id)
        return self._to_board(state, criteria)

    async def stats(self, user_id: str) -> TaskStats:
        """Dashboard counters for the signed-in user."""
        tasks = await self.repository.get_tasks()
        return compute_task_stats(tasks, user_id)

    async def create_task(self, data: TaskCreate, user_id: str) -> TaskCreated:
        """Create a new task and return it with the refreshed board."""
        try:
            created = await self.repository.create_task(data, user_id)
        except StoreError as exc:
            logger.error("Error creating task: %s", exc)
            raise TaskOperationError("create", str(exc)) from exc
        return TaskCreated(created=created, board=self._to_board(await self.loader.refetch()))

    async def update_task(self, task_id: str, data: TaskUpdate) -> TaskBoard:
        """Update a task."""
        try:
            await self.repository.update_task(task_id, data)
        except StoreError as exc:
            logger.error("Error updating task %s: %s", task_id, exc)
            raise TaskOperationError("update", str(exc)) from exc
        return self._to_board(await self.loader.refetch())

    async def update_task_status(self, task_id: str, status: TaskStatus) -> TaskBoard:
        """Move a task to another column."""
        try:
            await self.repository.update_task_status(task_id, status)
        except StoreError as exc:
            logger.error("Error updating task status %s: %s", task_id, exc)
            raise TaskOperationError("update_status", str(exc)) from exc
        return self._to_board(await self.loader.refetch())

    async def delete_task(self, task_id: str) -> TaskBoard:
        """Delete a task."""
        try:
            await self.repository.delete_task(task_id)
        except StoreError as exc:
            logger.error("Error deleting task %s: %s", task_id, exc)
            raise TaskOperationError("delete", str(exc)) from exc
        return self._to_board(await self.loader.refetch())

    @staticmethod
    def _to_board(state: TaskDataState, criteria: Optional[TaskFilter] = None) -> TaskBoard:
        return TaskBoard(
            columns=group_by_status(filter_tasks(state.tasks, criteria)),
            users=state.users,
            tags=state.tags,
            errors=state.errors,
        )
