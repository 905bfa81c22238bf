"""Task data loader: holds tasks, users and tags for a signed-in user.

The loader fetches the three collections concurrently. Each fetch is
isolated, so a failing tag lookup empties only the tag list and records a
``tags`` error while tasks and users still load.

Writes never patch local state; callers ``refetch`` after every mutation.
Every fetch takes a new generation number and only the newest generation
may update the state, so a slow, older fetch can never overwrite a newer
result.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Dict, List, Optional, Tuple, TypeVar

from app.repositories.task_repository import TaskRepository
from app.schemas.task import Task
from app.schemas.user import UserProfile

logger = logging.getLogger(__name__)

T = TypeVar("T")

ERROR_PREFIXES = {
    "tasks": "TaskError",
    "users": "UserError",
    "tags": "TagError",
}


class LoadPhase(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    READY_WITH_ERRORS = "ready_with_errors"


@dataclass
class TaskDataState:
    phase: LoadPhase = LoadPhase.IDLE
    tasks: List[Task] = field(default_factory=list)
    users: List[UserProfile] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def is_loading(self) -> bool:
        return self.phase == LoadPhase.LOADING


class TaskDataLoader:
    """Loads and holds the board collections for one session."""

    def __init__(self, repository: TaskRepository) -> None:
        self.repository = repository
        self.state = TaskDataState()
        self.user_id: Optional[str] = None
        self._generation = 0
        self._closed = False

    @property
    def generation(self) -> int:
        return self._generation

    async def set_session(self, user_id: Optional[str]) -> TaskDataState:
        """Fetch when a user signs in; go idle when the session ends."""
        self.user_id = user_id
        if not user_id:
            # Invalidate anything still in flight for the previous session
            self._generation += 1
            self.state = TaskDataState()
            return self.state
        return await self.refetch()

    async def refetch(self) -> TaskDataState:
        """Reload tasks, users and tags. Stale results are dropped."""
        if self._closed:
            logger.debug("Loader closed; ignoring refetch")
            return self.state

        self._generation += 1
        generation = self._generation
        self.state.phase = LoadPhase.LOADING

        (tasks, task_error), (users, user_error), (tags, tag_error) = await asyncio.gather(
            self._guarded("tasks", self.repository.get_tasks()),
            self._guarded("users", self.repository.get_users()),
            self._guarded("tags", self.repository.get_tags()),
        )

        if self._closed or generation != self._generation:
            logger.debug(
                "Discarding stale fetch (generation %d, latest %d)", generation, self._generation
            )
            return self.state

        errors = {
            name: message
            for name, message in (("tasks", task_error), ("users", user_error), ("tags", tag_error))
            if message
        }
        self.state = TaskDataState(
            phase=LoadPhase.READY_WITH_ERRORS if errors else LoadPhase.READY,
            tasks=tasks,
            users=users,
            tags=tags,
            errors=errors,
        )
        return self.state

    def close(self) -> None:
        """Stop accepting results, e.g. when the consumer goes away."""
        self._closed = True

    async def _guarded(self, name: str, fetch: Awaitable[List[T]]) -> Tuple[List[T], Optional[str]]:
        try:
            return await fetch, None
        except Exception as exc:
            logger.warning("Loading %s failed: %s", name, exc)
            return [], f"{ERROR_PREFIXES[name]}: {exc}"
