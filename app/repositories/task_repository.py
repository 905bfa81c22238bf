"""
Task repository - store operations for tasks, users and tags.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from app.errors import StoreError
from app.schemas.task import Task, TaskCreate, TaskStatus, TaskUpdate
from app.schemas.user import UserProfile
from app.store.client import Row, StoreClient
from app.utils.time import ensure_utc, parse_instant, utc_now

logger = logging.getLogger(__name__)

TASKS_TABLE = "tasks"
USERS_TABLE = "users"
TAGS_TABLE = "tags"

PROFILE_COLUMNS = "id, name, image"


class TaskRepository:
    """Repository for task board store operations."""

    def __init__(self, client: StoreClient):
        self.client = client

    async def get_tasks(self) -> List[Task]:
        """
        Fetch every task and attach the assignee's public profile.

        Assignee profiles are loaded with one batched lookup. A failed or
        empty lookup leaves ``assigned_to_user`` unset; it never fails the
        call. A failure of the task fetch itself raises StoreError.
        """
        rows = await self.client.table(TASKS_TABLE).select().execute()

        assignee_ids = {row["assigned_to"] for row in rows if row.get("assigned_to")}
        profiles = await self._load_profiles(assignee_ids)

        tasks: List[Task] = []
        for row in rows:
            task = self._row_to_task(row, profiles)
            if task is not None:
                tasks.append(task)
        return tasks

    async def get_users(self) -> List[UserProfile]:
        """List the public profile of every user."""
        rows = await self.client.table(USERS_TABLE).select(PROFILE_COLUMNS).execute()
        return [UserProfile(**row) for row in rows]

    async def get_tags(self) -> List[str]:
        """List tag names from the tag catalog."""
        rows = await self.client.table(TAGS_TABLE).select("name").execute()
        return [row["name"] for row in rows]

    async def create_task(self, data: TaskCreate, user_id: str) -> List[Task]:
        """
        Insert a new task and return the inserted row(s).

        The task starts in Todo, is stamped with the current time and falls
        back to the acting user as assignee. The caller must refetch to see
        the new task in the full list.
        """
        row = {
            "title": data.title,
            "description": data.description,
            "priority": data.priority.value if data.priority else None,
            "status": TaskStatus.TODO.value,
            "created_at": utc_now(),
            "assigned_to": data.assigned_to or user_id,
            "deadline": ensure_utc(data.deadline) if data.deadline else None,
            "tags": list(data.tags) if data.tags else [],
        }
        inserted = await self.client.table(TASKS_TABLE).insert([row]).select().execute()
        logger.info("Created task %s assigned to %s", [r.get("id") for r in inserted], row["assigned_to"])
        return [task for task in (self._row_to_task(r, {}) for r in inserted) if task is not None]

    async def update_task(self, task_id: str, data: TaskUpdate) -> None:
        """
        Overwrite the editable fields of a task.

        Status and creation time are never touched. ``assigned_to`` and
        ``tags`` are only sent when provided.
        """
        values: Dict[str, Any] = {
            "title": data.title,
            "description": data.description,
            "priority": data.priority.value if data.priority else None,
            "deadline": ensure_utc(data.deadline) if data.deadline else None,
        }
        if data.assigned_to is not None:
            values["assigned_to"] = data.assigned_to
        if data.tags is not None:
            values["tags"] = list(data.tags)
        await self.client.table(TASKS_TABLE).update(values).eq("id", task_id).execute()

    async def update_task_status(self, task_id: str, status: TaskStatus) -> None:
        """Move a task to another status column."""
        status_value = TaskStatus(status).value
        await self.client.table(TASKS_TABLE).update({"status": status_value}).eq("id", task_id).execute()

    async def delete_task(self, task_id: str) -> None:
        """Remove a task. There is no undo."""
        await self.client.table(TASKS_TABLE).delete().eq("id", task_id).execute()
        logger.info("Deleted task %s", task_id)

    async def _load_profiles(self, user_ids: Iterable[str]) -> Dict[str, UserProfile]:
        ids = sorted(set(user_ids))
        if not ids:
            return {}
        try:
            rows = await self.client.table(USERS_TABLE).select(PROFILE_COLUMNS).in_("id", ids).execute()
        except StoreError as exc:
            logger.warning("Assignee lookup failed, returning tasks without profiles: %s", exc)
            return {}
        return {row["id"]: UserProfile(**row) for row in rows}

    def _row_to_task(self, row: Row, profiles: Dict[str, UserProfile]) -> Optional[Task]:
        created_at = parse_instant(row.get("created_at"))
        if created_at is None:
            logger.warning("Task %s has an unreadable created_at: %r", row.get("id"), row.get("created_at"))

        assigned_to = row.get("assigned_to") or None
        assigned_to_user = None
        if assigned_to:
            assigned_to_user = profiles.get(assigned_to)
            if assigned_to_user is None:
                logger.info("No profile found for assignee %s of task %s", assigned_to, row.get("id"))

        try:
            return Task(
                id=str(row["id"]),
                title=row.get("title") or "",
                description=row.get("description") or "",
                priority=row.get("priority"),
                status=row.get("status"),
                deadline=parse_instant(row.get("deadline")),
                assigned_to=assigned_to,
                assigned_to_user=assigned_to_user,
                tags=row.get("tags") or [],
                created_at=created_at,
            )
        except ValidationError as exc:
            logger.warning("Skipping malformed task row %s: %s", row.get("id"), exc)
            return None
