"""
Task Pydantic schemas.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.user import UserProfile


class TaskPriority(str, Enum):
    """Task priority. Ranked High > Medium > Low when sorting."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class TaskStatus(str, Enum):
    """Task status; decides which board column a task lands in."""

    TODO = "Todo"
    IN_PROGRESS = "InProgress"
    DONE = "Done"


class Task(BaseModel):
    """
    A task as read from the store.

    ``assigned_to_user`` is filled in by the repository at read time and is
    never written back.
    """

    id: str
    title: str
    description: str = ""
    priority: TaskPriority
    status: TaskStatus = TaskStatus.TODO
    deadline: Optional[datetime] = None
    assigned_to: Optional[str] = None
    assigned_to_user: Optional[UserProfile] = None
    tags: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class TaskCreate(BaseModel):
    """Schema for creating a new task.

    The acting user's id is not part of the payload; it comes from the
    session and is used as the assignee when ``assigned_to`` is empty.
    """

    title: str = ""
    description: str = ""
    priority: Optional[TaskPriority] = None
    deadline: Optional[datetime] = None
    assigned_to: Optional[str] = None
    tags: Optional[List[str]] = None


class TaskUpdate(TaskCreate):
    """Schema for updating a task. Replaces every editable field."""


class TaskStatusUpdate(BaseModel):
    """Schema for moving a task to another column."""

    status: TaskStatus


class TaskFilter(BaseModel):
    """Board filter criteria. Unset fields match everything."""

    tag: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    assigned_to: Optional[str] = None

    def is_empty(self) -> bool:
        return all(
            value is None
            for value in (self.tag, self.status, self.priority, self.assigned_to)
        )


class TaskStats(BaseModel):
    """Dashboard counters."""

    total: int = 0
    todo: int = 0
    in_progress: int = 0
    done: int = 0
    high_priority: int = 0
    overdue: int = 0
    assigned_to_me: int = 0
    completion_rate: int = 0
    completion_message: str = ""


class TaskBoard(BaseModel):
    """Filtered, sorted board columns plus the lookup collections."""

    columns: Dict[TaskStatus, List[Task]]
    users: List[UserProfile] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    errors: Dict[str, str] = Field(default_factory=dict)


class TaskCreated(BaseModel):
    """Rows returned by the insert, alongside the board re-read after it."""

    created: List[Task]
    board: TaskBoard
