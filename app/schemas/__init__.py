"""
Schemas package.

Import all schemas here for easy access.
"""

from app.schemas.user import UserProfile
from app.schemas.task import (
    Task,
    TaskBoard,
    TaskCreated,
    TaskCreate,
    TaskFilter,
    TaskPriority,
    TaskStats,
    TaskStatus,
    TaskStatusUpdate,
    TaskUpdate,
)

__all__ = [
    # User
    "UserProfile",
    # Task
    "Task", "TaskCreate", "TaskUpdate", "TaskStatusUpdate",
    "TaskPriority", "TaskStatus", "TaskFilter",
    # Board / dashboard
    "TaskBoard", "TaskCreated", "TaskStats",
]
