"""
Models package.

Import all models here so they are registered with SQLAlchemy.
This file also makes it easy to import models from one place.
"""

from app.models.user import User
from app.models.tag import Tag
from app.models.task import Task

# Export all models
__all__ = [
    "User",
    "Tag",
    "Task",
]
