"""
User Pydantic schemas.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class UserProfile(BaseModel):
    """Public profile of a user: what the board shows for an assignee."""

    id: str
    name: str
    image: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
