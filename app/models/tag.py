"""
Tag model.

The tag catalog is an independent list of names offered when tagging a task.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class Tag(Base):
    """Tag catalog table."""

    __tablename__ = "tags"

    name: Mapped[str] = mapped_column(
        String(100),
        primary_key=True,
    )
