"""
SQLAlchemy declarative base.

All task board tables inherit from this Base class, so its metadata is the
single source of truth for the store client and for Alembic.
"""

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase


# Deterministic constraint names keep autogenerated migrations stable
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    The store client looks tables up by name in ``Base.metadata.tables``.
    """

    metadata = MetaData(naming_convention=NAMING_CONVENTION)
