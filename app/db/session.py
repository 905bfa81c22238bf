"""
Database engine and session-maker configuration.

This file sets up the async database connection using SQLAlchemy.
Nothing is created at import time: the application lifespan builds the
engine once per process and hands the session maker to the store client.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.core.config import Settings, settings as default_settings


def create_engine_from_settings(settings: Optional[Settings] = None, **kwargs) -> AsyncEngine:
    """
    Create the async database engine.

    Extra keyword arguments are passed through to ``create_async_engine``
    (tests use this to install a StaticPool for in-memory SQLite).
    """
    settings = settings or default_settings
    return create_async_engine(
        settings.DATABASE_URL,
        echo=settings.DEBUG,  # When DEBUG=True, prints SQL queries to console
        future=True,
        **kwargs,
    )


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory bound to ``engine``."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,  # Keeps data accessible after commit
    )
