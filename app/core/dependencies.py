"""
FastAPI dependencies for the application.
"""

from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.errors import AppError
from app.repositories.task_repository import TaskRepository
from app.services.task_service import TaskService
from app.store.client import StoreClient


def get_store_client(request: Request) -> StoreClient:
    """
    Return the process-wide store client built in the app lifespan.

    Tests override this dependency with a fake client.
    """
    client = getattr(request.app.state, "store", None)
    if client is None:
        raise AppError(503, "store_unavailable", "Task store is not initialised")
    return client


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Yield a database session from the lifespan session maker."""
    session_maker = getattr(request.app.state, "session_maker", None)
    if session_maker is None:
        raise AppError(503, "store_unavailable", "Task store is not initialised")
    async with session_maker() as session:
        yield session


def get_task_repository(client: StoreClient = Depends(get_store_client)) -> TaskRepository:
    return TaskRepository(client)


def get_task_service(repository: TaskRepository = Depends(get_task_repository)) -> TaskService:
    return TaskService(repository)


async def get_current_user_id(request: Request) -> str:
    """
    Extract the signed-in user's id from the session header.

    Raises 401 if the header is missing or blank.
    """
    user_id = (request.headers.get(settings.USER_HEADER) or "").strip()
    if not user_id:
        raise AppError(
            401,
            "not_authenticated",
            f"{settings.USER_HEADER} header is required",
        )
    return user_id
