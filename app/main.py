"""
Main FastAPI application.

This is the entry point for the API server.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.core.config import settings
from app.db.session import create_engine_from_settings, create_session_maker
from app.errors import AppError, StoreError, app_error_handler, store_error_handler
from app.routers import dashboard, health, tags, task, users
from app.store.client import StoreClient

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for the FastAPI app.

    - On startup: build the engine, session maker and the store client.
    - On shutdown: dispose of the engine's connection pool.
    """
    logger.info("Starting %s...", settings.APP_NAME)
    engine = create_engine_from_settings(settings)
    app.state.session_maker = create_session_maker(engine)
    app.state.store = StoreClient(app.state.session_maker)

    yield  # The server runs while we're "yielded" here

    logger.info("Shutting down %s...", settings.APP_NAME)
    await engine.dispose()


def create_app() -> FastAPI:
    """Build the application with routers and error handlers attached."""
    app = FastAPI(
        title=settings.APP_NAME,
        description="Multi-user task board API",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StoreError, store_error_handler)

    # Include routers (API endpoints)
    app.include_router(health.router, tags=["Health"])
    app.include_router(task.router)
    app.include_router(users.router)
    app.include_router(tags.router)
    app.include_router(dashboard.router)

    return app


# Create the FastAPI application
app = create_app()


# Root endpoint
@app.get("/")
async def root():
    """
    Root endpoint - redirects to the task board.
    """
    from fastapi.responses import RedirectResponse
    return RedirectResponse(url="/tasks/board", status_code=303)
