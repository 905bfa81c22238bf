"""
Pytest configuration and shared fixtures.
"""

import asyncio
import os
from datetime import timedelta

import pytest
from sqlalchemy.pool import StaticPool

from app.core.config import Settings
from app.db.base import Base
from app.db.session import create_engine_from_settings, create_session_maker
from app.store.client import StoreClient
from app.utils.time import utc_now
from tests.fakes import FakeStoreClient

SQLITE_URL = "sqlite+aiosqlite:///:memory:"

TEST_USER_ID = "user-1"
OTHER_USER_ID = "user-2"


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests, no external deps")
    config.addinivalue_line("markers", "db: requires database")
    config.addinivalue_line("markers", "server: requires running HTTP server")


def pytest_collection_modifyitems(config, items):
    run_db = os.environ.get("RUN_DB_TESTS") == "1"
    run_server = os.environ.get("RUN_SERVER_TESTS") == "1"

    skip_db = pytest.mark.skip(reason="db tests skipped by default; set RUN_DB_TESTS=1 to enable")
    skip_server = pytest.mark.skip(reason="server tests skipped by default; set RUN_SERVER_TESTS=1 to enable")

    for item in items:
        if "db" in item.keywords and not run_db:
            item.add_marker(skip_db)
        if "server" in item.keywords and not run_server:
            item.add_marker(skip_server)


def run_with_sqlite_store(scenario):
    """
    Run ``scenario(client)`` against a fresh in-memory SQLite store.

    Engine creation, the scenario and disposal all happen inside one event
    loop so aiosqlite connections never cross loops.
    """
    async def main():
        engine = create_engine_from_settings(
            Settings(DATABASE_URL=SQLITE_URL, DEBUG=False),
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        try:
            return await scenario(StoreClient(create_session_maker(engine)))
        finally:
            await engine.dispose()

    return asyncio.run(main())


@pytest.fixture
def now():
    return utc_now()


@pytest.fixture
def store():
    """Fake store seeded with two users, a tag catalog and three tasks."""
    now = utc_now()
    return FakeStoreClient(
        {
            "users": [
                {"id": TEST_USER_ID, "name": "Ada", "image": None, "email": "ada@example.com"},
                {"id": OTHER_USER_ID, "name": "Grace", "image": "grace.png", "email": "grace@example.com"},
            ],
            "tags": [{"name": "backend"}, {"name": "ui"}],
            "tasks": [
                {
                    "id": "1",
                    "title": "Fix login",
                    "description": "",
                    "priority": "High",
                    "status": "Todo",
                    "deadline": (now - timedelta(days=1)).isoformat(),
                    "assigned_to": TEST_USER_ID,
                    "tags": ["backend"],
                    "created_at": (now - timedelta(days=3)).isoformat(),
                },
                {
                    "id": "2",
                    "title": "Ship release",
                    "description": "Tag and publish",
                    "priority": "High",
                    "status": "Done",
                    "deadline": (now - timedelta(days=1)).isoformat(),
                    "assigned_to": OTHER_USER_ID,
                    "tags": None,
                    "created_at": (now - timedelta(days=5)).isoformat(),
                },
                {
                    "id": "3",
                    "title": "Polish header",
                    "description": None,
                    "priority": "Low",
                    "status": "Todo",
                    "deadline": None,
                    "assigned_to": None,
                    "tags": ["ui"],
                    "created_at": (now - timedelta(days=2)).isoformat(),
                },
            ],
        }
    )
