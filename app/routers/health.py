"""Health check: task store tables and migration state."""

import logging
from pathlib import Path
from typing import Dict, Optional

from alembic.config import Config
from alembic.script import ScriptDirectory
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_db, get_store_client
from app.errors import StoreError
from app.repositories.task_repository import TAGS_TABLE, TASKS_TABLE, USERS_TABLE
from app.store.client import StoreClient

logger = logging.getLogger(__name__)

router = APIRouter()

ALEMBIC_INI = Path(__file__).resolve().parents[2] / "alembic.ini"
STORE_TABLES = (TASKS_TABLE, USERS_TABLE, TAGS_TABLE)


def migration_head() -> Optional[str]:
    """Newest revision shipped in alembic/versions, or None outside a checkout."""
    if not ALEMBIC_INI.exists():
        return None
    config = Config(str(ALEMBIC_INI))
    config.set_main_option("script_location", str(ALEMBIC_INI.parent / "alembic"))
    return ScriptDirectory.from_config(config).get_current_head()


async def applied_revision(db: AsyncSession) -> Optional[str]:
    try:
        result = await db.execute(text("SELECT version_num FROM alembic_version"))
    except SQLAlchemyError as exc:
        logger.info("No applied migration revision: %s", exc)
        return None
    return result.scalar_one_or_none()


async def table_row_counts(client: StoreClient) -> Dict[str, Optional[int]]:
    """Row count per task board table; None where the table can't be read."""
    counts: Dict[str, Optional[int]] = {}
    for name in STORE_TABLES:
        try:
            counts[name] = await client.table(name).count()
        except StoreError as exc:
            logger.warning("Health check could not read %s: %s", name, exc)
            counts[name] = None
    return counts


@router.get("/health")
async def health_check(
    client: StoreClient = Depends(get_store_client),
    db: AsyncSession = Depends(get_db),
):
    counts = await table_row_counts(client)
    head = migration_head()
    current = await applied_revision(db)

    return {
        "api_ok": True,
        "store_ok": all(count is not None for count in counts.values()),
        "tables": counts,
        "migrations_ok": bool(head and current == head),
        "migration_current": current,
        "migration_head": head,
    }
