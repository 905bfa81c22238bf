"""Task store client: table-scoped query builders over SQLAlchemy Core.

Usage::

    client = StoreClient(session_maker)
    rows = await client.table("tasks").select().execute()
    user = await client.table("users").select("id, name, image").eq("id", uid).single()
    created = await client.table("tasks").insert([row]).select().execute()
    await client.table("tasks").update({"status": "Done"}).eq("id", tid).execute()
    await client.table("tasks").delete().eq("id", tid).execute()

Each ``execute`` runs one statement in its own transaction. Rows come back
as plain dicts keyed by column name.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from sqlalchemy import Column, Table, delete, func, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

import app.models  # noqa: F401  registers the task board tables
from app.db.base import Base
from app.errors import StoreError

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


class StoreClient:
    """Generic accessor for the task store tables."""

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        tables: Optional[Mapping[str, Table]] = None,
    ) -> None:
        self._session_maker = session_maker
        self._tables: Dict[str, Table] = dict(Base.metadata.tables if tables is None else tables)

    def table(self, name: str) -> "TableQuery":
        table = self._tables.get(name)
        if table is None:
            raise StoreError(f"unknown table {name!r}")
        return TableQuery(self, table)

    async def run(self, statement, table: Table, fetch: bool) -> List[Row]:
        """Execute ``statement`` in a fresh transaction, wrapping driver errors."""
        try:
            async with self._session_maker() as session:
                async with session.begin():
                    result = await session.execute(statement)
                    rows = [dict(row) for row in result.mappings().all()] if fetch else []
        except SQLAlchemyError as exc:
            logger.warning("Store statement on %s failed: %s", table.name, exc)
            raise StoreError(str(getattr(exc, "orig", None) or exc), table.name) from exc
        except (OSError, asyncio.TimeoutError) as exc:
            # Refused or dropped connections surface from the driver unwrapped
            logger.warning("Store connection for %s failed: %r", table.name, exc)
            raise StoreError(str(exc) or exc.__class__.__name__, table.name) from exc
        logger.debug("Store statement on %s returned %d row(s)", table.name, len(rows))
        return rows


class TableQuery:
    """Entry point for one table: pick the kind of statement to build."""

    def __init__(self, client: StoreClient, table: Table) -> None:
        self.client = client
        self.table = table

    def column(self, name: str) -> Column:
        try:
            return self.table.c[name]
        except KeyError:
            raise StoreError(f"unknown column {name!r}", self.table.name) from None

    def select(self, *columns: str) -> "SelectQuery":
        names = [part.strip() for entry in columns for part in entry.split(",") if part.strip()]
        return SelectQuery(self, [self.column(name) for name in names])

    def insert(self, rows: Sequence[Mapping[str, Any]]) -> "InsertQuery":
        return InsertQuery(self, rows)

    def update(self, values: Mapping[str, Any]) -> "UpdateQuery":
        return UpdateQuery(self, values)

    def delete(self) -> "DeleteQuery":
        return DeleteQuery(self)

    async def count(self) -> int:
        """Number of rows in the table."""
        stmt = select(func.count().label("rows")).select_from(self.table)
        rows = await self.client.run(stmt, self.table, fetch=True)
        return int(rows[0]["rows"])


class FilteredQuery:
    """Shared equality / membership filters."""

    def __init__(self, query: TableQuery) -> None:
        self.query = query
        self._criteria: list = []

    def eq(self, column: str, value: Any):
        self._criteria.append(self.query.column(column) == value)
        return self

    def in_(self, column: str, values: Iterable[Any]):
        self._criteria.append(self.query.column(column).in_(list(values)))
        return self

    def _require_filter(self, verb: str) -> None:
        # A bare update/delete would touch every row
        if not self._criteria:
            raise StoreError(f"refusing to {verb} without a filter", self.query.table.name)


class SelectQuery(FilteredQuery):
    def __init__(self, query: TableQuery, columns: List[Column]) -> None:
        super().__init__(query)
        self._columns = columns

    def _statement(self):
        stmt = select(*self._columns) if self._columns else select(self.query.table)
        if self._criteria:
            stmt = stmt.where(*self._criteria)
        return stmt

    async def execute(self) -> List[Row]:
        return await self.query.client.run(self._statement(), self.query.table, fetch=True)

    async def single(self) -> Row:
        """Return exactly one row; zero or several rows is a StoreError."""
        rows = await self.execute()
        if len(rows) != 1:
            raise StoreError(f"expected a single row, got {len(rows)}", self.query.table.name)
        return rows[0]


class InsertQuery:
    def __init__(self, query: TableQuery, rows: Sequence[Mapping[str, Any]]) -> None:
        self.query = query
        self._rows = [dict(row) for row in rows]
        self._returning = False
        for row in self._rows:
            for name in row:
                query.column(name)

    def select(self) -> "InsertQuery":
        """Return the inserted rows from ``execute``."""
        self._returning = True
        return self

    async def execute(self) -> List[Row]:
        if not self._rows:
            return []
        table = self.query.table
        stmt = insert(table).values(self._rows)
        if self._returning:
            stmt = stmt.returning(*table.c)
        return await self.query.client.run(stmt, table, fetch=self._returning)


class UpdateQuery(FilteredQuery):
    def __init__(self, query: TableQuery, values: Mapping[str, Any]) -> None:
        super().__init__(query)
        self._values = {query.column(name).name: value for name, value in values.items()}

    async def execute(self) -> None:
        self._require_filter("update")
        table = self.query.table
        stmt = update(table).where(*self._criteria).values(self._values)
        await self.query.client.run(stmt, table, fetch=False)


class DeleteQuery(FilteredQuery):
    async def execute(self) -> None:
        self._require_filter("delete")
        table = self.query.table
        await self.query.client.run(delete(table).where(*self._criteria), table, fetch=False)
