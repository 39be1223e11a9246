"""
Database manager.

PostgreSQL (asyncpg) in production, SQLite (aiosqlite) for tests and local runs.
Evaluations run through ``transaction()``, which uses the configured isolation
level (SERIALIZABLE by default).
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from sqlalchemy import event
from sqlalchemy.engine import Result
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.sql.elements import ClauseElement, TextClause

from betleague.config import Settings

logger = logging.getLogger(__name__)


def _set_sqlite_pragma(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA journal_mode=WAL")
    finally:
        cursor.close()


class DBM:
    def __init__(self, settings: Settings | None = None, *, url: str | None = None):
        self.settings = settings or Settings()
        db_cfg = self.settings.database
        if url is None:
            url = db_cfg.url
        if not url:
            raise ValueError(
                "database url is not configured; set BETLEAGUE_DATABASE__URL "
                "or BETLEAGUE_DATABASE__USER/NAME"
            )
        self.url = url

        engine_kwargs: dict[str, Any] = {"echo": db_cfg.echo, "future": True}
        if url.startswith("postgresql"):
            engine_kwargs["pool_size"] = db_cfg.pool_size
            engine_kwargs["pool_pre_ping"] = True

        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine.sync_engine, "connect", _set_sqlite_pragma)

        self.session_maker: async_sessionmaker[AsyncSession] = async_sessionmaker(
            bind=self.engine,
            expire_on_commit=False,
            autoflush=False,
        )
        self.isolation_level = db_cfg.isolation_level
        self.isolated_session_maker: async_sessionmaker[AsyncSession] = async_sessionmaker(
            bind=self.engine.execution_options(isolation_level=self.isolation_level),
            expire_on_commit=False,
            autoflush=False,
        )

    @property
    def dialect(self) -> str:
        return self.engine.dialect.name

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        async with self.session_maker() as session:
            yield session

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """Open a session at the configured isolation level inside one transaction.

        Commits when the block exits normally; any exception rolls everything back.
        """
        async with self.isolated_session_maker() as session:
            async with session.begin():
                yield session

    async def read(self, query: Any, params: dict | None = None) -> list[Any]:
        """Execute a read-only statement and return all rows."""
        if isinstance(query, str):
            raise TypeError("Raw SQL strings are disallowed. Use sqlalchemy.text().")
        if not isinstance(query, (TextClause, ClauseElement)):
            raise TypeError("Query must be a SQLAlchemy TextClause or ClauseElement.")

        async with self.session() as session:
            result: Result = await session.execute(query, params or {})
            return result.mappings().all()

    async def write(self, query: Any, params: dict | None = None) -> int:
        """Execute a write statement inside a transaction and return row count."""
        if isinstance(query, str):
            raise TypeError("Raw SQL strings are disallowed. Use sqlalchemy.text().")
        if not isinstance(query, (TextClause, ClauseElement)):
            raise TypeError("Query must be a SQLAlchemy TextClause or ClauseElement.")
        if not params:
            raise ValueError("Parameterized writes are required. Provide a params mapping.")

        async with self.session() as session:
            async with session.begin():
                result: Result = await session.execute(query, params)
                return result.rowcount or 0

    async def dispose(self) -> None:
        await self.engine.dispose()


__all__ = ["DBM"]
