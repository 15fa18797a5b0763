"""SQLite adapter using aiosqlite."""

from __future__ import annotations

import asyncio
import sqlite3
from typing import Any

import aiosqlite

from row_select.core.cancellation import run_with_timeout
from row_select.core.connection import ConnectionConfig
from row_select.core.enums import DatabaseBackend
from row_select.core.exceptions import DatabaseError

# Generic SQLITE_ERROR, reported when the exception carries no code
_SQLITE_ERROR = 1


class SqliteAsyncAdapter:
    """Asynchronous SQLite adapter using aiosqlite."""

    backend = DatabaseBackend.SQLITE

    @property
    def paramstyle(self) -> str:
        return "named"

    async def connect(self, config: ConnectionConfig) -> aiosqlite.Connection:
        """Open a connection to the configured database file."""
        if config.connect_timeout is not None:
            return await aiosqlite.connect(config.database, timeout=config.connect_timeout)
        return await aiosqlite.connect(config.database)

    async def close(self, connection: aiosqlite.Connection) -> None:
        await connection.close()

    async def execute(
        self,
        connection: aiosqlite.Connection,
        sql: str,
        params: dict[str, Any],
        timeout_seconds: float,
    ) -> aiosqlite.Cursor:
        """Execute SQL; sqlite3 has no command timeout, so it is enforced here."""
        cursor = await connection.cursor()
        try:
            await run_with_timeout(cursor.execute(sql, params), timeout_seconds)
        except (TimeoutError, asyncio.CancelledError):
            # The statement is still running on aiosqlite's worker thread
            cursor.connection.interrupt()
            await cursor.close()
            raise
        except BaseException:
            await cursor.close()
            raise
        return cursor

    async def fetch_row(self, cursor: aiosqlite.Cursor, timeout_seconds: float) -> Any:
        try:
            return await run_with_timeout(cursor.fetchone(), timeout_seconds)
        except (TimeoutError, asyncio.CancelledError):
            cursor.connection.interrupt()
            raise

    async def close_cursor(self, cursor: aiosqlite.Cursor) -> None:
        await cursor.close()

    def database_error(self, exc: BaseException) -> DatabaseError | None:
        if not isinstance(exc, sqlite3.Error):
            return None
        code = getattr(exc, "sqlite_errorcode", None)
        return DatabaseError(
            self.backend.label,
            _SQLITE_ERROR if code is None else code,
            str(exc),
        )
