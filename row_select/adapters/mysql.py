"""MySQL adapter using aiomysql.

Rows are read through an unbuffered ``SSCursor`` so the result set is
streamed from the server one row per fetch.
"""

from __future__ import annotations

import asyncio
from typing import Any

import aiomysql
import pymysql

from row_select.core.cancellation import run_with_timeout
from row_select.core.connection import ConnectionConfig
from row_select.core.enums import DatabaseBackend
from row_select.core.exceptions import DatabaseError

_DEFAULT_PORT = 3306


def _abandon(cursor: Any) -> None:
    # Closing an SSCursor drains the rest of the result set, so a stalled
    # stream is cut by dropping the socket instead
    if cursor.connection is not None:
        cursor.connection.close()


class MysqlAsyncAdapter:
    """Asynchronous MySQL adapter using aiomysql."""

    backend = DatabaseBackend.MYSQL

    @property
    def paramstyle(self) -> str:
        return "pyformat"

    async def connect(self, config: ConnectionConfig) -> Any:
        kwargs: dict[str, Any] = {
            "host": config.host or "localhost",
            "port": config.port or _DEFAULT_PORT,
            "user": config.user,
            "password": config.password or "",
            "db": config.database,
        }
        if config.connect_timeout is not None:
            kwargs["connect_timeout"] = config.connect_timeout
        if "charset" in config.extra:
            kwargs["charset"] = config.extra["charset"]
        return await aiomysql.connect(**kwargs)

    async def close(self, connection: Any) -> None:
        connection.close()

    async def execute(
        self,
        connection: Any,
        sql: str,
        params: dict[str, Any],
        timeout_seconds: float,
    ) -> Any:
        """Execute SQL and return an unbuffered cursor."""
        cursor = await connection.cursor(aiomysql.SSCursor)
        try:
            await run_with_timeout(cursor.execute(sql, params), timeout_seconds)
        except (TimeoutError, asyncio.CancelledError):
            _abandon(cursor)
            raise
        except BaseException:
            await self.close_cursor(cursor)
            raise
        return cursor

    async def fetch_row(self, cursor: Any, timeout_seconds: float) -> Any:
        """Fetch one row; the unbuffered read waits on the server here."""
        try:
            return await run_with_timeout(cursor.fetchone(), timeout_seconds)
        except (TimeoutError, asyncio.CancelledError):
            _abandon(cursor)
            raise

    async def close_cursor(self, cursor: Any) -> None:
        connection = cursor.connection
        if connection is None or connection.closed:
            return
        await cursor.close()

    def database_error(self, exc: BaseException) -> DatabaseError | None:
        if not isinstance(exc, pymysql.err.MySQLError):
            return None
        # pymysql errors carry (errno, message)
        if len(exc.args) >= 2 and isinstance(exc.args[0], int):
            return DatabaseError(self.backend.label, exc.args[0], str(exc.args[1]))
        return DatabaseError(self.backend.label, None, str(exc))
