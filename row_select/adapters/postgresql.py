"""PostgreSQL adapter using psycopg (v3+) async support."""

from __future__ import annotations

from typing import Any

import psycopg
from psycopg.conninfo import make_conninfo

from row_select.core.connection import ConnectionConfig
from row_select.core.enums import DatabaseBackend
from row_select.core.exceptions import DatabaseError


def _build_conninfo(config: ConnectionConfig) -> str:
    """Build a libpq connection string from config fields."""
    fields: dict[str, Any] = {
        "host": config.host,
        "port": config.port,
        "user": config.user,
        "password": config.password,
        "dbname": config.database,
        "connect_timeout": config.connect_timeout,
    }
    fields.update(config.extra)
    return make_conninfo(
        **{key: value for key, value in fields.items() if value is not None}
    )


class PostgresqlAsyncAdapter:
    """Asynchronous PostgreSQL adapter using psycopg."""

    backend = DatabaseBackend.POSTGRESQL

    @property
    def paramstyle(self) -> str:
        return "pyformat"

    async def connect(self, config: ConnectionConfig) -> psycopg.AsyncConnection[Any]:
        return await psycopg.AsyncConnection.connect(_build_conninfo(config), autocommit=True)

    async def close(self, connection: psycopg.AsyncConnection[Any]) -> None:
        await connection.close()

    async def execute(
        self,
        connection: psycopg.AsyncConnection[Any],
        sql: str,
        params: dict[str, Any],
        timeout_seconds: float,
    ) -> psycopg.AsyncCursor[Any]:
        """Apply ``statement_timeout`` for this session, then execute."""
        cursor = connection.cursor()
        try:
            await cursor.execute(
                "SELECT set_config('statement_timeout', %s, false)",
                (str(max(int(timeout_seconds * 1000), 0)),),
            )
            await cursor.execute(sql, params)
        except BaseException:
            await cursor.close()
            raise
        return cursor

    async def fetch_row(self, cursor: psycopg.AsyncCursor[Any], timeout_seconds: float) -> Any:
        # statement_timeout set in execute bounds the server side
        return await cursor.fetchone()

    async def close_cursor(self, cursor: psycopg.AsyncCursor[Any]) -> None:
        await cursor.close()

    def database_error(self, exc: BaseException) -> DatabaseError | None:
        if not isinstance(exc, psycopg.Error):
            return None
        detail = exc.diag.message_primary or str(exc)
        return DatabaseError(self.backend.label, exc.sqlstate, detail)
