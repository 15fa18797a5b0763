"""Oracle adapter using oracledb async support."""

from __future__ import annotations

from typing import Any

import oracledb

from row_select.core.connection import ConnectionConfig
from row_select.core.enums import DatabaseBackend
from row_select.core.exceptions import DatabaseError

_DEFAULT_PORT = 1521


def _build_dsn(config: ConnectionConfig) -> str:
    """Build an Oracle easy-connect DSN (host:port/service)."""
    return f"{config.host or 'localhost'}:{config.port or _DEFAULT_PORT}/{config.database}"


class OracleAsyncAdapter:
    """Asynchronous Oracle adapter using oracledb."""

    backend = DatabaseBackend.ORACLE

    @property
    def paramstyle(self) -> str:
        return "named"

    async def connect(self, config: ConnectionConfig) -> Any:
        kwargs: dict[str, Any] = {}
        if config.connect_timeout is not None:
            kwargs["tcp_connect_timeout"] = config.connect_timeout
        return await oracledb.connect_async(
            user=config.user, password=config.password, dsn=_build_dsn(config), **kwargs
        )

    async def close(self, connection: Any) -> None:
        await connection.close()

    async def execute(
        self,
        connection: Any,
        sql: str,
        params: dict[str, Any],
        timeout_seconds: float,
    ) -> Any:
        """Execute SQL with ``call_timeout`` bounding each round trip."""
        connection.call_timeout = max(int(timeout_seconds * 1000), 0)
        cursor = connection.cursor()
        try:
            await cursor.execute(sql, params)
        except BaseException:
            cursor.close()
            raise
        return cursor

    async def fetch_row(self, cursor: Any, timeout_seconds: float) -> Any:
        # call_timeout set in execute bounds every round trip
        return await cursor.fetchone()

    async def close_cursor(self, cursor: Any) -> None:
        cursor.close()

    def database_error(self, exc: BaseException) -> DatabaseError | None:
        if not isinstance(exc, oracledb.Error):
            return None
        error = exc.args[0] if exc.args else None
        if error is None or not hasattr(error, "message"):
            return DatabaseError(self.backend.label, None, str(exc))
        code = getattr(error, "full_code", None) or error.code
        # oracledb messages already start with "ORA-NNNNN: "
        detail = str(error.message).removeprefix(f"{code}: ")
        return DatabaseError(self.backend.label, code, detail)
