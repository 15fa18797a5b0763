"""Database adapter protocol.

Every adapter module MUST implement this protocol. The engine only talks to
drivers through it, so adding a backend means adding one adapter class and
one entry in the connection module's adapter map.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from row_select.core.connection import ConnectionConfig
from row_select.core.enums import DatabaseBackend
from row_select.core.exceptions import DatabaseError


@runtime_checkable
class AsyncAdapter(Protocol):
    """Asynchronous database adapter protocol."""

    backend: DatabaseBackend

    @property
    def paramstyle(self) -> str:
        """Parameter binding style: 'named' (:name) or 'pyformat' (%(name)s)."""
        ...

    async def connect(self, config: ConnectionConfig) -> Any:
        """Open a new connection."""
        ...

    async def close(self, connection: Any) -> None:
        """Close a connection opened by ``connect``."""
        ...

    async def execute(
        self,
        connection: Any,
        sql: str,
        params: dict[str, Any],
        timeout_seconds: float,
    ) -> Any:
        """Execute SQL with a per-command timeout and return a forward-only cursor.

        The cursor must yield plain sequences (tuple rows), ordered like
        ``cursor.description``.
        """
        ...

    async def fetch_row(self, cursor: Any, timeout_seconds: float) -> Any:
        """Fetch the next row, or ``None`` once the cursor is exhausted.

        ``timeout_seconds`` bounds each fetch the way it bounds ``execute``.
        """
        ...

    async def close_cursor(self, cursor: Any) -> None:
        """Release a cursor returned by ``execute``."""
        ...

    def database_error(self, exc: BaseException) -> DatabaseError | None:
        """Translate a driver-reported error, or return None for anything else."""
        ...
