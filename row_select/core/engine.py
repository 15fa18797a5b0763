"""Query execution engine.

``select`` opens a connection, executes a parameterized query, streams the
cursor row by row and maps every row onto a new record instance. It never
raises: every failure is returned as an ``Err`` result.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any, TypeVar

from row_select.core.cancellation import raise_if_canceled
from row_select.core.connection import (
    ConnectionConfig,
    load_adapter,
    open_connection,
    open_cursor,
)
from row_select.core.enums import ErrorKind
from row_select.core.exceptions import DatabaseError, QueryCanceledError
from row_select.core.params import bind_parameters, normalize_params
from row_select.core.result import ConversionSkipped, Err, Ok, QueryResult
from row_select.mapping.plan import RecordPlan, build_column_map

LOG = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TIMEOUT_SECONDS = 30


async def select(
    connection_string: str,
    query: str,
    record_type: type[T],
    parameters: Mapping[str, Any] | None = None,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    cancel: asyncio.Event | None = None,
) -> QueryResult[T]:
    """Run a SELECT and map each row onto a new *record_type* instance.

    Args:
        connection_string: URL (``mysql://user:pw@host/db``) or
            ``key=value;`` connection string.
        query: SQL text with ``:name`` or ``@name`` placeholders.
        record_type: Class with a zero-argument constructor. Columns are
            matched to its public attributes case-insensitively.
        parameters: Values bound to the placeholders. ``None`` binds SQL NULL.
        timeout_seconds: Per-command timeout. It bounds the execute and each
            row fetch separately, not the whole query.
        cancel: Cooperative cancellation signal, checked while connecting,
            while executing and before each row fetch.

    Returns:
        ``Ok`` with the records in cursor order, or ``Err`` describing the
        failure. Nothing is raised.
    """
    adapter: Any = None
    try:
        config = ConnectionConfig.from_dsn(connection_string)
        adapter = load_adapter(config.driver)
        plan = RecordPlan.for_type(record_type)
        params = bind_parameters(parameters)
        sql = normalize_params(query, adapter.paramstyle, params)

        records: list[T] = []
        skipped: list[ConversionSkipped] = []
        async with open_connection(adapter, config, cancel) as connection:
            async with open_cursor(
                adapter, connection, sql, params, timeout_seconds, cancel
            ) as cursor:
                if cursor.description is None:
                    LOG.debug("Statement returned no result set")
                    return Ok(records, skipped)

                columns = [desc[0] for desc in cursor.description]
                bound = plan.bind(build_column_map(columns), columns)

                while True:
                    raise_if_canceled(cancel)
                    row = await adapter.fetch_row(cursor, timeout_seconds)
                    if row is None:
                        break
                    record, row_skipped = bound.map_row(row, len(records))
                    records.append(record)
                    skipped.extend(row_skipped)

        LOG.debug("Mapped %d %s record(s)", len(records), record_type.__name__)
        return Ok(records, skipped)

    except QueryCanceledError as e:
        LOG.debug("Query canceled")
        return Err(ErrorKind.CANCELED, str(e))
    except Exception as e:
        db_error = _as_database_error(adapter, e)
        if db_error is not None:
            LOG.debug("Database error: %s", db_error)
            return Err(ErrorKind.DATABASE_ERROR, str(db_error), db_error.code)
        LOG.exception("Unexpected error while running query")
        return Err(ErrorKind.UNEXPECTED_ERROR, f"An unexpected error occurred: {e}")


def _as_database_error(adapter: Any, exc: Exception) -> DatabaseError | None:
    if isinstance(exc, DatabaseError):
        return exc
    if adapter is None:
        return None
    return adapter.database_error(exc)
