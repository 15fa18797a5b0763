"""Connection configuration and scoped resources.

ConnectionConfig is a Pydantic model parsed from an opaque connection
string. ``open_connection`` and ``open_cursor`` wrap the adapter protocol in
async context managers so that the connection and the cursor are released
on every exit path.
"""

from __future__ import annotations

import asyncio
import importlib
import logging
import re
from contextlib import asynccontextmanager
from typing import Any
from urllib.parse import parse_qsl, unquote, urlsplit

from pydantic import BaseModel, ValidationError, field_validator

from row_select.core.cancellation import run_cancellable
from row_select.core.exceptions import AdapterError, ConfigurationError

LOG = logging.getLogger(__name__)

_DRIVER_ALIASES = {
    "postgres": "postgresql",
    "pgsql": "postgresql",
    "mariadb": "mysql",
    "sqlite3": "sqlite",
}

# A URL-form string starts with its scheme
_URL_SCHEME = re.compile(r"^\s*[A-Za-z][\w+.-]*://")

# ADO.NET style key synonyms -> ConnectionConfig field
_KEYWORD_FIELDS = {
    "driver": "driver",
    "server": "host",
    "host": "host",
    "data source": "host",
    "datasource": "host",
    "port": "port",
    "database": "database",
    "initial catalog": "database",
    "db": "database",
    "user": "user",
    "uid": "user",
    "user id": "user",
    "userid": "user",
    "username": "user",
    "password": "password",
    "pwd": "password",
    "connection timeout": "connect_timeout",
    "connect timeout": "connect_timeout",
    "connect_timeout": "connect_timeout",
}


def canonical_driver(name: str) -> str:
    """Lower-case a driver name, drop any ``+dialect`` suffix and resolve aliases."""
    driver = name.strip().lower().split("+", 1)[0]
    return _DRIVER_ALIASES.get(driver, driver)


class ConnectionConfig(BaseModel):
    """Configuration for a single database connection."""

    driver: str
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    connect_timeout: int | None = None
    extra: dict[str, Any] = {}

    @field_validator("driver")
    @classmethod
    def _normalize_driver(cls, value: str) -> str:
        return canonical_driver(value)

    @classmethod
    def from_dsn(cls, dsn: str) -> ConnectionConfig:
        """Parse a URL or ``key=value;`` connection string.

        Raises:
            ConfigurationError: If the string is empty or malformed.
        """
        if not dsn or not dsn.strip():
            raise ConfigurationError("connection string is empty")
        try:
            if _URL_SCHEME.match(dsn):
                return cls._from_url(dsn.strip())
            return cls._from_keywords(dsn)
        except ValidationError as e:
            raise ConfigurationError(str(e)) from e

    @classmethod
    def _from_url(cls, dsn: str) -> ConnectionConfig:
        parts = urlsplit(dsn)
        if not parts.scheme:
            raise ConfigurationError("missing driver scheme")
        query = dict(parse_qsl(parts.query))
        connect_timeout = query.pop("connect_timeout", None)

        path = unquote(parts.path)
        if canonical_driver(parts.scheme) == "sqlite":
            database = path[1:] if path.startswith("/") else path
            return cls(
                driver=parts.scheme,
                database=database or ":memory:",
                connect_timeout=connect_timeout,
                extra=query,
            )

        try:
            port = parts.port
        except ValueError as e:
            raise ConfigurationError(str(e)) from e
        return cls(
            driver=parts.scheme,
            host=parts.hostname,
            port=port,
            user=unquote(parts.username) if parts.username else None,
            password=unquote(parts.password) if parts.password else None,
            database=path.lstrip("/") or None,
            connect_timeout=connect_timeout,
            extra=query,
        )

    @classmethod
    def _from_keywords(cls, dsn: str) -> ConnectionConfig:
        values: dict[str, Any] = {"driver": "mysql"}
        extra: dict[str, str] = {}
        for segment in dsn.split(";"):
            if not segment.strip():
                continue
            key, sep, value = segment.partition("=")
            if not sep:
                raise ConfigurationError(f"expected key=value, got '{segment.strip()}'")
            key = " ".join(key.lower().split())
            field = _KEYWORD_FIELDS.get(key)
            if field is None:
                extra[key] = value.strip()
            else:
                values[field] = value.strip()
        if canonical_driver(values["driver"]) == "sqlite" and not values.get("database"):
            values["database"] = ":memory:"
        return cls(**values, extra=extra)


# Adapter module mapping: driver name -> (module_path, class_name)
_ADAPTER_MAP: dict[str, tuple[str, str]] = {
    "sqlite": ("row_select.adapters.sqlite", "SqliteAsyncAdapter"),
    "postgresql": ("row_select.adapters.postgresql", "PostgresqlAsyncAdapter"),
    "mysql": ("row_select.adapters.mysql", "MysqlAsyncAdapter"),
    "oracle": ("row_select.adapters.oracle", "OracleAsyncAdapter"),
}


def load_adapter(driver: str) -> Any:
    """Load an async adapter by driver name."""
    if driver not in _ADAPTER_MAP:
        raise AdapterError(f"Unsupported database driver: {driver}")

    module_path, cls_name = _ADAPTER_MAP[driver]
    try:
        module = importlib.import_module(module_path)
        return getattr(module, cls_name)()
    except (ImportError, AttributeError) as e:
        raise AdapterError(f"Failed to load adapter for '{driver}': {e}") from e


@asynccontextmanager
async def open_connection(
    adapter: Any,
    config: ConnectionConfig,
    cancel: asyncio.Event | None = None,
):  # type: ignore[no-untyped-def]
    """Open a connection, racing the open against *cancel*."""
    connection = await run_cancellable(adapter.connect(config), cancel)
    LOG.debug("Opened %s connection to %s", config.driver, config.host or config.database)
    try:
        yield connection
    finally:
        await adapter.close(connection)


@asynccontextmanager
async def open_cursor(
    adapter: Any,
    connection: Any,
    sql: str,
    params: dict[str, Any],
    timeout_seconds: float,
    cancel: asyncio.Event | None = None,
):  # type: ignore[no-untyped-def]
    """Execute *sql* and yield the resulting forward-only cursor."""
    cursor = await run_cancellable(
        adapter.execute(connection, sql, params, timeout_seconds), cancel
    )
    try:
        yield cursor
    finally:
        await adapter.close_cursor(cursor)
