"""Backend and error-kind enumerations."""

from __future__ import annotations

from enum import Enum


class DatabaseBackend(Enum):
    """Supported database backends."""

    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"
    MYSQL = "mysql"
    ORACLE = "oracle"

    @property
    def label(self) -> str:
        """Name used as the prefix of driver error messages."""
        return _LABELS[self]


_LABELS = {
    DatabaseBackend.SQLITE: "SQLite",
    DatabaseBackend.POSTGRESQL: "PostgreSQL",
    DatabaseBackend.MYSQL: "MySQL",
    DatabaseBackend.ORACLE: "Oracle",
}


class ErrorKind(Enum):
    """Failure categories reported in an ``Err`` result."""

    CANCELED = "canceled"
    DATABASE_ERROR = "database_error"
    UNEXPECTED_ERROR = "unexpected_error"
