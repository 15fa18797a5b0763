"""RowSelect exception hierarchy.

These exceptions are raised internally and translated into a result
envelope by ``select()``. Raw driver exceptions are wrapped by the
adapters before they reach the engine.
"""

from __future__ import annotations

from typing import Any


class RowSelectError(Exception):
    """Base exception for all RowSelect errors."""


# --- Configuration ---


class ConfigurationError(RowSelectError):
    """Raised when a connection string cannot be parsed."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"Invalid connection string: {detail}")


# --- Execution ---


class ExecutionError(RowSelectError):
    """Base for query execution errors."""


class ParameterBindingError(ExecutionError):
    """Raised when a parameter name cannot be bound as a placeholder."""

    def __init__(self, name: str, detail: str) -> None:
        self.name = name
        super().__init__(f"Cannot bind parameter '{name}': {detail}")


class QueryCanceledError(ExecutionError):
    """Raised when the cancellation signal is observed at a checkpoint."""

    def __init__(self) -> None:
        super().__init__("Query was canceled.")


class DatabaseError(ExecutionError):
    """A driver- or server-reported error, carrying the driver's code."""

    def __init__(self, backend: str, code: Any, detail: str) -> None:
        self.backend = backend
        self.code = code
        self.detail = detail
        if code is None:
            super().__init__(f"{backend} Error: {detail}")
        else:
            super().__init__(f"{backend} Error {code}: {detail}")


# --- Mapping ---


class MappingError(RowSelectError):
    """Base for mapping errors."""


class PlanCompilationError(MappingError):
    """Raised when a record type cannot be turned into a mapping plan."""

    def __init__(self, target_class: str, detail: str) -> None:
        self.target_class = target_class
        super().__init__(f"Cannot map rows to {target_class}: {detail}")


class DuplicateColumnError(MappingError):
    """Raised when two result columns differ only by case."""

    def __init__(self, column: str) -> None:
        self.column = column
        super().__init__(f"Duplicate column name in result set: '{column}'")


# --- Adapter ---


class AdapterError(RowSelectError):
    """Raised when a database adapter cannot be loaded."""
