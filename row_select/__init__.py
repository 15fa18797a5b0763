"""RowSelect - async SELECT-and-map helper for SQL databases."""

from __future__ import annotations

from row_select.core.connection import ConnectionConfig
from row_select.core.engine import DEFAULT_TIMEOUT_SECONDS, select
from row_select.core.enums import DatabaseBackend, ErrorKind
from row_select.core.exceptions import (
    AdapterError,
    ConfigurationError,
    DatabaseError,
    DuplicateColumnError,
    ExecutionError,
    MappingError,
    ParameterBindingError,
    PlanCompilationError,
    QueryCanceledError,
    RowSelectError,
)
from row_select.core.result import ConversionSkipped, Err, Ok, QueryResult
from row_select.mapping.plan import RecordPlan
from row_select.mapping.protocol import ColumnAssignable

__all__ = [
    # Engine
    "select",
    "DEFAULT_TIMEOUT_SECONDS",
    # Connection
    "ConnectionConfig",
    # Results
    "Ok",
    "Err",
    "QueryResult",
    "ConversionSkipped",
    # Mapping
    "RecordPlan",
    "ColumnAssignable",
    # Enums
    "DatabaseBackend",
    "ErrorKind",
    # Exceptions
    "RowSelectError",
    "ConfigurationError",
    "ExecutionError",
    "ParameterBindingError",
    "QueryCanceledError",
    "DatabaseError",
    "MappingError",
    "PlanCompilationError",
    "DuplicateColumnError",
    "AdapterError",
]
