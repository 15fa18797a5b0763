"""Query result envelope.

A query either succeeds with ``Ok`` or fails with ``Err``. Both expose
the same three read-only views (``succeeded``, ``error_message``,
``records``) and unpack as a 3-tuple, so callers can write::

    succeeded, error, users = await select(dsn, sql, User)
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar, Union

from row_select.core.enums import ErrorKind

T = TypeVar("T")


@dataclass(frozen=True)
class ConversionSkipped:
    """A column value that could not be converted to its attribute's type.

    The attribute is left at its default and the row is still returned.
    """

    row_index: int
    attribute: str
    column: str
    value_type: str
    error: str


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful query: the mapped records, in cursor order."""

    records: list[T] = field(default_factory=list)
    skipped: list[ConversionSkipped] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return True

    @property
    def error_message(self) -> None:
        return None

    def __iter__(self) -> Iterator[Any]:
        return iter((True, None, self.records))


@dataclass(frozen=True)
class Err:
    """Failed query. Never carries records."""

    kind: ErrorKind
    message: str
    code: Any = None

    @property
    def succeeded(self) -> bool:
        return False

    @property
    def error_message(self) -> str:
        return self.message

    @property
    def records(self) -> list[Any]:
        return []

    def __iter__(self) -> Iterator[Any]:
        return iter((False, self.message, []))


QueryResult = Union[Ok[T], Err]
