"""Record mapping plans.

A ``RecordPlan`` describes, once per record type, which attributes can be
populated and how raw column values are converted for each of them.
Binding a plan to a result set's column names produces a ``BoundPlan``
that maps cursor rows without any further introspection.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Generic, TypeVar

from row_select.core.exceptions import DuplicateColumnError
from row_select.core.result import ConversionSkipped
from row_select.mapping.fields import (
    Converter,
    construct,
    discover_fields,
    make_converter,
)
from row_select.mapping.protocol import ColumnAssignable

LOG = logging.getLogger(__name__)

T = TypeVar("T")


def build_column_map(columns: Sequence[str]) -> dict[str, int]:
    """Map each case-folded column name to its ordinal.

    Raises:
        DuplicateColumnError: If two columns differ only by case.
    """
    column_map: dict[str, int] = {}
    for ordinal, name in enumerate(columns):
        key = name.casefold()
        if key in column_map:
            raise DuplicateColumnError(name)
        column_map[key] = ordinal
    return column_map


@dataclass(frozen=True)
class FieldSpec:
    """One populatable attribute of a record type."""

    name: str
    annotation: Any
    convert: Converter


@dataclass(frozen=True)
class ColumnBinding:
    """A field paired with the result column that feeds it."""

    ordinal: int
    column: str
    spec: FieldSpec


@dataclass(frozen=True)
class RecordPlan(Generic[T]):
    """Compiled mapping plan for one record type."""

    target_class: type[T]
    fields: tuple[FieldSpec, ...]
    self_assigning: bool = False

    @classmethod
    def for_type(cls, target_class: type[T]) -> RecordPlan[T]:
        """Return the cached plan for *target_class*, compiling it on first use.

        Raises:
            PlanCompilationError: If the type has no zero-argument constructor.
        """
        return _compile(target_class)

    def bind(self, column_map: dict[str, int], columns: Sequence[str]) -> BoundPlan[T]:
        """Pair fields with result columns, case-insensitively.

        Fields without a matching column are left out; columns without a
        matching field are ignored.
        """
        if self.self_assigning:
            return BoundPlan(self.target_class, (), tuple(enumerate(columns)))

        bindings = []
        for spec in self.fields:
            ordinal = column_map.get(spec.name.casefold())
            if ordinal is not None:
                bindings.append(ColumnBinding(ordinal, columns[ordinal], spec))
        return BoundPlan(self.target_class, tuple(bindings))


@lru_cache(maxsize=128)
def _compile(target_class: type) -> RecordPlan[Any]:
    if issubclass(target_class, ColumnAssignable):
        construct(target_class)
        return RecordPlan(target_class, (), self_assigning=True)

    specs = tuple(
        FieldSpec(name, annotation, make_converter(annotation))
        for name, annotation in discover_fields(target_class).items()
    )
    LOG.debug("Compiled plan for %s: %s", target_class.__name__, [s.name for s in specs])
    return RecordPlan(target_class, specs)


@dataclass(frozen=True)
class BoundPlan(Generic[T]):
    """A plan bound to the columns of one result set."""

    target_class: type[T]
    bindings: tuple[ColumnBinding, ...]
    raw_columns: tuple[tuple[int, str], ...] = ()

    def map_row(self, row: Sequence[Any], row_index: int) -> tuple[T, list[ConversionSkipped]]:
        """Build one record from *row*.

        NULL values leave the attribute at its default. A value that cannot
        be converted is logged and reported, and the rest of the row is
        still mapped.
        """
        record = self.target_class()
        skipped: list[ConversionSkipped] = []

        if self.raw_columns:
            for ordinal, column in self.raw_columns:
                value = row[ordinal]
                if value is None:
                    continue
                try:
                    record.assign_column(column, value)  # type: ignore[attr-defined]
                except Exception as e:
                    skipped.append(self._skip(row_index, column, column, value, e))
            return record, skipped

        for binding in self.bindings:
            value = row[binding.ordinal]
            if value is None:
                continue
            try:
                setattr(record, binding.spec.name, binding.spec.convert(value))
            except Exception as e:
                skipped.append(self._skip(row_index, binding.spec.name, binding.column, value, e))
        return record, skipped

    def _skip(
        self,
        row_index: int,
        attribute: str,
        column: str,
        value: Any,
        error: Exception,
    ) -> ConversionSkipped:
        LOG.warning(
            "Could not convert column '%s' to %s.%s (row %d): %s",
            column,
            self.target_class.__name__,
            attribute,
            row_index,
            error,
        )
        return ConversionSkipped(
            row_index=row_index,
            attribute=attribute,
            column=column,
            value_type=type(value).__name__,
            error=str(error),
        )
