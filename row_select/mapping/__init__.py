"""Mapping layer - turn cursor rows into record instances."""

from __future__ import annotations

from row_select.mapping.plan import BoundPlan, FieldSpec, RecordPlan, build_column_map
from row_select.mapping.protocol import ColumnAssignable

__all__ = [
    "RecordPlan",
    "BoundPlan",
    "FieldSpec",
    "build_column_map",
    "ColumnAssignable",
]
