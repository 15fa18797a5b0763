"""Column assignment protocol.

Record types may take over population themselves by implementing
``assign_column``. The plan then hands every non-NULL column to the
record instead of matching columns to attributes.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ColumnAssignable(Protocol):
    """A record that populates itself from result columns."""

    def assign_column(self, name: str, value: Any) -> None:
        """Store *value* read from column *name*."""
        ...
