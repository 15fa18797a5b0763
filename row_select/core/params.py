"""SQL parameter normalization and binding.

Queries use ``:name`` placeholders, or ``@name`` for names that are bound.
They are rewritten to the driver's paramstyle and the values are always
passed separately to the driver.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from functools import lru_cache
from typing import Any

from row_select.core.exceptions import ParameterBindingError

# Matches :name but not ::typecast and not inside words
_PARAM_PATTERN = re.compile(r"(?<![:\w]):([a-zA-Z_]\w*)")

# Matches @name but not @@system_variable
_AT_PARAM_PATTERN = re.compile(r"(?<![@\w])@([a-zA-Z_]\w*)")

# Matches single-quoted string literals (with escaped quotes handled)
_STRING_LITERAL_PATTERN = re.compile(r"'(?:[^'\\]|\\.|'')*'")

_IDENTIFIER = re.compile(r"^[a-zA-Z_]\w*$")


def normalize_params(sql: str, paramstyle: str, bound_names: Iterable[str] = ()) -> str:
    """Convert placeholders to the target param style.

    Args:
        sql: SQL string with :name parameters.
        paramstyle: Target style - 'named' (no conversion) or 'pyformat' (%(name)s).
        bound_names: Names being bound. ``@name`` placeholders are rewritten
            only for these, so MySQL user variables such as ``@rownum`` and
            ``@@sql_mode`` keep their meaning.

    Returns:
        SQL with parameters converted to the target style.
    """
    names = frozenset(bound_names)
    if paramstyle == "named" and not names:
        return sql
    return _convert(sql, paramstyle, names)


@lru_cache(maxsize=256)
def _convert(sql: str, paramstyle: str, names: frozenset[str]) -> str:
    """Rewrite placeholders outside string literals; escape % for pyformat."""
    pyformat = paramstyle == "pyformat"

    def at_to_colon(match: re.Match[str]) -> str:
        return f":{match.group(1)}" if match.group(1) in names else match.group()

    def rewrite(segment: str) -> str:
        if names:
            segment = _AT_PARAM_PATTERN.sub(at_to_colon, segment)
        if pyformat:
            segment = _PARAM_PATTERN.sub(r"%(\1)s", segment.replace("%", "%%"))
        return segment

    parts: list[str] = []
    last_end = 0

    for match in _STRING_LITERAL_PATTERN.finditer(sql):
        start, end = match.span()
        if start > last_end:
            parts.append(rewrite(sql[last_end:start]))
        # Literals keep their text, but pyformat drivers still scan them for %
        literal = match.group()
        parts.append(literal.replace("%", "%%") if pyformat else literal)
        last_end = end

    if last_end < len(sql):
        parts.append(rewrite(sql[last_end:]))

    return "".join(parts)


def bind_parameters(parameters: Mapping[str, Any] | None) -> dict[str, Any]:
    """Return a driver-ready parameter dict.

    A leading ``@`` or ``:`` is stripped from each name so that ``{"@id": 5}``
    binds to ``:id``. ``None`` values are kept as-is and bound as SQL NULL.

    Raises:
        ParameterBindingError: If a name is not a valid placeholder identifier.
    """
    if not parameters:
        return {}

    bound: dict[str, Any] = {}
    for raw_name, value in parameters.items():
        name = str(raw_name).lstrip("@:")
        if not _IDENTIFIER.match(name):
            raise ParameterBindingError(str(raw_name), "not a valid placeholder name")
        if name in bound:
            raise ParameterBindingError(str(raw_name), "bound more than once")
        bound[name] = value
    return bound
