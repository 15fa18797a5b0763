"""Attribute discovery and value conversion for record types.

Supports Pydantic models, dataclasses, and plain classes. Every supported
type must be constructible without arguments; attributes are populated
by assignment after construction.
"""

from __future__ import annotations

import dataclasses
import types
import typing
from collections.abc import Callable
from typing import Any, ClassVar, Union

from pydantic import TypeAdapter
from pydantic.errors import PydanticSchemaGenerationError

from row_select.core.exceptions import PlanCompilationError

Converter = Callable[[Any], Any]


def _is_pydantic_model(cls: type) -> bool:
    """Check if a class is a Pydantic BaseModel."""
    from pydantic import BaseModel

    return isinstance(cls, type) and issubclass(cls, BaseModel)


def _is_public(name: str) -> bool:
    return not name.startswith("_")


def _class_hints(cls: type) -> dict[str, Any]:
    """Resolved class annotations, or Any wherever resolution fails."""
    try:
        return typing.get_type_hints(cls)
    except (NameError, TypeError):
        hints: dict[str, Any] = {}
        for klass in reversed(cls.__mro__):
            for name in getattr(klass, "__annotations__", {}):
                hints[name] = Any
        return hints


def _is_class_var(hint: Any) -> bool:
    return hint is ClassVar or typing.get_origin(hint) is ClassVar


def _is_plain_value(attr: Any) -> bool:
    """True for data values; False for methods, nested classes and descriptors."""
    return not callable(attr) and not hasattr(type(attr), "__get__")


def _property_hint(prop: property) -> Any:
    try:
        return typing.get_type_hints(prop.fget).get("return", Any)
    except (NameError, TypeError):
        return Any


def construct(cls: type) -> Any:
    """Create an instance with the zero-argument constructor.

    Raises:
        PlanCompilationError: If the type cannot be built without arguments.
    """
    try:
        return cls()
    except Exception as e:
        raise PlanCompilationError(
            cls.__name__, f"a zero-argument constructor is required ({e})"
        ) from e


def discover_fields(cls: type) -> dict[str, Any]:
    """Return ``{attribute_name: annotation}`` for every public writable attribute.

    Detection order:
    1. Pydantic BaseModel -> model_fields
    2. dataclass -> dataclasses.fields
    3. Plain class -> annotations, unannotated class attributes holding
       plain values, settable properties, and the instance attributes set
       by ``cls()``
    """
    probe = construct(cls)

    if _is_pydantic_model(cls):
        return {
            name: info.annotation
            for name, info in cls.model_fields.items()  # type: ignore[attr-defined]
            if _is_public(name)
        }

    hints = _class_hints(cls)

    if dataclasses.is_dataclass(cls):
        return {
            f.name: hints.get(f.name, Any) for f in dataclasses.fields(cls) if _is_public(f.name)
        }

    class_vars = {name for name, hint in hints.items() if _is_class_var(hint)}
    found: dict[str, Any] = {
        name: hint
        for name, hint in hints.items()
        if _is_public(name) and name not in class_vars
    }
    for klass in reversed(cls.__mro__):
        for name, attr in vars(klass).items():
            if not _is_public(name) or name in class_vars:
                continue
            if isinstance(attr, property):
                if attr.fset is None:
                    found.pop(name, None)
                else:
                    found[name] = _property_hint(attr)
            elif name not in found and _is_plain_value(attr):
                # Unannotated default: its type stands in for the annotation
                found[name] = Any if attr is None else type(attr)
    for name in getattr(probe, "__dict__", {}):
        if _is_public(name) and name not in found:
            found[name] = Any
    return found


def unwrap_optional(annotation: Any) -> Any:
    """Strip ``None`` from ``Optional[X]`` / ``X | None``."""
    origin = typing.get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        members = tuple(arg for arg in typing.get_args(annotation) if arg is not type(None))
        if len(members) == 1:
            return members[0]
        return Union[members]  # noqa: UP007
    return annotation


def _identity(value: Any) -> Any:
    return value


def _constructor_converter(target: type) -> Converter:
    def convert(value: Any) -> Any:
        if isinstance(value, target):
            return value
        return target(value)

    return convert


def _to_str(value: Any) -> str:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode()
    return str(value)


def make_converter(annotation: Any) -> Converter:
    """Build a converter from a raw column value to *annotation*.

    Pydantic lax-mode validation does the conversion, so ``"42"`` becomes
    ``42`` for an ``int`` attribute and ``"abc"`` is rejected. A ``str``
    attribute accepts any scalar through ``str()``, so numeric and
    timestamp columns still map onto text fields.
    """
    target = unwrap_optional(annotation)
    if target is Any or target is object:
        return _identity
    if target is str:
        return _to_str
    try:
        return TypeAdapter(target).validate_python
    except PydanticSchemaGenerationError:
        if isinstance(target, type):
            return _constructor_converter(target)
        return _identity
