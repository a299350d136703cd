"""Node classification and record field access.

``classify`` is the single place where a native Python value is mapped to a
``NodeKind``:

- SCALAR -> a leaf: ``None``, strings, numbers, booleans, dates, enums, ...
- ARRAY  -> a subscript-addressed container: any mapping, list or tuple.
  Children are addressed with ``[key]``.
- RECORD -> any other object.  Children are fields addressed with ``.name``.

Records are read and written through a ``FieldAccessor``.  Values that do
not implement the protocol themselves are wrapped once by ``accessor_for``
in an ``AttributeAccessor`` that exposes their public attributes.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterator, Mapping, Sequence
from datetime import date, time, timedelta
from decimal import Decimal
from enum import Enum, StrEnum, auto
from pathlib import PurePath
from types import (
    BuiltinFunctionType,
    FunctionType,
    MethodType,
    ModuleType,
    SimpleNamespace,
)
from typing import Any
from uuid import UUID

from http_payload.protocols import FieldAccessor

__all__ = [
    "AttributeAccessor",
    "NodeKind",
    "accessor_for",
    "classify",
    "is_plain_record",
    "record_type",
]

# Leaf types.  datetime is covered by date.
_SCALAR_TYPES: tuple[type, ...] = (
    str,
    bytes,
    bytearray,
    int,
    float,
    complex,
    Decimal,
    date,
    time,
    timedelta,
    UUID,
    Enum,
    PurePath,
    set,
    frozenset,
)

# Callables and namespaces are opaque leaves, never records.
_OPAQUE_TYPES: tuple[type, ...] = (
    type,
    FunctionType,
    BuiltinFunctionType,
    MethodType,
    ModuleType,
)


class NodeKind(StrEnum):
    """The three kinds of tree values."""

    SCALAR = auto()
    ARRAY = auto()
    RECORD = auto()


def classify(value: Any) -> NodeKind:
    """Return the ``NodeKind`` of a native value."""
    if value is None or isinstance(value, _SCALAR_TYPES + _OPAQUE_TYPES):
        return NodeKind.SCALAR
    if isinstance(value, (Mapping, Sequence)):
        return NodeKind.ARRAY
    return NodeKind.RECORD


def is_plain_record(value: Any) -> bool:
    """True for record literals (``SimpleNamespace``), which accept any field."""
    return isinstance(value, SimpleNamespace)


def record_type(value: Any) -> type:
    """Type identifier of a typed record, as stored in exclusion sets."""
    return type(value)


def _is_public(name: str) -> bool:
    return bool(name) and not name.startswith("_")


def _slots_of(klass: type) -> tuple[str, ...]:
    slots = vars(klass).get("__slots__", ())
    if isinstance(slots, str):
        return (slots,)
    return tuple(slots)


def _class_attribute(klass: type, name: str) -> Any:
    for base in klass.__mro__:
        if name in vars(base):
            return vars(base)[name]
    return None


class AttributeAccessor:
    """``FieldAccessor`` over the public attributes of an arbitrary object.

    Field order: dataclass fields (or the instance ``__dict__``), then set
    ``__slots__`` entries, then public properties of the class hierarchy.
    Names starting with an underscore are never fields.
    """

    __slots__ = ("_target",)

    def __init__(self, target: Any) -> None:
        self._target = target

    @property
    def target(self) -> Any:
        return self._target

    @property
    def has_layout(self) -> bool:
        """True when the object exposes any attribute storage at all."""
        klass = type(self._target)
        if hasattr(self._target, "__dict__"):
            return True
        return any(
            _slots_of(base)
            or any(isinstance(attr, property) for attr in vars(base).values())
            for base in klass.__mro__
        )

    def _iter_names(self) -> Iterator[str]:
        target = self._target
        klass = type(target)
        if dataclasses.is_dataclass(target):
            yield from (f.name for f in dataclasses.fields(target))
        yield from getattr(target, "__dict__", {})
        for base in klass.__mro__:
            for slot in _slots_of(base):
                if hasattr(target, slot):
                    yield slot
        for base in klass.__mro__:
            for name, attr in vars(base).items():
                if isinstance(attr, property):
                    yield name

    def field_names(self) -> list[str]:
        return [name for name in dict.fromkeys(self._iter_names()) if _is_public(name)]

    def get_field(self, name: str) -> Any:
        if not _is_public(name):
            raise AttributeError(name)
        return getattr(self._target, name)

    def set_field(self, name: str, value: Any) -> None:
        setattr(self._target, name, value)

    def can_write(self, name: str) -> bool:
        """Structural write check: the field exists and has no read-only descriptor."""
        if not _is_public(name):
            return False
        if is_plain_record(self._target):
            return True
        if name not in self.field_names():
            return False
        descriptor = _class_attribute(type(self._target), name)
        return not (isinstance(descriptor, property) and descriptor.fset is None)


def accessor_for(value: Any) -> FieldAccessor:
    """Return the ``FieldAccessor`` used to read and write a record."""
    if isinstance(value, FieldAccessor):
        return value
    return AttributeAccessor(value)
