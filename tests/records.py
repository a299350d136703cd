"""Sample record types shared by the http-payload test-suite."""

from __future__ import annotations

from dataclasses import dataclass
from types import SimpleNamespace
from typing import Any


class EmptyObject:
    """Record type with no readable field: only private attributes."""

    _class_private: Any = None

    def __init__(self) -> None:
        self._private = "hidden"
        self.__mangled = "hidden too"


class Node:
    """Typed record that can hold another instance of itself."""

    def __init__(self, value: Any, next: Node | None = None) -> None:
        self.value = value
        self.next = next


@dataclass
class Point:
    x: int
    y: int


@dataclass(frozen=True)
class FrozenPoint:
    x: int
    y: int


class Person:
    """Record exposing a read-only property over private storage."""

    def __init__(self, first: str, last: str) -> None:
        self._first = first
        self._last = last

    @property
    def full_name(self) -> str:
        return f"{self._first} {self._last}"


class Slotted:
    __slots__ = ("_hidden", "a", "b")

    def __init__(self) -> None:
        self.a = 1
        self._hidden = 2


class Settings:
    """Explicit ``FieldAccessor`` implementation."""

    def __init__(self) -> None:
        self._values: dict[str, Any] = {"debug": False, "level": "info"}
        self.writes: list[tuple[str, Any]] = []

    def field_names(self) -> list[str]:
        return list(self._values)

    def get_field(self, name: str) -> Any:
        return self._values[name]

    def set_field(self, name: str, value: Any) -> None:
        self.writes.append((name, value))
        self._values[name] = value


class Flaky:
    """Record whose property getter fails."""

    def __init__(self) -> None:
        self.ok = 1

    @property
    def broken(self) -> str:
        raise RuntimeError("backend down")


class Unlisted:
    """Record whose field listing fails."""

    def field_names(self) -> list[str]:
        raise RuntimeError("backend down")

    def get_field(self, name: str) -> Any:
        raise KeyError(name)

    def set_field(self, name: str, value: Any) -> None:
        raise KeyError(name)


def make_data() -> dict[str, Any]:
    """Fresh copy of the reference tree: a dict holding a list of one record."""
    return {
        "foo": [SimpleNamespace(bar="qux", baz=None)],
        "bar": None,
    }
