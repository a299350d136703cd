"""Property paths: parsing and formatting of ``[key]`` / ``.name`` addresses.

A path is a sequence of segments.  An ``INDEX`` segment is written ``[key]``
and addresses a child of a subscriptable container (mapping, list, tuple).
A ``PROPERTY`` segment is written ``.name`` (bare ``name`` when it is the
first segment) and addresses a field of a record.

Examples::

    parse_path("foo[0].bar")      # PROPERTY foo, INDEX 0, PROPERTY bar
    parse_path("[foo][0].bar")    # INDEX foo, INDEX 0, PROPERTY bar
    str(PropertyPath.root().child(SegmentKind.INDEX, "x"))   # "[x]"

The two segment kinds are never interchangeable: ``foo`` does not address
the ``"foo"`` key of a dict and ``[foo]`` does not address a ``foo``
attribute.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from enum import StrEnum, auto
from typing import Any

from http_payload.exceptions import InvalidPath

__all__ = ["PropertyPath", "Segment", "SegmentKind", "format_path", "parse_path"]

# First element: bare name or [key].  Following elements: .name or [key].
_FIRST = re.compile(r"([^.\[\]]+)|\[([^\]]+)\]")
_NEXT = re.compile(r"\.([^.\[\]]+)|\[([^\]]+)\]")


class SegmentKind(StrEnum):
    """Which container syntax a segment uses."""

    INDEX = auto()
    PROPERTY = auto()


@dataclass(frozen=True, slots=True)
class Segment:
    """One step of a path: a subscript key or a field name."""

    kind: SegmentKind
    key: str

    @property
    def addressable(self) -> bool:
        """True when the rendered segment parses back to itself."""
        if not self.key:
            return False
        if self.kind is SegmentKind.INDEX:
            return "]" not in self.key
        return not any(ch in self.key for ch in ".[]")

    def render(self, first: bool = False) -> str:
        if self.kind is SegmentKind.INDEX:
            return f"[{self.key}]"
        return self.key if first else f".{self.key}"


@dataclass(frozen=True, slots=True)
class PropertyPath:
    """Immutable sequence of segments with a canonical string form."""

    segments: tuple[Segment, ...] = ()

    @classmethod
    def root(cls) -> PropertyPath:
        return cls()

    def child(self, kind: SegmentKind, key: Any) -> PropertyPath:
        """Return a new path extended by one segment."""
        return PropertyPath((*self.segments, Segment(kind, str(key))))

    @property
    def last(self) -> Segment:
        return self.segments[-1]

    @property
    def parent(self) -> PropertyPath:
        return PropertyPath(self.segments[:-1])

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self) -> Iterator[Segment]:
        return iter(self.segments)

    def __str__(self) -> str:
        return format_path(self.segments)


def format_path(segments: tuple[Segment, ...] | list[Segment]) -> str:
    """Concatenate segments into their textual form."""
    return "".join(seg.render(first=i == 0) for i, seg in enumerate(segments))


def parse_path(text: str) -> PropertyPath:
    """Parse a path string into a ``PropertyPath``.

    Args:
        text: Path such as ``"foo[0].bar"`` or ``"[foo][0]"``.

    Returns:
        The parsed path.  Round-trips through ``str()`` for every valid input.

    Raises:
        InvalidPath: If ``text`` is empty or does not follow the grammar.
    """
    if not isinstance(text, str) or not text:
        raise InvalidPath(str(text), "the path is empty")

    segments: list[Segment] = []
    position = 0
    pattern = _FIRST
    while position < len(text):
        match = pattern.match(text, position)
        if match is None:
            msg = f"unexpected character at offset {position}"
            raise InvalidPath(text, msg)
        name, key = match.group(1), match.group(2)
        if name is not None:
            segments.append(Segment(SegmentKind.PROPERTY, name))
        else:
            segments.append(Segment(SegmentKind.INDEX, key))
        position = match.end()
        pattern = _NEXT

    return PropertyPath(tuple(segments))
