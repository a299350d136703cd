"""PathResolver: structural checks, reads and in-place writes by path.

The resolver walks a tree one segment at a time:

- an INDEX segment (``[key]``) requires an ARRAY node.  Mappings are looked
  up by the string key, then by its integer value (negative values too);
  lists and tuples require a non-negative decimal index.
- a PROPERTY segment (``.name``) requires a RECORD node and goes through the
  node's ``FieldAccessor``.

Using a segment against the wrong kind of container makes the path
unreadable and unwritable.  ``is_readable``, ``is_writable`` and ``get``
never raise; ``set`` raises ``PathNotWritable`` before touching the tree and
``WriteFailure`` when the container rejects the value.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, MutableMapping, MutableSequence
from typing import Any

from http_payload.exceptions import InvalidPath, PathNotWritable, WriteFailure
from http_payload.nodes import AttributeAccessor, NodeKind, accessor_for, classify
from http_payload.paths import PropertyPath, Segment, SegmentKind, parse_path

__all__ = ["MISSING", "PathResolver"]

_DECIMAL = re.compile(r"\d+")
# Mapping keys may be negative integers; list indexes may not.
_INTEGER = re.compile(r"-?\d+")

# Exceptions a container may raise while a single segment is read or written.
_ACCESS_ERRORS = (AttributeError, LookupError, TypeError, ValueError)


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "<MISSING>"


MISSING: Any = _Missing()


def _as_index(key: str) -> int | None:
    return int(key) if _DECIMAL.fullmatch(key) else None


def _mapping_key(container: Mapping[Any, Any], key: str) -> Any:
    """Actual key of ``container`` addressed by ``key``, or MISSING."""
    if key in container:
        return key
    if _INTEGER.fullmatch(key) and int(key) in container:
        return int(key)
    return MISSING


class PathResolver:
    """Resolves ``PropertyPath`` strings against a tree root.

    Stateless: one instance can serve any number of roots.

    Example::

        resolver = PathResolver()
        data = {"foo": [{"bar": "qux"}]}
        resolver.get(data, "[foo][0][bar]")        # "qux"
        resolver.is_readable(data, "foo")          # False - foo is a key, not a field
        resolver.set(data, "[foo][1]", {"bar": 1}) # appends to the list in place
    """

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def is_readable(self, root: Any, path: str | PropertyPath) -> bool:
        parsed = self._parse(path)
        return parsed is not None and self._walk(root, parsed) is not MISSING

    def is_writable(self, root: Any, path: str | PropertyPath) -> bool:
        parsed = self._parse(path)
        if parsed is None:
            return False
        container = self._walk(root, parsed.parent)
        return container is not MISSING and self.can_write_segment(
            container, parsed.last
        )

    def get(self, root: Any, path: str | PropertyPath, default: Any = None) -> Any:
        """Return the value at ``path``, or ``default`` when it is not readable."""
        parsed = self._parse(path)
        if parsed is None:
            return default
        value = self._walk(root, parsed)
        return default if value is MISSING else value

    def set(self, root: Any, path: str | PropertyPath, value: Any) -> None:
        """Write ``value`` at ``path``, mutating the owning container in place.

        Raises:
            PathNotWritable: If ``is_writable(root, path)`` is False.
            WriteFailure: If the container raised while assigning the value.
        """
        if not self.is_writable(root, path):
            raise PathNotWritable(str(path))
        parsed = self._parse(path)
        assert parsed is not None  # guaranteed by is_writable
        container = self._walk(root, parsed.parent)
        try:
            self._write_segment(container, parsed.last, value)
        except _ACCESS_ERRORS as exc:
            raise WriteFailure(str(path), str(exc) or type(exc).__name__) from exc

    # ------------------------------------------------------------------
    # Single-segment primitives
    # ------------------------------------------------------------------

    def read_segment(self, container: Any, segment: Segment) -> Any:
        """Value of one child of ``container``, or ``MISSING``."""
        kind = classify(container)
        if segment.kind is SegmentKind.INDEX:
            if kind is not NodeKind.ARRAY:
                return MISSING
            if isinstance(container, Mapping):
                key = _mapping_key(container, segment.key)
                return MISSING if key is MISSING else container[key]
            index = _as_index(segment.key)
            if index is None or index >= len(container):
                return MISSING
            return container[index]

        if kind is not NodeKind.RECORD:
            return MISSING
        accessor = accessor_for(container)
        try:
            if segment.key not in accessor.field_names():
                return MISSING
            return accessor.get_field(segment.key)
        except Exception:
            # A field whose getter raises is not readable.
            return MISSING

    def can_read_segment(self, container: Any, segment: Segment) -> bool:
        return self.read_segment(container, segment) is not MISSING

    def can_write_segment(self, container: Any, segment: Segment) -> bool:
        kind = classify(container)
        if segment.kind is SegmentKind.INDEX:
            if kind is not NodeKind.ARRAY:
                return False
            if isinstance(container, MutableMapping):
                return True
            if isinstance(container, MutableSequence):
                index = _as_index(segment.key)
                return index is not None and index <= len(container)
            return False

        if kind is not NodeKind.RECORD:
            return False
        accessor = accessor_for(container)
        if isinstance(accessor, AttributeAccessor):
            return accessor.can_write(segment.key)
        try:
            return segment.key in accessor.field_names()
        except Exception:
            return False

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _parse(path: str | PropertyPath) -> PropertyPath | None:
        if isinstance(path, PropertyPath):
            return path if len(path) else None
        try:
            return parse_path(path)
        except InvalidPath:
            return None

    def _walk(self, root: Any, path: PropertyPath) -> Any:
        node = root
        for segment in path:
            node = self.read_segment(node, segment)
            if node is MISSING:
                return MISSING
        return node

    def _write_segment(self, container: Any, segment: Segment, value: Any) -> None:
        if segment.kind is SegmentKind.PROPERTY:
            accessor_for(container).set_field(segment.key, value)
            return
        if isinstance(container, MutableMapping):
            key = _mapping_key(container, segment.key)
            container[segment.key if key is MISSING else key] = value
            return
        index = int(segment.key)
        if index == len(container):
            container.append(value)
        else:
            container[index] = value
