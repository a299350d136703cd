"""ObjectNormalizer: field mappings and plain-data conversion for arbitrary values.

Two conversions are offered:

- ``normalize`` is *shallow*: it returns the immediate fields of one record
  (or the items of one container) with the child values untouched.  Discovery
  relies on this so nested typed records keep their type and the cycle guard
  can see them.
- ``to_plain`` is *deep*: it rebuilds the whole tree out of ``dict``, ``list``
  and JSON scalars so that any wire encoder can handle it.  A value that
  contains itself raises ``ValueError``.

Leaf conversion used by ``to_plain``::

    Enum            -> its value (converted again)
    date / time     -> ISO 8601 string
    timedelta       -> total seconds (float)
    Decimal / UUID / PurePath / complex -> str
    bytes           -> UTF-8 text (invalid bytes replaced)
    set / frozenset -> list
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date, time, timedelta
from enum import Enum
from typing import Any

from http_payload.nodes import AttributeAccessor, NodeKind, accessor_for, classify

__all__ = ["ObjectNormalizer"]

logger = logging.getLogger(__name__)

# bool before int: isinstance(True, int) is True.
_JSON_SCALARS = (str, bool, int, float)


class ObjectNormalizer:
    """Normalizes records through their ``FieldAccessor``.

    Stateless: a single instance can be shared by any number of serializers.

    Example::

        from dataclasses import dataclass

        @dataclass
        class User:
            name: str
            tags: tuple[str, ...]

        normalizer = ObjectNormalizer()
        normalizer.normalize(User("ada", ("x",)))   # {"name": "ada", "tags": ("x",)}
        normalizer.to_plain(User("ada", ("x",)))    # {"name": "ada", "tags": ["x"]}
    """

    def supports_normalization(self, value: Any) -> bool:
        """True for containers and for records exposing a field layout."""
        kind = classify(value)
        if kind is NodeKind.ARRAY:
            return True
        if kind is NodeKind.SCALAR:
            return False
        accessor = accessor_for(value)
        return not isinstance(accessor, AttributeAccessor) or accessor.has_layout

    def normalize(self, value: Any) -> dict[str, Any]:
        """Return the immediate children of ``value`` keyed by field name or index.

        Raises:
            TypeError: If ``supports_normalization(value)`` is False.
        """
        if not self.supports_normalization(value):
            msg = f"Cannot normalize a value of type {type(value).__name__}"
            raise TypeError(msg)
        if isinstance(value, Mapping):
            return {str(key): child for key, child in value.items()}
        if classify(value) is NodeKind.ARRAY:
            return {str(index): child for index, child in enumerate(value)}

        accessor = accessor_for(value)
        try:
            names = list(accessor.field_names())
        except Exception:
            logger.debug("Cannot list the fields of %s", type(value).__name__)
            return {}
        fields: dict[str, Any] = {}
        for name in names:
            try:
                fields[name] = accessor.get_field(name)
            except Exception:
                # Unset slot or raising getter: the field is not readable.
                logger.debug("Skipping unreadable field %r", name)
                continue
        return fields

    def to_plain(self, value: Any) -> Any:
        """Deep-convert ``value`` into dicts, lists and JSON scalars.

        Raises:
            ValueError: If ``value`` contains a circular reference.
        """
        return self._to_plain(value, set())

    def _to_plain(self, value: Any, active: set[int]) -> Any:
        if classify(value) is NodeKind.SCALAR:
            return self._plain_scalar(value, active)

        marker = id(value)
        if marker in active:
            msg = f"A circular reference has been detected on {type(value).__name__}"
            raise ValueError(msg)
        active.add(marker)
        try:
            if isinstance(value, Mapping):
                return {
                    self._plain_key(key): self._to_plain(child, active)
                    for key, child in value.items()
                }
            if classify(value) is NodeKind.ARRAY:
                return [self._to_plain(child, active) for child in value]
            if not self.supports_normalization(value):
                return {}
            return {
                name: self._to_plain(child, active)
                for name, child in self.normalize(value).items()
            }
        finally:
            active.discard(marker)

    def _plain_scalar(self, value: Any, active: set[int]) -> Any:
        # Enum first: StrEnum and IntEnum members are also str / int.
        if isinstance(value, Enum):
            return self._to_plain(value.value, active)
        if value is None or type(value) in _JSON_SCALARS:
            return value
        for base in _JSON_SCALARS:
            if isinstance(value, base):
                return base(value)
        if isinstance(value, (date, time)):
            return value.isoformat()
        if isinstance(value, timedelta):
            return value.total_seconds()
        if isinstance(value, (bytes, bytearray)):
            return bytes(value).decode("utf-8", errors="replace")
        if isinstance(value, (set, frozenset)):
            return [self._to_plain(item, active) for item in value]
        return str(value)

    @staticmethod
    def _plain_key(key: Any) -> str | int:
        if isinstance(key, Enum):
            key = key.value
        if isinstance(key, int) and not isinstance(key, bool):
            return key
        return str(key)
