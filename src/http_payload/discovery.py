"""DiscoveryEngine: recursive flattening of a tree into path -> value pairs.

Discovery walks a tree depth-first, children in iteration order, and returns
an insertion-ordered ``dict`` keyed by path string:

- children of an ARRAY node get an INDEX segment (``[key]``);
- children of a RECORD node get a PROPERTY segment (``.name``);
- with ``recursive=True`` aggregates are descended into and only leaves are
  emitted; with ``recursive=False`` the immediate children are emitted as-is.

Typed records (anything but a ``SimpleNamespace`` literal) are normalized
into a field mapping through the ``NormalizationAdapter``.  Their type is
added to the context's exclusion set for the rest of the branch, so a
record whose field holds another instance of the same type contributes no
fields for that inner occurrence.  The exclusion set is a ``frozenset``
extended by copy, never mutated.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from http_payload.nodes import NodeKind, classify, is_plain_record, record_type
from http_payload.paths import PropertyPath, SegmentKind
from http_payload.protocols import NormalizationAdapter
from http_payload.resolver import PathResolver

__all__ = ["DiscoveryContext", "DiscoveryEngine"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DiscoveryContext:
    """Immutable state threaded through one discovery call chain.

    Attributes:
        prefix: Path of the node being discovered, relative to the discovery root.
        recursive: Descend into aggregate children instead of emitting them.
        exclusions: Record types already entered on the current branch.
    """

    prefix: PropertyPath = field(default_factory=PropertyPath.root)
    recursive: bool = True
    exclusions: frozenset[type] = frozenset()

    def at(self, prefix: PropertyPath) -> DiscoveryContext:
        return replace(self, prefix=prefix)

    def excluding(self, rtype: type) -> DiscoveryContext:
        return replace(self, exclusions=self.exclusions | {rtype})


class DiscoveryEngine:
    """Flattens trees into ordered path -> value mappings.

    Args:
        adapter: Normalizes typed records into field mappings.
        resolver: Decides which enumerated children are addressable.
            Defaults to a fresh ``PathResolver``.

    Example::

        from types import SimpleNamespace
        from http_payload.serializer import DEFAULT_SERIALIZER

        engine = DiscoveryEngine(DEFAULT_SERIALIZER)
        engine.discover({"foo": [SimpleNamespace(bar="qux")], "bar": None})
        # {"[foo][0].bar": "qux", "[bar]": None}
    """

    def __init__(
        self,
        adapter: NormalizationAdapter,
        resolver: PathResolver | None = None,
    ) -> None:
        self._adapter = adapter
        self._resolver = resolver if resolver is not None else PathResolver()

    def discover(
        self, value: Any, context: DiscoveryContext | None = None
    ) -> dict[str, Any]:
        """Return the ordered path -> value mapping of ``value``.

        Never raises for lack of data: ``None``, leaves and records without
        readable fields all yield an empty dict.
        """
        if context is None:
            context = DiscoveryContext()
        if value is None:
            return {}

        children = self._enumerate(value)
        if children is None:
            return {}

        kind = classify(value)
        if kind is NodeKind.RECORD and not is_plain_record(value):
            rtype = record_type(value)
            if rtype in context.exclusions:
                logger.debug(
                    "Skipping %s at %r: type already entered on this branch",
                    rtype.__qualname__,
                    str(context.prefix),
                )
                return {}
            context = context.excluding(rtype)

        segment_kind = (
            SegmentKind.INDEX if kind is NodeKind.ARRAY else SegmentKind.PROPERTY
        )
        result: dict[str, Any] = {}
        for key, child in children:
            child_path = context.prefix.child(segment_kind, key)
            segment = child_path.last
            if not (
                segment.addressable
                and self._resolver.can_read_segment(value, segment)
            ):
                continue
            if context.recursive and classify(child) is not NodeKind.SCALAR:
                result.update(self.discover(child, context.at(child_path)))
            else:
                result[str(child_path)] = child
        return result

    def _enumerate(self, value: Any) -> Iterable[tuple[Any, Any]] | None:
        """(key, child) pairs of ``value`` in iteration order, or None."""
        kind = classify(value)
        if kind is NodeKind.ARRAY:
            return value.items() if isinstance(value, Mapping) else enumerate(value)
        if is_plain_record(value):
            return vars(value).items()

        if self._adapter.supports_normalization(value):
            fields = self._adapter.normalize(value)
        else:
            # Coerced to a one-field record; the readability check drops it
            # unless the value really exposes that field.
            fields = {"scalar": value}
        if not isinstance(fields, Mapping):
            return None
        return fields.items()
