"""Payload: schema-less wrapper around one data tree.

A ``Payload`` owns a root value and composes the ``PathResolver`` (single
path reads and writes), the ``DiscoveryEngine`` (bulk enumeration), a
per-instance ``DiscoveryCache`` and a ``NormalizationAdapter`` (wire formats).

Admission policy: ``None`` and aggregates (mappings, lists, tuples, records)
become the root as-is, by reference.  Any other value is wrapped into a
one-field record, ``SimpleNamespace(scalar=value)``.

Path syntax depends on the root: a dict root is addressed with ``[key]``
segments, a record root with bare / ``.name`` segments::

    Payload({"foo": [1]}).get("[foo][0]")                    # 1
    Payload(SimpleNamespace(foo=[1])).get("foo[0]")          # 1
    Payload({"foo": [1]}).get("foo", "n/a")                  # "n/a"

Every successful ``set`` clears the discovery cache of the payload and of
every payload sliced from the same root before returning.
"""

from __future__ import annotations

import logging
import weakref
from collections.abc import Iterator, Mapping
from types import SimpleNamespace
from typing import Any
from urllib.parse import urlsplit

from http_payload.cache import DiscoveryCache
from http_payload.config import DiscoveryOptions, Format, QueryEncoding
from http_payload.discovery import DiscoveryContext, DiscoveryEngine
from http_payload.exceptions import (
    DecodeFailure,
    EncodeFailure,
    PathNotReadable,
    QueryBuildFailure,
    UnsupportedFormat,
    UnsupportedRootType,
)
from http_payload.nodes import NodeKind, classify
from http_payload.protocols import NormalizationAdapter
from http_payload.query import build_http_query, parse_http_query
from http_payload.resolver import MISSING, PathResolver
from http_payload.serializer import DEFAULT_SERIALIZER

__all__ = ["Payload"]

logger = logging.getLogger(__name__)

_SCALAR_FIELD = "scalar"


def _admit(data: Any) -> Any:
    if data is None or classify(data) is not NodeKind.SCALAR:
        return data
    return SimpleNamespace(**{_SCALAR_FIELD: data})


def _read_body(response: Any) -> str | bytes:
    """Body of an HTTP-client response (``requests``, ``httpx``, ``urllib``)."""
    text = getattr(response, "text", None)
    if isinstance(text, str):
        return text
    content = getattr(response, "content", None)
    if isinstance(content, (bytes, bytearray, str)):
        return content
    read = getattr(response, "read", None)
    if callable(read):
        return read()
    msg = f"Cannot read a body from {type(response).__name__}"
    raise TypeError(msg)


class Payload:
    """Read, write, enumerate and encode an arbitrary data tree by path.

    Args:
        data: Root value (see the admission policy in the module docstring).
        adapter: Normalization / wire-format adapter.  Defaults to the shared,
            never-mutated ``DEFAULT_SERIALIZER``.
        max_cache_size: Maximum number of distinct discovery requests memoized
            by this instance.  Infrastructure only: results do not depend on it.

    Example::

        payload = Payload({"foo": [SimpleNamespace(bar="qux")], "bar": None})
        payload.discover(recursive=False)
        # {"[foo]": [namespace(bar='qux')], "[bar]": None}
        payload.discover()
        # {"[foo][0].bar": "qux", "[bar]": None}
        payload.set("[bar]", 1).get("[bar]")   # 1
        payload.to_json()   # '{"foo":[{"bar":"qux"}],"bar":1}'
    """

    def __init__(
        self,
        data: Any = None,
        adapter: NormalizationAdapter | None = None,
        max_cache_size: int = 32,
    ) -> None:
        self._adapter: NormalizationAdapter = (
            adapter if adapter is not None else DEFAULT_SERIALIZER
        )
        self._resolver = PathResolver()
        self._engine = DiscoveryEngine(self._adapter, self._resolver)
        self._cache = DiscoveryCache(max_size=max_cache_size)
        self._parent: Payload | None = None
        self._slices: weakref.WeakSet[Payload] = weakref.WeakSet()
        self._data: Any = None
        self.set_data(data)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def create(
        cls, data: Any, adapter: NormalizationAdapter | None = None
    ) -> Payload:
        return cls(data, adapter=adapter)

    @classmethod
    def parse(
        cls,
        data: str | bytes,
        fmt: str,
        context: Mapping[str, Any] | None = None,
        adapter: NormalizationAdapter | None = None,
    ) -> Payload:
        """Decode ``data`` from ``fmt`` into a new payload.

        Raises:
            UnsupportedFormat: If the adapter does not know ``fmt``.
            DecodeFailure: If the adapter raised while decoding.
        """
        adapter = adapter if adapter is not None else DEFAULT_SERIALIZER
        if not adapter.supports_format(fmt):
            raise UnsupportedFormat(str(fmt))
        try:
            decoded = adapter.decode(data, fmt, context or {})
        except Exception as exc:
            raise DecodeFailure(str(fmt), str(exc) or type(exc).__name__) from exc
        return cls(decoded, adapter=adapter)

    @classmethod
    def parse_json(
        cls, data: str | bytes, context: Mapping[str, Any] | None = None
    ) -> Payload:
        return cls.parse(data, Format.JSON, context)

    @classmethod
    def parse_xml(
        cls, data: str | bytes, context: Mapping[str, Any] | None = None
    ) -> Payload:
        return cls.parse(data, Format.XML, context)

    @classmethod
    def parse_yaml(
        cls, data: str | bytes, context: Mapping[str, Any] | None = None
    ) -> Payload:
        return cls.parse(data, Format.YAML, context)

    @classmethod
    def parse_csv(
        cls, data: str | bytes, context: Mapping[str, Any] | None = None
    ) -> Payload:
        return cls.parse(data, Format.CSV, context)

    @classmethod
    def parse_response(
        cls,
        response: Any,
        fmt: str,
        context: Mapping[str, Any] | None = None,
        adapter: NormalizationAdapter | None = None,
    ) -> Payload:
        """Decode the body of an HTTP-client response object.

        The body is taken from ``response.text`` when it is a string, else from
        ``response.content``, else from ``response.read()``.
        """
        adapter = adapter if adapter is not None else DEFAULT_SERIALIZER
        if not adapter.supports_format(fmt):
            raise UnsupportedFormat(str(fmt))
        try:
            body = _read_body(response)
        except Exception as exc:
            raise DecodeFailure(str(fmt), str(exc) or type(exc).__name__) from exc
        return cls.parse(body, fmt, context, adapter=adapter)

    @classmethod
    def from_query_string(
        cls, query: str, adapter: NormalizationAdapter | None = None
    ) -> Payload:
        """Payload of the parameters of a query string (``a[b]=1&c=2``)."""
        return cls(parse_http_query(query.lstrip("?")), adapter=adapter)

    @classmethod
    def from_url(
        cls, url: str, adapter: NormalizationAdapter | None = None
    ) -> Payload:
        """Payload of the query parameters of ``url``."""
        return cls.from_query_string(urlsplit(url).query, adapter=adapter)

    # ------------------------------------------------------------------
    # Root and cache
    # ------------------------------------------------------------------

    @property
    def data(self) -> Any:
        """The root value (live reference)."""
        return self._data

    @property
    def adapter(self) -> NormalizationAdapter:
        return self._adapter

    def set_data(self, data: Any) -> Payload:
        """Replace the root, applying the admission policy, and clear the cache."""
        self._data = _admit(data)
        self._invalidate()
        return self

    def clear_cache(self) -> None:
        """Forget every memoized discovery result."""
        self._cache.clear()

    def _invalidate(self) -> None:
        """Clear the caches of the whole slice family this payload belongs to."""
        root = self
        while root._parent is not None:
            root = root._parent
        root._invalidate_down()

    def _invalidate_down(self) -> None:
        self._cache.clear()
        for sliced in list(self._slices):
            sliced._invalidate_down()

    # ------------------------------------------------------------------
    # Single path access
    # ------------------------------------------------------------------

    def is_readable(self, path: str) -> bool:
        return self._resolver.is_readable(self._data, path)

    def is_writable(self, path: str) -> bool:
        return self._resolver.is_writable(self._data, path)

    def get(self, path: str, default: Any = None) -> Any:
        """Value at ``path``, or ``default`` when the path is not readable."""
        return self._resolver.get(self._data, path, default)

    def set(self, path: str, value: Any = None) -> Payload:
        """Write ``value`` at ``path`` in place and return the payload.

        Raises:
            PathNotWritable: If the path is not writable.
            WriteFailure: If the container rejected the value.
        """
        self._resolver.set(self._data, path, value)
        logger.debug("Wrote %r, invalidating discovery cache", path)
        self._invalidate()
        return self

    def slice(self, path: str) -> Payload:
        """New payload rooted at the aggregate found at ``path``.

        The sub-tree is shared by reference.  Writes through either payload
        invalidate the discovery caches of both.

        Raises:
            PathNotReadable: If the path is not readable.
            UnsupportedRootType: If the value is a scalar other than ``None``.
        """
        value = self._resolver.get(self._data, path, MISSING)
        if value is MISSING:
            raise PathNotReadable(path)
        if value is not None and classify(value) is NodeKind.SCALAR:
            raise UnsupportedRootType(path, type(value))
        sliced = type(self)(
            value, adapter=self._adapter, max_cache_size=self._cache.max_size
        )
        sliced._parent = self
        self._slices.add(sliced)
        return sliced

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def discover(
        self, path: str | None = None, recursive: bool = True
    ) -> dict[str, Any]:
        """Ordered mapping of paths to values.

        Args:
            path: Discover only the sub-tree at this path.  Returned keys are
                relative to it.  An unreadable path yields ``{}``.
            recursive: True (default) returns leaves only; False returns the
                immediate children, aggregates included.
        """
        options = DiscoveryOptions(path=path, recursive=recursive)
        return self._cache.get_or_compute(options, lambda: self._discover(options))

    def _discover(self, options: DiscoveryOptions) -> dict[str, Any]:
        root = self._data
        if options.path is not None:
            root = self._resolver.get(self._data, options.path)
        context = DiscoveryContext(recursive=options.recursive)
        return self._engine.discover(root, context)

    def is_empty(self, strict: bool = False) -> bool:
        """True when the root is ``None``, or (non-strict) has no readable child."""
        if self._data is None:
            return True
        if strict:
            return False
        if classify(self._data) is NodeKind.ARRAY and len(self._data) == 0:
            return True
        return not self.discover(recursive=False)

    # ------------------------------------------------------------------
    # Wire formats
    # ------------------------------------------------------------------

    def encode(self, fmt: str, context: Mapping[str, Any] | None = None) -> str:
        """Encode the tree to ``fmt``.  CSV is written from flattened rows.

        Raises:
            UnsupportedFormat: If the adapter does not know ``fmt``.
            EncodeFailure: If the adapter raised while encoding.
        """
        if not self._adapter.supports_format(fmt):
            raise UnsupportedFormat(str(fmt))
        data = self._csv_rows() if fmt == Format.CSV else self._data
        try:
            return self._adapter.encode(data, fmt, context or {})
        except Exception as exc:
            raise EncodeFailure(str(fmt), str(exc) or type(exc).__name__) from exc

    def _csv_rows(self) -> list[dict[str, Any]]:
        root = self._data
        if (
            isinstance(root, (list, tuple))
            and root
            and all(classify(row) is not NodeKind.SCALAR for row in root)
        ):
            rows = [self._engine.discover(row) for row in root]
        else:
            rows = [self.discover()]
        return [
            {path: self._csv_leaf(value) for path, value in row.items()}
            for row in rows
        ]

    def _csv_leaf(self, value: Any) -> Any:
        # Set leaves fill a single cell: sorted items joined by commas.
        if isinstance(value, (set, frozenset)):
            items = (str(self._adapter.to_plain(item)) for item in value)
            return ",".join(sorted(items))
        return value

    def to_json(self, context: Mapping[str, Any] | None = None) -> str:
        return self.encode(Format.JSON, context)

    def to_xml(self, context: Mapping[str, Any] | None = None) -> str:
        return self.encode(Format.XML, context)

    def to_yaml(self, context: Mapping[str, Any] | None = None) -> str:
        return self.encode(Format.YAML, context)

    def to_csv(self, context: Mapping[str, Any] | None = None) -> str:
        return self.encode(Format.CSV, context)

    def build_http_query(
        self,
        numeric_prefix: str | None = None,
        arg_separator: str | None = None,
        encoding: QueryEncoding = QueryEncoding.RFC1738,
    ) -> str:
        """URL-encoded query string of the tree (``foo%5B0%5D%5Bbar%5D=qux``).

        Raises:
            QueryBuildFailure: If the tree cannot be expressed as a query.
        """
        try:
            return build_http_query(
                self._data, numeric_prefix, arg_separator, encoding, self._adapter
            )
        except Exception as exc:
            raise QueryBuildFailure(str(exc)) from exc

    # ------------------------------------------------------------------
    # Python protocols
    # ------------------------------------------------------------------

    def __iter__(self) -> Iterator[tuple[str, Any]]:
        yield from self.discover().items()

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and self.is_readable(path)

    def __getitem__(self, path: str) -> Any:
        value = self._resolver.get(self._data, path, MISSING)
        if value is MISSING:
            raise PathNotReadable(path)
        return value

    def __setitem__(self, path: str, value: Any) -> None:
        self.set(path, value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._data!r})"
