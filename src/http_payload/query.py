"""URL query strings: tree -> ``a[b][0]=x`` pairs and back.

``build_http_query`` follows the form-encoding conventions used by PHP-style
back ends:

- nested keys are written with brackets: ``{"a": {"b": [1]}}`` -> ``a[b][0]=1``;
- ``None`` values and empty containers produce no pair at all;
- booleans are written ``1`` / ``0``;
- ``numeric_prefix`` is prepended to integer keys of the top level only;
- RFC 1738 escaping writes spaces as ``+`` and escapes ``~``; RFC 3986
  escaping writes spaces as ``%20``.

``parse_http_query`` is the inverse tree builder: ``a[b][]=1&a[b][]=2`` ->
``{"a": {"b": ["1", "2"]}}``.  Values are always strings; blank values are
kept; bracket keys that are decimal numbers become integer keys, and a
container whose keys are exactly ``0`` .. ``n-1`` becomes a list.
"""

from __future__ import annotations

import re
from typing import Any
from urllib.parse import parse_qsl, quote, quote_plus

from http_payload.config import QueryEncoding
from http_payload.protocols import NormalizationAdapter
from http_payload.serializer.normalizer import ObjectNormalizer

__all__ = ["build_http_query", "parse_http_query"]

_NAME = re.compile(r"([^\[]+)((?:\[[^\]]*\])*)")
_SUBKEY = re.compile(r"\[([^\]]*)\]")
_DECIMAL = re.compile(r"0|[1-9]\d*")

_normalizer = ObjectNormalizer()


# ---------------------------------------------------------------------------
# Building
# ---------------------------------------------------------------------------


def _quote_rfc1738(text: str) -> str:
    return quote_plus(text, safe="").replace("~", "%7E")


def _quote_rfc3986(text: str) -> str:
    return quote(text, safe="~")


def _is_numeric_key(key: Any) -> bool:
    if isinstance(key, bool):
        return False
    return isinstance(key, int) or bool(_DECIMAL.fullmatch(str(key)))


def _collect(pairs: list[tuple[str, str]], name: str, value: Any) -> None:
    if value is None:
        return
    if isinstance(value, dict):
        for key, child in value.items():
            _collect(pairs, f"{name}[{key}]", child)
    elif isinstance(value, list):
        for index, child in enumerate(value):
            _collect(pairs, f"{name}[{index}]", child)
    elif isinstance(value, bool):
        pairs.append((name, "1" if value else "0"))
    else:
        pairs.append((name, str(value)))


def build_http_query(
    data: Any,
    numeric_prefix: str | None = None,
    arg_separator: str | None = None,
    encoding: QueryEncoding = QueryEncoding.RFC1738,
    normalizer: ObjectNormalizer | NormalizationAdapter | None = None,
) -> str:
    """Serialize a tree to a URL-encoded query string.

    Args:
        data: Mapping, sequence or record.  Records are expanded through
            ``normalizer``.
        numeric_prefix: Prepended to integer keys of the top level.
        arg_separator: Separator between pairs.  Defaults to ``"&"``.
        encoding: Escaping rule, RFC 1738 (default) or RFC 3986.
        normalizer: Converter used to reach plain data.  Defaults to a shared
            ``ObjectNormalizer``.

    Returns:
        The query string, without a leading ``?``.

    Raises:
        TypeError: If ``data`` is not a container once normalized.
        ValueError: If ``data`` contains a circular reference.
    """
    plain = (normalizer or _normalizer).to_plain(data)
    if isinstance(plain, list):
        plain = dict(enumerate(plain))
    if not isinstance(plain, dict):
        msg = (
            "Query data must be a mapping, a sequence or a record, "
            f"got {type(data).__name__}"
        )
        raise TypeError(msg)

    pairs: list[tuple[str, str]] = []
    for key, value in plain.items():
        name = str(key)
        if numeric_prefix and _is_numeric_key(key):
            name = f"{numeric_prefix}{name}"
        _collect(pairs, name, value)

    if QueryEncoding(encoding) is QueryEncoding.RFC3986:
        escape = _quote_rfc3986
    else:
        escape = _quote_rfc1738
    separator = "&" if arg_separator is None else arg_separator
    return separator.join(f"{escape(name)}={escape(value)}" for name, value in pairs)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _subkey(raw: str) -> str | int:
    return int(raw) if _DECIMAL.fullmatch(raw) else raw


def _next_index(node: dict[Any, Any]) -> int:
    indexes = [key for key in node if isinstance(key, int)]
    return max(indexes) + 1 if indexes else 0


def _assign(node: dict[Any, Any], keys: list[str | int], value: str) -> None:
    key, rest = keys[0], keys[1:]
    if key == "":
        key = _next_index(node)
    if not rest:
        node[key] = value
        return
    child = node.get(key)
    if not isinstance(child, dict):
        child = node[key] = {}
    _assign(child, rest, value)


def _listify(node: Any) -> Any:
    if not isinstance(node, dict):
        return node
    converted = {key: _listify(child) for key, child in node.items()}
    if converted and list(converted) == list(range(len(converted))):
        return list(converted.values())
    return converted


def parse_http_query(query: str) -> dict[str, Any]:
    """Build a tree from a URL-encoded query string (without the leading ``?``)."""
    tree: dict[Any, Any] = {}
    for name, value in parse_qsl(query, keep_blank_values=True):
        match = _NAME.fullmatch(name)
        if match is None:
            tree[name] = value
            continue
        subkeys = [_subkey(raw) for raw in _SUBKEY.findall(match.group(2))]
        _assign(tree, [match.group(1), *subkeys], value)
    return {key: _listify(child) for key, child in tree.items()}
