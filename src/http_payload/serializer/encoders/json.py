"""JsonEncoder: compact JSON via the standard library ``json`` module.

Encoding is compact (``{"a":1}``) unless ``json_indent`` is given.  Decoding
returns dicts and lists; with ``json_as_records`` every JSON object becomes a
``SimpleNamespace`` record instead, so the decoded tree is addressed with
``.name`` paths.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from types import SimpleNamespace
from typing import Any

from http_payload.config import (
    JSON_AS_RECORDS_KEY,
    JSON_ENSURE_ASCII_KEY,
    JSON_INDENT_KEY,
    Format,
)

__all__ = ["JsonEncoder"]


def _as_record(fields: dict[str, Any]) -> SimpleNamespace:
    return SimpleNamespace(**fields)


class JsonEncoder:
    """``Encoder`` for the ``json`` format."""

    format: str = Format.JSON

    def encode(self, data: Any, context: Mapping[str, Any]) -> str:
        indent = context.get(JSON_INDENT_KEY)
        separators = (",", ":") if indent is None else (",", ": ")
        return json.dumps(
            data,
            indent=indent,
            separators=separators,
            ensure_ascii=bool(context.get(JSON_ENSURE_ASCII_KEY, True)),
        )

    def decode(self, data: str, context: Mapping[str, Any]) -> Any:
        if context.get(JSON_AS_RECORDS_KEY, False):
            return json.loads(data, object_hook=_as_record)
        return json.loads(data)
