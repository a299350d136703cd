"""CsvEncoder: flat rows in, nested trees out.

Encoding expects one row (a mapping of column -> leaf value) or a list of
rows.  The header is the union of all row keys in first-seen order; missing
cells are empty, ``None`` is written as an empty cell and booleans as
``1`` / ``0``.  Nested values are rejected: trees must be flattened first
(``Payload.to_csv`` does this through discovery, so columns are paths).

Decoding parses every header as a path and rebuilds the nesting::

    [foo][0][bar],[baz]        ->  [{"foo": [{"bar": "qux"}], "baz": ""}]
    qux,

Every rebuilt container is a dict; a dict whose keys are exactly ``"0"`` ..
``"n-1"`` becomes a list.  Headers that are not valid paths are kept as
plain keys.  Cell values stay strings.  With ``csv_as_collection`` set to
False a single data row is returned as-is instead of a one-row list.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Mapping
from typing import Any

from http_payload.config import (
    CSV_AS_COLLECTION_KEY,
    CSV_DELIMITER_KEY,
    CSV_ENCLOSURE_KEY,
    Format,
)
from http_payload.exceptions import InvalidPath
from http_payload.paths import parse_path

__all__ = ["CsvEncoder"]


def _cell(column: str, value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (Mapping, list)):
        msg = f'The column "{column}" holds a nested value; flatten the data first'
        raise TypeError(msg)
    return str(value)


def _keys_of(column: str) -> list[str]:
    try:
        return [segment.key for segment in parse_path(column)]
    except InvalidPath:
        return [column]


def _listify(node: Any) -> Any:
    if not isinstance(node, dict):
        return node
    converted = {key: _listify(child) for key, child in node.items()}
    if converted and list(converted) == [str(i) for i in range(len(converted))]:
        return list(converted.values())
    return converted


def _unflatten(row: Mapping[str, str]) -> Any:
    tree: dict[str, Any] = {}
    for column, value in row.items():
        *parents, leaf = _keys_of(column)
        node = tree
        for key in parents:
            child = node.get(key)
            if not isinstance(child, dict):
                child = node[key] = {}
            node = child
        node[leaf] = value
    return _listify(tree)


class CsvEncoder:
    """``Encoder`` for the ``csv`` format."""

    format: str = Format.CSV

    def encode(self, data: Any, context: Mapping[str, Any]) -> str:
        rows = data if isinstance(data, list) else [data]
        for row in rows:
            if not isinstance(row, Mapping):
                msg = f"CSV rows must be mappings, got {type(row).__name__}"
                raise TypeError(msg)

        header = list(dict.fromkeys(str(key) for row in rows for key in row))
        if not header:
            return ""

        buffer = io.StringIO()
        writer = csv.writer(
            buffer,
            delimiter=context.get(CSV_DELIMITER_KEY, ","),
            quotechar=context.get(CSV_ENCLOSURE_KEY, '"'),
            lineterminator="\n",
        )
        writer.writerow(header)
        for row in rows:
            cells = {str(key): value for key, value in row.items()}
            writer.writerow([_cell(column, cells.get(column)) for column in header])
        return buffer.getvalue()

    def decode(self, data: str, context: Mapping[str, Any]) -> Any:
        reader = csv.reader(
            io.StringIO(data),
            delimiter=context.get(CSV_DELIMITER_KEY, ","),
            quotechar=context.get(CSV_ENCLOSURE_KEY, '"'),
        )
        lines = [line for line in reader if line]
        if not lines:
            return []

        header, *records = lines
        rows = []
        for record in records:
            cells = record + [""] * (len(header) - len(record))
            rows.append(_unflatten(dict(zip(header, cells, strict=False))))

        if not context.get(CSV_AS_COLLECTION_KEY, True) and len(rows) == 1:
            return rows[0]
        return rows
