"""Option objects and selectors for payload operations.

``DiscoveryOptions`` is a frozen (immutable) dataclass; being hashable it is
also the key under which a discovery result is memoized.  ``Format`` and
``QueryEncoding`` select the wire format and the query-string escaping rule.

Encoders are tuned per call through plain context mappings.  The recognised
keys are listed below as ``*_KEY`` constants next to their defaults.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum, auto

__all__ = [
    "CSV_AS_COLLECTION_KEY",
    "CSV_DELIMITER_KEY",
    "CSV_ENCLOSURE_KEY",
    "JSON_AS_RECORDS_KEY",
    "JSON_ENSURE_ASCII_KEY",
    "JSON_INDENT_KEY",
    "SUPPORTED_FORMATS",
    "XML_ENCODING_KEY",
    "XML_FORMAT_OUTPUT_KEY",
    "XML_ROOT_NODE_NAME_KEY",
    "YAML_FLOW_STYLE_KEY",
    "YAML_INDENT_KEY",
    "DiscoveryOptions",
    "Format",
    "QueryEncoding",
]


class Format(StrEnum):
    """Wire formats understood by the default serializer."""

    JSON = auto()
    XML = auto()
    YAML = auto()
    CSV = auto()


SUPPORTED_FORMATS: frozenset[str] = frozenset(fmt.value for fmt in Format)


class QueryEncoding(StrEnum):
    """Escaping rule for ``build_http_query``.

    - RFC1738: spaces become ``+`` (HTML form encoding).
    - RFC3986: spaces become ``%20``.
    """

    RFC1738 = auto()
    RFC3986 = auto()


# json: int indent (None = compact), ensure_ascii flag, decode objects
# as SimpleNamespace records instead of dicts.
JSON_INDENT_KEY = "json_indent"
JSON_ENSURE_ASCII_KEY = "json_ensure_ascii"
JSON_AS_RECORDS_KEY = "json_as_records"

# xml: name of the document element, pretty printing, declared encoding.
XML_ROOT_NODE_NAME_KEY = "xml_root_node_name"
XML_FORMAT_OUTPUT_KEY = "xml_format_output"
XML_ENCODING_KEY = "xml_encoding"

# yaml: indentation width, flow style (None lets PyYAML decide).
YAML_INDENT_KEY = "yaml_indent"
YAML_FLOW_STYLE_KEY = "yaml_flow_style"

# csv: field delimiter, quote character, always decode to a list of rows.
CSV_DELIMITER_KEY = "csv_delimiter"
CSV_ENCLOSURE_KEY = "csv_enclosure"
CSV_AS_COLLECTION_KEY = "csv_as_collection"


@dataclass(frozen=True, slots=True)
class DiscoveryOptions:
    """Immutable discovery request.

    Attributes:
        path: Optional path of the sub-tree to discover.  ``None`` or ``""``
            discovers the whole payload.
        recursive: When True (default) only leaf values are returned, keyed
            by their full path.  When False only the immediate children of
            the discovered node are returned, aggregates included.
    """

    path: str | None = None
    recursive: bool = True

    def __post_init__(self) -> None:
        if self.path is not None and not isinstance(self.path, str):
            msg = f"path must be a string or None, got {type(self.path).__name__}"
            raise TypeError(msg)
        if not isinstance(self.recursive, bool):
            msg = f"recursive must be a bool, got {type(self.recursive).__name__}"
            raise TypeError(msg)
        if self.path == "":
            object.__setattr__(self, "path", None)
