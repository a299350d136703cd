"""http-payload - path access, discovery and encoding for schema-less data trees."""

from __future__ import annotations

from http_payload.config import DiscoveryOptions, Format, QueryEncoding
from http_payload.exceptions import (
    DecodeFailure,
    EncodeFailure,
    PathNotReadable,
    PathNotWritable,
    PayloadError,
    QueryBuildFailure,
    UnsupportedFormat,
    UnsupportedRootType,
    WriteFailure,
)
from http_payload.payload import Payload
from http_payload.protocols import FieldAccessor, NormalizationAdapter

__version__: str = "0.1.0"
__all__: list[str] = [
    "DecodeFailure",
    "DiscoveryOptions",
    "EncodeFailure",
    "FieldAccessor",
    "Format",
    "NormalizationAdapter",
    "PathNotReadable",
    "PathNotWritable",
    "Payload",
    "PayloadError",
    "QueryBuildFailure",
    "QueryEncoding",
    "UnsupportedFormat",
    "UnsupportedRootType",
    "WriteFailure",
]
