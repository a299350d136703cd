"""Exception taxonomy for http-payload.

Every error raised by the public API derives from ``PayloadError`` and also
from the closest builtin (``LookupError``, ``ValueError``, ``TypeError`` or
``RuntimeError``) so callers can catch either.  Failures raised by a format
adapter are never leaked as-is: they are re-raised as ``EncodeFailure``,
``DecodeFailure`` or ``QueryBuildFailure`` with the original exception
chained as ``__cause__``.
"""

from __future__ import annotations

__all__ = [
    "DecodeFailure",
    "EncodeFailure",
    "InvalidPath",
    "PathNotReadable",
    "PathNotWritable",
    "PayloadError",
    "QueryBuildFailure",
    "UnsupportedFormat",
    "UnsupportedRootType",
    "WriteFailure",
]


class PayloadError(Exception):
    """Base class of every error raised by http-payload."""


class InvalidPath(PayloadError, ValueError):
    """A path string does not follow the ``[key]`` / ``.name`` grammar."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f'Invalid path "{path}" - {reason}')


class PathNotReadable(PayloadError, LookupError):
    """The path cannot be traversed against the current tree."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f'The path "{path}" is not readable')


class PathNotWritable(PayloadError, LookupError):
    """The terminal container of the path does not exist or refuses writes."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f'The path "{path}" is not writable')


class WriteFailure(PayloadError, RuntimeError):
    """The path was writable but the container rejected the assignment."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__(f'Failed to write the path "{path}" - {reason}')


class UnsupportedFormat(PayloadError, ValueError):
    """The format is not registered with the normalization adapter."""

    def __init__(self, fmt: str) -> None:
        self.format = fmt
        super().__init__(f'The format "{fmt}" is not supported')


class EncodeFailure(PayloadError, RuntimeError):
    """The adapter raised while encoding data to a wire format."""

    def __init__(self, fmt: str, reason: str) -> None:
        self.format = fmt
        super().__init__(f'Failed to encode data to format "{fmt}" - {reason}')


class DecodeFailure(PayloadError, RuntimeError):
    """The adapter raised while decoding content from a wire format."""

    def __init__(self, fmt: str, reason: str) -> None:
        self.format = fmt
        super().__init__(f'Failed to parse content with format "{fmt}" - {reason}')


class QueryBuildFailure(PayloadError, RuntimeError):
    """The tree could not be serialized to a URL-encoded query string."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to build HTTP query from data - {reason}")


class UnsupportedRootType(PayloadError, TypeError):
    """The value cannot back a payload slice."""

    def __init__(self, path: str, value_type: type) -> None:
        self.path = path
        self.value_type = value_type
        super().__init__(
            f'The value at path "{path}" is a {value_type.__name__}, '
            "not an array or a record"
        )
