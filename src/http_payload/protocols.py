"""Structural protocols for the http-payload extension points.

``FieldAccessor`` lets a record type expose its fields explicitly instead of
relying on attribute introspection.  ``NormalizationAdapter`` is the whole
contract the payload needs from a serializer, and ``Encoder`` is the contract
of one wire format inside the default serializer.  None of them require
inheritance: any class with conformant methods passes ``isinstance`` checks.

Example::

    from http_payload.protocols import FieldAccessor

    class Settings:
        def __init__(self) -> None:
            self._values = {"debug": False}

        def field_names(self) -> list[str]:
            return list(self._values)

        def get_field(self, name: str) -> object:
            return self._values[name]

        def set_field(self, name: str, value: object) -> None:
            self._values[name] = value

    assert isinstance(Settings(), FieldAccessor)  # True
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Protocol, runtime_checkable

__all__ = ["Encoder", "FieldAccessor", "NormalizationAdapter"]


@runtime_checkable
class FieldAccessor(Protocol):
    """Explicit field access for record-like values.

    - ``field_names`` enumerates readable field names in a stable order.
    - ``get_field`` reads a field listed by ``field_names``.
    - ``set_field`` writes a field; it may raise to reject the value.
    """

    def field_names(self) -> Iterable[str]: ...

    def get_field(self, name: str) -> Any: ...

    def set_field(self, name: str, value: Any) -> None: ...


@runtime_checkable
class NormalizationAdapter(Protocol):
    """Normalization and wire-format capability used by ``Payload``."""

    def supports_normalization(self, value: Any) -> bool: ...

    def normalize(self, value: Any) -> dict[str, Any]: ...

    def to_plain(self, value: Any) -> Any: ...

    def supports_format(self, fmt: str) -> bool: ...

    def encode(self, data: Any, fmt: str, context: Mapping[str, Any]) -> str: ...

    def decode(self, data: str, fmt: str, context: Mapping[str, Any]) -> Any: ...


@runtime_checkable
class Encoder(Protocol):
    """One wire format: plain data in, text out, and back."""

    format: str

    def encode(self, data: Any, context: Mapping[str, Any]) -> str: ...

    def decode(self, data: str, context: Mapping[str, Any]) -> Any: ...
