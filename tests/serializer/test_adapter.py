"""Tests for the Serializer format registry."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pytest

from http_payload.exceptions import UnsupportedFormat
from http_payload.protocols import Encoder, NormalizationAdapter
from http_payload.serializer import DEFAULT_SERIALIZER, Serializer
from http_payload.serializer.encoders import default_encoders

from tests.records import Point


class UpperEncoder:
    format = "upper"

    def encode(self, data: Any, context: Mapping[str, Any]) -> str:
        return str(data).upper()

    def decode(self, data: str, context: Mapping[str, Any]) -> Any:
        return data.lower()


class TestProtocols:
    def test_serializer_is_an_adapter(self) -> None:
        assert isinstance(DEFAULT_SERIALIZER, NormalizationAdapter)

    def test_builtin_encoders(self) -> None:
        for encoder in default_encoders():
            assert isinstance(encoder, Encoder)


class TestRegistry:
    def test_default_formats(self) -> None:
        assert DEFAULT_SERIALIZER.formats == {"json", "xml", "yaml", "csv"}

    @pytest.mark.parametrize("fmt", ["toml", "", None])
    def test_unknown_formats(self, fmt: Any) -> None:
        assert not DEFAULT_SERIALIZER.supports_format(fmt)

    def test_custom_encoders_replace_defaults(self) -> None:
        serializer = Serializer(encoders=[UpperEncoder()])
        assert serializer.formats == {"upper"}
        assert serializer.encode("abc", "upper") == "ABC"
        assert serializer.decode(b"ABC", "upper") == "abc"
        assert not serializer.supports_format("json")

    def test_unsupported_format_raises(self) -> None:
        with pytest.raises(UnsupportedFormat, match='"toml"'):
            DEFAULT_SERIALIZER.encode({}, "toml")
        with pytest.raises(UnsupportedFormat):
            DEFAULT_SERIALIZER.decode("", "toml")


class TestEncodeDecode:
    def test_encode_normalizes_first(self) -> None:
        assert DEFAULT_SERIALIZER.encode({"p": Point(1, 2)}, "json") == (
            '{"p":{"x":1,"y":2}}'
        )

    def test_decode_bytes(self) -> None:
        assert DEFAULT_SERIALIZER.decode(b'{"a": "\xc3\xa9"}', "json") == {"a": "é"}

    def test_encoder_errors_propagate(self) -> None:
        with pytest.raises(TypeError):
            DEFAULT_SERIALIZER.encode({"a": {"b": 1}}, "csv")
