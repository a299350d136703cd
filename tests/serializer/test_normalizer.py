"""Tests for ObjectNormalizer: shallow field mappings and deep plain-data conversion."""

from __future__ import annotations

import datetime
import enum
import uuid
from decimal import Decimal
from pathlib import PurePosixPath
from types import SimpleNamespace
from typing import Any

import pytest

from http_payload.serializer import ObjectNormalizer

from tests.records import (
    EmptyObject,
    Flaky,
    Node,
    Person,
    Point,
    Settings,
    Unlisted,
)


class Color(enum.Enum):
    RED = "red"


class Level(enum.IntEnum):
    HIGH = 3


@pytest.fixture
def normalizer() -> ObjectNormalizer:
    return ObjectNormalizer()


# ---------------------------------------------------------------------------
# supports_normalization / normalize
# ---------------------------------------------------------------------------


class TestSupportsNormalization:
    @pytest.mark.parametrize(
        "value",
        [{}, [], (), SimpleNamespace(), Point(1, 2), EmptyObject(), Settings()],
    )
    def test_supported(self, normalizer: ObjectNormalizer, value: Any) -> None:
        assert normalizer.supports_normalization(value)

    @pytest.mark.parametrize("value", [None, "x", 1, object()])
    def test_unsupported(self, normalizer: ObjectNormalizer, value: Any) -> None:
        assert not normalizer.supports_normalization(value)


class TestNormalize:
    def test_shallow(self, normalizer: ObjectNormalizer) -> None:
        inner = Point(3, 4)
        result = normalizer.normalize(SimpleNamespace(a=inner, b=[1]))
        assert result == {"a": inner, "b": [1]}
        assert result["a"] is inner

    def test_sequence_keys_are_strings(self, normalizer: ObjectNormalizer) -> None:
        assert normalizer.normalize(["a", "b"]) == {"0": "a", "1": "b"}

    def test_mapping_keys_are_strings(self, normalizer: ObjectNormalizer) -> None:
        assert normalizer.normalize({1: "a"}) == {"1": "a"}

    def test_properties(self, normalizer: ObjectNormalizer) -> None:
        assert normalizer.normalize(Person("Ada", "L")) == {"full_name": "Ada L"}

    def test_raising_property_is_skipped(self, normalizer: ObjectNormalizer) -> None:
        assert normalizer.normalize(Flaky()) == {"ok": 1}

    def test_raising_field_listing(self, normalizer: ObjectNormalizer) -> None:
        assert normalizer.normalize(Unlisted()) == {}

    def test_unsupported_raises(self, normalizer: ObjectNormalizer) -> None:
        with pytest.raises(TypeError, match="Cannot normalize"):
            normalizer.normalize("text")


# ---------------------------------------------------------------------------
# to_plain
# ---------------------------------------------------------------------------


class TestToPlain:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, None),
            ("s", "s"),
            (True, True),
            (1.5, 1.5),
            (Color.RED, "red"),
            (Level.HIGH, 3),
            (datetime.date(2024, 1, 2), "2024-01-02"),
            (datetime.datetime(2024, 1, 2, 3, 4, 5), "2024-01-02T03:04:05"),
            (datetime.timedelta(minutes=1), 60.0),
            (Decimal("1.10"), "1.10"),
            (uuid.UUID(int=0), "00000000-0000-0000-0000-000000000000"),
            (PurePosixPath("/tmp/x"), "/tmp/x"),
            (b"bytes", "bytes"),
            (frozenset({1}), [1]),
        ],
    )
    def test_scalars(
        self, normalizer: ObjectNormalizer, value: Any, expected: Any
    ) -> None:
        result = normalizer.to_plain(value)
        assert result == expected
        assert type(result) is type(expected)

    def test_deep(self, normalizer: ObjectNormalizer) -> None:
        tree = SimpleNamespace(points=(Point(1, 2),), meta={"when": Color.RED})
        assert normalizer.to_plain(tree) == {
            "points": [{"x": 1, "y": 2}],
            "meta": {"when": "red"},
        }

    def test_int_keys_are_kept(self, normalizer: ObjectNormalizer) -> None:
        assert normalizer.to_plain({0: "a", Color.RED: "b"}) == {0: "a", "red": "b"}

    def test_record_without_layout(self, normalizer: ObjectNormalizer) -> None:
        assert normalizer.to_plain({"o": object()}) == {"o": {}}

    def test_shared_references_are_not_circular(
        self, normalizer: ObjectNormalizer
    ) -> None:
        shared = {"a": 1}
        assert normalizer.to_plain([shared, shared]) == [{"a": 1}, {"a": 1}]

    def test_circular_reference(self, normalizer: ObjectNormalizer) -> None:
        node = Node(1)
        node.next = node
        with pytest.raises(ValueError, match="circular reference"):
            normalizer.to_plain(node)
