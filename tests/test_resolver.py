"""Tests for PathResolver: structural checks, reads and writes by path."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import pytest

from http_payload.exceptions import PathNotWritable, WriteFailure
from http_payload.paths import parse_path
from http_payload.resolver import MISSING, PathResolver

from tests.records import Flaky, FrozenPoint, Person, Point, Settings, Unlisted


@pytest.fixture
def resolver() -> PathResolver:
    return PathResolver()


@pytest.fixture
def tree() -> dict[str, Any]:
    return {
        "foo": [SimpleNamespace(bar="qux", tags=("a", "b"))],
        "counts": {0: "zero", "1": "one"},
        "none": None,
    }


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------


class TestGet:
    def test_nested_mixed_path(self, resolver: PathResolver, tree: Any) -> None:
        assert resolver.get(tree, "[foo][0].bar") == "qux"

    def test_tuple_index(self, resolver: PathResolver, tree: Any) -> None:
        assert resolver.get(tree, "[foo][0].tags[1]") == "b"

    def test_int_mapping_key_by_decimal_text(
        self, resolver: PathResolver, tree: Any
    ) -> None:
        assert resolver.get(tree, "[counts][0]") == "zero"
        assert resolver.get(tree, "[counts][1]") == "one"

    def test_negative_int_mapping_key(self, resolver: PathResolver) -> None:
        assert resolver.get({-1: "a"}, "[-1]") == "a"
        assert not resolver.is_readable(["a"], "[-1]")

    def test_none_value_is_returned_not_default(
        self, resolver: PathResolver, tree: Any
    ) -> None:
        assert resolver.get(tree, "[none]", "default") is None

    @pytest.mark.parametrize(
        "path",
        [
            "foo",  # property syntax on a dict
            "[foo][0][bar]",  # index syntax on a record
            "[foo][1]",  # out of range
            "[foo][-1]",  # not a decimal index
            "[missing]",
            "[none][x]",
            "foo..",  # invalid path
            "",
        ],
    )
    def test_unreadable_paths_return_default(
        self, resolver: PathResolver, tree: Any, path: str
    ) -> None:
        assert resolver.get(tree, path, "default") == "default"
        assert not resolver.is_readable(tree, path)

    def test_accepts_parsed_paths(self, resolver: PathResolver, tree: Any) -> None:
        assert resolver.get(tree, parse_path("[foo][0].bar")) == "qux"

    def test_property_through_field_accessor(self, resolver: PathResolver) -> None:
        assert resolver.get(Settings(), "level") == "info"
        assert not resolver.is_readable(Settings(), "writes")

    def test_read_only_property_is_readable(self, resolver: PathResolver) -> None:
        assert resolver.get(Person("Ada", "L"), "full_name") == "Ada L"

    def test_raising_property_is_unreadable(self, resolver: PathResolver) -> None:
        assert resolver.get(Flaky(), "broken", "default") == "default"
        assert not resolver.is_readable(Flaky(), "broken")
        assert resolver.is_readable(Flaky(), "ok")

    def test_raising_field_listing_is_unreadable(
        self, resolver: PathResolver
    ) -> None:
        assert not resolver.is_readable(Unlisted(), "x")
        assert not resolver.is_writable(Unlisted(), "x")


class TestReadSegment:
    def test_missing_sentinel(self, resolver: PathResolver) -> None:
        segment = parse_path("[x]").last
        assert resolver.read_segment({}, segment) is MISSING
        assert not resolver.can_read_segment({}, segment)


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------


class TestIsWritable:
    def test_new_mapping_key(self, resolver: PathResolver, tree: Any) -> None:
        assert resolver.is_writable(tree, "[new]")

    def test_list_append_slot(self, resolver: PathResolver, tree: Any) -> None:
        assert resolver.is_writable(tree, "[foo][1]")
        assert not resolver.is_writable(tree, "[foo][2]")

    def test_tuple_is_read_only(self, resolver: PathResolver, tree: Any) -> None:
        assert not resolver.is_writable(tree, "[foo][0].tags[0]")

    def test_plain_record_accepts_new_field(
        self, resolver: PathResolver, tree: Any
    ) -> None:
        assert resolver.is_writable(tree, "[foo][0].new")

    def test_typed_record_rejects_unknown_field(self, resolver: PathResolver) -> None:
        assert resolver.is_writable(Point(1, 2), "x")
        assert not resolver.is_writable(Point(1, 2), "z")

    def test_read_only_property(self, resolver: PathResolver) -> None:
        assert not resolver.is_writable(Person("a", "b"), "full_name")

    def test_wrong_syntax(self, resolver: PathResolver, tree: Any) -> None:
        assert not resolver.is_writable(tree, "foo")
        assert not resolver.is_writable(tree, "[foo][0][bar]")

    def test_missing_parent(self, resolver: PathResolver, tree: Any) -> None:
        assert not resolver.is_writable(tree, "[missing][x]")

    def test_invalid_path(self, resolver: PathResolver, tree: Any) -> None:
        assert not resolver.is_writable(tree, "[")


class TestSet:
    def test_overwrite_nested(self, resolver: PathResolver, tree: Any) -> None:
        resolver.set(tree, "[foo][0].bar", "changed")
        assert tree["foo"][0].bar == "changed"

    def test_existing_int_key_is_reused(
        self, resolver: PathResolver, tree: Any
    ) -> None:
        resolver.set(tree, "[counts][0]", "ZERO")
        assert tree["counts"] == {0: "ZERO", "1": "one"}

    def test_new_key_is_a_string(self, resolver: PathResolver, tree: Any) -> None:
        resolver.set(tree, "[counts][2]", "two")
        assert tree["counts"]["2"] == "two"

    def test_append(self, resolver: PathResolver, tree: Any) -> None:
        resolver.set(tree, "[foo][1]", "appended")
        assert tree["foo"][1] == "appended"

    def test_field_accessor_set(self, resolver: PathResolver) -> None:
        settings = Settings()
        resolver.set(settings, "debug", True)
        assert settings.writes == [("debug", True)]

    def test_not_writable_raises_before_mutation(
        self, resolver: PathResolver, tree: Any
    ) -> None:
        with pytest.raises(PathNotWritable, match='"foo" is not writable'):
            resolver.set(tree, "foo", 1)
        assert tree["foo"][0].bar == "qux"

    def test_container_rejection_is_a_write_failure(
        self, resolver: PathResolver
    ) -> None:
        with pytest.raises(WriteFailure) as excinfo:
            resolver.set(FrozenPoint(1, 2), "x", 3)
        assert isinstance(excinfo.value.__cause__, AttributeError)
