"""Unit tests for the merge engine."""

from envchain.core.context import BootstrapContext
from envchain.core.merge import merge_parsed_sources, merge_preserve_existing, merge_profile
from envchain.core.types import ParsedSource


class TestMergePreserveExisting:
    """Test suite for merge_preserve_existing."""

    def test_missing_existing_takes_incoming(self):
        """Test the incoming value is used when nothing exists yet."""
        assert merge_preserve_existing(None, [1]) == [1]

    def test_equal_values_keep_existing(self):
        """Test structurally equal values keep the existing object."""
        existing = ["a"]
        assert merge_preserve_existing(existing, ("a",)) is existing

    def test_list_union_keeps_existing_order(self):
        """Test two lists merge into an ordered union."""
        assert merge_preserve_existing([1, 2], [2, 3]) == [1, 2, 3]

    def test_list_and_scalar(self):
        """Test a scalar is appended to a list unless present."""
        assert merge_preserve_existing([1], 2) == [1, 2]
        assert merge_preserve_existing([1, 2], 2) == [1, 2]

    def test_scalar_and_list(self):
        """Test a scalar is placed before the missing list items."""
        assert merge_preserve_existing("a", ["b", "a"]) == ["a", "b"]

    def test_different_scalars_keep_existing(self):
        """Test the first applied scalar wins."""
        assert merge_preserve_existing("first", "second") == "first"

    def test_deep_deduplication_of_map_items(self):
        """Test equal map items are not duplicated."""
        assert merge_preserve_existing([{"a": 1}], [{"a": 1}, {"b": 2}]) == [{"a": 1}, {"b": 2}]
        assert merge_preserve_existing([{"a": 1}], [{"a": 1}]) == [{"a": 1}]

    def test_idempotent(self):
        """Test merging a value with itself changes nothing."""
        value = [1, {"a": [2]}]
        assert merge_preserve_existing(value, value) == value


def test_merge_profile_first_entry_wins():
    """Test entries are folded in order with the first value kept."""
    merged = merge_profile(
        "default",
        [
            ParsedSource("app", "default", {"server": {"port": 8080}, "tags": "a,b"}),
            ParsedSource("lib", "default", {"server": {"port": 1, "host": "x"}, "tags": ["c"]}),
        ],
    )
    assert merged.profile == "default"
    assert merged.properties == {"server.port": 8080, "server.host": "x", "tags": ["a", "b", "c"]}


class TestMergeParsedSources:
    """Test suite for merge_parsed_sources."""

    def test_groups_by_profile_and_orders_by_precedence(self):
        """Test the root module wins over a library even when the library was parsed first."""
        context = BootstrapContext("app", known_modules=["lib"])
        parsed = [
            ParsedSource("lib", "default", {"a": "lib", "l": [1]}),
            ParsedSource("mystery", "dev", {"a": "dev"}),
            ParsedSource("app", "default", {"a": "app", "l": [2]}),
        ]

        merged = merge_parsed_sources(parsed, context)

        assert [m.profile for m in merged] == ["default", "dev"]
        assert merged[0].properties == {"a": "app", "l": [2, 1]}
        assert merged[1].properties == {"a": "dev"}

    def test_merging_twice_gives_same_result(self):
        """Test repeated merges are deterministic."""
        context = BootstrapContext("app")
        parsed = [ParsedSource("app", "default", {"x": "1, 2"})]
        assert merge_parsed_sources(parsed, context) == merge_parsed_sources(parsed, context)

    def test_no_sources(self):
        """Test no parsed sources produce no merged sources."""
        assert merge_parsed_sources([], BootstrapContext("app")) == []

    def test_feeding_merged_map_back_in_is_idempotent(self):
        """Test a merged map fed back in as an earlier source changes nothing."""
        context = BootstrapContext("app", known_modules=["lib"])
        parsed = [
            ParsedSource("app", "default", {"a": "x", "l": ["1", "2"]}),
            ParsedSource("lib", "default", {"a": "y", "l": "2,3", "b": None}),
        ]
        merged = merge_parsed_sources(parsed, context)[0]

        again = merge_parsed_sources(
            [ParsedSource("app", "default", dict(merged.properties))] + parsed, context
        )[0]

        assert again.properties == merged.properties == {"a": "x", "l": ["1", "2", "3"], "b": ""}

    def test_root_module_beats_framework(self):
        """Test the root module's scalar wins over the framework's."""
        context = BootstrapContext("app")
        parsed = [
            ParsedSource("envchain", "default", {"k": "framework"}),
            ParsedSource("app", "default", {"k": "root"}),
        ]
        assert merge_parsed_sources(parsed, context)[0].properties == {"k": "root"}
