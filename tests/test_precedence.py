"""Unit tests for module precedence and profile grouping."""

import sys

from envchain.core.context import BootstrapContext
from envchain.core.precedence import (
    FRAMEWORK_RANK,
    FRAMEWORK_SUBMODULE_RANK,
    OTHER_RANK,
    ROOT_RANK,
    STDLIB_RANK,
    group_by_profile,
    order_by_precedence,
    precedence_rank,
)
from envchain.core.types import LOWEST_PRECEDENCE, ParsedSource


def make_context():
    return BootstrapContext("app", known_modules=["envchain_web", "json", "other_lib"])


class TestPrecedenceRank:
    """Test suite for precedence_rank."""

    def test_ranks(self):
        """Test each module category gets its rank."""
        context = make_context()
        assert precedence_rank("app", context) == ROOT_RANK
        assert precedence_rank("envchain", context) == FRAMEWORK_RANK
        assert precedence_rank("envchain_web", context) == FRAMEWORK_SUBMODULE_RANK
        assert precedence_rank("json", context) == STDLIB_RANK
        assert precedence_rank("other_lib", context) == OTHER_RANK

    def test_unknown_module_has_lowest_precedence(self):
        """Test unknown and empty module names rank last."""
        assert precedence_rank("nowhere", make_context()) == LOWEST_PRECEDENCE == sys.maxsize
        assert precedence_rank("", make_context()) == LOWEST_PRECEDENCE


def test_group_by_profile_keeps_first_seen_order():
    """Test profiles are grouped in the order they first appear."""
    parsed = [
        ParsedSource("a", "dev", {}),
        ParsedSource("a", "default", {}),
        ParsedSource("b", "dev", {}),
    ]
    grouped = group_by_profile(parsed)
    assert list(grouped) == ["dev", "default"]
    assert [p.module for p in grouped["dev"]] == ["a", "b"]


def test_order_by_precedence_is_stable():
    """Test entries with equal rank keep their original order."""
    context = make_context()
    entries = [
        ParsedSource("other_lib", "default", {"n": 1}),
        ParsedSource("unknown", "default", {"n": 2}),
        ParsedSource("other_lib", "default", {"n": 3}),
        ParsedSource("app", "default", {"n": 4}),
    ]
    ordered = order_by_precedence(entries, context)
    assert [e.properties["n"] for e in ordered] == [4, 1, 3, 2]
