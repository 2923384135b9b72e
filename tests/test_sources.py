"""Unit tests for property sources and chain ordering."""

import pytest

from envchain.core.ordering import OriginOrderRule, ProfileBlockOrderRule
from envchain.core.source import (
    NON_OPTION_ARGS_KEY,
    CommandLinePropertySource,
    PropertySource,
    PropertySources,
    SystemEnvironmentPropertySource,
)


class TestCommandLinePropertySource:
    """Test suite for CommandLinePropertySource."""

    def test_options_and_positional_args(self):
        """Test options, flags, repeated options and positional arguments."""
        source = CommandLinePropertySource.from_args(
            ["--a=1", "--flag", "--a=2", "pos", "--b=x=y", "--", "rest"]
        )
        assert source.name == "commandLine"
        assert source.get("a") == ["1", "2"]
        assert source.get("flag") == ""
        assert source.get("b") == "x=y"
        assert source.get(NON_OPTION_ARGS_KEY) == ["pos", "--", "rest"]

    def test_empty_option_name(self):
        """Test an option without a name is rejected."""
        with pytest.raises(ValueError):
            CommandLinePropertySource.from_args(["--=x"])


class TestSystemEnvironmentPropertySource:
    """Test suite for SystemEnvironmentPropertySource."""

    def test_relaxed_lookup(self):
        """Test dotted keys resolve to underscored and upper-case variables."""
        source = SystemEnvironmentPropertySource({"SERVER_PORT": "80", "app_name": "demo"})
        assert source.get("server.port") == "80"
        assert source.contains("server-port")
        assert source.get("app.name") == "demo"
        assert source.get("SERVER_PORT") == "80"
        assert not source.contains("server.host")
        assert source.get("server.host") is None


class TestPropertySources:
    """Test suite for the PropertySources chain."""

    def test_chain_operations(self):
        """Test adding sources and first-match lookups."""
        sources = PropertySources([PropertySource("a", {"k": 1})])
        sources.add_first(PropertySource("b", {"k": 2}))
        sources.add_last(PropertySource("c", {"k": 3, "only_c": True}))

        assert sources.names() == ["b", "a", "c"]
        assert sources.get_property("k") == 2
        assert sources.get_property("only_c") is True
        assert sources.get_property("missing") is None
        assert sources.find_source("only_c").name == "c"
        assert sources.contains("a")
        assert len(sources) == 3

    def test_adding_existing_name_moves_it(self):
        """Test re-adding a name replaces and moves the source."""
        sources = PropertySources([PropertySource("a"), PropertySource("b")])
        sources.add_last(PropertySource("a", {"new": 1}))
        assert sources.names() == ["b", "a"]
        assert sources.get("a").properties == {"new": 1}

    def test_replace_keeps_position(self):
        """Test replace swaps a source in place."""
        sources = PropertySources([PropertySource("a"), PropertySource("b")])
        sources.replace("a", PropertySource("a", {"x": 1}))
        assert sources.names() == ["a", "b"]
        assert sources.get_property("x") == 1

    def test_replace_missing(self):
        """Test replacing an unknown source raises KeyError."""
        with pytest.raises(KeyError):
            PropertySources().replace("nope", PropertySource("nope"))

    def test_remove(self):
        """Test removing sources by name."""
        sources = PropertySources([PropertySource("a"), PropertySource("b")])
        assert sources.remove("a").name == "a"
        assert sources.remove("a") is None
        assert sources.names() == ["b"]


def _chain(*names):
    return [PropertySource(name) for name in names]


class TestOriginOrderRule:
    """Test suite for OriginOrderRule."""

    def test_process_sources_then_active_profiles(self):
        """Test process sources first, then active profiles, then the rest."""
        ordered = OriginOrderRule(["dev"]).apply(
            _chain("defaultProperties", "dev", "systemProperties", "commandLine")
        )
        assert [s.name for s in ordered] == [
            "commandLine",
            "systemProperties",
            "dev",
            "defaultProperties",
        ]

    def test_active_profiles_follow_activation_order(self):
        """Test active profile sources are ordered by activation position."""
        ordered = OriginOrderRule(["qa", "dev"]).apply(
            _chain("dev", "x", "qa", "systemEnvironment", "y", "commandLineArgs")
        )
        assert [s.name for s in ordered] == [
            "commandLineArgs",
            "systemEnvironment",
            "qa",
            "dev",
            "x",
            "y",
        ]

    def test_inactive_profile_sources_keep_relative_order(self):
        """Test unranked sources keep their order."""
        ordered = OriginOrderRule([]).apply(_chain("default", "dev", "versioned"))
        assert [s.name for s in ordered] == ["default", "dev", "versioned"]


def test_profile_block_order_rule():
    """Test profile sources move to the front in their relative order."""
    ordered = ProfileBlockOrderRule(["default", "dev"]).apply(
        _chain("commandLine", "default", "systemEnvironment", "dev")
    )
    assert [s.name for s in ordered] == ["default", "dev", "commandLine", "systemEnvironment"]
