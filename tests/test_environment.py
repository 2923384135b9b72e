"""Unit tests for the Environment, the installer and profile configuration."""

import sys

from envchain.core.environment import Environment
from envchain.core.installer import ChainPlaceholderResolver, add_or_merge, install_merged_sources
from envchain.core.profiles import configure_profiles, parse_profiles
from envchain.core.source import PropertySource, PropertySources
from envchain.core.types import MergedSource


class TestEnvironment:
    """Test suite for Environment class."""

    def test_process_sources(self):
        """Test command line, system properties and environment sources."""
        env = Environment(
            args=["--server.port=1"],
            system_properties={"server.port": "2", "sys.only": "s"},
            environ={"SERVER_PORT": "3", "ENV_ONLY": "e"},
        )
        assert env.property_sources.names() == [
            "commandLine",
            "systemProperties",
            "systemEnvironment",
        ]
        assert env.get_property("server.port") == "1"
        assert env.get_property("sys.only") == "s"
        assert env.get_property("env.only") == "e"
        assert env.source_of("env.only") == "systemEnvironment"

    def test_defaults(self):
        """Test an empty Environment."""
        env = Environment()
        assert len(env.property_sources) == 0
        assert env.get_property("missing", "fallback") == "fallback"
        assert not env.contains_property("missing")
        assert env.source_of("missing") is None

    def test_from_process(self, monkeypatch):
        """Test reading sys.argv and os.environ."""
        monkeypatch.setattr(sys, "argv", ["prog", "--a=b"])
        monkeypatch.setenv("ENVCHAIN_TEST_VALUE", "x")
        env = Environment.from_process()
        assert env.get_property("a") == "b"
        assert env.get_property("envchain.test.value") == "x"

    def test_effective_profiles(self):
        """Test active profiles take over from default profiles."""
        env = Environment()
        env.set_default_profiles(["default"])
        assert env.effective_profiles() == ["default"]
        env.set_active_profiles(["dev"])
        assert env.effective_profiles() == ["dev"]


class TestInstaller:
    """Test suite for installing merged sources."""

    def test_profile_sources_move_to_front(self):
        """Test profile sources are installed ahead of process sources."""
        env = Environment(args=["--x=1"], environ={})
        merged = [
            MergedSource("default", {"a": 1}),
            MergedSource("dev", {"a": 2}),
            MergedSource("empty", {}),
        ]

        install_merged_sources(merged, env)

        assert env.property_sources.names() == ["default", "dev", "commandLine", "systemEnvironment"]
        assert env.get_property("a") == 1

    def test_add_or_merge_incoming_wins(self):
        """Test incoming values win on key collision."""
        sources = PropertySources([PropertySource("dev", {"a": 1, "b": 1})])
        add_or_merge({"b": 2, "c": 3}, sources, "dev")
        assert sources.get("dev").properties == {"a": 1, "b": 2, "c": 3}

    def test_add_or_merge_skips_empty(self):
        """Test empty maps are not installed."""
        sources = PropertySources()
        add_or_merge({}, sources, "dev")
        assert len(sources) == 0

    def test_custom_resolver(self):
        """Test the resolver hook runs before installation."""
        env = Environment()
        calls = []

        def upper(properties, environment, merged):
            calls.append(environment)
            return {k: str(v).upper() for k, v in properties.items()}

        install_merged_sources([MergedSource("default", {"a": "x"})], env, upper)
        assert env.get_property("a") == "X"
        assert calls == [env]

    def test_placeholder_resolver(self):
        """Test ${key} and ${key:default} expansion across profiles and environment."""
        env = Environment(environ={"REGION": "eu"})
        merged = [
            MergedSource(
                "default",
                {
                    "host": "localhost",
                    "url": "http://${host}:${port:8080}/${missing}",
                    "hosts": ["${host}", "${region}"],
                    "timeout": 5,
                },
            ),
            MergedSource("dev", {"name": "${host}-${env.name:dev}"}),
        ]

        install_merged_sources(merged, env, ChainPlaceholderResolver())

        assert env.get_property("url") == "http://localhost:8080/${missing}"
        assert env.get_property("hosts") == ["localhost", "eu"]
        assert env.get_property("timeout") == 5
        assert env.get_property("name") == "localhost-dev"


class TestProfiles:
    """Test suite for profile configuration."""

    def test_parse_profiles(self):
        """Test profile lists split on commas and whitespace."""
        assert parse_profiles(None) == []
        assert parse_profiles("dev, prod qa") == ["dev", "prod", "qa"]
        assert parse_profiles(["a,b", "c"]) == ["a", "b", "c"]

    def test_fallback_to_default(self):
        """Test both lists fall back to the default profile."""
        env = Environment()
        configure_profiles(env)
        assert env.active_profiles == ["default"]
        assert env.default_profiles == ["default"]

    def test_from_command_line(self):
        """Test profiles activated from the command line."""
        env = Environment(args=["--envchain.profiles.active=dev,prod"])
        configure_profiles(env)
        assert env.active_profiles == ["dev", "prod"]
        assert env.default_profiles == ["default"]

    def test_origin_sources_win_over_profile_sources(self):
        """Test environment variables win over installed profile sources."""
        env = Environment(environ={"ENVCHAIN_PROFILES_ACTIVE": "prod"})
        env.property_sources.add_first(
            PropertySource("default", {"envchain.profiles.active": "qa"})
        )
        configure_profiles(env)
        assert env.active_profiles == ["prod"]

    def test_from_installed_source(self):
        """Test profiles read from merged configuration."""
        env = Environment()
        install_merged_sources(
            [
                MergedSource(
                    "default",
                    {"envchain.profiles.active": ["dev"], "envchain.profiles.default": "base"},
                )
            ],
            env,
        )
        configure_profiles(env)
        assert env.active_profiles == ["dev"]
        assert env.default_profiles == ["base"]
