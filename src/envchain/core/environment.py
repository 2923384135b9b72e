"""Runtime environment holding the property-source chain and profiles."""

from __future__ import annotations

import os
import sys
from typing import Any, List, Mapping, Optional, Sequence

from .source import (
    SYSTEM_PROPERTIES_SOURCE_NAME,
    CommandLinePropertySource,
    PropertySource,
    PropertySources,
    SystemEnvironmentPropertySource,
)


class Environment:
    """Property lookup over an ordered chain of property sources.

    An Environment starts with the process-level sources it is given
    (command line, system properties, environment variables); environment
    preparation then installs one source per configuration profile.
    """

    def __init__(
        self,
        args: Optional[Sequence[str]] = None,
        system_properties: Optional[Mapping[str, Any]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        """Initialize an Environment.

        Args:
            args: Program arguments; ``--key=value`` options become the
                command line source.
            system_properties: Explicit system properties, if any.
            environ: Environment variables, typically ``os.environ``.
        """
        self.property_sources = PropertySources()
        self._active_profiles: List[str] = []
        self._default_profiles: List[str] = []

        if args:
            self.property_sources.add_last(CommandLinePropertySource.from_args(args))
        if system_properties is not None:
            self.property_sources.add_last(
                PropertySource(SYSTEM_PROPERTIES_SOURCE_NAME, dict(system_properties))
            )
        if environ is not None:
            self.property_sources.add_last(SystemEnvironmentPropertySource(environ))

    @classmethod
    def from_process(cls, args: Optional[Sequence[str]] = None) -> "Environment":
        return cls(
            args=sys.argv[1:] if args is None else args,
            system_properties={},
            environ=os.environ,
        )

    def get_property(self, key: str, default: Optional[Any] = None) -> Any:
        value = self.property_sources.get_property(key)
        return default if value is None else value

    def contains_property(self, key: str) -> bool:
        return self.property_sources.find_source(key) is not None

    def source_of(self, key: str) -> Optional[str]:
        """Name of the property source that answers ``key``, if any."""
        source = self.property_sources.find_source(key)
        return None if source is None else source.name

    @property
    def active_profiles(self) -> List[str]:
        return list(self._active_profiles)

    def set_active_profiles(self, profiles: Sequence[str]) -> None:
        self._active_profiles = list(profiles)

    @property
    def default_profiles(self) -> List[str]:
        return list(self._default_profiles)

    def set_default_profiles(self, profiles: Sequence[str]) -> None:
        self._default_profiles = list(profiles)

    def effective_profiles(self) -> List[str]:
        return self.active_profiles or self.default_profiles
