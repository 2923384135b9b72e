"""Final ordering of the property-source chain by source origin."""

from __future__ import annotations

from typing import List, Sequence

from .source import (
    COMMAND_LINE_SOURCE_NAMES,
    SYSTEM_ENVIRONMENT_SOURCE_NAME,
    SYSTEM_PROPERTIES_SOURCE_NAME,
    PropertySource,
)

PROFILE_CATEGORY = 3
FALLBACK_CATEGORY = 1000


class OriginOrderRule:
    """Rank sources by where they come from.

    Command line arguments first, then system properties, then system
    environment variables, then the active profiles in the order they were
    activated, then everything else in its current order.
    """

    def __init__(self, active_profiles: Sequence[str]):
        self.active_profiles = list(active_profiles)

    def apply(self, sources: List[PropertySource]) -> List[PropertySource]:
        return sorted(sources, key=self._sort_key)

    def _sort_key(self, source: PropertySource) -> tuple:
        category = self._category_of(source.name)
        if category == PROFILE_CATEGORY:
            return (category, self.active_profiles.index(source.name))
        return (category, 0)

    def _category_of(self, name: str) -> int:
        if name in COMMAND_LINE_SOURCE_NAMES:
            return 0
        if name == SYSTEM_PROPERTIES_SOURCE_NAME:
            return 1
        if name == SYSTEM_ENVIRONMENT_SOURCE_NAME:
            return 2
        if name in self.active_profiles:
            return PROFILE_CATEGORY
        return FALLBACK_CATEGORY


class ProfileBlockOrderRule:
    """Move sources named after a merged profile ahead of all other sources."""

    def __init__(self, profiles: Sequence[str]):
        self.profiles = set(profiles)

    def apply(self, sources: List[PropertySource]) -> List[PropertySource]:
        front = [source for source in sources if source.name in self.profiles]
        rest = [source for source in sources if source.name not in self.profiles]
        return front + rest
