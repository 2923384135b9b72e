"""Activation of profiles from configuration properties."""

from __future__ import annotations

import logging
import re
from typing import Any, List, Optional

from .environment import Environment
from .equality import is_sequence
from .source import (
    COMMAND_LINE_SOURCE_NAMES,
    SYSTEM_ENVIRONMENT_SOURCE_NAME,
    SYSTEM_PROPERTIES_SOURCE_NAME,
)
from .types import DEFAULT_PROFILE

logger = logging.getLogger(__name__)

ACTIVE_PROFILES_PROPERTY = "envchain.profiles.active"
DEFAULT_PROFILES_PROPERTY = "envchain.profiles.default"

_ORIGIN_SOURCES = COMMAND_LINE_SOURCE_NAMES + (
    SYSTEM_PROPERTIES_SOURCE_NAME,
    SYSTEM_ENVIRONMENT_SOURCE_NAME,
)


def parse_profiles(raw: Any) -> List[str]:
    if raw is None:
        return []
    if is_sequence(raw):
        items = [str(item) for item in raw]
    else:
        items = [str(raw)]
    profiles: List[str] = []
    for item in items:
        profiles.extend(token for token in re.split(r"[,\s]+", item) if token)
    return profiles


def _lookup(environment: Environment, key: str) -> Optional[Any]:
    # Process-level sources are consulted before the installed profile sources.
    for name in _ORIGIN_SOURCES:
        source = environment.property_sources.get(name)
        if source is not None and source.contains(key):
            return source.get(key)
    return environment.get_property(key)


def configure_profiles(environment: Environment) -> None:
    """Set active and default profiles from ``envchain.profiles.*`` properties.

    Both lists fall back to ``["default"]`` when nothing is configured.
    """
    active = parse_profiles(_lookup(environment, ACTIVE_PROFILES_PROPERTY))
    if active:
        environment.set_active_profiles(active)
        logger.debug("Set active profiles from config: %s", active)

    defaults = parse_profiles(_lookup(environment, DEFAULT_PROFILES_PROPERTY))
    if defaults:
        environment.set_default_profiles(defaults)
        logger.debug("Set default profiles from config: %s", defaults)

    if not environment.default_profiles:
        environment.set_default_profiles([DEFAULT_PROFILE])
    if not environment.active_profiles:
        environment.set_active_profiles([DEFAULT_PROFILE])
