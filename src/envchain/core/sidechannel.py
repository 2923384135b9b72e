"""Logging and version projections derived from the merged environment."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from .context import BootstrapContext
from .environment import Environment
from .equality import is_sequence
from .source import VERSIONED_SOURCE_NAME, PropertySource
from .types import MergedSource

logger = logging.getLogger(__name__)

LOGGING_PREFIX = "logging."
FRAMEWORK_VERSION_PROPERTY = "envchain.version"
APPLICATION_VERSION_PROPERTY = "envchain.application.version"
UNKNOWN_VERSION = "unknown"


def _stringify(value: Any) -> str:
    if is_sequence(value):
        return ",".join(_stringify(item) for item in value)
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def collect_logging_properties(
    environment: Environment,
    merged: List[MergedSource],
    context: BootstrapContext,
) -> Dict[str, str]:
    """Copy ``logging.*`` keys into the context's log properties.

    Inactive profiles contribute first and the first value seen is kept;
    active profiles are then applied in activation order, each overwriting
    what came before.
    """
    active = environment.active_profiles
    collected: Dict[str, str] = {}

    for source in merged:
        if source.profile in active:
            continue
        for key, value in source.properties.items():
            if key.startswith(LOGGING_PREFIX):
                collected.setdefault(key, _stringify(value))

    by_profile = {source.profile: source for source in merged}
    for profile in active:
        source = by_profile.get(profile)
        if source is None:
            continue
        for key, value in source.properties.items():
            if key.startswith(LOGGING_PREFIX):
                collected[key] = _stringify(value)

    context.log_properties.set_properties(collected, overwrite=True)
    logger.debug(
        "Loaded %d logging properties from environment: %s",
        len(collected),
        list(collected),
    )
    return collected


def add_versioned_property_source(
    environment: Environment, context: BootstrapContext
) -> None:
    """Append a ``versioned`` source for version keys nothing else defines."""
    from .. import __version__

    content: Dict[str, Any] = {}
    if environment.get_property(FRAMEWORK_VERSION_PROPERTY) is None:
        content[FRAMEWORK_VERSION_PROPERTY] = __version__
    if environment.get_property(APPLICATION_VERSION_PROPERTY) is None:
        content[APPLICATION_VERSION_PROPERTY] = context.application_version or UNKNOWN_VERSION
    environment.property_sources.add_last(PropertySource(VERSIONED_SOURCE_NAME, content))
