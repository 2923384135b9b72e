"""Installation of merged profile maps into the property-source chain."""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Dict, List, Optional

from .environment import Environment
from .ordering import ProfileBlockOrderRule
from .source import PropertySource, PropertySources
from .types import MergedSource

logger = logging.getLogger(__name__)

Resolver = Callable[[Dict[str, Any], Environment, List[MergedSource]], Dict[str, Any]]


def identity_resolver(
    properties: Dict[str, Any], environment: Environment, sources: List[MergedSource]
) -> Dict[str, Any]:
    return properties


class ChainPlaceholderResolver:
    """Expand ``${key}`` and ``${key:default}`` inside string values.

    A placeholder is looked up in the profile's own map first, then in the
    other merged profiles, then in the environment. Unresolvable
    placeholders without a default are left untouched.
    """

    PLACEHOLDER = re.compile(r"\$\{([^}:]+)(?::([^}]*))?\}")

    def __init__(self, max_depth: int = 10):
        self.max_depth = max_depth

    def __call__(
        self,
        properties: Dict[str, Any],
        environment: Environment,
        sources: List[MergedSource],
    ) -> Dict[str, Any]:
        def lookup(key: str) -> Optional[Any]:
            if key in properties:
                return properties[key]
            for source in sources:
                if key in source.properties:
                    return source.properties[key]
            return environment.get_property(key)

        def expand(value: Any, depth: int = 0) -> Any:
            if isinstance(value, list):
                return [expand(item, depth) for item in value]
            if not isinstance(value, str) or depth >= self.max_depth:
                return value

            def substitute(match: "re.Match[str]") -> str:
                found = lookup(match.group(1).strip())
                if found is None:
                    return match.group(2) if match.group(2) is not None else match.group(0)
                if isinstance(found, list):
                    return ",".join(str(item) for item in found)
                return str(found)

            expanded = self.PLACEHOLDER.sub(substitute, value)
            if expanded != value and self.PLACEHOLDER.search(expanded):
                return expand(expanded, depth + 1)
            return expanded

        return {key: expand(value) for key, value in properties.items()}


def add_or_merge(properties: Dict[str, Any], sources: PropertySources, name: str) -> None:
    """Install ``properties`` under ``name``, merging into an existing source.

    New keys augment the existing source; on collision the incoming value wins.
    """
    if not properties:
        return
    existing = sources.get(name)
    if existing is None:
        sources.add_last(PropertySource(name, dict(properties)))
        return
    resulting = dict(existing.properties)
    resulting.update(properties)
    sources.replace(name, PropertySource(name, resulting))


def install_merged_sources(
    merged: List[MergedSource],
    environment: Environment,
    resolver: Optional[Resolver] = None,
) -> None:
    """Install one property source per profile and move them ahead of the rest.

    Args:
        merged: Merged maps, one per profile.
        environment: Environment whose chain is updated in place.
        resolver: Hook applied to each map before installation; defaults to
            the identity.
    """
    resolve = resolver or identity_resolver
    sources = environment.property_sources
    for source in merged:
        resolved = resolve(dict(source.properties), environment, merged)
        add_or_merge(resolved, sources, source.profile)

    sources.reorder([ProfileBlockOrderRule([source.profile for source in merged])])
    logger.debug("Property sources after install: %s", sources.names())
