"""Environment preparation: parse assets, merge per profile, install the chain."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Set, Tuple

from ..parsers.registry import ParserRegistry
from .bootstrap import is_bootstrap_config_path
from .context import BootstrapContext
from .environment import Environment
from .errors import EnvChainError
from .installer import Resolver, install_merged_sources
from .merge import merge_parsed_sources
from .ordering import OriginOrderRule
from .profiles import configure_profiles
from .sidechannel import add_versioned_property_source, collect_logging_properties
from .types import Asset, MergedSource, ParsedSource

logger = logging.getLogger(__name__)


class EnvironmentPreparer:
    """Runs the configuration pipeline once, before the application starts."""

    def __init__(
        self,
        context: BootstrapContext,
        registry: Optional[ParserRegistry] = None,
        resolver: Optional[Resolver] = None,
    ):
        self.context = context
        self.registry = registry or ParserRegistry()
        self.resolver = resolver

    def parse_assets(self, assets: Iterable[Asset]) -> List[ParsedSource]:
        """Parse every asset a parser claims.

        A malformed asset is logged and skipped so the rest of the
        configuration still loads.
        """
        parsed: List[ParsedSource] = []
        seen: Set[Tuple[str, str]] = set()
        for asset in assets:
            location = (asset.module, asset.path)
            if location in seen:
                continue
            seen.add(location)
            if is_bootstrap_config_path(asset.path):
                continue

            parser = self.registry.find(asset)
            if parser is None:
                logger.debug("No parser claims %s, skipping", asset.path)
                continue
            try:
                parsed.append(parser.load(asset))
            except EnvChainError as e:
                logger.error("Skipping configuration asset %s: %s", asset.path, e, exc_info=e)
        return parsed

    def prepare(self, environment: Environment, assets: Iterable[Asset]) -> List[MergedSource]:
        parsed = self.parse_assets(assets)
        merged = merge_parsed_sources(parsed, self.context)
        install_merged_sources(merged, environment, self.resolver)
        add_versioned_property_source(environment, self.context)
        configure_profiles(environment)
        collect_logging_properties(environment, merged, self.context)
        apply_origin_ordering(environment)
        logger.info(
            "Prepared environment with profiles %s from %d assets",
            environment.active_profiles,
            len(parsed),
        )
        return merged


def apply_origin_ordering(environment: Environment) -> None:
    profiles = environment.effective_profiles()
    environment.property_sources.reorder([OriginOrderRule(profiles)])
    logger.debug("New property source order applied: %s", environment.property_sources.names())
