from .types import DEFAULT_PROFILE, Asset, MergedSource, ParsedSource
from .errors import EnvChainError, ParseError, StructureError, UnsupportedFormatError
from .context import BootstrapContext, LogProperties
from .source import PropertySource, PropertySources
from .environment import Environment
from .merge import merge_parsed_sources, merge_preserve_existing
from .flatten import flatten_and_normalize
from .installer import ChainPlaceholderResolver, install_merged_sources
from .ordering import OriginOrderRule
from .pipeline import EnvironmentPreparer

__all__ = [
    "DEFAULT_PROFILE",
    "Asset",
    "MergedSource",
    "ParsedSource",
    "EnvChainError",
    "ParseError",
    "StructureError",
    "UnsupportedFormatError",
    "BootstrapContext",
    "LogProperties",
    "PropertySource",
    "PropertySources",
    "Environment",
    "merge_parsed_sources",
    "merge_preserve_existing",
    "flatten_and_normalize",
    "ChainPlaceholderResolver",
    "install_merged_sources",
    "OriginOrderRule",
    "EnvironmentPreparer",
]
