"""envchain - profile-aware configuration resolution.

Parse configuration assets in several formats, merge them per profile by
module precedence, and install the result as an ordered chain of property
sources.
"""

__version__ = "0.1.0"

from .core.context import BootstrapContext
from .core.environment import Environment
from .core.pipeline import EnvironmentPreparer
from .core.source import PropertySource, PropertySources
from .core.types import Asset
from .parsers.registry import ParserRegistry

__all__ = [
    "__version__",
    "Asset",
    "BootstrapContext",
    "Environment",
    "EnvironmentPreparer",
    "ParserRegistry",
    "PropertySource",
    "PropertySources",
]
