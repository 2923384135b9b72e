"""Type definitions for the envchain configuration engine."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

from .errors import ParseError

DEFAULT_PROFILE = "default"

# Rank given to sources whose module is not known to the runtime.
LOWEST_PRECEDENCE = sys.maxsize

Scalar = Union[str, int, float, bool]
NormalizedValue = Union[Scalar, List[Any]]


@dataclass(frozen=True)
class Asset:
    """A configuration file handed over by an asset registry.

    Attributes:
        path: Path of the asset relative to its module root.
        module: Name of the module that ships the asset.
        content: Raw file bytes.
    """

    path: str
    module: str
    content: bytes = field(repr=False)

    @property
    def file_name(self) -> str:
        return self.path.replace("\\", "/").rsplit("/", 1)[-1]

    def text(self) -> str:
        try:
            decoded = self.content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(f"{self.path} is not valid UTF-8: {e}") from e
        if decoded.startswith("\ufeff"):
            decoded = decoded[1:]
        return decoded


@dataclass(frozen=True)
class ParsedSource:
    """Raw output of one parser run over one asset."""

    module: str
    profile: str
    properties: Dict[str, Any]


@dataclass(frozen=True)
class MergedSource:
    """Flattened and merged properties of every source sharing a profile.

    Attributes:
        profile: Profile name, also the name of the installed property source.
        properties: Dotted keys mapped to scalars or lists.
    """

    profile: str
    properties: Dict[str, NormalizedValue]
