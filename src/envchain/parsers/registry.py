"""Explicit, ordered registration of environment parsers."""

from __future__ import annotations

from typing import List, Optional, Sequence

from ..core.errors import UnsupportedFormatError
from ..core.types import Asset, ParsedSource
from .base import EnvironmentParser
from .dotenv import DotEnvParser
from .json_file import JsonParser
from .properties_file import PropertiesParser
from .python_config import PythonConfigParser
from .yaml_file import YamlParser


def default_parsers() -> List[EnvironmentParser]:
    return [DotEnvParser(), JsonParser(), PropertiesParser(), YamlParser()]


class ParserRegistry:
    """Picks the parser for an asset.

    Format parsers are tried in registration order and the first one that
    claims the asset wins. The fallback parser is only consulted when no
    format parser does.
    """

    def __init__(
        self,
        parsers: Optional[Sequence[EnvironmentParser]] = None,
        fallback: Optional[EnvironmentParser] = None,
        use_default_fallback: bool = True,
    ):
        self._parsers: List[EnvironmentParser] = (
            list(parsers) if parsers is not None else default_parsers()
        )
        if fallback is None and use_default_fallback:
            fallback = PythonConfigParser()
        self.fallback = fallback

    @property
    def parsers(self) -> List[EnvironmentParser]:
        return list(self._parsers)

    def register(self, parser: EnvironmentParser, first: bool = False) -> None:
        if first:
            self._parsers.insert(0, parser)
        else:
            self._parsers.append(parser)

    def find(self, asset: Asset) -> Optional[EnvironmentParser]:
        for parser in self._parsers:
            if parser.can_parse(asset):
                return parser
        if self.fallback is not None and self.fallback.can_parse(asset):
            return self.fallback
        return None

    def load(self, asset: Asset) -> ParsedSource:
        parser = self.find(asset)
        if parser is None:
            raise UnsupportedFormatError(f"No parser registered for {asset.path}")
        return parser.load(asset)
