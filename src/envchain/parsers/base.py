"""Base class shared by the environment parsers."""

from __future__ import annotations

from typing import Any, Dict

from ..core.types import DEFAULT_PROFILE, Asset, ParsedSource

DEFAULT_BASE_NAMES = ("application", "config")


class EnvironmentParser:
    """Turns one asset into a ``ParsedSource``.

    Subclasses implement ``can_parse`` and ``parse_text``; the profile is
    taken from the file name.
    """

    extensions: tuple = ()

    def can_parse(self, asset: Asset) -> bool:
        return asset.file_name.lower().endswith(self.extensions)

    def load(self, asset: Asset) -> ParsedSource:
        properties = self.parse_text(asset.text(), asset.path)
        return ParsedSource(
            module=asset.module or "",
            profile=self.extract_profile(asset.file_name),
            properties=properties,
        )

    def parse_text(self, content: str, path: str) -> Dict[str, Any]:
        raise NotImplementedError

    def extract_profile(self, file_name: str) -> str:
        """Profile named by the file: ``application-dev.yaml`` -> ``dev``.

        The last ``-`` segment wins, then the last ``_`` segment; anything
        else (including ``application`` and ``config``) is the default profile.
        """
        base_name = file_name
        dot = base_name.rfind(".")
        if dot > 0:
            base_name = base_name[:dot]

        if base_name in DEFAULT_BASE_NAMES:
            return DEFAULT_PROFILE
        for separator in ("-", "_"):
            if separator in base_name:
                profile = base_name.rsplit(separator, 1)[1]
                if profile:
                    return profile
        return DEFAULT_PROFILE
