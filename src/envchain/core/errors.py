"""Exception types raised while loading and merging configuration."""

from __future__ import annotations


class EnvChainError(ValueError):
    """Base class for configuration loading errors."""


class StructureError(EnvChainError):
    """Input violates the structure a strict format requires.

    Messages are meant to be shown to the user as-is and usually end with an
    example of the expected layout.
    """


class UnsupportedFormatError(EnvChainError):
    """No parser recognizes the asset's file type."""


class ParseError(EnvChainError):
    """The asset has a known format but its content cannot be decoded."""
