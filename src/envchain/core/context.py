"""Startup context threaded through environment preparation."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Optional


FRAMEWORK_MODULE = "envchain"


class LogProperties:
    """``logging.*`` values collected from the merged environment."""

    def __init__(self) -> None:
        self._properties: Dict[str, str] = {}

    def set_properties(self, properties: Dict[str, str], overwrite: bool = True) -> None:
        if overwrite:
            self._properties = dict(properties)
            return
        for key, value in properties.items():
            self._properties.setdefault(key, value)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._properties.get(key, default)

    def level_for(self, logger_name: Optional[str] = None) -> Optional[str]:
        """Return the configured level for a logger, falling back to ``logging.level``."""
        if logger_name:
            specific = self._properties.get(f"logging.level.{logger_name}")
            if specific:
                return specific
        return self._properties.get("logging.level")

    def values(self) -> Dict[str, str]:
        return dict(self._properties)

    def __len__(self) -> int:
        return len(self._properties)


@dataclass
class BootstrapContext:
    """Everything environment preparation needs to know about the running application.

    Attributes:
        root_module: Module name of the application itself.
        framework_module: Name of the framework's main module.
        known_modules: Other module names the asset registry knows about.
        stdlib_modules: Names treated as standard-library modules.
        application_version: Version reported in the ``versioned`` source.
        log_properties: Sink for the logging projection.
    """

    root_module: str
    framework_module: str = FRAMEWORK_MODULE
    known_modules: Iterable[str] = ()
    stdlib_modules: FrozenSet[str] = field(
        default_factory=lambda: frozenset(sys.stdlib_module_names)
    )
    application_version: Optional[str] = None
    log_properties: LogProperties = field(default_factory=LogProperties)

    def is_known_module(self, module: str) -> bool:
        if not module:
            return False
        if module in (self.root_module, self.framework_module):
            return True
        return module in set(self.known_modules)
