"""Loader for envchain.yaml project files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .context import FRAMEWORK_MODULE, BootstrapContext

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "envchain.yaml"


class ConfigLoader:
    """Handles loading and parsing of envchain.yaml configuration files."""

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """Initialize config loader.

        Args:
            config_path: Path to envchain.yaml file. If None, looks in current
                directory and parent directories.
        """
        self.config_path = self._find_config_file(config_path)
        self._config: Optional[Dict[str, Any]] = None

    def _find_config_file(
        self, config_path: Optional[Union[str, Path]] = None
    ) -> Optional[Path]:
        if config_path is not None:
            path = Path(config_path)
            if path.exists():
                return path
            return None

        # Search for envchain.yaml in current and parent directories
        current = Path.cwd()
        while current != current.parent:
            candidate = current / CONFIG_FILE_NAME
            if candidate.exists():
                return candidate
            current = current.parent

        candidate = current / CONFIG_FILE_NAME
        if candidate.exists():
            return candidate

        return None

    def load(self) -> Dict[str, Any]:
        """Load the configuration file.

        Returns:
            Parsed configuration dictionary, or empty dict if no config file.

        Raises:
            ValueError: If the config file is invalid YAML.
        """
        if self.config_path is None:
            return {}

        if self._config is not None:
            return self._config

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(
                f"Invalid {CONFIG_FILE_NAME} at {self.config_path}: {e}"
            ) from e
        except OSError as e:
            logger.warning("Could not read %s at %s: %s", CONFIG_FILE_NAME, self.config_path, e)
            return {}

        if not isinstance(data, dict):
            raise ValueError(f"{CONFIG_FILE_NAME} at {self.config_path} must be a mapping")
        self._config = data
        return self._config

    @property
    def base_dir(self) -> Path:
        return self.config_path.parent if self.config_path else Path.cwd()

    def get_context(self) -> BootstrapContext:
        config = self.load()
        application = config.get("application") or {}
        version = application.get("version")
        return BootstrapContext(
            root_module=application.get("module", ""),
            framework_module=config.get("framework_module", FRAMEWORK_MODULE),
            known_modules=tuple(config.get("known_modules") or ()),
            application_version=None if version is None else str(version),
        )

    def get_active_profiles(self) -> List[str]:
        profiles = (self.load().get("profiles") or {}).get("active") or []
        if isinstance(profiles, str):
            return [p.strip() for p in profiles.split(",") if p.strip()]
        return [str(p) for p in profiles]

    def get_asset_registries(self) -> List[Any]:
        """Build asset registries from the ``assets`` list.

        Entries with ``path`` are directories relative to the config file;
        entries with ``uri`` are Redis URLs. Invalid entries are skipped with a
        warning.
        """
        from ..assets.filesystem import FileSystemAssetRegistry

        registries: List[Any] = []
        for entry in self.load().get("assets") or []:
            if not isinstance(entry, dict):
                logger.warning("Ignoring asset entry %r: expected a mapping", entry)
                continue
            if "path" in entry:
                module = entry.get("module") or self.get_context().root_module
                registries.append(FileSystemAssetRegistry({module: self.base_dir / entry["path"]}))
            elif "uri" in entry:
                from ..assets.redis_kv import DEFAULT_PREFIX, RedisAssetRegistry

                registries.append(
                    RedisAssetRegistry(entry["uri"], prefix=entry.get("prefix", DEFAULT_PREFIX))
                )
            else:
                logger.warning("Ignoring asset entry %r: needs either 'path' or 'uri'", entry)
        return registries
