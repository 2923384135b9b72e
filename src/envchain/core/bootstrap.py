"""Strict enable/disable auto-configuration lists read at bootstrap.

Unlike environment files, these assets are never skipped: a malformed file
aborts startup.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from .context import BootstrapContext
from .errors import ParseError, StructureError, UnsupportedFormatError
from .types import Asset

logger = logging.getLogger(__name__)

ENABLE_AUTO_CONFIGURATION_PROPERTY = "envchain.enableautoconfiguration"
DISABLE_AUTO_CONFIGURATION_PROPERTY = "envchain.disableautoconfiguration"
ALLOWED_KEYS = (ENABLE_AUTO_CONFIGURATION_PROPERTY, DISABLE_AUTO_CONFIGURATION_PROPERTY)

BOOTSTRAP_CONFIG_DIRS = ("meta-inf/", "meta_inf/", "meta_config/")

_YAML_ITEM = re.compile(r"^(\s*)-\s*(.*)$")
_YAML_KEY = re.compile(r"^(\s*)([^:]+?)\s*:\s*(.*)$")
_PROPERTIES_LINE = re.compile(r"^([^\[\]=]+)\[(\d+)\]\s*=\s*(.*)$")


def is_bootstrap_config_path(path: str) -> bool:
    lowered = path.replace("\\", "/").lower()
    return any(directory in lowered for directory in BOOTSTRAP_CONFIG_DIRS)


def _yaml_error(path: str, reason: str) -> StructureError:
    return StructureError(
        f"Invalid YAML structure in {path}: {reason}\n"
        "Expected example:\n"
        f"{ENABLE_AUTO_CONFIGURATION_PROPERTY}:\n"
        "  - my_app.config.SchedulingAutoConfiguration\n\n"
        f"{DISABLE_AUTO_CONFIGURATION_PROPERTY}:\n"
        "  - envchain_web\n"
    )


def _properties_error(path: str, reason: str) -> StructureError:
    return StructureError(
        f"Invalid .properties structure in {path}: {reason}\n"
        "Expected example:\n"
        f"{ENABLE_AUTO_CONFIGURATION_PROPERTY}[0]=my_app.config.SchedulingAutoConfiguration\n"
        f"{DISABLE_AUTO_CONFIGURATION_PROPERTY}[0]=envchain_web\n"
        f"{DISABLE_AUTO_CONFIGURATION_PROPERTY}[1]=envchain_cache\n"
    )


def _add_unique(result: Dict[str, List[str]], key: str, values: Iterable[str]) -> None:
    existing = result.setdefault(key, [])
    for value in values:
        if value not in existing:
            existing.append(value)


class BootstrapConfigParser:
    """Parses bootstrap-config assets into ``{key: [values]}``."""

    def parse_asset(self, asset: Asset) -> Dict[str, List[str]]:
        path = asset.path.lower()
        content = asset.text()
        if path.endswith((".yaml", ".yml")):
            return self.parse_yaml(content, asset.path)
        if path.endswith(".json"):
            return self.parse_json(content, asset.path)
        if path.endswith(".properties"):
            return self.parse_properties(content, asset.path)
        raise UnsupportedFormatError(f"Unsupported config extension for: {asset.path}")

    def parse_yaml(self, content: str, path: str) -> Dict[str, List[str]]:
        result: Dict[str, List[str]] = {}
        current_key: Optional[str] = None
        current_indent = 0

        for raw in content.splitlines():
            line = raw.replace("\t", "    ")
            trimmed = line.strip()
            if not trimmed or trimmed.startswith("#"):
                continue

            item = _YAML_ITEM.match(line)
            if item:
                if current_key is None:
                    raise _yaml_error(
                        path,
                        "Found list item without a parent top-level key. "
                        "List items must follow a top-level key definition.",
                    )
                if len(item.group(1)) <= current_indent:
                    raise _yaml_error(
                        path,
                        f'List item indent must be greater than key indent for key "{current_key}".',
                    )
                value = item.group(2).strip()
                if not value:
                    raise _yaml_error(path, f'Empty list item for key "{current_key}" is not allowed.')
                _add_unique(result, current_key, [value])
                continue

            key_line = _YAML_KEY.match(line)
            if key_line:
                indent, key, after = key_line.group(1), key_line.group(2).strip(), key_line.group(3).strip()
                if indent:
                    raise _yaml_error(
                        path,
                        "Keys must be defined at the top level with no indentation. "
                        f'Offending key: "{key}"',
                    )
                if key not in ALLOWED_KEYS:
                    raise _yaml_error(
                        path, f'Unsupported key "{key}". Only allowed keys are: {list(ALLOWED_KEYS)}'
                    )
                current_key = key
                current_indent = 0
                result.setdefault(key, [])
                if after:
                    if not after.startswith("["):
                        raise _yaml_error(
                            path,
                            f'Invalid value for "{key}". Expected a list using `- item` lines '
                            "or an inline JSON array.",
                        )
                    try:
                        parsed = json.loads(after)
                    except json.JSONDecodeError as e:
                        raise _yaml_error(path, f'Failed to parse inline list for "{key}": {e}') from e
                    if not isinstance(parsed, list):
                        raise _yaml_error(path, f'Inline value for "{key}" must be a list of strings.')
                    _add_unique(result, key, ["" if v is None else str(v) for v in parsed])
                continue

            raise _yaml_error(
                path,
                f'Unexpected line in YAML: "{line}". '
                "Expected top-level keys and list values using `- item`.",
            )

        for key, values in result.items():
            if not values:
                raise _yaml_error(path, f'Key "{key}" must contain at least one entry.')
        return result

    def parse_json(self, content: str, path: str) -> Dict[str, List[str]]:
        try:
            decoded = json.loads(content)
        except json.JSONDecodeError as e:
            raise ParseError(f"Invalid JSON in {path}: {e}") from e
        if not isinstance(decoded, dict):
            raise StructureError(
                f"Top-level JSON in {path} must be an object mapping keys to list values. "
                f'Example: {{"{ENABLE_AUTO_CONFIGURATION_PROPERTY}": ["my_app.config.Config"]}}'
            )

        result: Dict[str, List[str]] = {}
        for key, value in decoded.items():
            if key not in ALLOWED_KEYS:
                raise StructureError(
                    f'Unsupported key "{key}" in {path}. Only allowed keys: {list(ALLOWED_KEYS)}'
                )
            if not isinstance(value, list):
                raise StructureError(
                    f'Value for key "{key}" in {path} must be a JSON array of strings. '
                    f'Example: "{key}": ["envchain_web"]'
                )
            items: List[str] = []
            for item in value:
                if item is None:
                    raise StructureError(f'Null item found in array for key "{key}" in {path}.')
                items.append(str(item))
            if not items:
                raise StructureError(
                    f'Array for key "{key}" in {path} must contain at least one element. '
                    f'Example: "{key}": ["envchain_web"]'
                )
            _add_unique(result, key, items)
        return result

    def parse_properties(self, content: str, path: str) -> Dict[str, List[str]]:
        indexed: Dict[str, Dict[int, str]] = {}
        for line in content.splitlines():
            stripped = line.strip()
            if not stripped or stripped[0] in "#!":
                continue
            match = _PROPERTIES_LINE.match(stripped)
            if match is None:
                raise _properties_error(
                    path,
                    f'Invalid properties line. Expected format: key[index]=value\nOffending line: "{line}"',
                )
            key, index, value = match.group(1).strip(), int(match.group(2)), match.group(3).strip()
            if key not in ALLOWED_KEYS:
                raise _properties_error(
                    path, f'Unsupported key "{key}". Only allowed keys: {list(ALLOWED_KEYS)}'
                )
            slots = indexed.setdefault(key, {})
            if index in slots:
                raise _properties_error(path, f'Duplicate index {index} for key "{key}"')
            slots[index] = value

        result: Dict[str, List[str]] = {}
        for key, slots in indexed.items():
            indices = sorted(slots)
            if indices[0] != 0:
                raise _properties_error(
                    path, f'Indices for key "{key}" must start at 0. Found first index {indices[0]}'
                )
            for expected, actual in enumerate(indices):
                if expected != actual:
                    raise _properties_error(
                        path,
                        f'Indices for key "{key}" must be contiguous starting at 0. '
                        f"Missing index {expected}",
                    )
            result[key] = [slots[i] for i in indices]
        return result


@dataclass(frozen=True)
class ImportSelection:
    """One entry selected for (or excluded from) auto-configuration."""

    name: str
    is_package: bool
    disabled: bool = False
    target: Any = None


class ComponentRegistry:
    """Explicitly registered auto-configuration components by qualified name."""

    def __init__(self) -> None:
        self._components: Dict[str, Any] = {}

    def register(self, qualified_name: str, component: Any) -> None:
        self._components[qualified_name] = component

    def get(self, qualified_name: str) -> Optional[Any]:
        return self._components.get(qualified_name)

    def __contains__(self, qualified_name: str) -> bool:
        return qualified_name in self._components


def extract_package_name(entry: str) -> str:
    """Package part of a selection entry.

    ``package:envchain_web/config.py`` -> ``envchain_web``,
    ``my_app.config.Scheduling`` -> ``my_app``.
    """
    if entry.startswith("package:"):
        return entry[len("package:"):].split("/", 1)[0]
    if ":" in entry:
        return entry.split(":", 1)[0]
    if "/" in entry:
        return entry.split("/", 1)[0]
    return entry.split(".", 1)[0]


def _selection(item: str, disabled: bool, registry: ComponentRegistry) -> ImportSelection:
    if "." in item:
        component = registry.get(item)
        if component is not None:
            return ImportSelection(item, is_package=False, disabled=disabled, target=component)
        logger.debug("%s is not a registered component, selecting its package", item)
        return ImportSelection(extract_package_name(item), is_package=True, disabled=disabled)
    return ImportSelection(item, is_package=True, disabled=disabled)


def select_imports(
    assets: Iterable[Asset],
    context: BootstrapContext,
    registry: Optional[ComponentRegistry] = None,
    parser: Optional[BootstrapConfigParser] = None,
) -> List[ImportSelection]:
    """Turn bootstrap-config assets into import selections.

    The application's root module is always selected first. Parsing errors
    propagate.
    """
    registry = registry or ComponentRegistry()
    parser = parser or BootstrapConfigParser()
    selections: List[ImportSelection] = []
    if context.root_module:
        selections.append(ImportSelection(context.root_module, is_package=True))

    for asset in assets:
        if not is_bootstrap_config_path(asset.path):
            continue
        configuration = parser.parse_asset(asset)
        for item in configuration.get(ENABLE_AUTO_CONFIGURATION_PROPERTY, []):
            selections.append(_selection(item, False, registry))
        for item in configuration.get(DISABLE_AUTO_CONFIGURATION_PROPERTY, []):
            selections.append(_selection(item, True, registry))
    return selections
