"""Flatten nested property maps into dotted keys and normalize values."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, List

from .equality import is_sequence, contains_deep
from .types import NormalizedValue

CONFIG_FILE_EXTENSIONS = (".txt", ".yaml", ".yml", ".json", ".properties", ".env", ".py")


def looks_like_file_path(text: str) -> bool:
    if "/" in text or "\\" in text:
        return True
    return text.lower().endswith(CONFIG_FILE_EXTENSIONS)


def normalize_value(value: Any) -> Any:
    """Normalize a single leaf value.

    - ``None`` becomes an empty string.
    - A string holding a comma is split into trimmed, non-empty tokens unless
      it looks like a file path.
    - Everything else is returned unchanged.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        if "," in value and not looks_like_file_path(value):
            return [token.strip() for token in value.split(",") if token.strip()]
        return value
    return value


def _normalize_list(items: Any) -> List[Any]:
    out: List[Any] = []
    for item in items:
        normalized = normalize_value(item)
        # one level of nested lists and comma strings is spread into the parent
        if is_sequence(normalized):
            for inner in normalized:
                if not contains_deep(out, inner):
                    out.append(inner)
        elif not contains_deep(out, normalized):
            out.append(normalized)
    return out


def flatten_and_normalize(properties: Mapping) -> Dict[str, NormalizedValue]:
    """Flatten nested mappings using dot-notation and normalize every leaf.

    Example:
        >>> flatten_and_normalize({"server": {"port": 8080, "hosts": "a, b"}})
        {'server.port': 8080, 'server.hosts': ['a', 'b']}
    """
    out: Dict[str, NormalizedValue] = {}

    def walk(prefix: str, node: Any) -> None:
        if isinstance(node, Mapping):
            for key, value in node.items():
                walk(str(key) if not prefix else f"{prefix}.{key}", value)
            return
        if is_sequence(node):
            out[prefix] = _normalize_list(node)
            return
        out[prefix] = normalize_value(node)

    for key, value in properties.items():
        walk(str(key), value)
    return out
