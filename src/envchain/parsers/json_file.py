"""Parser for JSON configuration files."""

from __future__ import annotations

import json
from typing import Any, Dict

from ..core.errors import ParseError, StructureError
from .base import EnvironmentParser


class JsonParser(EnvironmentParser):
    extensions = (".json",)

    def parse_text(self, content: str, path: str) -> Dict[str, Any]:
        if not content.strip():
            return {}
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ParseError(f"Invalid JSON in {path}: {e}") from e
        if not isinstance(data, dict):
            raise StructureError(
                f"Top-level JSON in {path} must be an object, got {type(data).__name__}.\n"
                'Expected example:\n{"server": {"port": 8080}}'
            )
        return data
