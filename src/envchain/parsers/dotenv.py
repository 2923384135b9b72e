"""Parser for ``.env`` and ``.env.<profile>`` files."""

from __future__ import annotations

import re
from typing import Dict, Optional, Tuple

from ..core.types import DEFAULT_PROFILE, Asset
from .base import EnvironmentParser

_LINE = re.compile(r"^(?:export\s+)?([A-Za-z_][A-Za-z0-9_.\-]*)\s*=\s*(.*)$")


def parse_line(line: str) -> Optional[Tuple[str, str]]:
    """Parse a single line from a .env file.

    Args:
        line: Line to parse.

    Returns:
        Tuple of (key, value) or None if the line should be ignored.
    """
    line = line.strip()

    # Skip empty lines and comments
    if not line or line.startswith("#"):
        return None

    match = _LINE.match(line)
    if not match:
        return None

    key, value = match.groups()

    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        value = value[1:-1]
        value = (
            value.replace('\\"', '"')
            .replace("\\n", "\n")
            .replace("\\r", "\r")
            .replace("\\t", "\t")
        )
    elif len(value) >= 2 and value.startswith("'") and value.endswith("'"):
        value = value[1:-1]
    else:
        # unquoted values may carry a trailing " # comment"
        value = re.split(r"\s+#", value, maxsplit=1)[0].rstrip()

    return key, value


class DotEnvParser(EnvironmentParser):
    def can_parse(self, asset: Asset) -> bool:
        name = asset.file_name
        return name == ".env" or name.startswith(".env.")

    def parse_text(self, content: str, path: str) -> Dict[str, str]:
        values: Dict[str, str] = {}
        for line in content.splitlines():
            parsed = parse_line(line)
            if parsed:
                key, value = parsed
                values[key] = value
        return values

    def extract_profile(self, file_name: str) -> str:
        if file_name.startswith(".env.") and len(file_name) > len(".env."):
            return file_name[len(".env."):]
        return DEFAULT_PROFILE
