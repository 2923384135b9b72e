"""Parser for the restricted YAML subset used by environment files.

Only top-level keys are allowed, each holding either a scalar or a list of
scalars::

    server.port: 8080
    server.hosts:
      - alpha
      - beta
    features: [search, export]

Anything outside that shape is rejected with a ``StructureError`` rather
than guessed at. Scalar typing (numbers, booleans, quoting) is delegated to a
PyYAML safe loader that leaves dates and YAML 1.1 words such as ``yes`` or
``NO`` as text.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

import yaml

from ..core.errors import ParseError, StructureError
from .base import EnvironmentParser

_LIST_ITEM = re.compile(r"^(\s*)-(?:\s+(.*?)|\s*)$")
_KEY_LINE = re.compile(r"^(\s*)([^:]*?)\s*:(?:\s+(.*?)|\s*)$")

_BOOL_TAG = "tag:yaml.org,2002:bool"
_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"

EXAMPLE = (
    "Expected example:\n"
    "server.port: 8080\n"
    "server.hosts:\n"
    "  - alpha\n"
    "  - beta\n"
    "features: [search, export]\n"
)


def _error(path: str, line_no: int, reason: str) -> StructureError:
    return StructureError(
        f"Invalid YAML structure in {path} (line {line_no}): {reason}\n{EXAMPLE}"
    )


def _unquote(key: str) -> str:
    if len(key) >= 2 and key[0] == key[-1] and key[0] in "'\"":
        return key[1:-1]
    return key


class ScalarLoader(yaml.SafeLoader):
    """Safe loader that keeps dates as text and only reads true/false as booleans."""


ScalarLoader.yaml_implicit_resolvers = {
    first: [
        (tag, regexp)
        for tag, regexp in resolvers
        if tag not in (_BOOL_TAG, _TIMESTAMP_TAG)
    ]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
ScalarLoader.add_implicit_resolver(
    _BOOL_TAG,
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)


def load_scalar(text: str) -> Any:
    return yaml.load(text, Loader=ScalarLoader)


def _is_scalar(value: Any) -> bool:
    return not isinstance(value, (dict, list))


class YamlParser(EnvironmentParser):
    extensions = (".yaml", ".yml")

    def parse_text(self, content: str, path: str) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        current_key: Optional[str] = None
        current_has_value = False

        for line_no, raw in enumerate(content.splitlines(), 1):
            line = raw.replace("\t", "    ").rstrip()
            stripped = line.strip()
            if not stripped or stripped.startswith("#") or stripped in ("---", "..."):
                continue

            item = _LIST_ITEM.match(line)
            if item:
                if current_key is None:
                    raise _error(path, line_no, "Found list item without a parent top-level key.")
                if current_has_value:
                    raise _error(
                        path,
                        line_no,
                        f'Key "{current_key}" already has an inline value; '
                        "list items cannot follow it.",
                    )
                text = (item.group(2) or "").strip()
                if not text:
                    raise _error(path, line_no, f'Empty list item for key "{current_key}".')
                value = self._decode(text, path, line_no)
                if not _is_scalar(value):
                    raise _error(
                        path, line_no, f'List items for "{current_key}" must be scalars.'
                    )
                if result.get(current_key) is None:
                    result[current_key] = []
                result[current_key].append(value)
                continue

            key_line = _KEY_LINE.match(line)
            if key_line:
                indent, key, after = key_line.group(1), key_line.group(2), key_line.group(3)
                key = _unquote(key.strip())
                if indent:
                    raise _error(
                        path,
                        line_no,
                        f'Keys must start at column 0, nested mappings are not supported. '
                        f'Offending key: "{key}". Use a dotted key instead.',
                    )
                if not key:
                    raise _error(path, line_no, "Empty key.")
                current_key = key
                current_has_value = bool(after)
                result[key] = self._decode_value(key, after, path, line_no) if after else None
                continue

            raise _error(path, line_no, f'Unexpected line: "{stripped}".')

        return result

    def _decode_value(self, key: str, text: str, path: str, line_no: int) -> Any:
        if text.startswith("["):
            try:
                value = load_scalar(text)
            except yaml.YAMLError as e:
                raise _error(path, line_no, f'Invalid inline list for "{key}": {e}') from e
            if not isinstance(value, list) or not all(_is_scalar(v) for v in value):
                raise _error(
                    path, line_no, f'Inline value for "{key}" must be a list of scalars.'
                )
            return value
        value = self._decode(text, path, line_no)
        if not _is_scalar(value):
            raise _error(
                path, line_no, f'Value for "{key}" must be a scalar or a list of scalars.'
            )
        return value

    def _decode(self, text: str, path: str, line_no: int) -> Any:
        try:
            return load_scalar(text)
        except yaml.YAMLError as e:
            raise ParseError(f"Invalid YAML value in {path} (line {line_no}): {e}") from e
