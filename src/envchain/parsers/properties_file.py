"""Parser for Java-style ``.properties`` files."""

from __future__ import annotations

import string
from typing import Dict, Iterator, List, Tuple

from ..core.errors import ParseError
from .base import EnvironmentParser

_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}


def _logical_lines(content: str) -> Iterator[str]:
    """Join lines ending in an odd number of backslashes with the next line."""
    pending: List[str] = []
    for raw in content.splitlines():
        line = raw.lstrip() if pending else raw
        if not pending:
            stripped = line.strip()
            if not stripped or stripped[0] in "#!":
                continue
        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2 == 1:
            pending.append(line[:-1])
            continue
        pending.append(line)
        yield "".join(pending)
        pending = []
    if pending:
        yield "".join(pending)


def _unescape(text: str, path: str) -> str:
    out: List[str] = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch != "\\" or i + 1 >= len(text):
            out.append(ch)
            i += 1
            continue
        nxt = text[i + 1]
        if nxt == "u":
            code = text[i + 2 : i + 6]
            if len(code) != 4 or any(c not in string.hexdigits for c in code):
                raise ParseError(f"Malformed \\u escape in {path}: \\u{code}")
            out.append(chr(int(code, 16)))
            i += 6
            continue
        out.append(_ESCAPES.get(nxt, nxt))
        i += 2
    return "".join(out)


def split_key_value(line: str) -> Tuple[str, str]:
    line = line.lstrip()
    i = 0
    while i < len(line):
        ch = line[i]
        if ch == "\\":
            i += 2
            continue
        if ch in "=: \t\f":
            break
        i += 1
    key = line[:i]
    rest = line[i:].lstrip(" \t\f")
    if rest[:1] in ("=", ":"):
        rest = rest[1:].lstrip(" \t\f")
    return key, rest


class PropertiesParser(EnvironmentParser):
    extensions = (".properties",)

    def parse_text(self, content: str, path: str) -> Dict[str, str]:
        properties: Dict[str, str] = {}
        for line in _logical_lines(content):
            key, value = split_key_value(line)
            key = _unescape(key, path)
            if not key:
                continue
            properties[key] = _unescape(value, path)
        return properties
