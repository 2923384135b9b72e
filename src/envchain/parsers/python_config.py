"""Heuristic extraction of properties from ``application*.py`` sources.

Configuration can be written as code::

    class Application(ConfigurationProperty):
        def properties(self):
            return ConfigurationProperties([
                Property.custom("server.port", 8080, "HTTP port"),
                TimeoutProperty("server.timeout", 30),
            ])

This is a lexical scan, not a Python parser. Comments are removed with
string literals preserved, classes whose bases end in
``ConfigurationProperty`` are located, and inside each the argument of the
first ``ConfigurationProperties(...)`` call is scanned for calls that look
like property definitions: the callee is ``Property``, a class declared in
the same file as a ``Property`` subclass, a name ending in ``Property``, or
any capitalized name. The first argument must be a string literal (the key);
the second, if any, is the value.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Set, Tuple

from ..core.types import DEFAULT_PROFILE, Asset
from .base import EnvironmentParser

PROPERTY_TYPE = "Property"
CONFIGURATION_BASE_SUFFIX = "ConfigurationProperty"
PROPERTIES_CALL = "ConfigurationProperties"
PROFILE_PREFIX = "application_"

_CLASS_HEADER = re.compile(
    r"^([ \t]*)class\s+([A-Za-z_]\w*)\s*(?:\(([^)]*)\))?\s*:", re.MULTILINE
)
_PROPERTIES_CALL = re.compile(r"\b" + PROPERTIES_CALL + r"\s*\(")
_KEYWORD = re.compile(r"[A-Za-z_]\w*\s*=(?!=)")
_STRING_PREFIX = re.compile(r"[rRbBuUfF]{1,2}(?=['\"])")
_OPENERS = {"(": ")", "[": "]", "{": "}"}
_WHITESPACE = " \t\r\n"


def _string_end(s: str, start: int) -> int:
    """Index just past the string literal whose opening quote is at ``start``."""
    quote = s[start] * 3 if s.startswith(s[start] * 3, start) else s[start]
    i = start + len(quote)
    while i < len(s):
        if s[i] == "\\":
            i += 2
            continue
        if s.startswith(quote, i):
            return i + len(quote)
        if len(quote) == 1 and s[i] == "\n":
            return i
        i += 1
    return len(s)


def strip_comments(source: str) -> str:
    out: List[str] = []
    i = 0
    while i < len(source):
        ch = source[i]
        if ch in "'\"":
            end = _string_end(source, i)
            out.append(source[i:end])
            i = end
            continue
        if ch == "#":
            while i < len(source) and source[i] != "\n":
                i += 1
            continue
        out.append(ch)
        i += 1
    return "".join(out)


def mask_strings(source: str) -> str:
    """Blank out string contents, keeping quotes, newlines and offsets."""
    out: List[str] = []
    i = 0
    while i < len(source):
        if source[i] in "'\"":
            end = _string_end(source, i)
            literal = source[i:end]
            out.append(
                "".join(c if c in "'\"\n" else " " for c in literal)
            )
            i = end
            continue
        out.append(source[i])
        i += 1
    return "".join(out)


def _matching_close(masked: str, open_index: int) -> int:
    opener = masked[open_index]
    closer = _OPENERS[opener]
    depth = 0
    for i in range(open_index, len(masked)):
        if masked[i] == opener:
            depth += 1
        elif masked[i] == closer:
            depth -= 1
            if depth == 0:
                return i
    return -1


def _base_names(bases: Optional[str]) -> List[str]:
    if not bases:
        return []
    names = []
    for base in bases.split(","):
        base = base.strip()
        if base and "=" not in base:
            names.append(base.split(".")[-1])
    return names


def _class_body_end(masked: str, body_start: int, class_indent: int) -> int:
    depth = 0
    at_line_start = False
    i = body_start
    while i < len(masked):
        ch = masked[i]
        if ch == "\n":
            at_line_start = depth == 0
            i += 1
            continue
        if at_line_start:
            j = i
            while j < len(masked) and masked[j] in " \t":
                j += 1
            if j < len(masked) and masked[j] not in "\r\n" and j - i <= class_indent:
                return i
            at_line_start = False
            i = j
            continue
        if ch in "([{":
            depth += 1
        elif ch in ")]}":
            depth = max(0, depth - 1)
        i += 1
    return len(masked)


class PythonConfigParser(EnvironmentParser):
    def can_parse(self, asset: Asset) -> bool:
        name = asset.file_name
        return name.endswith(".py") and name.startswith("application")

    def extract_profile(self, file_name: str) -> str:
        """``application_dev_eu.py`` -> ``dev_eu``; any other name is the default profile."""
        base_name = file_name[: -len(".py")] if file_name.endswith(".py") else file_name
        if base_name.startswith(PROFILE_PREFIX) and len(base_name) > len(PROFILE_PREFIX):
            return base_name[len(PROFILE_PREFIX):]
        return DEFAULT_PROFILE

    def parse_text(self, content: str, path: str) -> Dict[str, Any]:
        clean = strip_comments(content)
        masked = mask_strings(clean)

        declared: Set[str] = set()
        config_bodies: List[Tuple[int, int]] = []
        for header in _CLASS_HEADER.finditer(masked):
            bases = _base_names(header.group(3))
            if any(base == PROPERTY_TYPE or base in declared for base in bases):
                declared.add(header.group(2))
            if any(base.endswith(CONFIGURATION_BASE_SUFFIX) for base in bases):
                end = _class_body_end(masked, header.end(), len(header.group(1)))
                config_bodies.append((header.end(), end))

        out: Dict[str, Any] = {}
        for start, end in config_bodies:
            block = self._properties_block(masked, start, end)
            if block is None:
                continue
            out.update(self._parse_entries(clean, masked, block[0], block[1], declared))
        return out

    def _properties_block(self, masked: str, start: int, end: int) -> Optional[Tuple[int, int]]:
        call = _PROPERTIES_CALL.search(masked, start, end)
        if call is None:
            return None
        paren = call.end() - 1
        close = _matching_close(masked, paren)
        if close < 0:
            return None
        inner_start, inner_end = paren + 1, close
        # unwrap a single literal argument: ConfigurationProperties([ ... ])
        while inner_start < inner_end and masked[inner_start] in _WHITESPACE:
            inner_start += 1
        if inner_start < inner_end and masked[inner_start] in _OPENERS:
            literal_close = _matching_close(masked, inner_start)
            if literal_close > 0 and not masked[literal_close + 1 : inner_end].strip(" \t\r\n,"):
                return inner_start + 1, literal_close
        return paren + 1, close

    def _parse_entries(
        self, clean: str, masked: str, start: int, end: int, declared: Set[str]
    ) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        i = start
        while i < end:
            if masked[i] in _WHITESPACE or masked[i] == ",":
                i += 1
                continue

            j = i
            while j < end and masked[j] not in "(,":
                j += 1
            if j >= end:
                break
            if masked[j] == ",":
                i = j + 1
                continue

            callee = self._callee_before(masked, j)
            if callee is None or not self._is_property_creator(callee, declared):
                i = j + 1
                continue

            close = _matching_close(masked, j)
            if close < 0 or close > end:
                break
            args = self._parse_arguments(clean[j + 1 : close])
            if args and isinstance(args[0], str):
                out[args[0]] = args[1] if len(args) > 1 else None
            i = close + 1
        return out

    def _callee_before(self, s: str, paren: int) -> Optional[str]:
        i = paren - 1
        while i >= 0 and s[i] in _WHITESPACE:
            i -= 1
        end = i
        while i >= 0 and (s[i].isalnum() or s[i] in "_."):
            i -= 1
        token = s[i + 1 : end + 1].strip(".")
        return token or None

    def _is_property_creator(self, callee: str, declared: Set[str]) -> bool:
        simple = callee.split(".")[0]
        if simple == PROPERTY_TYPE or simple in declared:
            return True
        if simple.endswith(PROPERTY_TYPE):
            return True
        return simple[:1].isupper()

    def _parse_arguments(self, s: str) -> List[Any]:
        values: List[Any] = []
        i = 0
        while i < len(s):
            while i < len(s) and s[i] in _WHITESPACE:
                i += 1
            if i >= len(s):
                break
            value, i = self._parse_value(s, i)
            values.append(value)
            while i < len(s) and s[i] in _WHITESPACE:
                i += 1
            if i < len(s) and s[i] == ",":
                i += 1
        return values

    def _parse_value(self, s: str, start: int) -> Tuple[Any, int]:
        i = start
        while i < len(s) and s[i] in _WHITESPACE:
            i += 1
        if i >= len(s):
            return None, i

        keyword = _KEYWORD.match(s, i)
        if keyword:
            return self._parse_value(s, keyword.end())

        prefix = _STRING_PREFIX.match(s, i)
        if prefix:
            i = prefix.end()
        if s[i] in "'\"":
            end = _string_end(s, i)
            return self._decode_string(s[i:end]), end

        if s[i] in "[(":
            return self._parse_sequence(s, i)

        j = i
        while j < len(s) and s[j] not in _WHITESPACE and s[j] not in ",)]}":
            j += 1
        if j == i:
            # lone closing bracket; consume it so callers always advance
            return None, i + 1
        return self._decode_token(s[i:j].strip()), j

    def _parse_sequence(self, s: str, start: int) -> Tuple[List[Any], int]:
        closer = "]" if s[start] == "[" else ")"
        items: List[Any] = []
        i = start + 1
        while i < len(s):
            while i < len(s) and s[i] in _WHITESPACE:
                i += 1
            if i >= len(s):
                break
            if s[i] == closer:
                return items, i + 1
            value, i = self._parse_value(s, i)
            items.append(value)
            while i < len(s) and s[i] in _WHITESPACE:
                i += 1
            if i < len(s) and s[i] == ",":
                i += 1
            elif i < len(s) and s[i] != closer:
                # stray token such as a nested call: step over it
                i += 1
        return items, i

    @staticmethod
    def _decode_string(literal: str) -> str:
        quote = literal[:3] if literal[:3] in ('"""', "'''") else literal[:1]
        body = literal[len(quote):]
        if body.endswith(quote):
            body = body[: -len(quote)]
        escapes = {"n": "\n", "r": "\r", "t": "\t", '"': '"', "'": "'", "\\": "\\"}
        out: List[str] = []
        i = 0
        while i < len(body):
            if body[i] == "\\" and i + 1 < len(body):
                out.append(escapes.get(body[i + 1], body[i + 1]))
                i += 2
                continue
            out.append(body[i])
            i += 1
        return "".join(out)

    @staticmethod
    def _decode_token(token: str) -> Any:
        if not token:
            return None
        if token in ("True", "true"):
            return True
        if token in ("False", "false"):
            return False
        if token in ("None", "null"):
            return None
        try:
            return int(token)
        except ValueError:
            pass
        try:
            return float(token)
        except ValueError:
            return token
