"""Grouping of parsed sources by profile and ordering by module precedence."""

from __future__ import annotations

from typing import Dict, List

from .context import BootstrapContext
from .types import LOWEST_PRECEDENCE, ParsedSource

ROOT_RANK = 0
FRAMEWORK_RANK = 1
FRAMEWORK_SUBMODULE_RANK = 2
STDLIB_RANK = 3
OTHER_RANK = 4


def precedence_rank(module: str, context: BootstrapContext) -> int:
    """Rank a module for merge ordering; lower ranks are merged first and win."""
    if not context.is_known_module(module):
        return LOWEST_PRECEDENCE
    if module == context.root_module:
        return ROOT_RANK
    if module == context.framework_module:
        return FRAMEWORK_RANK
    if module.startswith(context.framework_module):
        return FRAMEWORK_SUBMODULE_RANK
    if module.split(".", 1)[0] in context.stdlib_modules:
        return STDLIB_RANK
    return OTHER_RANK


def group_by_profile(parsed: List[ParsedSource]) -> Dict[str, List[ParsedSource]]:
    grouped: Dict[str, List[ParsedSource]] = {}
    for entry in parsed:
        grouped.setdefault(entry.profile, []).append(entry)
    return grouped


def order_by_precedence(
    entries: List[ParsedSource], context: BootstrapContext
) -> List[ParsedSource]:
    # sorted() is stable, so equal ranks keep asset order
    return sorted(entries, key=lambda entry: precedence_rank(entry.module, context))
