"""Merging of flattened property maps within a profile."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from .context import BootstrapContext
from .equality import contains_deep, deep_equals, is_sequence
from .flatten import flatten_and_normalize
from .precedence import group_by_profile, order_by_precedence
from .types import MergedSource, NormalizedValue, ParsedSource

logger = logging.getLogger(__name__)


def merge_preserve_existing(existing: Any, incoming: Any) -> Any:
    """Combine two values for the same key, keeping what was applied first.

    - no existing value: take the incoming one
    - structurally equal: keep the existing one
    - both lists: existing items, then incoming items not yet present
    - existing list, incoming scalar: append the scalar if not present
    - existing scalar, incoming list: the scalar first, then missing items
    - two different scalars: keep the existing one
    """
    if existing is None:
        return incoming
    if deep_equals(existing, incoming):
        return existing

    existing_is_list = is_sequence(existing)
    incoming_is_list = is_sequence(incoming)

    if existing_is_list and incoming_is_list:
        result = list(existing)
        for item in incoming:
            if not contains_deep(result, item):
                result.append(item)
        return result

    if existing_is_list:
        result = list(existing)
        if not contains_deep(result, incoming):
            result.append(incoming)
        return result

    if incoming_is_list:
        result = [existing]
        for item in incoming:
            if not contains_deep(result, item):
                result.append(item)
        return result

    return existing


def merge_profile(profile: str, entries: List[ParsedSource]) -> MergedSource:
    """Fold already ordered entries of one profile into a single map."""
    merged: Dict[str, NormalizedValue] = {}
    for entry in entries:
        for key, incoming in flatten_and_normalize(entry.properties).items():
            merged[key] = merge_preserve_existing(merged.get(key), incoming)
    return MergedSource(profile=profile, properties=merged)


def merge_parsed_sources(
    parsed: List[ParsedSource], context: BootstrapContext
) -> List[MergedSource]:
    """Group parsed sources by profile and merge each group in precedence order.

    Args:
        parsed: Parser output in asset order.
        context: Startup context used to rank modules.

    Returns:
        One ``MergedSource`` per profile, in the order profiles were first seen.
    """
    merged: List[MergedSource] = []
    for profile, entries in group_by_profile(parsed).items():
        ordered = order_by_precedence(entries, context)
        logger.debug(
            "Merging profile %r from modules %s",
            profile,
            [entry.module for entry in ordered],
        )
        merged.append(merge_profile(profile, ordered))
    return merged
