"""Structural equality used to deduplicate merged values."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Iterable, Optional, Set


def is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def deep_equals(
    a: Any,
    b: Any,
    _seen_a: Optional[Set[int]] = None,
    _seen_b: Optional[Set[int]] = None,
) -> bool:
    """Compare two values structurally.

    Any ``Sequence`` compares equal to another ``Sequence`` with equal items
    (a list and a tuple may be equal), and likewise for ``Mapping``. Each
    branch of the comparison tracks the containers it has entered, so two
    cycles of the same shape compare equal instead of recursing forever.
    """
    if a is b:
        return True
    if a is None or b is None:
        return False

    a_map, b_map = isinstance(a, Mapping), isinstance(b, Mapping)
    a_list, b_list = is_sequence(a), is_sequence(b)
    if not (a_map or a_list) or not (b_map or b_list):
        if a_map or a_list or b_map or b_list:
            return False
        # bool is an int subclass; True must not equal 1 here
        if isinstance(a, bool) != isinstance(b, bool):
            return False
        return a == b
    if a_map != b_map:
        return False

    seen_a = set(_seen_a) if _seen_a else set()
    seen_b = set(_seen_b) if _seen_b else set()
    if id(a) in seen_a and id(b) in seen_b:
        return True
    seen_a.add(id(a))
    seen_b.add(id(b))

    if a_map:
        if len(a) != len(b):
            return False
        for key, value in a.items():
            if key not in b:
                return False
            if not deep_equals(value, b[key], seen_a, seen_b):
                return False
        return True

    if len(a) != len(b):
        return False
    return all(deep_equals(x, y, seen_a, seen_b) for x, y in zip(a, b))


def contains_deep(items: Iterable[Any], item: Any) -> bool:
    return any(deep_equals(existing, item) for existing in items)
