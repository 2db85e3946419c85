"""Filter and sort evaluation over in-memory objects.

This module applies filter trees and sort directives to plain dict
objects. It keeps evaluation reusable for any engine holding rows in memory.
"""

from __future__ import annotations

from functools import cmp_to_key
from typing import Any, Callable, Mapping

from filtering.filter_tree import FilterCondition, FilterGroup
from protocol.sort_directive import SortDirective


def matches(group: FilterGroup | None, obj: Mapping[str, Any]) -> bool:
    """Return True when an object satisfies a filter tree.

    An absent or empty tree matches every object.
    """
    if group is None or not group.filters:
        return True
    results = (
        matches(node, obj) if isinstance(node, FilterGroup) else _matches_condition(node, obj)
        for node in group.filters
    )
    return all(results) if group.logic == "and" else any(results)


def filter_objects(
    group: FilterGroup | None, objects: list[dict[str, Any]]
) -> list[dict[str, Any]]:
    """Return the objects that satisfy a filter tree, in storage order."""
    return [obj for obj in objects if matches(group, obj)]


def sort_objects(objects: list[dict[str, Any]], sorts: list[SortDirective]) -> list[dict[str, Any]]:
    """Return objects ordered by sort directives.

    Ordering is stable; None sorts before any value and values of
    incomparable types compare by type name.
    """
    if not sorts:
        return list(objects)

    def compare(left: Mapping[str, Any], right: Mapping[str, Any]) -> int:
        for directive in sorts:
            result = _compare_values(left.get(directive.property), right.get(directive.property))
            if result:
                return -result if directive.dir == "desc" else result
        return 0

    return sorted(objects, key=cmp_to_key(compare))


def _matches_condition(condition: FilterCondition, obj: Mapping[str, Any]) -> bool:
    actual = obj.get(condition.property)
    evaluate = _OPERATIONS[condition.op]
    return evaluate(actual, condition.value)


def _compare_values(left: Any, right: Any) -> int:
    if left is None or right is None:
        return (left is not None) - (right is not None)
    try:
        return (left > right) - (left < right)
    except TypeError:
        left_name, right_name = type(left).__name__, type(right).__name__
        return (left_name > right_name) - (left_name < right_name)


def _ordered(check: Callable[[int], bool]) -> Callable[[Any, Any], bool]:
    def evaluate(actual: Any, expected: Any) -> bool:
        if actual is None or expected is None:
            return False
        try:
            return check((actual > expected) - (actual < expected))
        except TypeError:
            return False

    return evaluate


def _contains(actual: Any, expected: Any) -> bool:
    if actual is None or expected is None:
        return False
    if isinstance(actual, str):
        return str(expected) in actual
    try:
        return expected in actual
    except TypeError:
        return False


def _starts_with(actual: Any, expected: Any) -> bool:
    return isinstance(actual, str) and expected is not None and actual.startswith(str(expected))


def _ends_with(actual: Any, expected: Any) -> bool:
    return isinstance(actual, str) and expected is not None and actual.endswith(str(expected))


def _is_empty(actual: Any, _expected: Any) -> bool:
    if actual is None:
        return True
    if isinstance(actual, str):
        return actual.strip() == ""
    try:
        return len(actual) == 0
    except TypeError:
        return False


def _in_set(actual: Any, expected: Any) -> bool:
    return expected is not None and actual in expected


_OPERATIONS: dict[str, Callable[[Any, Any], bool]] = {
    "eq": lambda actual, expected: actual == expected,
    "neq": lambda actual, expected: actual != expected,
    "lt": _ordered(lambda result: result < 0),
    "lte": _ordered(lambda result: result <= 0),
    "gt": _ordered(lambda result: result > 0),
    "gte": _ordered(lambda result: result >= 0),
    "contains": _contains,
    "doesnotcontain": lambda actual, expected: not _contains(actual, expected),
    "startswith": _starts_with,
    "endswith": _ends_with,
    "isnull": lambda actual, _expected: actual is None,
    "isnotnull": lambda actual, _expected: actual is not None,
    "isempty": _is_empty,
    "isnotempty": lambda actual, expected: not _is_empty(actual, expected),
    "in": _in_set,
    "nin": lambda actual, expected: not _in_set(actual, expected),
}
