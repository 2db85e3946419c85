"""Filter builder over the filter tree.

This module exposes the Filter object requests hold as their ``where``
clause. Conditions are appended with ``and_``/``or_`` or parsed from
expression text, and the tree serializes to the ``{logic, filters}``
wire shape.
"""

from __future__ import annotations

import copy
from typing import Any, Callable, Mapping, cast

from core.errors import StashArgumentError
from core.types import (
    SET_FILTER_OPERATORS,
    SUPPORTED_FILTER_OPERATORS,
    VALUELESS_FILTER_OPERATORS,
    FilterLogic,
    FilterOperator,
)
from filtering.filter_parser import parse_filter
from filtering.filter_syntax import TOKEN_OPERATORS, render_group
from filtering.filter_tree import (
    FilterCondition,
    FilterGroup,
    FilterNode,
    group_from_dict,
    iter_conditions,
)


class Filter:
    """Mutable builder owning one filter tree."""

    def __init__(self, tree: FilterGroup | None = None) -> None:
        """Create a filter.

        Args:
            tree: Optional root group; the filter takes ownership of it.
        """
        if tree is not None and not isinstance(tree, FilterGroup):
            raise StashArgumentError(
                "Invalid 'tree' argument: expected a FilterGroup or None, "
                f"got {type(tree).__name__}."
            )
        self._tree = tree

    @property
    def tree(self) -> FilterGroup | None:
        """Return the root group, or None when no conditions exist."""
        return self._tree

    @classmethod
    def parse(cls, text: str) -> "Filter":
        """Build a filter from expression text.

        Args:
            text: Filter expression, e.g. ``{Age} >= 21 AND {Name} ~~ "Sam"``.

        Returns:
            Filter holding the parsed tree.

        Raises:
            FilterParseError: If the text is malformed.
        """
        return cls(parse_filter(text))

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any] | None) -> "Filter":
        """Restore a filter from its ``{logic, filters}`` wire payload."""
        if payload is None:
            return cls()
        return cls(group_from_dict(payload))

    def and_(
        self,
        property_or_filter: str | "Filter" | FilterGroup,
        op: str | None = None,
        value: Any = None,
    ) -> "Filter":
        """Append a condition or nested group joined by AND.

        Args:
            property_or_filter: Property name, or a Filter/FilterGroup to nest.
            op: Operator name (``"gte"``) or expression token (``">="``).
            value: Comparison operand.

        Returns:
            This filter for chaining.
        """
        self._append("and", _build_node(property_or_filter, op, value))
        return self

    def or_(
        self,
        property_or_filter: str | "Filter" | FilterGroup,
        op: str | None = None,
        value: Any = None,
    ) -> "Filter":
        """Append a condition or nested group joined by OR.

        Args:
            property_or_filter: Property name, or a Filter/FilterGroup to nest.
            op: Operator name (``"gte"``) or expression token (``">="``).
            value: Comparison operand.

        Returns:
            This filter for chaining.
        """
        self._append("or", _build_node(property_or_filter, op, value))
        return self

    def clear(self) -> "Filter":
        """Remove every condition."""
        self._tree = None
        return self

    def is_empty(self) -> bool:
        """Return True when the filter holds no conditions."""
        return self._tree is None or not self._tree.filters

    def copy(self) -> "Filter":
        """Return a filter holding a deep copy of this tree."""
        return Filter(copy.deepcopy(self._tree))

    def walk(self, callback: Callable[[FilterCondition, FilterGroup], None]) -> "Filter":
        """Call ``callback(condition, parent_group)`` for every condition."""
        if self._tree is not None:
            for condition, parent in list(iter_conditions(self._tree)):
                callback(condition, parent)
        return self

    def to_dict(self) -> dict[str, Any] | None:
        """Return the ``{logic, filters}`` wire payload, or None."""
        return None if self._tree is None else self._tree.to_dict()

    def _append(self, logic: FilterLogic, node: FilterNode | None) -> None:
        if node is None:
            return
        if self._tree is None:
            self._tree = FilterGroup(logic=logic, filters=[node])
        elif self._tree.logic == logic:
            self._tree.filters.append(node)
        elif len(self._tree.filters) <= 1:
            self._tree.logic = logic
            self._tree.filters.append(node)
        else:
            self._tree = FilterGroup(logic=logic, filters=[self._tree, node])

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Filter):
            return self._tree == other._tree
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return "" if self._tree is None else render_group(self._tree)

    def __repr__(self) -> str:
        return f"Filter({str(self)!r})"


def normalize_operator(raw_op: object) -> FilterOperator:
    """Resolve an operator name or expression token.

    Args:
        raw_op: Wire name such as ``"contains"`` or token such as ``"~~"``.

    Returns:
        Wire operator name.

    Raises:
        StashArgumentError: If the operator is unknown.
    """
    if isinstance(raw_op, str):
        lowered = raw_op.strip().lower()
        if lowered in SUPPORTED_FILTER_OPERATORS:
            return cast(FilterOperator, lowered)
        token = raw_op.strip().upper()
        if token in TOKEN_OPERATORS:
            return TOKEN_OPERATORS[token]
    raise StashArgumentError(
        f"Invalid 'op' argument {raw_op!r}. Use one of: {', '.join(SUPPORTED_FILTER_OPERATORS)}."
    )


def _build_node(
    property_or_filter: object,
    op: object,
    value: Any,
) -> FilterNode | None:
    if isinstance(property_or_filter, Filter):
        property_or_filter = property_or_filter.tree
        if property_or_filter is None:
            return None
    if isinstance(property_or_filter, FilterGroup):
        if not property_or_filter.filters:
            return None
        return copy.deepcopy(property_or_filter)
    if not isinstance(property_or_filter, str) or not property_or_filter.strip():
        raise StashArgumentError(
            "Invalid 'property' argument: expected a non-empty string, Filter, or FilterGroup."
        )
    operator = normalize_operator(op)
    if operator in VALUELESS_FILTER_OPERATORS:
        value = None
    elif operator in SET_FILTER_OPERATORS:
        if not isinstance(value, (list, tuple, set, frozenset)):
            raise StashArgumentError(
                f"Invalid 'value' argument for '{operator}': expected a list of values."
            )
        value = list(value)
    return FilterCondition(property=property_or_filter.strip(), op=operator, value=value)
