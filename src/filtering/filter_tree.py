"""Filter tree node types and wire serialization.

A filter tree is either None or rooted at one FilterGroup. Groups hold an
ordered list of conditions and nested groups combined by one logic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Union, cast

from core.constants import SUPPORTED_FILTER_LOGIC
from core.errors import StashArgumentError
from core.types import (
    SET_FILTER_OPERATORS,
    SUPPORTED_FILTER_OPERATORS,
    FilterLogic,
    FilterOperator,
)


@dataclass
class FilterCondition:
    """One property comparison.

    Attributes:
        property: Property name the comparison reads.
        op: Comparison operator.
        value: Comparison operand; None for null and empty checks.
    """

    property: str
    op: FilterOperator
    value: Any = None

    def to_dict(self) -> dict[str, Any]:
        """Return the condition wire payload."""
        value = list(self.value) if isinstance(self.value, (tuple, set, frozenset)) else self.value
        return {"property": self.property, "op": self.op, "value": value}


@dataclass
class FilterGroup:
    """Ordered conditions and sub-groups joined by one logic."""

    logic: FilterLogic
    filters: list[FilterNode] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return the group wire payload."""
        return {"logic": self.logic, "filters": [node.to_dict() for node in self.filters]}


FilterNode = Union[FilterCondition, FilterGroup]


def node_from_dict(payload: object) -> FilterNode:
    """Deserialize one filter node from its wire payload.

    Args:
        payload: Mapping holding either ``logic``/``filters`` or
            ``property``/``op``/``value``.

    Returns:
        Restored condition or group.

    Raises:
        StashArgumentError: If the payload does not match the wire shape.
    """
    if not isinstance(payload, Mapping):
        raise StashArgumentError(
            f"Invalid filter payload: expected a mapping, got {type(payload).__name__}."
        )
    if "logic" in payload:
        return group_from_dict(payload)
    raw_property = payload.get("property")
    if not isinstance(raw_property, str) or not raw_property:
        raise StashArgumentError("Invalid filter condition: 'property' must be a non-empty string.")
    op = parse_operator_name(payload.get("op"))
    value = payload.get("value")
    if op in SET_FILTER_OPERATORS and isinstance(value, (tuple, set, frozenset)):
        value = list(value)
    return FilterCondition(property=raw_property, op=op, value=value)


def group_from_dict(payload: Mapping[str, Any]) -> FilterGroup:
    """Deserialize a filter group from its wire payload."""
    logic = parse_logic(payload.get("logic"))
    raw_filters = payload.get("filters") or []
    if not isinstance(raw_filters, (list, tuple)):
        raise StashArgumentError("Invalid filter group: 'filters' must be a list.")
    return FilterGroup(logic=logic, filters=[node_from_dict(item) for item in raw_filters])


def parse_logic(raw_logic: object) -> FilterLogic:
    """Validate a filter logic value."""
    if isinstance(raw_logic, str) and raw_logic.lower() in SUPPORTED_FILTER_LOGIC:
        return cast(FilterLogic, raw_logic.lower())
    raise StashArgumentError(
        f"Invalid filter logic {raw_logic!r}. Use one of: {', '.join(SUPPORTED_FILTER_LOGIC)}."
    )


def parse_operator_name(raw_op: object) -> FilterOperator:
    """Validate a wire operator name."""
    if isinstance(raw_op, str) and raw_op in SUPPORTED_FILTER_OPERATORS:
        return cast(FilterOperator, raw_op)
    raise StashArgumentError(
        f"Invalid filter operator {raw_op!r}. Use one of: {', '.join(SUPPORTED_FILTER_OPERATORS)}."
    )


def iter_conditions(group: FilterGroup):
    """Yield every condition in a tree together with its parent group."""
    for node in group.filters:
        if isinstance(node, FilterGroup):
            yield from iter_conditions(node)
        else:
            yield node, group
