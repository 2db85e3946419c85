"""Filter expression text tokens and rendering.

Operator tokens map one to one onto wire operator names so parsed text
and rendered text describe the same tree.
"""

from __future__ import annotations

import json
from typing import Any

from core.types import VALUELESS_FILTER_OPERATORS, FilterOperator
from filtering.filter_tree import FilterCondition, FilterGroup, FilterNode

OPERATOR_TOKENS: dict[FilterOperator, str] = {
    "eq": "==",
    "neq": "!=",
    "lt": "<",
    "lte": "<=",
    "gt": ">",
    "gte": ">=",
    "contains": "~~",
    "doesnotcontain": "!~~",
    "startswith": "^~",
    "endswith": "~$",
    "isnull": ">NULL<",
    "isnotnull": "!>NULL<",
    "isempty": ">EMPTY<",
    "isnotempty": "!>EMPTY<",
    "in": "[]",
    "nin": "![]",
}
TOKEN_OPERATORS: dict[str, FilterOperator] = {token: op for op, token in OPERATOR_TOKENS.items()}
# Longest first so ">=" never matches as ">" and "!>NULL<" never as "!=".
OPERATOR_TOKENS_BY_LENGTH: tuple[str, ...] = tuple(
    sorted(TOKEN_OPERATORS, key=len, reverse=True)
)


def render_group(group: FilterGroup, nested: bool = False) -> str:
    """Render a filter group as expression text.

    Args:
        group: Group to render.
        nested: Wrap the output in parentheses.

    Returns:
        Expression text that parses back into an equal tree.
    """
    connector = f" {group.logic.upper()} "
    text = connector.join(_render_node(node) for node in group.filters)
    return f"({text})" if nested else text


def _render_node(node: FilterNode) -> str:
    if isinstance(node, FilterGroup):
        return render_group(node, nested=True)
    return render_condition(node)


def render_condition(condition: FilterCondition) -> str:
    """Render one condition as expression text."""
    token = OPERATOR_TOKENS[condition.op]
    if condition.op in VALUELESS_FILTER_OPERATORS:
        return f"{{{condition.property}}} {token}"
    return f"{{{condition.property}}} {token} {render_value(condition.value)}"


def render_value(value: Any) -> str:
    """Render a literal value in expression syntax."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, (list, tuple, set, frozenset)):
        return "[" + ", ".join(render_value(item) for item in value) + "]"
    return json.dumps(str(value), ensure_ascii=False)
