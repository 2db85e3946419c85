"""Filter expression text parser.

This module parses the filter mini-language into a filter tree::

    {Age} >= 21 AND ({Name} ~~ "Sam" OR {Name} ^~ "Al")

Property references are wrapped in braces. Conditions at one nesting level
share a single AND or OR connector; mixing them requires parentheses.
"""

from __future__ import annotations

import re
from typing import Any

from core.errors import FilterParseError
from core.types import SET_FILTER_OPERATORS, VALUELESS_FILTER_OPERATORS, FilterLogic, FilterOperator
from filtering.filter_syntax import OPERATOR_TOKENS_BY_LENGTH, TOKEN_OPERATORS
from filtering.filter_tree import FilterCondition, FilterGroup, FilterNode

_INT_PATTERN = re.compile(r"[-+]?\d+")
_FLOAT_PATTERN = re.compile(r"[-+]?(\d+\.\d*|\.\d+|\d+)([eE][-+]?\d+)?")
_BARE_VALUE_STOP = set("()[],")
_ESCAPES = {
    '"': '"',
    "'": "'",
    "\\": "\\",
    "/": "/",
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
}


def parse_filter(text: str) -> FilterGroup | None:
    """Parse filter expression text into a filter tree.

    Args:
        text: Expression text.

    Returns:
        Root group, or None when the text is blank.

    Raises:
        FilterParseError: If the text is malformed.
    """
    if not isinstance(text, str):
        raise FilterParseError(f"Filter text must be a string, got {type(text).__name__}.")
    return _FilterTextParser(text).parse()


class _FilterTextParser:
    """Recursive-descent parser over one expression string."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    def parse(self) -> FilterGroup | None:
        self._skip_whitespace()
        if self._at_end():
            return None
        group = self._parse_sequence()
        self._skip_whitespace()
        if not self._at_end():
            if self._peek() == ")":
                raise FilterParseError("Unbalanced parentheses: unexpected ')'", self._pos, ")")
            token = self._read_raw_token()
            raise FilterParseError(f"Unexpected token '{token}'", self._pos - len(token), token)
        return group

    def _parse_sequence(self) -> FilterGroup:
        nodes: list[FilterNode] = [self._parse_term()]
        logic: FilterLogic | None = None
        while True:
            self._skip_whitespace()
            if self._at_end() or self._peek() == ")":
                break
            connector_pos = self._pos
            connector = self._read_connector()
            if logic is None:
                logic = connector
            elif connector != logic:
                raise FilterParseError(
                    "Cannot mix AND and OR at the same level; wrap one side in parentheses",
                    connector_pos,
                    connector.upper(),
                )
            nodes.append(self._parse_term())
        if len(nodes) == 1 and isinstance(nodes[0], FilterGroup):
            return nodes[0]
        return FilterGroup(logic=logic or "and", filters=nodes)

    def _parse_term(self) -> FilterNode:
        self._skip_whitespace()
        if self._at_end():
            raise FilterParseError(
                "Expected a condition but reached the end of the text", self._pos
            )
        if self._peek() != "(":
            return self._parse_condition()
        open_pos = self._pos
        self._pos += 1
        self._skip_whitespace()
        if self._peek() == ")":
            raise FilterParseError("Empty parentheses", open_pos, "()")
        group = self._parse_sequence()
        self._skip_whitespace()
        if self._peek() != ")":
            raise FilterParseError("Unbalanced parentheses: missing ')'", open_pos, "(")
        self._pos += 1
        return group

    def _parse_condition(self) -> FilterCondition:
        property_name = self._read_property()
        self._skip_whitespace()
        op = self._read_operator()
        if op in VALUELESS_FILTER_OPERATORS:
            return FilterCondition(property=property_name, op=op, value=None)
        self._skip_whitespace()
        value_pos = self._pos
        value = self._read_value()
        is_list = isinstance(value, list)
        if op in SET_FILTER_OPERATORS and not is_list:
            raise FilterParseError(
                "Set operators require a bracketed list value, e.g. [1, 2]", value_pos
            )
        if op not in SET_FILTER_OPERATORS and is_list:
            raise FilterParseError(
                "List values are only valid with [] and ![] operators", value_pos
            )
        return FilterCondition(property=property_name, op=op, value=value)

    def _read_property(self) -> str:
        start = self._pos
        if self._peek() != "{":
            token = self._read_raw_token()
            raise FilterParseError(
                f"Expected a property reference in braces (e.g. {{Name}}), got '{token}'",
                start,
                token,
            )
        end = self._text.find("}", start + 1)
        if end < 0:
            raise FilterParseError("Unterminated property reference", start, self._text[start:])
        name = self._text[start + 1 : end].strip()
        if not name:
            raise FilterParseError("Empty property reference", start, "{}")
        self._pos = end + 1
        return name

    def _read_operator(self) -> FilterOperator:
        start = self._pos
        for token in OPERATOR_TOKENS_BY_LENGTH:
            candidate = self._text[start : start + len(token)]
            if candidate.upper() == token:
                self._pos += len(token)
                return TOKEN_OPERATORS[token]
        if self._at_end():
            raise FilterParseError("Expected an operator but reached the end of the text", start)
        token = self._read_raw_token()
        raise FilterParseError(f"Unknown operator '{token}'", start, token)

    def _read_connector(self) -> FilterLogic:
        start = self._pos
        while not self._at_end() and self._text[self._pos].isalpha():
            self._pos += 1
        token = self._text[start : self._pos] or self._read_raw_token()
        lowered = token.lower()
        if lowered == "and":
            return "and"
        if lowered == "or":
            return "or"
        raise FilterParseError(
            f"Expected AND or OR between conditions, got '{token}'", start, token
        )

    def _read_value(self) -> Any:
        if self._at_end():
            raise FilterParseError("Expected a value but reached the end of the text", self._pos)
        char = self._peek()
        if char in ('"', "'"):
            return self._read_string()
        if char == "[":
            return self._read_list()
        return self._read_bare_value()

    def _read_list(self) -> list[Any]:
        start = self._pos
        self._pos += 1
        items: list[Any] = []
        self._skip_whitespace()
        if self._peek() == "]":
            self._pos += 1
            return items
        while True:
            self._skip_whitespace()
            if self._at_end():
                raise FilterParseError("Unterminated list value", start, "[")
            if self._peek() == "[":
                raise FilterParseError("Nested lists are not supported", self._pos, "[")
            items.append(self._read_value())
            self._skip_whitespace()
            char = self._peek()
            if char == ",":
                self._pos += 1
            elif char == "]":
                self._pos += 1
                return items
            else:
                raise FilterParseError("Unterminated list value", start, "[")

    def _read_string(self) -> str:
        start = self._pos
        quote = self._text[start]
        self._pos += 1
        chars: list[str] = []
        while not self._at_end():
            char = self._text[self._pos]
            if char == quote:
                self._pos += 1
                return "".join(chars)
            if char == "\\":
                chars.append(self._read_escape())
                continue
            chars.append(char)
            self._pos += 1
        raise FilterParseError("Unterminated string", start, self._text[start:])

    def _read_escape(self) -> str:
        escape_pos = self._pos
        self._pos += 1
        if self._at_end():
            raise FilterParseError("Unterminated escape sequence", escape_pos, "\\")
        code = self._text[self._pos]
        if code == "u":
            digits = self._text[self._pos + 1 : self._pos + 5]
            if len(digits) != 4 or not all(c in "0123456789abcdefABCDEF" for c in digits):
                raise FilterParseError("Invalid unicode escape", escape_pos, "\\u" + digits)
            self._pos += 5
            return chr(int(digits, 16))
        self._pos += 1
        return _ESCAPES.get(code, code)

    def _read_bare_value(self) -> Any:
        start = self._pos
        while not self._at_end():
            char = self._text[self._pos]
            if char.isspace() or char in _BARE_VALUE_STOP:
                break
            self._pos += 1
        token = self._text[start : self._pos]
        if not token:
            raise FilterParseError(f"Expected a value, got '{self._peek()}'", start, self._peek())
        lowered = token.lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
        if lowered == "null":
            return None
        if _INT_PATTERN.fullmatch(token):
            return int(token)
        if _FLOAT_PATTERN.fullmatch(token):
            return float(token)
        raise FilterParseError(
            f"Invalid value '{token}'; wrap text values in quotes", start, token
        )

    def _read_raw_token(self) -> str:
        start = self._pos
        while not self._at_end() and not self._text[self._pos].isspace():
            self._pos += 1
        return self._text[start : self._pos]

    def _skip_whitespace(self) -> None:
        while not self._at_end() and self._text[self._pos].isspace():
            self._pos += 1

    def _peek(self) -> str:
        return self._text[self._pos] if self._pos < len(self._text) else ""

    def _at_end(self) -> bool:
        return self._pos >= len(self._text)
