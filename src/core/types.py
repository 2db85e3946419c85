"""Shared typed models.

This module defines the literal vocabularies and the response envelope
shared by filtering, modeling, requests, and engines.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Mapping, Sequence

from core.constants import DEFAULT_RESPONSE_CODE, ERROR_RESPONSE_CODE

RequestMethod = Literal["options", "get", "post", "put", "patch", "delete"]
FilterLogic = Literal["and", "or"]
SortDirection = Literal["asc", "desc"]
FilterOperator = Literal[
    "eq",
    "neq",
    "lt",
    "lte",
    "gt",
    "gte",
    "contains",
    "doesnotcontain",
    "startswith",
    "endswith",
    "isnull",
    "isnotnull",
    "isempty",
    "isnotempty",
    "in",
    "nin",
]
SUPPORTED_FILTER_OPERATORS: tuple[FilterOperator, ...] = (
    "eq",
    "neq",
    "lt",
    "lte",
    "gt",
    "gte",
    "contains",
    "doesnotcontain",
    "startswith",
    "endswith",
    "isnull",
    "isnotnull",
    "isempty",
    "isnotempty",
    "in",
    "nin",
)
VALUELESS_FILTER_OPERATORS: tuple[FilterOperator, ...] = (
    "isnull",
    "isnotnull",
    "isempty",
    "isnotempty",
)
SET_FILTER_OPERATORS: tuple[FilterOperator, ...] = ("in", "nin")
PrimitiveType = Literal["str", "number", "bool", "date", "bytes", "any"]
SUPPORTED_PRIMITIVE_TYPES: tuple[PrimitiveType, ...] = (
    "str",
    "number",
    "bool",
    "date",
    "bytes",
    "any",
)


@dataclass(frozen=True)
class ResponseError:
    """One engine error descriptor carried on a response.

    Attributes:
        message: Human-readable failure description.
        code: Optional engine-specific error code.
    """

    message: str
    code: str | None = None

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-serializable payload."""
        return {"message": self.message, "code": self.code}


@dataclass
class StashResponse:
    """Result envelope every engine returns.

    Attributes:
        data: Returned objects; empty in count-only mode.
        returned: Number of objects in ``data``.
        total: Number of objects matched before paging.
        affected: Number of objects created, updated, or deleted.
        code: HTTP-like status code.
        errors: Optional engine error descriptors.
    """

    data: list[Any] = field(default_factory=list)
    returned: int = 0
    total: int = 0
    affected: int = 0
    code: int = DEFAULT_RESPONSE_CODE
    errors: list[ResponseError] | None = None

    @classmethod
    def setup(
        cls,
        data: Sequence[Any] | None = None,
        total: int | None = None,
        affected: int = 0,
        count_only: bool = False,
    ) -> "StashResponse":
        """Build a response that honors the count-only invariant.

        Args:
            data: Result objects.
            total: Match count; defaults to the number of objects.
            affected: Number of objects changed in storage.
            count_only: Suppress returned objects while keeping counts.

        Returns:
            A populated response.
        """
        rows = list(data or [])
        total_count = len(rows) if total is None else total
        if count_only:
            return cls(data=[], returned=0, total=total_count, affected=affected)
        return cls(data=rows, returned=len(rows), total=total_count, affected=affected)

    @classmethod
    def failure(cls, *errors: ResponseError, code: int = ERROR_RESPONSE_CODE) -> "StashResponse":
        """Build an empty response describing engine errors."""
        return cls(code=code, errors=list(errors))

    def single(self) -> Any:
        """Return the first data object, or None when there is none."""
        return self.data[0] if self.data else None

    @property
    def ok(self) -> bool:
        """Return True when the response carries no errors."""
        return not self.errors

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-serializable payload."""
        payload: dict[str, object] = {
            "data": list(self.data),
            "returned": self.returned,
            "total": self.total,
            "affected": self.affected,
            "code": self.code,
        }
        if self.errors:
            payload["errors"] = [error.to_dict() for error in self.errors]
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "StashResponse":
        """Restore a response from its transport payload."""
        raw_errors = payload.get("errors")
        errors = None
        if raw_errors:
            errors = [
                ResponseError(message=str(item.get("message")), code=item.get("code"))
                for item in raw_errors
            ]
        return cls(
            data=list(payload.get("data") or []),
            returned=int(payload.get("returned", 0)),
            total=int(payload.get("total", 0)),
            affected=int(payload.get("affected", 0)),
            code=int(payload.get("code", DEFAULT_RESPONSE_CODE)),
            errors=errors,
        )
