"""Sort directives for get requests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, cast

from core.constants import SORT_ASCENDING, SORT_DESCENDING
from core.errors import StashArgumentError
from core.types import SortDirection


@dataclass(frozen=True)
class SortDirective:
    """One ordering key.

    Attributes:
        property: Property name to order by.
        dir: ``"asc"`` or ``"desc"``.
    """

    property: str
    dir: SortDirection = SORT_ASCENDING

    @classmethod
    def parse(cls, text: str) -> "SortDirective":
        """Parse ``"{Name} DESC"``, ``"Name desc"``, or ``"Name"``.

        Raises:
            StashArgumentError: If the text is not a sort expression.
        """
        stripped = text.strip()
        if stripped.startswith("{"):
            end = stripped.find("}")
            if end < 0:
                raise StashArgumentError(f"Invalid sort {text!r}: unterminated property reference.")
            name = stripped[1:end].strip()
            remainder = stripped[end + 1 :].split()
        else:
            parts = stripped.split()
            name = parts[0] if parts else ""
            remainder = parts[1:]
        if not name:
            raise StashArgumentError(f"Invalid sort {text!r}: a property name is required.")
        if len(remainder) > 1:
            raise StashArgumentError(
                f"Invalid sort {text!r}: wrap property names containing spaces in braces."
            )
        direction = remainder[0].lower() if remainder else SORT_ASCENDING
        return cls(property=name, dir=parse_direction(direction))

    @classmethod
    def from_value(cls, raw_value: object) -> "SortDirective":
        """Normalize a directive, expression text, or ``{property, dir}`` mapping."""
        if isinstance(raw_value, SortDirective):
            return raw_value
        if isinstance(raw_value, str):
            return cls.parse(raw_value)
        if isinstance(raw_value, Mapping):
            name = raw_value.get("property")
            if not isinstance(name, str) or not name:
                raise StashArgumentError(
                    "Invalid sort mapping: 'property' must be a non-empty string."
                )
            return cls(property=name, dir=parse_direction(raw_value.get("dir", SORT_ASCENDING)))
        raise StashArgumentError(
            f"Invalid 'sorts' argument: expected text, a mapping, or SortDirective, "
            f"got {type(raw_value).__name__}."
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the sort wire payload."""
        return {"property": self.property, "dir": self.dir}

    def __str__(self) -> str:
        return f"{{{self.property}}} {self.dir.upper()}"


def parse_direction(raw_value: object) -> SortDirection:
    """Validate a sort direction."""
    if isinstance(raw_value, str) and raw_value.lower() in (SORT_ASCENDING, SORT_DESCENDING):
        return cast(SortDirection, raw_value.lower())
    raise StashArgumentError(f"Invalid sort direction {raw_value!r}. Use 'asc' or 'desc'.")
