"""GET request: retrieve objects from a storage resource."""

from __future__ import annotations

from typing import Any

from core.errors import StashArgumentError
from modeling.model_mapping import storage_name
from protocol.request_capabilities import FromCapability, WhereCapability, flatten_values
from protocol.request_metadata import GetMetadata
from protocol.sort_directive import SortDirective


class GetRequest(WhereCapability, FromCapability):
    """Builder for a request that retrieves objects from storage."""

    method = "get"
    metadata_type = GetMetadata

    def __init__(self, *properties: str) -> None:
        """Create a GET request.

        Args:
            properties: Optional property names to return.
        """
        super().__init__()
        if properties:
            self.properties(*properties)

    def properties(self, *properties: Any) -> "GetRequest":
        """Add property names to return; a single None clears the list.

        Raises:
            StashArgumentError: If a property name is not a string.
        """
        if len(properties) == 1 and properties[0] is None:
            self.metadata.properties.clear()
            return self
        model_type = self.metadata.model
        for name in flatten_values(properties):
            if name is None:
                continue
            if not isinstance(name, str) or not name:
                raise StashArgumentError(
                    "Invalid 'properties' argument. Property names must be non-empty strings."
                )
            if model_type is not None:
                name = storage_name(model_type, name)
            if name not in self.metadata.properties:
                self.metadata.properties.append(name)
        return self

    def distinct(self, enabled: object = True) -> "GetRequest":
        """Return only unique objects."""
        self.metadata.distinct = bool(enabled)
        return self

    def skip(self, count: int | None) -> "GetRequest":
        """Skip a number of matched objects; None resets to zero.

        Raises:
            StashArgumentError: If ``count`` is not a non-negative integer.
        """
        self.metadata.skip = 0 if count is None else _non_negative_int(count, "count")
        return self

    def take(self, count: int | None) -> "GetRequest":
        """Limit the number of returned objects; None or 0 removes the limit.

        Raises:
            StashArgumentError: If ``count`` is not a non-negative integer.
        """
        limit = None if count is None else _non_negative_int(count, "count")
        self.metadata.take = limit or None
        return self

    def sort(self, *sorts: Any) -> "GetRequest":
        """Add ordering keys; a single None clears them.

        Each key may be a SortDirective, text such as ``"{Name} DESC"``, or a
        ``{property, dir}`` mapping. A property already sorted on is skipped.

        Raises:
            StashArgumentError: If a key cannot be parsed.
        """
        if len(sorts) == 1 and sorts[0] is None:
            self.metadata.sorts.clear()
            return self
        model_type = self.metadata.model
        for raw_sort in flatten_values(sorts):
            if raw_sort is None:
                continue
            directive = SortDirective.from_value(raw_sort)
            if model_type is not None:
                target = storage_name(model_type, directive.property)
                directive = SortDirective(target, directive.dir)
            if all(existing.property != directive.property for existing in self.metadata.sorts):
                self.metadata.sorts.append(directive)
        return self

    def _translate_names(self, model_type: type) -> None:
        super()._translate_names(model_type)
        self.metadata.properties = list(
            dict.fromkeys(storage_name(model_type, name) for name in self.metadata.properties)
        )
        self.metadata.sorts = [
            SortDirective(storage_name(model_type, sort.property), sort.dir)
            for sort in self.metadata.sorts
        ]


def _non_negative_int(value: object, argument_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise StashArgumentError(
            f"Invalid '{argument_name}' argument. The value must be a non-negative integer or None."
        )
    return value
