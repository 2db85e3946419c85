"""Capability mixins shared by several request kinds.

Mixins precede StashRequest in each request's bases and extend
``_apply_model`` and ``_translate_names`` cooperatively, so binding a
model updates every capability a request carries.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping

from core.errors import StashArgumentError
from filtering.filter import Filter
from filtering.filter_tree import FilterGroup
from modeling.model_mapping import storage_name, validate_object
from protocol.base_request import StashRequest


class FromCapability(StashRequest):
    """Source resource naming for options, get, and delete requests."""

    resource_field = "from_"

    def from_(self, name: str | None) -> "FromCapability":
        """Set the source resource name.

        Raises:
            StashArgumentError: If ``name`` is not a string or None.
        """
        self._set_resource(name)
        return self


class ToCapability(StashRequest):
    """Target resource naming for post, put, and patch requests."""

    resource_field = "to"

    def to(self, name: str | None) -> "ToCapability":
        """Set the target resource name.

        Raises:
            StashArgumentError: If ``name`` is not a string or None.
        """
        self._set_resource(name)
        return self


class WhereCapability(StashRequest):
    """Filter conditions selecting the objects a request acts on."""

    def where(
        self,
        conditions: Filter | FilterGroup | Callable[[Filter], Any] | str | None,
    ) -> "WhereCapability":
        """Set the conditions matching objects in storage.

        Existing conditions are replaced. A Filter is stored by reference; a
        callback receives a fresh Filter to populate; text is parsed as a
        filter expression. With a model bound, a translated copy is stored
        and the given Filter is left unchanged.

        Args:
            conditions: None to clear, a Filter, a FilterGroup, a callback,
                or filter expression text.

        Raises:
            StashArgumentError: If ``conditions`` is any other kind of value.
            FilterParseError: If expression text is malformed.
        """
        if conditions is None:
            self.metadata.where = None
            return self
        if isinstance(conditions, Filter):
            where = conditions
        elif isinstance(conditions, FilterGroup):
            where = Filter(conditions)
        elif isinstance(conditions, str):
            where = Filter.parse(conditions)
        elif callable(conditions) and not isinstance(conditions, type):
            where = Filter()
            conditions(where)
        else:
            raise StashArgumentError(
                "The 'conditions' argument must be None, a callback, filter text, "
                "or a Filter instance."
            )
        if self.metadata.model is not None:
            where = _translated_filter(where, self.metadata.model)
        self.metadata.where = where
        return self

    def has_conditions(self) -> bool:
        """Return True when at least one filter condition is set."""
        where = self.metadata.where
        return where is not None and not where.is_empty()

    def _translate_names(self, model_type: type) -> None:
        super()._translate_names(model_type)
        if self.metadata.where is not None:
            self.metadata.where = _translated_filter(self.metadata.where, model_type)


class AllCapability(WhereCapability):
    """Explicit opt-in to affect every object when no conditions are set."""

    def all(self, enabled: object = True) -> "AllCapability":
        """Allow the request to affect every object when ``where`` is empty.

        Conditions always take precedence; this flag is ignored when any
        condition is set.

        Args:
            enabled: Truthy to allow affecting all objects. Defaults to True.
        """
        self.metadata.all = bool(enabled)
        return self

    def targets_all(self) -> bool:
        """Return True when the request may affect every stored object."""
        return self.metadata.all and not self.has_conditions()


class ObjectsCapability(StashRequest):
    """Payload objects for post and put requests."""

    def objects(self, *objects: Any) -> "ObjectsCapability":
        """Add payload objects, skipping ones already added.

        Lists and tuples are flattened. A single None clears all objects.

        Raises:
            StashArgumentError: If an entry is not an object or mapping.
            StashValidationError: If a bound model rejects a property value.
        """
        if len(objects) == 1 and objects[0] is None:
            self.metadata.objects.clear()
            return self
        model_type = self.metadata.model
        for obj in flatten_values(objects):
            if obj is None:
                continue
            if not is_payload_object(obj):
                raise StashArgumentError(
                    f"Invalid 'objects' argument. Values must be objects, got {type(obj).__name__}."
                )
            if any(existing is obj for existing in self.metadata.objects):
                continue
            if model_type is not None:
                validate_object(model_type, obj, self.method)
            self.metadata.objects.append(obj)
        return self

    def _apply_model(self, model_type: type) -> None:
        super()._apply_model(model_type)
        for obj in self.metadata.objects:
            validate_object(model_type, obj, self.method)


def is_payload_object(value: object) -> bool:
    """Return True for mappings and plain object instances."""
    if isinstance(value, Mapping):
        return True
    if isinstance(value, (str, bytes, bytearray, int, float, complex, type)):
        return False
    return hasattr(value, "__dict__")


def flatten_values(values: tuple[Any, ...] | list[Any]) -> list[Any]:
    """Flatten nested lists and tuples into one list."""
    flattened: list[Any] = []
    for value in values:
        if isinstance(value, (list, tuple)):
            flattened.extend(flatten_values(value))
        else:
            flattened.append(value)
    return flattened


def _translated_filter(where: Filter, model_type: type) -> Filter:
    def translate(condition, _parent) -> None:
        condition.property = storage_name(model_type, condition.property)

    return where.copy().walk(translate)
