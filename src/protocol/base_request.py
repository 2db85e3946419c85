"""Shared request builder behavior.

Every request kind is a StashRequest over its own metadata dataclass.
Shared builder methods (count, headers, model, clear, serialization)
live here once; capability mixins add where/objects/all support.
"""

from __future__ import annotations

from dataclasses import fields
from typing import Any, ClassVar, Mapping

from core.errors import StashArgumentError, StashConfigError, StashHeaderKeyError
from core.types import RequestMethod
from filtering.filter import Filter
from modeling.model_mapping import is_model_type
from modeling.resource_naming import resolve_resource_name
from protocol.request_metadata import RequestMetadata
from protocol.sort_directive import SortDirective

_UNSET: Any = object()


class StashRequest:
    """Base builder for one protocol request.

    Subclasses set ``method``, ``resource_field`` (``"from_"`` or ``"to"``)
    and ``metadata_type``.
    """

    method: ClassVar[RequestMethod]
    resource_field: ClassVar[str] = "from_"
    metadata_type: ClassVar[type[RequestMetadata]] = RequestMetadata

    def __init__(self) -> None:
        self.metadata = self.metadata_type()
        self._names_model: type | None = None

    @property
    def resource(self) -> str | None:
        """Return the target resource name."""
        return getattr(self.metadata, self.resource_field)

    def count(self, enabled: object = True) -> "StashRequest":
        """Request counts only; the response data will be empty.

        Args:
            enabled: Truthy to enable count-only mode. Defaults to True.
        """
        self.metadata.count = bool(enabled)
        return self

    def headers(self, dictionary: Mapping[str, Any] | None = _UNSET) -> "StashRequest":
        """Merge engine-specific options into the request headers.

        A None value for a key deletes that key. Passing None clears every
        header.

        Args:
            dictionary: Header names and values, or None to clear.

        Raises:
            StashArgumentError: If called without an argument or with a non-mapping.
            StashHeaderKeyError: If a header name is not a string.
        """
        if dictionary is _UNSET:
            raise StashArgumentError(
                "The 'dictionary' argument is required. Pass None to clear all headers."
            )
        if dictionary is not None and not isinstance(dictionary, Mapping):
            raise StashArgumentError(
                "The 'dictionary' argument must be None or a mapping, "
                f"got {type(dictionary).__name__}."
            )
        if self.metadata.headers is None:
            self.metadata.headers = {}
        if dictionary is None:
            self.metadata.headers.clear()
            return self
        for key in dictionary:
            if not isinstance(key, str):
                raise StashHeaderKeyError(
                    f"Invalid header key {key!r}: only string keys may be used."
                )
        for key, value in dictionary.items():
            if value is None:
                self.metadata.headers.pop(key, None)
            else:
                self.metadata.headers[key] = value
        return self

    def model(self, model_type: type | None = _UNSET) -> "StashRequest":
        """Bind a model type, filling configuration not already set.

        Passing None unbinds the model; configured metadata remains.
        Property names already set are translated to storage names once per
        bound model, so binding the same model again leaves them unchanged.

        Raises:
            StashArgumentError: If called without an argument, or if
                ``model_type`` is not None or a class.
        """
        if model_type is _UNSET:
            raise StashArgumentError(
                "The 'model_type' argument is required. Pass None to unbind the model."
            )
        if model_type is not None and not is_model_type(model_type):
            raise StashArgumentError(
                "Invalid 'model_type' argument. The value must be None or a class."
            )
        self.metadata.model = model_type
        if model_type is None:
            self._names_model = None
            return self
        self._apply_model(model_type)
        if model_type is not self._names_model:
            self._translate_names(model_type)
            self._names_model = model_type
        return self

    def clear(self) -> "StashRequest":
        """Reset all metadata to defaults, keeping this request instance."""
        self.metadata = self.metadata_type()
        self._names_model = None
        return self

    def validate_dispatch(self) -> None:
        """Check dispatch-time requirements.

        Raises:
            StashConfigError: If no resource is set or resolvable from the model.
        """
        if not self.resource:
            raise StashConfigError(
                f"{self.method.upper()} requests require a resource. "
                "Set one on the request or bind a model."
            )

    def to_dict(self) -> dict[str, Any]:
        """Return the request wire payload.

        Headers are flattened to a plain mapping and the model is reduced to
        its type name.
        """
        payload: dict[str, Any] = {"method": self.method}
        for metadata_field in fields(self.metadata):
            key = "from" if metadata_field.name == "from_" else metadata_field.name
            payload[key] = _wire_value(getattr(self.metadata, metadata_field.name))
        model_type = self.metadata.model
        payload["model"] = model_type.__name__ if model_type is not None else None
        headers = self.metadata.headers
        payload["headers"] = dict(headers) if headers is not None else None
        return payload

    def _apply_model(self, model_type: type) -> None:
        if not self.resource:
            self._set_resource(resolve_resource_name(model_type, self.method))

    def _translate_names(self, model_type: type) -> None:
        """Rewrite caller-facing property names already set to storage names."""

    def _set_resource(self, name: str | None) -> None:
        if name is not None and not isinstance(name, str):
            raise StashArgumentError(
                "Invalid 'name' argument. The value must be a string or None, "
                f"got {type(name).__name__}."
            )
        setattr(self.metadata, self.resource_field, name)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.resource!r})"


def _wire_value(value: Any) -> Any:
    if isinstance(value, Filter):
        return value.to_dict()
    if isinstance(value, list):
        return [item.to_dict() if isinstance(item, SortDirective) else item for item in value]
    return value
