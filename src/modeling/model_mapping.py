"""Model-to-storage mapping helpers.

This module translates between caller-facing model objects and
storage-shaped objects. A model type is any class whose attributes
declare property definitions; no common base class is required.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping

from core.errors import StashArgumentError, StashValidationError
from modeling.property_definition import PropertyDefinition, definition_from_value, hook_functions
from modeling.resource_naming import resolve_resource_name, resource_config

_MISSING: Any = object()
_ZERO_VALUES: dict[str, Any] = {
    "bool": False,
    "number": 0,
    "str": "",
    "bytes": b"",
}


def is_model_type(value: object) -> bool:
    """Return True when a value can be bound as a model type."""
    return isinstance(value, type)


def model_properties(model_type: type) -> dict[str, PropertyDefinition]:
    """Collect property definitions declared on a model type.

    Base class declarations come first; a subclass redeclaring a property
    replaces the definition but keeps its original position.

    Args:
        model_type: Model class.

    Returns:
        Ordered mapping of caller-facing property name to definition.
    """
    _require_model_type(model_type)
    properties: dict[str, PropertyDefinition] = {}
    for klass in reversed(model_type.__mro__):
        if klass is object:
            continue
        for name, raw_value in vars(klass).items():
            if name.startswith("_"):
                continue
            definition = definition_from_value(name, raw_value)
            if definition is not None:
                properties[name] = definition
    return properties


def map_property(model_type: type, property_name: str) -> PropertyDefinition | None:
    """Look up the storage definition of one model property."""
    return model_properties(model_type).get(property_name)


def storage_name(model_type: type, property_name: str) -> str:
    """Translate a caller-facing property name to its storage target.

    Names that are not declared on the model pass through unchanged.
    """
    definition = map_property(model_type, property_name)
    return definition.target if definition else property_name


def extract_primary_keys(model_type: type) -> tuple[str, ...]:
    """Return the caller-facing names of primary-key properties in declaration order."""
    return tuple(name for name, definition in model_properties(model_type).items() if definition.pk)


def primary_key_targets(model_type: type) -> tuple[str, ...]:
    """Return the storage names of primary-key properties in declaration order."""
    return tuple(
        definition.target for definition in model_properties(model_type).values() if definition.pk
    )


def compute_default(definition: PropertyDefinition) -> Any:
    """Compute the value a property takes when none is provided.

    Args:
        definition: Property definition.

    Returns:
        The declared default verbatim, a type-appropriate zero value for
        required properties, or None.
    """
    if definition.has_default:
        return definition.default
    if not definition.required:
        return None
    if definition.type == "date":
        return datetime.now(timezone.utc)
    return _ZERO_VALUES.get(definition.type)


def apply_transforms(definition: PropertyDefinition, value: Any) -> Any:
    """Run a property's transform callables in order."""
    for transform in hook_functions(definition.transform):
        value = transform(value)
    return value


def apply_validation(definition: PropertyDefinition, value: Any) -> None:
    """Run a property's validators in order.

    Raises:
        StashValidationError: If a validator returns a falsy result or
            raises StashValidationError itself.
    """
    property_name = definition.name or definition.target
    for validator in hook_functions(definition.validate):
        try:
            accepted = validator(value)
        except StashValidationError as error:
            if error.property_name is None:
                error.property_name = property_name
            raise
        if not accepted:
            raise StashValidationError(
                f"Invalid value {value!r} for property '{property_name}'.",
                property_name=property_name,
            )


def validate_object(model_type: type, obj: object, method: str | None = None) -> None:
    """Validate the values an object would carry to storage.

    Missing and None values are skipped, except on ``post`` where a
    computed default other than None is validated in their place.
    """
    for name, definition in model_properties(model_type).items():
        if definition.omitted_for(method):
            continue
        value = _read_value(obj, name, definition.target)
        if value is _MISSING or value is None:
            if method != "post":
                continue
            value = compute_default(definition)
            if value is None:
                continue
        apply_validation(definition, value)


def unmodel(model_type: type, obj: object, method: str = "post") -> dict[str, Any]:
    """Convert a model object or mapping into a storage-shaped dict.

    Properties are keyed by storage target. On ``post`` missing values take
    their computed default; on other methods missing values are left out so
    partial updates never overwrite stored fields. Omitted properties are
    dropped, values are validated, then transformed. None is stored as-is
    and never reaches validators or transforms.

    Args:
        model_type: Model class.
        obj: Model instance or mapping keyed by property (or target) name.
        method: Request method the payload is built for.

    Returns:
        Storage-shaped object.
    """
    storage: dict[str, Any] = {}
    for name, definition in model_properties(model_type).items():
        if definition.omitted_for(method):
            continue
        value = _read_value(obj, name, definition.target)
        if value is _MISSING or value is None:
            if method != "post":
                if value is None:
                    storage[definition.target] = None
                continue
            value = compute_default(definition)
            if value is None:
                storage[definition.target] = None
                continue
        apply_validation(definition, value)
        storage[definition.target] = apply_transforms(definition, value)
    return storage


def map_template(model_type: type, template: object, method: str = "patch") -> dict[str, Any]:
    """Convert a patch template into storage names without applying defaults.

    Keys not declared on the model are kept as storage-native names.
    """
    source = template if isinstance(template, Mapping) else _instance_values(template)
    mapped: dict[str, Any] = {}
    for key, value in source.items():
        definition = map_property(model_type, key)
        if definition is None:
            mapped[key] = value
            continue
        if definition.omitted_for(method):
            continue
        if value is None:
            mapped[definition.target] = None
            continue
        apply_validation(definition, value)
        mapped[definition.target] = apply_transforms(definition, value)
    return mapped


def to_model(model_type: type, storage_obj: Mapping[str, Any]) -> Any:
    """Build a model instance from a storage-shaped object.

    The model type must be constructible without arguments.
    """
    instance = model_type()
    for name, definition in model_properties(model_type).items():
        if definition.target in storage_obj:
            value = storage_obj[definition.target]
        else:
            value = compute_default(definition)
        setattr(instance, name, value)
    return instance


def schema(model_type: type, method: str | None = None) -> dict[str, Any]:
    """Describe a model type for the options (describe-schema) operation.

    Args:
        model_type: Model class.
        method: Request method used to resolve the resource configuration.

    Returns:
        Serializable description of the model, its resource configuration,
        and every declared property.
    """
    return {
        "name": model_type.__name__,
        "resource": resolve_resource_name(model_type, method),
        "config": resource_config(model_type, method).to_dict(),
        "pk": list(extract_primary_keys(model_type)),
        "properties": {
            name: definition.to_dict() for name, definition in model_properties(model_type).items()
        },
    }


def _read_value(obj: object, name: str, target: str) -> Any:
    if isinstance(obj, Mapping):
        if name in obj:
            return obj[name]
        return obj.get(target, _MISSING)
    instance_values = getattr(obj, "__dict__", {})
    if name in instance_values:
        return instance_values[name]
    value = getattr(obj, name, _MISSING)
    if value is not _MISSING and value is getattr(type(obj), name, _MISSING):
        # Class-level declaration, not an instance value.
        return _MISSING
    return value


def _instance_values(obj: object) -> dict[str, Any]:
    try:
        return dict(vars(obj))
    except TypeError as error:
        raise StashArgumentError(
            f"Cannot read properties from {type(obj).__name__}; use a mapping or an object."
        ) from error


def _require_model_type(model_type: object) -> None:
    if not is_model_type(model_type):
        raise StashArgumentError(
            f"Invalid 'model_type' argument: expected a class, got {type(model_type).__name__}."
        )
