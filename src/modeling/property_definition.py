"""Model property definitions.

A model declares each storage-backed property as a class attribute holding a
PropertyDefinition, a mapping with the same keys, or a bare string that
names the storage target.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Mapping, Sequence, Union, cast

from core.errors import StashArgumentError
from core.types import SUPPORTED_PRIMITIVE_TYPES, PrimitiveType


class _NoDefault:
    """Marker for a property without a declared default."""

    def __repr__(self) -> str:
        return "NO_DEFAULT"


NO_DEFAULT: Any = _NoDefault()

ValueHook = Union[Callable[[Any], Any], Sequence[Callable[[Any], Any]], None]

_TYPE_ALIASES: dict[object, PrimitiveType] = {
    str: "str",
    int: "number",
    float: "number",
    Decimal: "number",
    bool: "bool",
    datetime: "date",
    date: "date",
    bytes: "bytes",
    bytearray: "bytes",
    "string": "str",
    "number": "number",
    "boolean": "bool",
    "date": "date",
    "buffer": "bytes",
}
_DEFINITION_KEYS = {
    "target",
    "type",
    "default",
    "required",
    "pk",
    "omit",
    "transform",
    "validate",
    "precision",
    "scale",
    "length",
    "charLength",
    "char_length",
}


@dataclass(frozen=True)
class PropertyDefinition:
    """Storage definition of one model property.

    Attributes:
        target: Storage-side field name.
        type: Primitive value type.
        default: Declared default value, or NO_DEFAULT.
        required: Property must hold a value on create.
        pk: Property participates in identity matching.
        omit: True to never write the property, or request methods to skip.
        transform: Callable or ordered callables applied before writing.
        validate: Callable or ordered callables that must return truthy.
        precision: Numeric precision hint.
        scale: Numeric scale hint.
        length: Maximum length hint.
        char_length: Maximum character length hint.
        name: Caller-facing property name, set when read from a model.
    """

    target: str
    type: PrimitiveType = "any"
    default: Any = NO_DEFAULT
    required: bool = False
    pk: bool = False
    omit: bool | tuple[str, ...] = False
    transform: ValueHook = None
    validate: ValueHook = None
    precision: int | None = None
    scale: int | None = None
    length: int | None = None
    char_length: int | None = None
    name: str | None = None

    @property
    def has_default(self) -> bool:
        """Return True when a default value was declared."""
        return self.default is not NO_DEFAULT

    def omitted_for(self, method: str | None) -> bool:
        """Return True when the property is dropped from payloads for a method."""
        if self.omit is True:
            return True
        if isinstance(self.omit, tuple):
            return method is not None and method in self.omit
        return False

    def to_dict(self) -> dict[str, Any]:
        """Return a serializable description; callables are reported by name."""
        payload: dict[str, Any] = {"target": self.target, "type": self.type}
        if self.has_default:
            payload["default"] = self.default
        if self.required:
            payload["required"] = True
        if self.pk:
            payload["pk"] = True
        if self.omit:
            payload["omit"] = True if self.omit is True else list(cast(tuple, self.omit))
        for hook_name in ("transform", "validate"):
            hooks = hook_functions(getattr(self, hook_name))
            if hooks:
                payload[hook_name] = [getattr(hook, "__name__", repr(hook)) for hook in hooks]
        for hint_name in ("precision", "scale", "length", "char_length"):
            hint = getattr(self, hint_name)
            if hint is not None:
                payload[hint_name] = hint
        return payload


def definition_from_value(name: str, raw_value: object) -> PropertyDefinition | None:
    """Read a property definition from a model class attribute.

    Args:
        name: Attribute name on the model class.
        raw_value: Attribute value.

    Returns:
        Normalized definition, or None when the attribute is not a property.

    Raises:
        StashArgumentError: If a mapping definition is malformed.
    """
    if isinstance(raw_value, PropertyDefinition):
        return replace(raw_value, name=name)
    if isinstance(raw_value, str):
        return PropertyDefinition(target=raw_value or name, name=name)
    if isinstance(raw_value, Mapping) and "target" in raw_value:
        return definition_from_mapping(name, raw_value)
    return None


def definition_from_mapping(name: str, payload: Mapping[str, Any]) -> PropertyDefinition:
    """Build a property definition from a mapping declaration."""
    unknown_keys = sorted(set(payload) - _DEFINITION_KEYS)
    if unknown_keys:
        raise StashArgumentError(
            f"Property '{name}' declares unknown definition keys: {', '.join(unknown_keys)}."
        )
    target = payload.get("target") or name
    if not isinstance(target, str):
        raise StashArgumentError(f"Property '{name}' must declare a string 'target'.")
    omit = payload.get("omit", False)
    if isinstance(omit, (list, tuple, set)):
        omit = tuple(str(method).lower() for method in omit)
    else:
        omit = bool(omit)
    return PropertyDefinition(
        target=target,
        type=parse_primitive_type(payload.get("type")),
        default=payload.get("default", NO_DEFAULT),
        required=bool(payload.get("required", False)),
        pk=bool(payload.get("pk", False)),
        omit=omit,
        transform=payload.get("transform"),
        validate=payload.get("validate"),
        precision=payload.get("precision"),
        scale=payload.get("scale"),
        length=payload.get("length"),
        char_length=payload.get("charLength", payload.get("char_length")),
        name=name,
    )


def parse_primitive_type(raw_type: object) -> PrimitiveType:
    """Normalize a declared type to a primitive type name.

    Accepts primitive names, Python types such as ``int``, and the
    capitalized names used by exported models (``"String"``, ``"Buffer"``).
    """
    if raw_type is None:
        return "any"
    if isinstance(raw_type, str):
        lowered = raw_type.lower()
        if lowered in SUPPORTED_PRIMITIVE_TYPES:
            return cast(PrimitiveType, lowered)
        if lowered in _TYPE_ALIASES:
            return _TYPE_ALIASES[lowered]
    elif isinstance(raw_type, type) and raw_type in _TYPE_ALIASES:
        return _TYPE_ALIASES[raw_type]
    raise StashArgumentError(
        f"Unsupported property type {raw_type!r}. "
        f"Use one of: {', '.join(SUPPORTED_PRIMITIVE_TYPES)}."
    )


def hook_functions(hook: ValueHook) -> tuple[Callable[[Any], Any], ...]:
    """Return a transform/validate declaration as an ordered tuple of callables."""
    if hook is None:
        return ()
    if callable(hook):
        return (hook,)
    functions = tuple(hook)
    for function in functions:
        if not callable(function):
            raise StashArgumentError(
                f"Property hooks must be callables, got {type(function).__name__}."
            )
    return functions
