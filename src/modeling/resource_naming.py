"""Resource name resolution for model types.

A model's resource configuration lives on its ``__stashku__`` class
attribute: a mapping, a ResourceConfig, or a callable that receives the
request method and returns either.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from core.constants import MODEL_CONFIG_ATTRIBUTE
from core.errors import StashArgumentError

_SIBILANT_ENDINGS = ("s", "x", "z", "ch", "sh")
_VOWELS = "aeiou"


@dataclass(frozen=True)
class ResourceConfig:
    """Per-model storage resource naming."""

    resource: str | None = None
    name: str | None = None
    slug: str | None = None
    plural_name: str | None = None
    plural_slug: str | None = None

    @classmethod
    def from_value(cls, raw_value: object) -> "ResourceConfig":
        """Normalize a ``__stashku__`` value into a ResourceConfig.

        Raises:
            StashArgumentError: If the value is not a mapping or ResourceConfig.
        """
        if raw_value is None:
            return cls()
        if isinstance(raw_value, ResourceConfig):
            return raw_value
        if not isinstance(raw_value, Mapping):
            raise StashArgumentError(
                f"Invalid {MODEL_CONFIG_ATTRIBUTE} value: expected a mapping, "
                f"got {type(raw_value).__name__}."
            )
        plural = raw_value.get("plural") or {}
        if not isinstance(plural, Mapping):
            raise StashArgumentError(
                f"Invalid {MODEL_CONFIG_ATTRIBUTE} 'plural': expected a mapping."
            )
        return cls(
            resource=_optional_name(raw_value.get("resource")),
            name=_optional_name(raw_value.get("name")),
            slug=_optional_name(raw_value.get("slug")),
            plural_name=_optional_name(plural.get("name")),
            plural_slug=_optional_name(plural.get("slug")),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the ``{resource, name, slug, plural}`` payload."""
        payload: dict[str, Any] = {}
        for key in ("resource", "name", "slug"):
            value = getattr(self, key)
            if value is not None:
                payload[key] = value
        plural = {
            key: value
            for key, value in (("name", self.plural_name), ("slug", self.plural_slug))
            if value is not None
        }
        if plural:
            payload["plural"] = plural
        return payload

    def first_name(self) -> str | None:
        """Return the first configured name in precedence order."""
        for candidate in (self.resource, self.name, self.slug, self.plural_name, self.plural_slug):
            if candidate:
                return candidate
        return None


def resource_config(model_type: type, method: str | None = None) -> ResourceConfig:
    """Read the resource configuration declared on a model type."""
    raw_value = getattr(model_type, MODEL_CONFIG_ATTRIBUTE, None)
    if callable(raw_value):
        raw_value = raw_value(method)
    return ResourceConfig.from_value(raw_value)


def resolve_resource_name(
    model_type: type,
    method: str | None = None,
    override: str | None = None,
) -> str:
    """Resolve the storage resource name for a model type.

    Precedence: explicit override, then ``resource``, ``name``, ``slug``,
    ``plural.name``, ``plural.slug``, and finally the pluralized class name.

    Args:
        model_type: Model class.
        method: Request method the name is resolved for.
        override: Explicit request-level resource name.

    Returns:
        Non-empty resource name.
    """
    if override:
        return override
    configured = resource_config(model_type, method).first_name()
    return configured or pluralize(model_type.__name__)


def pluralize(word: str) -> str:
    """Return a simple English plural of a class or resource name."""
    if not word:
        return word
    lowered = word.lower()
    if lowered.endswith("y") and len(word) > 1 and lowered[-2] not in _VOWELS:
        return word[:-1] + ("IES" if word.isupper() else "ies")
    if lowered.endswith(_SIBILANT_ENDINGS):
        return word + ("ES" if word.isupper() else "es")
    return word + ("S" if word.isupper() else "s")


def _optional_name(raw_value: object) -> str | None:
    if raw_value is None:
        return None
    if isinstance(raw_value, str):
        stripped = raw_value.strip()
        return stripped if stripped else None
    raise StashArgumentError(
        f"Resource names in {MODEL_CONFIG_ATTRIBUTE} must be strings, "
        f"got {type(raw_value).__name__}."
    )
