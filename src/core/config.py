"""Runtime configuration model for StashKu.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Mapping, cast

from core.constants import DEFAULT_ENGINE_NAME, ENGINE_ENV_VAR, ENGINE_MAP_ENV_VAR
from core.errors import StashConfigError, StashDependencyError


@dataclass(frozen=True)
class StashConfig:
    """Validated runtime configuration.

    Attributes:
        default_engine: Engine name used when a resource has no explicit mapping.
        resource_engines: Resource name to engine name overrides.
    """

    default_engine: str = DEFAULT_ENGINE_NAME
    resource_engines: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_env(cls) -> "StashConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            StashConfigError: If environment values are invalid.
        """
        default_engine = _parse_engine_name(os.getenv(ENGINE_ENV_VAR, DEFAULT_ENGINE_NAME))
        map_path = os.getenv(ENGINE_MAP_ENV_VAR)
        if not map_path:
            return cls(default_engine=default_engine)
        mapped_default, resource_engines = load_engine_map(map_path)
        return cls(
            default_engine=mapped_default or default_engine,
            resource_engines=resource_engines,
        )

    def engine_for(self, resource: str | None) -> str:
        """Return the engine name configured for a resource."""
        if resource and resource in self.resource_engines:
            return self.resource_engines[resource]
        return self.default_engine


def load_engine_map(map_path: str) -> tuple[str | None, dict[str, str]]:
    """Load a resource-to-engine YAML mapping file.

    The file holds an ``engines`` mapping of resource name to engine name
    and an optional ``default`` engine name.

    Args:
        map_path: File path to the YAML mapping.

    Returns:
        Optional default engine name and the resource mapping.

    Raises:
        StashDependencyError: If PyYAML is unavailable.
        StashConfigError: If the file is missing or malformed.
    """
    payload = _load_yaml_payload(map_path)
    if not isinstance(payload, Mapping):
        raise StashConfigError(
            f"Invalid engine map at {map_path}: expected a mapping with an 'engines' key."
        )
    unknown_keys = sorted(set(payload) - {"default", "engines"})
    if unknown_keys:
        raise StashConfigError(
            f"Engine map at {map_path} contains unknown fields: "
            f"{', '.join(map(str, unknown_keys))}."
        )
    raw_default = payload.get("default")
    default_engine = None if raw_default is None else _parse_engine_name(raw_default)
    raw_engines = payload.get("engines") or {}
    if not isinstance(raw_engines, Mapping):
        raise StashConfigError(
            f"Invalid engine map at {map_path}: 'engines' must map resource names to engine names."
        )
    resource_engines: dict[str, str] = {}
    for resource, engine_name in raw_engines.items():
        if not isinstance(resource, str) or not resource.strip():
            raise StashConfigError(
                f"Invalid engine map at {map_path}: resource names must be non-empty strings."
            )
        resource_engines[resource] = _parse_engine_name(engine_name)
    return default_engine, resource_engines


def _load_yaml_payload(map_path: str) -> object:
    try:
        import yaml  # type: ignore[import-untyped]
    except ImportError as error:  # pragma: no cover - dependency failure
        raise StashDependencyError(
            "YAML engine maps require PyYAML. Install with 'pip install pyyaml'."
        ) from error
    map_file = Path(map_path).expanduser().resolve()
    if not map_file.exists():
        raise StashConfigError(
            f"Engine map file does not exist at {map_file}. "
            f"Set {ENGINE_MAP_ENV_VAR} to a valid YAML file path."
        )
    try:
        return cast(object, yaml.safe_load(map_file.read_text(encoding="utf-8")))
    except OSError as error:
        raise StashConfigError(
            f"Failed to read engine map at {map_file}: {error}. Check file permissions and retry."
        ) from error
    except yaml.YAMLError as error:
        raise StashConfigError(
            f"Failed to parse YAML engine map at {map_file}: {error}. Fix YAML syntax and retry."
        ) from error


def _parse_engine_name(raw_value: object) -> str:
    """Parse an engine name value.

    Args:
        raw_value: Raw value from environment or YAML.

    Returns:
        Stripped engine name.

    Raises:
        StashConfigError: If the value is not a non-empty string.
    """
    if isinstance(raw_value, str) and raw_value.strip():
        return raw_value.strip()
    raise StashConfigError(
        f"Invalid engine name: expected a non-empty string, got {raw_value!r}. "
        f"Set {ENGINE_ENV_VAR} to a registered engine name."
    )
