"""Registered engine lookup.

Engines are registered as instances keyed by name. Resources resolve to an
engine name through configuration, falling back to the default engine.
"""

from __future__ import annotations

from core.config import StashConfig
from core.errors import StashConfigError
from core.logging_config import get_logger
from engines.storage_engine import StorageEngine

_LOGGER = get_logger(__name__)


class EngineRegistry:
    """Engine instances keyed by engine name."""

    def __init__(self, config: StashConfig) -> None:
        self._config = config
        self._engines: dict[str, StorageEngine] = {}

    def register(self, engine: StorageEngine) -> None:
        """Register an engine instance, replacing any engine with the same name.

        Raises:
            StashConfigError: If the engine has no usable name.
        """
        name = getattr(engine, "name", None)
        if not isinstance(name, str) or not name:
            raise StashConfigError(
                f"Engine {type(engine).__name__} must expose a non-empty string 'name'."
            )
        self._engines[name] = engine
        _LOGGER.info("engine_registered", engine=name)

    def names(self) -> tuple[str, ...]:
        """Return registered engine names in registration order."""
        return tuple(self._engines)

    def get(self, name: str) -> StorageEngine:
        """Return a registered engine by name.

        Raises:
            StashConfigError: If no engine is registered under the name.
        """
        engine = self._engines.get(name)
        if engine is None:
            registered = ", ".join(self._engines) or "none"
            raise StashConfigError(
                f"No engine named '{name}' is registered. Registered engines: {registered}."
            )
        return engine

    def resolve(self, resource: str | None) -> StorageEngine:
        """Return the engine configured for a resource.

        Raises:
            StashConfigError: If the configured engine is not registered.
        """
        return self.get(self._config.engine_for(resource))
