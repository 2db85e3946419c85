"""Core constants used across StashKu modules.

This module centralizes protocol tokens and defaults.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

DEFAULT_ENGINE_NAME = "memory"
ENGINE_ENV_VAR = "STASHKU_ENGINE"
ENGINE_MAP_ENV_VAR = "STASHKU_ENGINE_MAP"
MODEL_CONFIG_ATTRIBUTE = "__stashku__"

REQUEST_METHODS = ("options", "get", "post", "put", "patch", "delete")

LOGIC_AND = "and"
LOGIC_OR = "or"
SUPPORTED_FILTER_LOGIC = (LOGIC_AND, LOGIC_OR)

SORT_ASCENDING = "asc"
SORT_DESCENDING = "desc"

DEFAULT_RESPONSE_CODE = 200
ERROR_RESPONSE_CODE = 500
