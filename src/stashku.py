"""Public SDK surface for StashKu.

This module provides a stable import path for protocol users.
It re-exports the dispatch façade, request builders, and filter types.
"""

from __future__ import annotations

from core.config import StashConfig
from core.errors import (
    FilterParseError,
    StashArgumentError,
    StashConfigError,
    StashDependencyError,
    StashEngineError,
    StashError,
    StashHeaderKeyError,
    StashValidationError,
)
from core.types import ResponseError, StashResponse
from dispatch.stash import Stash
from engines.memory_engine import MemoryEngine
from engines.storage_engine import StorageEngine
from filtering.filter import Filter
from filtering.filter_parser import parse_filter
from filtering.filter_tree import FilterCondition, FilterGroup
from modeling.model_mapping import map_property, schema, to_model, unmodel
from modeling.property_definition import PropertyDefinition
from modeling.resource_naming import ResourceConfig
from protocol.delete_request import DeleteRequest
from protocol.get_request import GetRequest
from protocol.options_request import OptionsRequest
from protocol.patch_request import PatchRequest
from protocol.post_request import PostRequest
from protocol.put_request import PutRequest
from protocol.sort_directive import SortDirective

__all__ = [
    "DeleteRequest",
    "Filter",
    "FilterCondition",
    "FilterGroup",
    "FilterParseError",
    "GetRequest",
    "MemoryEngine",
    "OptionsRequest",
    "PatchRequest",
    "PostRequest",
    "PropertyDefinition",
    "PutRequest",
    "ResourceConfig",
    "ResponseError",
    "SortDirective",
    "Stash",
    "StashArgumentError",
    "StashConfig",
    "StashConfigError",
    "StashDependencyError",
    "StashEngineError",
    "StashError",
    "StashHeaderKeyError",
    "StashResponse",
    "StashValidationError",
    "StorageEngine",
    "map_property",
    "parse_filter",
    "schema",
    "to_model",
    "unmodel",
]
