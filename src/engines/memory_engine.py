"""In-memory storage engine.

This module stores resources as lists of dicts in process memory. It is
the reference engine for the protocol and the default engine for tests.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from core.constants import DEFAULT_ENGINE_NAME
from core.logging_config import get_logger
from core.types import StashResponse
from engines.memory_filtering import filter_objects, sort_objects
from modeling.model_mapping import map_template, primary_key_targets, schema, unmodel
from protocol.delete_request import DeleteRequest
from protocol.get_request import GetRequest
from protocol.options_request import OptionsRequest
from protocol.patch_request import PatchRequest
from protocol.post_request import PostRequest
from protocol.put_request import PutRequest
from protocol.request_capabilities import AllCapability

_LOGGER = get_logger(__name__)


class MemoryEngine:
    """Engine keeping every resource as an ordered list of dict objects."""

    def __init__(
        self,
        name: str = DEFAULT_ENGINE_NAME,
        resources: Mapping[str, Sequence[Mapping[str, Any]]] | None = None,
    ) -> None:
        """Create an in-memory engine.

        Args:
            name: Engine name used for registry lookups and diagnostics.
            resources: Optional initial objects keyed by resource name.
        """
        self.name = name
        self._resources: dict[str, list[dict[str, Any]]] = {}
        for resource, objects in (resources or {}).items():
            self.seed(resource, objects)

    def seed(self, resource: str, objects: Sequence[Mapping[str, Any]]) -> None:
        """Replace a resource's objects with copies of the given objects."""
        self._resources[resource] = [dict(obj) for obj in objects]

    def objects(self, resource: str) -> list[dict[str, Any]]:
        """Return copies of a resource's stored objects."""
        return [dict(obj) for obj in self._resources.get(resource, [])]

    async def get(self, request: GetRequest) -> StashResponse:
        """Return objects matching the request's conditions, order, and paging."""
        metadata = request.metadata
        where = metadata.where.tree if metadata.where is not None else None
        matched = filter_objects(where, self._resources.get(request.resource or "", []))
        ordered = sort_objects(matched, metadata.sorts)
        projected = [_project(obj, metadata.properties) for obj in ordered]
        if metadata.distinct:
            projected = _distinct(projected)
        end = None if metadata.take is None else metadata.skip + metadata.take
        page = projected[metadata.skip : end]
        _LOGGER.debug(
            "memory_get", engine=self.name, resource=request.resource, total=len(projected)
        )
        return StashResponse.setup(page, total=len(projected), count_only=metadata.count)

    async def post(self, request: PostRequest) -> StashResponse:
        """Append the request's objects to the resource."""
        metadata = request.metadata
        created = [
            _storage_shape(obj, metadata.model, request.method) for obj in metadata.objects
        ]
        rows = self._resources.setdefault(request.resource or "", [])
        rows.extend(dict(obj) for obj in created)
        _LOGGER.debug(
            "memory_post", engine=self.name, resource=request.resource, affected=len(created)
        )
        return StashResponse.setup(created, affected=len(created), count_only=metadata.count)

    async def put(self, request: PutRequest) -> StashResponse:
        """Update stored objects whose primary-key values match the request's objects."""
        metadata = request.metadata
        primary_keys = list(metadata.pk)
        if not primary_keys and metadata.model is not None:
            primary_keys = list(primary_key_targets(metadata.model))
        rows = self._resources.get(request.resource or "", [])
        updated: list[dict[str, Any]] = []
        for obj in metadata.objects:
            payload = _storage_shape(obj, metadata.model, request.method)
            if any(key not in payload for key in primary_keys):
                continue
            for row in rows:
                if all(row.get(key) == payload[key] for key in primary_keys):
                    row.update(payload)
                    updated.append(dict(row))
                    break
        _LOGGER.debug(
            "memory_put", engine=self.name, resource=request.resource, affected=len(updated)
        )
        return StashResponse.setup(updated, affected=len(updated), count_only=metadata.count)

    async def patch(self, request: PatchRequest) -> StashResponse:
        """Write the template into every targeted object."""
        metadata = request.metadata
        targets = self._targets(request)
        template: dict[str, Any] = {}
        if metadata.template is None:
            targets = []
        elif metadata.model is not None:
            template = map_template(metadata.model, metadata.template, request.method)
        else:
            template = _storage_shape(metadata.template, None, request.method)
        updated: list[dict[str, Any]] = []
        for row in targets:
            row.update(template)
            updated.append(dict(row))
        _LOGGER.debug(
            "memory_patch", engine=self.name, resource=request.resource, affected=len(updated)
        )
        return StashResponse.setup(updated, affected=len(updated), count_only=metadata.count)

    async def delete(self, request: DeleteRequest) -> StashResponse:
        """Remove every targeted object."""
        targets = self._targets(request)
        if targets:
            target_ids = {id(row) for row in targets}
            rows = self._resources[request.resource or ""]
            rows[:] = [row for row in rows if id(row) not in target_ids]
        removed = [dict(row) for row in targets]
        _LOGGER.debug(
            "memory_delete", engine=self.name, resource=request.resource, affected=len(removed)
        )
        return StashResponse.setup(
            removed, affected=len(removed), count_only=request.metadata.count
        )

    async def options(self, request: OptionsRequest) -> StashResponse:
        """Describe the resource from the bound model, or infer it from stored objects."""
        model_type = request.metadata.model
        resource = request.resource or ""
        if model_type is not None:
            description = schema(model_type, request.method)
        else:
            description = _infer_schema(resource, self._resources.get(resource, []))
        return StashResponse.setup([description], count_only=request.metadata.count)

    def _targets(self, request: AllCapability) -> list[dict[str, Any]]:
        rows = self._resources.get(request.resource or "", [])
        if request.has_conditions():
            return filter_objects(request.metadata.where.tree, rows)
        if request.targets_all():
            return list(rows)
        return []


def _storage_shape(obj: Any, model_type: type | None, method: str) -> dict[str, Any]:
    if model_type is not None:
        return unmodel(model_type, obj, method)
    if isinstance(obj, Mapping):
        return dict(obj)
    return dict(vars(obj))


def _project(obj: dict[str, Any], properties: list[str]) -> dict[str, Any]:
    if not properties:
        return dict(obj)
    return {name: obj.get(name) for name in properties}


def _distinct(objects: list[dict[str, Any]]) -> list[dict[str, Any]]:
    unique: list[dict[str, Any]] = []
    for obj in objects:
        if obj not in unique:
            unique.append(obj)
    return unique


def _infer_schema(resource: str, rows: list[dict[str, Any]]) -> dict[str, Any]:
    properties: dict[str, dict[str, Any]] = {}
    for row in rows:
        for key, value in row.items():
            if key not in properties or properties[key]["type"] == "any":
                properties[key] = {"target": key, "type": _infer_type(value)}
    return {
        "name": resource,
        "resource": resource,
        "config": {"resource": resource},
        "pk": [],
        "properties": properties,
    }


def _infer_type(value: Any) -> str:
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "str"
    if isinstance(value, (bytes, bytearray)):
        return "bytes"
    if hasattr(value, "isoformat"):
        return "date"
    return "any"
