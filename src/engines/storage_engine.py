"""Storage engine contract.

An engine is any object with a stable ``name`` and one coroutine handler
per request kind. Engines are checked structurally; no base class is
required.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.types import StashResponse
from protocol.delete_request import DeleteRequest
from protocol.get_request import GetRequest
from protocol.options_request import OptionsRequest
from protocol.patch_request import PatchRequest
from protocol.post_request import PostRequest
from protocol.put_request import PutRequest


@runtime_checkable
class StorageEngine(Protocol):  # pragma: no cover - structural typing helper
    """Pluggable storage backend executing protocol requests."""

    name: str

    async def get(self, request: GetRequest) -> StashResponse: ...

    async def post(self, request: PostRequest) -> StashResponse: ...

    async def put(self, request: PutRequest) -> StashResponse: ...

    async def patch(self, request: PatchRequest) -> StashResponse: ...

    async def delete(self, request: DeleteRequest) -> StashResponse: ...

    async def options(self, request: OptionsRequest) -> StashResponse: ...
