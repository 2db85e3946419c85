"""POST request: create objects in a storage resource."""

from __future__ import annotations

from typing import Any

from protocol.request_capabilities import ObjectsCapability, ToCapability
from protocol.request_metadata import PostMetadata


class PostRequest(ObjectsCapability, ToCapability):
    """Builder for a request that creates objects in storage."""

    method = "post"
    metadata_type = PostMetadata

    def __init__(self, *objects: Any) -> None:
        super().__init__()
        if objects:
            self.objects(*objects)
