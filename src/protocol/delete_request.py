"""DELETE request: remove objects matching conditions."""

from __future__ import annotations

from protocol.request_capabilities import AllCapability, FromCapability
from protocol.request_metadata import DeleteMetadata


class DeleteRequest(AllCapability, FromCapability):
    """Builder for a request that deletes matching objects.

    Without ``where`` conditions nothing is deleted unless ``all()`` is set.
    """

    method = "delete"
    metadata_type = DeleteMetadata
