"""OPTIONS request: describe the schema of a storage resource."""

from __future__ import annotations

from protocol.request_capabilities import FromCapability
from protocol.request_metadata import OptionsMetadata


class OptionsRequest(FromCapability):
    """Builder for a request that describes a resource's schema."""

    method = "options"
    metadata_type = OptionsMetadata

    def __init__(self, resource: str | None = None) -> None:
        super().__init__()
        if resource is not None:
            self.from_(resource)
