"""PUT request: update existing objects matched by primary key."""

from __future__ import annotations

from typing import Any

from core.errors import StashArgumentError, StashConfigError
from modeling.model_mapping import primary_key_targets, storage_name
from protocol.request_capabilities import ObjectsCapability, ToCapability, flatten_values
from protocol.request_metadata import PutMetadata


class PutRequest(ObjectsCapability, ToCapability):
    """Builder for a request that updates objects identified by primary key."""

    method = "put"
    metadata_type = PutMetadata

    def __init__(self, *objects: Any, pk: list[str] | tuple[str, ...] | None = None) -> None:
        """Create a PUT request.

        Args:
            objects: Objects to update.
            pk: Property names that uniquely identify each object.
        """
        super().__init__()
        if pk:
            self.pk(*pk)
        if objects:
            self.objects(*objects)

    def pk(self, *primary_keys: Any) -> "PutRequest":
        """Add primary-key property names; a single None clears them.

        With a model bound, names are translated to their storage targets.

        Raises:
            StashArgumentError: If a key is not a string.
        """
        if len(primary_keys) == 1 and primary_keys[0] is None:
            self.metadata.pk.clear()
            return self
        model_type = self.metadata.model
        for key in flatten_values(primary_keys):
            if key is None:
                continue
            if not isinstance(key, str):
                raise StashArgumentError(
                    "Invalid 'primary_keys' argument. The keys contain a non-string value."
                )
            if model_type is not None:
                key = storage_name(model_type, key)
            if key and key not in self.metadata.pk:
                self.metadata.pk.append(key)
        return self

    def validate_dispatch(self) -> None:
        """Require at least one primary key before dispatch.

        Raises:
            StashConfigError: If no resource or primary key is set or resolvable
                from the model.
        """
        super().validate_dispatch()
        if self.metadata.pk:
            return
        model_type = self.metadata.model
        if model_type is not None and primary_key_targets(model_type):
            return
        raise StashConfigError(
            "PUT requests require at least one primary key. "
            "Call pk(...) or bind a model that declares a pk property."
        )

    def _translate_names(self, model_type: type) -> None:
        super()._translate_names(model_type)
        targets = primary_key_targets(model_type)
        if targets:
            self.metadata.pk = list(targets)
        else:
            self.metadata.pk = list(
                dict.fromkeys(storage_name(model_type, key) for key in self.metadata.pk)
            )
