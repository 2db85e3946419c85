"""PATCH request: write template values into matching objects."""

from __future__ import annotations

from typing import Any

from core.errors import StashArgumentError
from modeling.model_mapping import validate_object
from protocol.request_capabilities import AllCapability, ToCapability, is_payload_object
from protocol.request_metadata import PatchMetadata


class PatchRequest(AllCapability, ToCapability):
    """Builder for a request that updates matching objects from a template.

    Without ``where`` conditions nothing is updated unless ``all()`` is set.
    """

    method = "patch"
    metadata_type = PatchMetadata

    def __init__(self, template: Any = None) -> None:
        super().__init__()
        if template is not None:
            self.template(template)

    def template(self, template: Any) -> "PatchRequest":
        """Set the property values written into every matched object.

        Args:
            template: Mapping or object of values, or None to remove it.

        Raises:
            StashArgumentError: If the template is not a mapping or object.
            StashValidationError: If a bound model rejects a property value.
        """
        if template is None:
            self.metadata.template = None
            return self
        if isinstance(template, (list, tuple)) or not is_payload_object(template):
            raise StashArgumentError(
                "Invalid 'template' argument. The template value must be None or an object."
            )
        if self.metadata.model is not None:
            validate_object(self.metadata.model, template, self.method)
        self.metadata.template = template
        return self

    def _apply_model(self, model_type: type) -> None:
        super()._apply_model(model_type)
        if self.metadata.template is not None:
            validate_object(model_type, self.metadata.template, self.method)
