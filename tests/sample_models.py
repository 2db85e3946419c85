"""Model classes shared by tests."""

from __future__ import annotations

from typing import Any

from modeling.property_definition import PropertyDefinition


def _valid_year(value: Any) -> bool:
    return isinstance(value, int) and value >= 1886


def _strip(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def _is_text(value: Any) -> bool:
    return isinstance(value, str)


class Car:
    """Car model stored in the ``cars`` resource with storage-side names."""

    __stashku__ = {"resource": "cars"}

    id = {"target": "ID", "type": "number", "pk": True}
    make = {"target": "Make", "type": "str", "required": True, "transform": _strip}
    model = "Model"
    year = {"target": "Year", "type": int, "validate": _valid_year}
    color = PropertyDefinition(target="Color", type="str", default="black")
    notes = {"target": "Notes", "omit": ["put", "patch"]}

    def __init__(self, **values: Any) -> None:
        for key, value in values.items():
            setattr(self, key, value)


class Owner:
    """Owner model configured by name only, keyed by a two-part identity."""

    __stashku__ = {"name": "Owner"}

    region = {"target": "Region", "pk": True}
    owner_id = {"target": "OwnerID", "pk": True, "type": "number"}
    full_name = "FullName"


class Company:
    """Model without resource configuration."""

    title = "Title"


class Inventory:
    """Model whose resource depends on the request method."""

    @staticmethod
    def __stashku__(method: str | None) -> dict[str, str]:
        if method == "get":
            return {"resource": "inventory_view"}
        return {"resource": "inventory"}

    sku = {"target": "SKU", "pk": True}


class Tag:
    """Model without primary keys whose optional label only accepts text."""

    __stashku__ = {"resource": "tags"}

    id = {"target": "TagID", "type": "number"}
    label = {"target": "Label", "validate": _is_text, "transform": str.upper}
