"""Unit tests for model-to-storage mapping."""

from __future__ import annotations

from datetime import datetime

import pytest

from core.errors import StashArgumentError, StashValidationError
from modeling.model_mapping import (
    apply_transforms,
    apply_validation,
    compute_default,
    extract_primary_keys,
    map_template,
    model_properties,
    primary_key_targets,
    schema,
    storage_name,
    to_model,
    unmodel,
    validate_object,
)
from modeling.property_definition import PropertyDefinition
from tests.sample_models import Car, Company, Owner, Tag


class SportsCar(Car):
    """Subclass that adds a property and retargets an inherited one."""

    top_speed = "TopSpeed"
    make = {"target": "Manufacturer", "required": True}


def _reject_negative(value: int) -> bool:
    if value < 0:
        raise StashValidationError("Value must not be negative.")
    return True


class Ranked:
    """Model whose declared default fails its own validator."""

    level = {"target": "Level", "default": -1, "validate": _reject_negative}


def test_model_properties_follow_declaration_order() -> None:
    """Properties should be collected base-first in declaration order."""
    names = list(model_properties(SportsCar))

    assert names == ["id", "make", "model", "year", "color", "notes", "top_speed"]
    assert model_properties(SportsCar)["make"].target == "Manufacturer"


def test_extract_primary_keys_is_ordered_and_stable() -> None:
    """Primary keys should follow declaration order on every call."""
    assert extract_primary_keys(Owner) == ("region", "owner_id")
    assert extract_primary_keys(Owner) == extract_primary_keys(Owner)
    assert primary_key_targets(Owner) == ("Region", "OwnerID")
    assert extract_primary_keys(Company) == ()


def test_storage_name_translates_declared_properties() -> None:
    """Declared names should map to targets and unknown names pass through."""
    assert storage_name(Car, "make") == "Make"
    assert storage_name(Car, "Mileage") == "Mileage"


def test_compute_default_by_type() -> None:
    """Required properties without defaults should take zero values."""
    assert compute_default(PropertyDefinition(target="A", default=5)) == 5
    assert compute_default(PropertyDefinition(target="A")) is None
    assert compute_default(PropertyDefinition(target="A", type="bool", required=True)) is False
    assert compute_default(PropertyDefinition(target="A", type="number", required=True)) == 0
    assert compute_default(PropertyDefinition(target="A", type="str", required=True)) == ""
    assert compute_default(PropertyDefinition(target="A", type="bytes", required=True)) == b""
    moment = compute_default(PropertyDefinition(target="A", type="date", required=True))
    assert isinstance(moment, datetime)
    assert moment.tzinfo is not None


def test_apply_transforms_runs_in_order() -> None:
    """Transform sequences should run left to right."""
    definition = PropertyDefinition(target="A", transform=[str.strip, str.upper])

    assert apply_transforms(definition, "  ford ") == "FORD"


def test_apply_validation_names_property() -> None:
    """Validator failures should name the rejecting property."""
    definition = PropertyDefinition(target="Miles", name="miles", validate=_reject_negative)

    with pytest.raises(StashValidationError) as error:
        apply_validation(definition, -1)

    assert error.value.property_name == "miles"


def test_unmodel_post_applies_defaults_and_transforms() -> None:
    """Post payloads should key by target with defaults and transforms applied."""
    car = Car(make=" Ford ", year=2001)

    storage = unmodel(Car, car, "post")

    assert storage == {
        "ID": None,
        "Make": "Ford",
        "Model": None,
        "Year": 2001,
        "Color": "black",
        "Notes": None,
    }


def test_unmodel_put_skips_missing_and_omitted_values() -> None:
    """Partial payloads should leave missing and omitted properties out."""
    storage = unmodel(Car, {"id": 1, "Year": 1999, "notes": "dented"}, "put")

    assert storage == {"ID": 1, "Year": 1999}


def test_unmodel_rejects_invalid_values() -> None:
    """Validators should run before a payload is produced."""
    with pytest.raises(StashValidationError, match="property 'year'"):
        unmodel(Car, {"make": "Ford", "year": 1700})


def test_validate_object_ignores_missing_values() -> None:
    """Objects only need valid values for the properties they carry."""
    validate_object(Car, Car(make="Ford"), "post")

    with pytest.raises(StashValidationError):
        validate_object(Car, Car(year=1800), "post")


def test_missing_optional_values_skip_validators_and_transforms() -> None:
    """None should reach storage without running validators or transforms."""
    validate_object(Tag, {"id": 1}, "post")

    storage = unmodel(Tag, {"id": 1}, "post")
    template = map_template(Tag, {"label": None}, "patch")

    assert storage == {"TagID": 1, "Label": None}
    assert template == {"Label": None}


def test_validate_object_checks_post_defaults() -> None:
    """Defaults filled on post should be validated with the object."""
    validate_object(Ranked, {}, "put")

    with pytest.raises(StashValidationError):
        validate_object(Ranked, {}, "post")


def test_map_template_renames_without_defaults() -> None:
    """Templates should only carry the keys they declare."""
    mapped = map_template(Car, {"color": "red", "notes": "x", "Mileage": 10}, "patch")

    assert mapped == {"Color": "red", "Mileage": 10}


def test_map_template_rejects_unreadable_objects() -> None:
    """Templates must be mappings or objects with attributes."""
    with pytest.raises(StashArgumentError, match="Cannot read properties"):
        map_template(Car, 12, "patch")


def test_to_model_restores_instance() -> None:
    """Storage objects should convert back into model instances."""
    car = to_model(Car, {"ID": 3, "Make": "Ford", "Year": 1999})

    assert isinstance(car, Car)
    assert (car.id, car.make, car.year, car.color, car.model) == (3, "Ford", 1999, "black", None)


def test_schema_describes_model() -> None:
    """schema() should describe resource, keys, and properties."""
    description = schema(Car)

    assert description["name"] == "Car"
    assert description["resource"] == "cars"
    assert description["config"] == {"resource": "cars"}
    assert description["pk"] == ["id"]
    assert description["properties"]["year"] == {
        "target": "Year",
        "type": "number",
        "validate": ["_valid_year"],
    }
    assert description["properties"]["color"]["default"] == "black"


def test_mapping_helpers_require_model_types() -> None:
    """Model helpers should reject non-class arguments."""
    with pytest.raises(StashArgumentError, match="expected a class"):
        model_properties(Car())  # type: ignore[arg-type]
