"""Unit tests for the in-memory storage engine."""

from __future__ import annotations

import asyncio

from engines.memory_engine import MemoryEngine
from protocol.delete_request import DeleteRequest
from protocol.get_request import GetRequest
from protocol.options_request import OptionsRequest
from protocol.patch_request import PatchRequest
from protocol.post_request import PostRequest
from protocol.put_request import PutRequest
from tests.sample_models import Car, Tag


def _seeded_engine() -> MemoryEngine:
    return MemoryEngine(
        resources={
            "cars": [
                {"ID": 1, "Make": "Ford", "Model": "Focus", "Year": 2012, "Color": "blue"},
                {"ID": 2, "Make": "Toyota", "Model": "Corolla", "Year": 2018, "Color": "red"},
                {"ID": 3, "Make": "Ford", "Model": "Fiesta", "Year": 2015, "Color": "red"},
                {"ID": 4, "Make": "Honda", "Model": "Civic", "Year": None, "Color": "black"},
            ]
        }
    )


def _ids(rows: list[dict]) -> list[int]:
    return [row["ID"] for row in rows]


def test_get_filters_and_sorts() -> None:
    """Get should apply conditions and ordering."""
    engine = _seeded_engine()
    request = GetRequest().from_("cars").where("{Make} == 'Ford'").sort("{Year} DESC")

    response = asyncio.run(engine.get(request))

    assert _ids(response.data) == [3, 1]
    assert response.total == 2
    assert response.returned == 2


def test_get_sorts_missing_values_first() -> None:
    """None values should order before any other value."""
    response = asyncio.run(_seeded_engine().get(GetRequest().from_("cars").sort("Year")))

    assert _ids(response.data) == [4, 1, 3, 2]


def test_get_pages_after_counting_total() -> None:
    """Paging should report the total before skip and take."""
    request = GetRequest().from_("cars").sort("ID").skip(1).take(2)

    response = asyncio.run(_seeded_engine().get(request))

    assert _ids(response.data) == [2, 3]
    assert response.total == 4
    assert response.returned == 2


def test_get_projects_distinct_properties() -> None:
    """Projection with distinct should collapse repeated objects."""
    request = GetRequest("Make").from_("cars").distinct()

    response = asyncio.run(_seeded_engine().get(request))

    assert response.data == [{"Make": "Ford"}, {"Make": "Toyota"}, {"Make": "Honda"}]
    assert response.total == 3


def test_get_count_only_returns_no_data() -> None:
    """Count-only gets should report totals without objects."""
    request = GetRequest().from_("cars").where("{Color} == 'red'").count()

    response = asyncio.run(_seeded_engine().get(request))

    assert response.data == []
    assert response.returned == 0
    assert response.total == 2


def test_get_unknown_resource_is_empty() -> None:
    """Resources without objects should return nothing."""
    response = asyncio.run(MemoryEngine().get(GetRequest().from_("nothing")))

    assert response.data == []
    assert response.total == 0


def test_post_maps_model_objects() -> None:
    """Post should store storage-shaped objects built from the model."""
    engine = _seeded_engine()
    request = PostRequest(Car(id=5, make=" Kia ", year=2020)).model(Car)

    response = asyncio.run(engine.post(request))

    assert response.affected == 1
    assert response.data == [
        {"ID": 5, "Make": "Kia", "Model": None, "Year": 2020, "Color": "black", "Notes": None}
    ]
    assert engine.objects("cars")[-1]["Make"] == "Kia"


def test_post_copies_plain_objects() -> None:
    """Stored objects should not alias the caller's objects."""
    engine = MemoryEngine()
    payload = {"Name": "Acme"}

    asyncio.run(engine.post(PostRequest(payload).to("companies")))
    payload["Name"] = "Changed"

    assert engine.objects("companies") == [{"Name": "Acme"}]


def test_put_updates_rows_matched_by_primary_key() -> None:
    """Put should update only rows whose key values match."""
    engine = _seeded_engine()
    request = PutRequest(
        {"ID": 2, "Color": "green"},
        {"ID": 99, "Color": "pink"},
        {"Color": "no key"},
        pk=["ID"],
    ).to("cars")

    response = asyncio.run(engine.put(request))

    assert response.affected == 1
    assert response.data[0]["Color"] == "green"
    assert engine.objects("cars")[1]["Model"] == "Corolla"


def test_put_uses_model_keys_and_partial_payloads() -> None:
    """Model-bound puts should write only the properties provided."""
    engine = _seeded_engine()
    request = PutRequest(Car(id=3, year=2016, notes="ignored")).model(Car)

    asyncio.run(engine.put(request))

    assert engine.objects("cars")[2] == {
        "ID": 3,
        "Make": "Ford",
        "Model": "Fiesta",
        "Year": 2016,
        "Color": "red",
    }


def test_put_matches_explicit_keys_by_storage_name() -> None:
    """Keys given by property name should match storage-shaped rows."""
    engine = MemoryEngine(resources={"tags": [{"TagID": 1, "Label": "old"}]})
    request = PutRequest().model(Tag).pk("id").objects({"id": 1, "label": "new"})

    response = asyncio.run(engine.put(request))

    assert response.affected == 1
    assert engine.objects("tags") == [{"TagID": 1, "Label": "NEW"}]


def test_patch_updates_matching_rows() -> None:
    """Patch should write the template into every matched row."""
    engine = _seeded_engine()
    request = PatchRequest({"color": "white"}).model(Car).where("{make} == 'Ford'")

    response = asyncio.run(engine.patch(request))

    assert response.affected == 2
    assert [row["Color"] for row in engine.objects("cars")] == ["white", "red", "white", "black"]


def test_patch_without_conditions_requires_all() -> None:
    """Patch without conditions should affect nothing unless all is set."""
    engine = _seeded_engine()

    blocked = asyncio.run(engine.patch(PatchRequest({"Color": "grey"}).to("cars")))
    allowed = asyncio.run(engine.patch(PatchRequest({"Color": "grey"}).to("cars").all()))

    assert blocked.affected == 0
    assert allowed.affected == 4


def test_patch_without_template_affects_nothing() -> None:
    """A patch with no template has nothing to write."""
    response = asyncio.run(_seeded_engine().patch(PatchRequest().to("cars").all()))

    assert response.affected == 0


def test_delete_targets_conditions_or_all() -> None:
    """Delete should remove matching rows and honor the all safety rail."""
    engine = _seeded_engine()

    nothing = asyncio.run(engine.delete(DeleteRequest().from_("cars")))
    reds = asyncio.run(engine.delete(DeleteRequest().from_("cars").where("{Color} == 'red'")))
    rest = asyncio.run(engine.delete(DeleteRequest().from_("cars").all().count()))

    assert nothing.affected == 0
    assert _ids(reds.data) == [2, 3]
    assert rest.affected == 2
    assert rest.data == []
    assert engine.objects("cars") == []


def test_options_describes_model() -> None:
    """Options should return the bound model's schema."""
    response = asyncio.run(MemoryEngine().options(OptionsRequest().model(Car)))

    description = response.single()
    assert description["resource"] == "cars"
    assert description["pk"] == ["id"]
    assert list(description["properties"]) == ["id", "make", "model", "year", "color", "notes"]


def test_options_infers_schema_from_objects() -> None:
    """Without a model, options should infer property types from stored objects."""
    response = asyncio.run(_seeded_engine().options(OptionsRequest("cars")))

    description = response.single()
    assert description["resource"] == "cars"
    assert description["properties"]["Year"] == {"target": "Year", "type": "number"}
    assert description["properties"]["Make"]["type"] == "str"
