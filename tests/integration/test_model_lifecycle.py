"""Integration tests for a model-bound create, read, update, delete cycle."""

from __future__ import annotations

import asyncio

from core.config import StashConfig
from dispatch.stash import Stash
from engines.memory_engine import MemoryEngine
from modeling.model_mapping import to_model
from protocol.delete_request import DeleteRequest
from protocol.get_request import GetRequest
from protocol.options_request import OptionsRequest
from protocol.patch_request import PatchRequest
from protocol.post_request import PostRequest
from protocol.put_request import PutRequest
from tests.sample_models import Car, Tag


def test_model_bound_lifecycle() -> None:
    """Model-bound requests should read and write storage-side names."""
    engine = MemoryEngine()
    stash = Stash(StashConfig(), engines=[engine])

    created = asyncio.run(
        stash.post(
            PostRequest(
                Car(id=1, make="Ford", model="Focus", year=2012),
                Car(id=2, make="Kia", model="Rio", year=2019, color="red"),
            ).model(Car)
        )
    )
    asyncio.run(stash.put(PutRequest(Car(id=1, color="green")).model(Car)))
    asyncio.run(
        stash.patch(PatchRequest({"year": 2020}).model(Car).where("{make} == 'Kia'"))
    )
    fetched = asyncio.run(stash.get(GetRequest().model(Car).sort("{id} ASC")))
    cars = [to_model(Car, row) for row in fetched.data]
    removed = asyncio.run(stash.delete(DeleteRequest().model(Car).where("{year} < 2015")))

    assert created.affected == 2
    assert engine.objects("cars")[0]["Make"] == "Ford"
    assert [(car.id, car.color, car.year) for car in cars] == [
        (1, "green", 2012),
        (2, "red", 2020),
    ]
    assert removed.affected == 1
    assert [row["ID"] for row in engine.objects("cars")] == [2]


def test_options_describes_bound_model() -> None:
    """Options dispatched with a model should describe its schema."""
    stash = Stash(StashConfig())

    response = asyncio.run(stash.options(lambda request: request.model(Car)))

    description = response.single()
    assert description["name"] == "Car"
    assert description["properties"]["make"]["target"] == "Make"
    assert description["properties"]["make"]["required"] is True


def test_post_missing_optional_value_dispatches() -> None:
    """Objects accepted by the builder should not fail validation at dispatch."""
    stash = Stash(StashConfig())

    response = asyncio.run(stash.post(PostRequest({"id": 1}).model(Tag)))

    assert response.affected == 1
    assert stash.engine("tags").objects("tags") == [{"TagID": 1, "Label": None}]
