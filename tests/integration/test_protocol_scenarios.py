"""Integration tests for protocol scenarios dispatched end to end."""

from __future__ import annotations

import asyncio

from core.config import StashConfig
from dispatch.stash import Stash
from engines.memory_engine import MemoryEngine
from filtering.filter import Filter
from filtering.filter_tree import FilterCondition, FilterGroup
from protocol.get_request import GetRequest
from protocol.patch_request import PatchRequest
from tests.sample_models import Car, Owner

_PEOPLE = [
    {"Name": "Sam", "Age": 34},
    {"Name": "Samira", "Age": 19},
    {"Name": "Alex", "Age": 52},
    {"Name": "Samuel", "Age": 21},
]


def _stash() -> Stash:
    engine = MemoryEngine(resources={"people": _PEOPLE})
    return Stash(StashConfig(), engines=[engine])


def test_parsed_filter_selects_matching_objects() -> None:
    """Parsed text should build the documented tree and select matches."""
    where = Filter.parse('{Age} >= 21 AND {Name} ~~ "Sam"')
    request = GetRequest().from_("people").where(where).sort("Name")

    response = asyncio.run(_stash().dispatch(request))

    assert where.tree == FilterGroup(
        "and",
        [FilterCondition("Age", "gte", 21), FilterCondition("Name", "contains", "Sam")],
    )
    assert [row["Name"] for row in response.data] == ["Sam", "Samuel"]


def test_patch_all_affects_every_object_only_when_enabled() -> None:
    """Patch without conditions should affect all objects only with all(True)."""
    stash = _stash()

    enabled = asyncio.run(stash.patch(PatchRequest({"Checked": True}).to("people").all(True)))
    disabled = asyncio.run(stash.patch(PatchRequest({"Checked": False}).to("people").all(False)))

    assert enabled.affected == len(_PEOPLE)
    assert disabled.affected == 0


def test_model_binding_names_resource() -> None:
    """Binding should target the configured resource, then the name."""
    assert GetRequest().model(Car).metadata.from_ == "cars"
    assert GetRequest().model(Owner).metadata.from_ == "Owner"


def test_count_returns_totals_without_data() -> None:
    """A count-only get should report the true total with no objects."""
    request = GetRequest().from_("people").where("{Age} > 20").count()

    response = asyncio.run(_stash().get(request))

    assert request.metadata.count is True
    assert response.data == []
    assert response.returned == 0
    assert response.total == 3


def test_serialized_filter_dispatches_identically() -> None:
    """A filter restored from its payload should select the same objects."""
    where = Filter().and_("Age", "lt", 30).or_("Name", "^~", "Al")
    restored = Filter.from_dict(where.to_dict())
    stash = _stash()

    original = asyncio.run(stash.get(GetRequest().from_("people").where(where)))
    copied = asyncio.run(stash.get(GetRequest().from_("people").where(restored)))

    assert restored == where
    assert original.data == copied.data
    assert [row["Name"] for row in copied.data] == ["Samira", "Alex", "Samuel"]
