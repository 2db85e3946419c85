"""Unit tests for in-memory filter and sort evaluation."""

from __future__ import annotations

import pytest

from engines.memory_filtering import filter_objects, matches, sort_objects
from filtering.filter import Filter
from protocol.sort_directive import SortDirective

_ROW = {
    "Name": "Samantha",
    "Age": 34,
    "Tags": ["admin", "ops"],
    "Nickname": "",
    "Manager": None,
}


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("{Age} == 34", True),
        ("{Age} != 34", False),
        ("{Age} < 40 AND {Age} <= 34 AND {Age} > 30 AND {Age} >= 34", True),
        ("{Age} > 'x'", False),
        ("{Name} ~~ 'man'", True),
        ("{Tags} ~~ 'ops'", True),
        ("{Name} !~~ 'man'", False),
        ("{Name} ^~ 'Sam' AND {Name} ~$ 'tha'", True),
        ("{Manager} >NULL< AND {Name} !>NULL<", True),
        ("{Nickname} >EMPTY< AND {Manager} >EMPTY< AND {Tags} !>EMPTY<", True),
        ("{Age} [] [30, 34] AND {Name} ![] ['Bob']", True),
        ("{Missing} == null", True),
        ("{Age} == 1 OR ({Name} ^~ 'S' AND {Age} >= 18)", True),
    ],
)
def test_conditions_evaluate_against_rows(text: str, expected: bool) -> None:
    """Every operator should evaluate against plain dict rows."""
    assert matches(Filter.parse(text).tree, _ROW) is expected


def test_empty_tree_matches_everything() -> None:
    """No conditions should select every row in storage order."""
    rows = [{"A": 2}, {"A": 1}]

    assert filter_objects(None, rows) == rows


def test_sort_is_stable_and_multi_key() -> None:
    """Later keys should break ties and equal rows should keep their order."""
    rows = [
        {"Make": "Ford", "Year": 2012, "ID": 1},
        {"Make": "Audi", "Year": 2015, "ID": 2},
        {"Make": "Ford", "Year": 2015, "ID": 3},
        {"Make": "Ford", "Year": 2015, "ID": 4},
    ]

    ordered = sort_objects(rows, [SortDirective("Make"), SortDirective("Year", "desc")])

    assert [row["ID"] for row in ordered] == [2, 3, 4, 1]


def test_sort_mixed_types_does_not_fail() -> None:
    """Incomparable values should still produce a deterministic order."""
    rows = [{"V": "b"}, {"V": 2}, {"V": None}, {"V": "a"}]

    ordered = sort_objects(rows, [SortDirective("V")])

    assert [row["V"] for row in ordered] == [None, 2, "a", "b"]
