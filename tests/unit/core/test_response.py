"""Unit tests for the response envelope."""

from __future__ import annotations

from core.types import ResponseError, StashResponse


def test_setup_counts_returned_objects() -> None:
    """Returned and total should default to the number of data objects."""
    response = StashResponse.setup([{"a": 1}, {"a": 2}], affected=2)

    assert response.returned == 2
    assert response.total == 2
    assert response.affected == 2
    assert response.code == 200


def test_setup_count_only_empties_data() -> None:
    """Count-only responses should keep totals while returning no data."""
    response = StashResponse.setup([{"a": 1}, {"a": 2}], total=7, affected=2, count_only=True)

    assert response.data == []
    assert response.returned == 0
    assert response.total == 7
    assert response.affected == 2


def test_single_returns_first_object_or_none() -> None:
    """single() should read the first data object when present."""
    assert StashResponse.setup([{"a": 1}, {"a": 2}]).single() == {"a": 1}
    assert StashResponse().single() is None


def test_failure_carries_errors() -> None:
    """Failure responses should report errors and a failing status."""
    response = StashResponse.failure(ResponseError("timeout", code="E_TIMEOUT"))

    assert response.ok is False
    assert response.code == 500
    assert response.to_dict()["errors"] == [{"message": "timeout", "code": "E_TIMEOUT"}]


def test_response_payload_roundtrip() -> None:
    """Transport payloads should restore an equal response."""
    response = StashResponse(
        data=[{"a": 1}],
        returned=1,
        total=4,
        affected=0,
        code=206,
        errors=[ResponseError("partial")],
    )

    restored = StashResponse.from_dict(response.to_dict())

    assert restored == response
