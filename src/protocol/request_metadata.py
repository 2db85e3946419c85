"""Per-kind request metadata.

Each request kind owns one metadata dataclass. Shared fields live on the
base dataclass so defaults stay identical across kinds.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from filtering.filter import Filter
from protocol.sort_directive import SortDirective


@dataclass
class RequestMetadata:
    """Fields shared by every request kind.

    Attributes:
        count: Return counts only, with empty data.
        model: Bound model type.
        headers: Engine-specific options; None until first set.
    """

    count: bool = False
    model: type | None = None
    headers: dict[str, Any] | None = None


@dataclass
class OptionsMetadata(RequestMetadata):
    """Describe-schema request metadata."""

    from_: str | None = None


@dataclass
class GetMetadata(RequestMetadata):
    """Retrieve request metadata.

    Attributes:
        from_: Source resource name.
        where: Filter conditions.
        properties: Property names to return; empty returns all.
        distinct: Return only unique objects.
        skip: Number of matched objects to skip.
        take: Maximum number of objects to return; None for no limit.
        sorts: Ordering keys.
    """

    from_: str | None = None
    where: Filter | None = None
    properties: list[str] = field(default_factory=list)
    distinct: bool = False
    skip: int = 0
    take: int | None = None
    sorts: list[SortDirective] = field(default_factory=list)


@dataclass
class PostMetadata(RequestMetadata):
    """Create request metadata."""

    to: str | None = None
    objects: list[Any] = field(default_factory=list)


@dataclass
class PutMetadata(RequestMetadata):
    """Update-by-identity request metadata.

    Attributes:
        to: Target resource name.
        objects: Objects to update, matched by ``pk`` values.
        pk: Ordered identity property names.
    """

    to: str | None = None
    objects: list[Any] = field(default_factory=list)
    pk: list[str] = field(default_factory=list)


@dataclass
class PatchMetadata(RequestMetadata):
    """Update-by-template request metadata.

    Attributes:
        to: Target resource name.
        where: Filter conditions selecting objects to update.
        template: Property values written into every matched object.
        all: Update every object when no conditions are set.
    """

    to: str | None = None
    where: Filter | None = None
    template: Any = None
    all: bool = False


@dataclass
class DeleteMetadata(RequestMetadata):
    """Delete request metadata."""

    from_: str | None = None
    where: Filter | None = None
    all: bool = False
