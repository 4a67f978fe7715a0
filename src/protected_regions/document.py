"""Parsed document model: plain text and marked regions.

A Document is an immutable tree. Concatenating its segments, markers
included, reproduces the parsed text exactly.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Union

from protected_regions.errors import DuplicateRegionIdError


@dataclass(frozen=True)
class PlainSegment:
    """Text outside any marker, passed through unchanged."""

    text: str

    @property
    def content(self) -> str:
        return self.text


@dataclass(frozen=True)
class RegionSegment:
    """A marked region with its verbatim markers and parsed body."""

    id: str
    enabled: bool
    start_marker: str
    end_marker: str
    body: tuple[Segment, ...] = ()

    @property
    def body_text(self) -> str:
        return "".join(s.content for s in self.body)

    @property
    def content(self) -> str:
        return self.start_marker + self.body_text + self.end_marker

    def with_body(self, body: tuple[Segment, ...]) -> RegionSegment:
        return RegionSegment(self.id, self.enabled, self.start_marker, self.end_marker, body)


Segment = Union[PlainSegment, RegionSegment]


def iter_regions(segments: tuple[Segment, ...]) -> Iterator[RegionSegment]:
    """Yield every region in document order, nested ones after their parent."""
    for seg in segments:
        if isinstance(seg, RegionSegment):
            yield seg
            yield from iter_regions(seg.body)


@dataclass(frozen=True)
class Document:
    """Ordered top-level segments plus an id index over all regions.

    Raises DuplicateRegionIdError if two regions share an id.
    """

    segments: tuple[Segment, ...] = ()
    _regions: Mapping[str, RegionSegment] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        index: dict[str, RegionSegment] = {}
        for region in iter_regions(self.segments):
            if region.id in index:
                raise DuplicateRegionIdError(region.id)
            index[region.id] = region
        object.__setattr__(self, "_regions", MappingProxyType(index))

    @property
    def regions(self) -> Mapping[str, RegionSegment]:
        """Read-only mapping of region id to region, nested regions included."""
        return self._regions

    def get_region(self, region_id: str) -> RegionSegment | None:
        return self._regions.get(region_id)

    def region_ids(self) -> list[str]:
        return [r.id for r in iter_regions(self.segments)]

    @property
    def content(self) -> str:
        return "".join(s.content for s in self.segments)

    def __str__(self) -> str:
        return self.content
