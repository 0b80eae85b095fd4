from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, Union

from cov_visualizer.positions import PositionIndex, Region

LOGGER = logging.getLogger(__name__)


# ---------- Markers ----------

@dataclass(frozen=True)
class Open:
    """Start of a region; `key` pairs it with its Close."""
    count: int
    key: int


@dataclass(frozen=True)
class Close:
    key: int


Marker = Union[Open, Close]


class MarkerTable:
    """
    Mapping of offset -> ordered markers at that offset.

    Iteration yields (offset, markers) pairs in ascending offset order.
    """

    def __init__(self, entries: dict[int, list[Marker]] | None = None):
        self._entries: dict[int, list[Marker]] = dict(entries or {})

    def __getitem__(self, offset: int) -> list[Marker]:
        return self._entries[offset]

    def __contains__(self, offset: int) -> bool:
        return offset in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[tuple[int, list[Marker]]]:
        for offset in sorted(self._entries):
            yield offset, self._entries[offset]

    def offsets(self) -> list[int]:
        return sorted(self._entries)


# ---------- Builder ----------

def resolve_regions(
    regions: Iterable[Region],
    index: PositionIndex,
) -> list[tuple[int, int, int]]:
    """
    Resolve regions to (start, end, count) offset triples.

    Regions with an endpoint outside the text, or whose end precedes their
    start, are dropped. The result is sorted by start ascending, then end
    descending, so enclosing regions come before the regions they contain.
    """
    resolved: list[tuple[int, int, int]] = []
    for region in regions:
        start = index.offset(region.start)
        end = index.offset(region.end)
        if start is None or end is None:
            LOGGER.debug("Dropping region %s: position outside of the source text", region)
            continue
        if end < start:
            LOGGER.debug("Dropping region %s: ends before it starts", region)
            continue
        resolved.append((start, end, region.count))

    resolved.sort(key=lambda r: (r[0], -r[1]))
    return resolved


def build_markers(regions: Iterable[Region], index: PositionIndex) -> MarkerTable:
    """
    Convert regions to a MarkerTable.

    At each offset the markers are ordered as:
    1. closes of regions ending there, innermost first,
    2. opens of regions starting there, outermost first; a zero-width region
       contributes an Open immediately followed by its Close, after the opens
       of the regions that contain it.

    Regions with unresolvable positions are silently dropped.
    """
    opens: dict[int, list[Marker]] = {}
    closes: dict[int, list[Marker]] = {}

    for key, (start, end, count) in enumerate(resolve_regions(regions, index)):
        opens.setdefault(start, []).append(Open(count, key))
        if start == end:
            opens[start].append(Close(key))
            continue
        # Later regions in sorted order are nested deeper, so they close first
        closes.setdefault(end, []).insert(0, Close(key))

    entries: dict[int, list[Marker]] = {}
    for offset in set(opens) | set(closes):
        entries[offset] = closes.get(offset, []) + opens.get(offset, [])
    return MarkerTable(entries)
