from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from cov_visualizer._base import NestingError
from cov_visualizer.markers import Close, MarkerTable, Open
from cov_visualizer.text import Part, split_text


# ---------- Content tree ----------

@dataclass(frozen=True)
class Leaf:
    parts: tuple[Part, ...] = ()


@dataclass(frozen=True)
class Wrapped:
    """Content that fell between a region's Open and its Close."""
    count: int
    children: tuple["Content", ...] = field(default_factory=tuple)


Content = Union[Leaf, Wrapped]


def _leaf(text: str) -> Leaf | None:
    parts = split_text(text)
    return Leaf(tuple(parts)) if parts else None


def build_nested(text: str, markers: MarkerTable) -> list[Content]:
    """
    Build the nested content tree of a text from its markers.

    Markers are consumed in ascending offset order. Text between consecutive
    marker offsets is split into parts and appended to the list being built
    at the current depth. An Open saves that list on the stack and starts a
    fresh one; its Close wraps the fresh list into a Wrapped node and appends
    it to the saved list.

    Errors:
    - NestingError when a Close does not match the innermost open region
      (crossing regions), when the stack is empty, or when regions are still
      open at the end of the text.
    """
    current: list[Content] = []
    stack: list[tuple[Open, list[Content]]] = []
    cursor = 0

    for offset, offset_markers in markers:
        if offset > len(text):
            raise NestingError(f"marker at offset {offset} beyond end of text ({len(text)})")
        leaf = _leaf(text[cursor:offset])
        if leaf is not None:
            current.append(leaf)
        cursor = offset

        for marker in offset_markers:
            if isinstance(marker, Open):
                stack.append((marker, current))
                current = []
            elif isinstance(marker, Close):
                if not stack:
                    raise NestingError(f"region closed at offset {offset} was never opened")
                opened, saved = stack.pop()
                if opened.key != marker.key:
                    raise NestingError(
                        f"regions cross at offset {offset}: closing region {marker.key} "
                        f"while region {opened.key} is still open"
                    )
                saved.append(Wrapped(opened.count, tuple(current)))
                current = saved

    if stack:
        raise NestingError(f"{len(stack)} region(s) still open at end of text")

    leaf = _leaf(text[cursor:])
    if leaf is not None:
        current.append(leaf)
    return current
