from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from typing import Iterator


# ---------- Data model ----------

@dataclass(frozen=True, order=True)
class Position:
    """A 1-based (line, column) location in a source text."""
    line: int
    column: int


@dataclass(frozen=True)
class Region:
    """
    A counted span of source text.

    Fields:
    - start: position of the first character (the coverage payload calls it "from")
    - end: position one past the last character (the payload's "to")
    - count: how many times the region was evaluated
    """
    start: Position
    end: Position
    count: int

    @property
    def covered(self) -> bool:
        return self.count > 0


# ---------- Position index ----------

class PositionIndex:
    """
    Resolve (line, column) positions of a text to absolute offsets.

    Lines and columns are 1-based; the column resets at every line start. A
    newline character occupies the column right after the last character of
    its line, so the position one past the end of a line is the offset of its
    newline. The position one past the last character of the text resolves to
    len(text), which lets regions end at end-of-input.

    An empty text only knows the position (1, 1).
    """

    def __init__(self, text: str):
        self._length = len(text)
        # Offset of the first character of every line
        self._line_starts: list[int] = [0]
        for offset, char in enumerate(text):
            if char == "\n":
                self._line_starts.append(offset + 1)

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    def line_end(self, line: int) -> int:
        """Offset one past the last character of a line (its newline, or end of text)."""
        if line < self.line_count:
            return self._line_starts[line] - 1
        return self._length

    def offset(self, position: Position) -> int | None:
        """Return the offset of a position, or None if the text has no such position."""
        line, column = position.line, position.column
        if line < 1 or line > self.line_count or column < 1:
            return None
        start = self._line_starts[line - 1]
        offset = start + column - 1
        if offset > self.line_end(line):
            return None
        return offset

    def position(self, offset: int) -> Position:
        """Inverse of offset(); raises ValueError for offsets outside [0, len(text)]."""
        if offset < 0 or offset > self._length:
            raise ValueError(f"offset {offset} outside of text of length {self._length}")
        line = bisect_right(self._line_starts, offset)
        return Position(line, offset - self._line_starts[line - 1] + 1)

    def __contains__(self, position: Position) -> bool:
        return self.offset(position) is not None

    def __getitem__(self, position: Position) -> int:
        offset = self.offset(position)
        if offset is None:
            raise KeyError(position)
        return offset

    def __iter__(self) -> Iterator[Position]:
        """Iterate every valid position in offset order."""
        for line in range(1, self.line_count + 1):
            width = self.line_end(line) - self._line_starts[line - 1]
            for column in range(1, width + 2):
                yield Position(line, column)

    def __len__(self) -> int:
        return self._length + 1
