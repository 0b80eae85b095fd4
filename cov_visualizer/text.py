from __future__ import annotations

from dataclasses import dataclass
from typing import Union


# ---------- Parts ----------

@dataclass(frozen=True)
class Text:
    text: str


@dataclass(frozen=True)
class LineBreak:
    pass


@dataclass(frozen=True)
class Indent:
    """A line made only of `width` spaces."""
    width: int


@dataclass(frozen=True)
class IndentedText:
    """`width` leading spaces followed by non-empty text, kept apart so both can be styled."""
    width: int
    text: str


Part = Union[Text, LineBreak, Indent, IndentedText]


def split_line(line: str) -> Part | None:
    """Classify a single line (without newline); returns None for an empty line."""
    if not line:
        return None
    stripped = line.lstrip(" ")
    width = len(line) - len(stripped)
    if not stripped:
        return Indent(width)
    if width:
        return IndentedText(width, stripped)
    return Text(line)


def split_text(text: str) -> list[Part]:
    """
    Decompose a text slice into Parts, left to right.

    Lines are separated by LineBreak parts; each non-empty line becomes a
    Text, Indent or IndentedText part depending on its leading spaces. The
    slice is assumed to hold no markers. An empty slice gives an empty list.
    """
    parts: list[Part] = []
    for number, line in enumerate(text.split("\n")):
        if number:
            parts.append(LineBreak())
        part = split_line(line)
        if part is not None:
            parts.append(part)
    return parts


def part_text(part: Part) -> str:
    """The exact source text a part stands for."""
    if isinstance(part, LineBreak):
        return "\n"
    if isinstance(part, Indent):
        return " " * part.width
    if isinstance(part, IndentedText):
        return " " * part.width + part.text
    return part.text
