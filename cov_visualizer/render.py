from __future__ import annotations

from dataclasses import dataclass, field
from html import escape
from typing import Any, Iterable, Union

from cov_visualizer.markup import Content, Leaf, Wrapped
from cov_visualizer.text import Indent, IndentedText, LineBreak, Part, Text


# ---------- Render primitives ----------

@dataclass(frozen=True)
class TextRun:
    text: str


@dataclass(frozen=True)
class Break:
    pass


@dataclass(frozen=True)
class Whitespace:
    """An indentation block, rendered in its own container."""
    width: int


@dataclass(frozen=True)
class Group:
    """
    The rendering of one region.

    - count: the literal execution count
    - children: primitives rendered inside the group, in document order
    """
    count: int
    children: tuple["Primitive", ...] = field(default_factory=tuple)

    @property
    def covered(self) -> bool:
        return self.count > 0

    @property
    def state(self) -> str:
        return "covered" if self.covered else "uncovered"

    @property
    def title(self) -> str:
        return f"Evaluated {self.count} time{'' if self.count == 1 else 's'}"


Primitive = Union[TextRun, Break, Whitespace, Group]


# ---------- Tree -> primitives ----------

def render_part(part: Part) -> list[Primitive]:
    if isinstance(part, LineBreak):
        return [Break()]
    if isinstance(part, Indent):
        return [Whitespace(part.width)]
    if isinstance(part, IndentedText):
        return [Whitespace(part.width), TextRun(part.text)]
    if isinstance(part, Text):
        return [TextRun(part.text)]
    raise TypeError(f"Unsupported part: {part!r}")


def render_content(nodes: Iterable[Content]) -> list[Primitive]:
    """Depth-first linearization of a content tree, preserving order at every level."""
    primitives: list[Primitive] = []
    for node in nodes:
        if isinstance(node, Leaf):
            for part in node.parts:
                primitives.extend(render_part(part))
        elif isinstance(node, Wrapped):
            primitives.append(Group(node.count, tuple(render_content(node.children))))
        else:
            raise TypeError(f"Unsupported content node: {node!r}")
    return primitives


# ---------- Serializers ----------

def plain_text(primitives: Iterable[Primitive]) -> str:
    """Concatenate the source text carried by primitives, ignoring group boundaries."""
    chunks: list[str] = []
    for prim in primitives:
        if isinstance(prim, TextRun):
            chunks.append(prim.text)
        elif isinstance(prim, Break):
            chunks.append("\n")
        elif isinstance(prim, Whitespace):
            chunks.append(" " * prim.width)
        elif isinstance(prim, Group):
            chunks.append(plain_text(prim.children))
    return "".join(chunks)


def to_html(primitives: Iterable[Primitive]) -> str:
    """
    Serialize primitives to an HTML fragment.

    - TextRun -> escaped text
    - Break -> <br>
    - Whitespace -> <span class="whitespace">...</span>
    - Group -> <span class="covered|uncovered" title="Evaluated N times">...</span>
    """
    chunks: list[str] = []
    for prim in primitives:
        if isinstance(prim, TextRun):
            chunks.append(escape(prim.text))
        elif isinstance(prim, Break):
            chunks.append("<br>")
        elif isinstance(prim, Whitespace):
            chunks.append(f'<span class="whitespace">{" " * prim.width}</span>')
        elif isinstance(prim, Group):
            chunks.append(
                f'<span class="{prim.state}" title="{escape(prim.title)}">'
                f"{to_html(prim.children)}</span>"
            )
    return "".join(chunks)


def to_dicts(primitives: Iterable[Primitive]) -> list[dict[str, Any]]:
    """Serialize primitives to JSON-friendly dictionaries."""
    out: list[dict[str, Any]] = []
    for prim in primitives:
        if isinstance(prim, TextRun):
            out.append({"type": "text", "text": prim.text})
        elif isinstance(prim, Break):
            out.append({"type": "linebreak"})
        elif isinstance(prim, Whitespace):
            out.append({"type": "whitespace", "width": prim.width})
        elif isinstance(prim, Group):
            out.append({
                "type": "group",
                "count": prim.count,
                "covered": prim.covered,
                "title": prim.title,
                "children": to_dicts(prim.children),
            })
    return out
