import pytest

from cov_visualizer.markup import Leaf, Wrapped
from cov_visualizer.render import (
    Break,
    Group,
    TextRun,
    Whitespace,
    plain_text,
    render_content,
    to_dicts,
    to_html,
)
from cov_visualizer.source import render_source
from cov_visualizer.text import Indent, IndentedText, LineBreak, Text

from tests.fixtures import *


def groups(primitives):
    """All groups of a primitive sequence, depth-first."""
    for prim in primitives:
        if isinstance(prim, Group):
            yield prim
            yield from groups(prim.children)


def test_small_source_primitives(small_source):
    text, regions = small_source
    assert render_source(text, regions) == [
        Group(3, (
            TextRun("a"),
            Break(),
            Whitespace(2),
            Group(0, (TextRun("b"),)),
            Break(),
        )),
    ]


def test_indented_text_becomes_whitespace_then_text():
    nodes = [Leaf((IndentedText(4, "else"), LineBreak(), Indent(2), Text("x")))]
    assert render_content(nodes) == [Whitespace(4), TextRun("else"), Break(), Whitespace(2), TextRun("x")]


def test_zero_width_wrapped_node_renders_empty_group():
    assert render_content([Wrapped(7, ())]) == [Group(7, ())]


@pytest.mark.parametrize(
    "count, state, title",
    [(0, "uncovered", "Evaluated 0 times"), (1, "covered", "Evaluated 1 time"), (12, "covered", "Evaluated 12 times")],
)
def test_group_classification(count, state, title):
    group = Group(count)
    assert group.state == state
    assert group.covered is (count > 0)
    assert group.title == title
    assert str(count) in group.title


def test_plain_text_reproduces_source(module_source, small_source):
    for text, regions in (module_source, small_source):
        assert plain_text(render_source(text, regions)) == text


@pytest.mark.parametrize(
    "text, regions",
    [
        # slice after a mid-line marker starts with spaces
        ("x =   y", [region(1, 1, 1, 4, 1), region(1, 4, 1, 8, 0)]),
        # no trailing newline, region ending at end of input
        ("a\nb", [region(1, 1, 2, 2, 2)]),
        ("", []),
        ("", [region(1, 1, 1, 1, 0)]),
        # whitespace-only file
        ("   \n  ", [region(1, 1, 2, 3, 1)]),
        ("\n\n", [region(2, 1, 3, 1, 1)]),
        # zero-width regions at region starts, ends, newlines and end of input
        ("ab\ncd", [
            region(1, 1, 2, 3, 1),
            region(1, 1, 1, 1, 0),
            region(1, 3, 1, 3, 4),
            region(2, 3, 2, 3, 0),
        ]),
        ("  if x\n    y", [region(1, 3, 2, 6, 1), region(2, 5, 2, 6, 0), region(2, 1, 2, 1, 2)]),
    ],
)
def test_plain_text_reproduces_edge_case_sources(text, regions):
    primitives = render_source(text, regions)
    assert plain_text(primitives) == text


def test_zero_width_regions_stay_observable():
    primitives = render_source("ab\ncd", [
        region(1, 1, 2, 3, 1),
        region(1, 1, 1, 1, 0),
        region(2, 3, 2, 3, 5),
    ])
    (outer, last) = [p for p in primitives if isinstance(p, Group)]
    assert outer.children[0] == Group(0, ())
    assert last == Group(5, ())


def test_inner_region_renders_inside_outer(module_source):
    text, regions = module_source
    (declaration,) = [p for p in render_source(text, regions) if isinstance(p, Group)]
    (if_expression,) = [c for c in declaration.children if isinstance(c, Group)]
    assert [g.count for g in groups(if_expression.children)] == [1, 0]
    assert plain_text(if_expression.children).startswith("if x then")


def test_disjoint_regions_render_in_document_order():
    primitives = render_source("one two", [region(1, 5, 1, 8, 0), region(1, 1, 1, 4, 4)])
    assert [plain_text(g.children) for g in groups(primitives)] == ["one", "two"]


def test_to_html_escapes_and_nests():
    primitives = [
        Group(2, (TextRun("a < b"), Break(), Whitespace(2), Group(0, (TextRun("&"),)))),
        Group(5, ()),
    ]
    assert to_html(primitives) == (
        '<span class="covered" title="Evaluated 2 times">a &lt; b<br>'
        '<span class="whitespace">  </span>'
        '<span class="uncovered" title="Evaluated 0 times">&amp;</span></span>'
        '<span class="covered" title="Evaluated 5 times"></span>'
    )


def test_to_dicts():
    assert to_dicts([Whitespace(3), Group(1, (TextRun("x"), Break()))]) == [
        {"type": "whitespace", "width": 3},
        {
            "type": "group",
            "count": 1,
            "covered": True,
            "title": "Evaluated 1 time",
            "children": [{"type": "text", "text": "x"}, {"type": "linebreak"}],
        },
    ]


def test_unknown_node_raises():
    with pytest.raises(TypeError):
        render_content(["not a node"])
