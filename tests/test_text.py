import pytest

from cov_visualizer.text import Indent, IndentedText, LineBreak, Text, part_text, split_text


def test_empty_slice_has_no_parts():
    assert split_text("") == []


@pytest.mark.parametrize(
    "text, expected",
    [
        ("abc", [Text("abc")]),
        ("  abc", [IndentedText(2, "abc")]),
        ("    ", [Indent(4)]),
        ("a b  ", [Text("a b  ")]),
        ("\tx", [Text("\tx")]),
    ],
)
def test_single_line(text, expected):
    assert split_text(text) == expected


def test_lines_are_separated_by_breaks():
    assert split_text("a\n  b\n") == [Text("a"), LineBreak(), IndentedText(2, "b"), LineBreak()]


def test_empty_lines_only_produce_breaks():
    assert split_text("\n\n") == [LineBreak(), LineBreak()]
    assert split_text("x\n\n    \ny") == [
        Text("x"), LineBreak(), LineBreak(), Indent(4), LineBreak(), Text("y"),
    ]


@pytest.mark.parametrize("text", ["a\n  b\n", "\n  \n\t x\n", "   if  x\n\n", "no newline"])
def test_parts_reproduce_text(text):
    assert "".join(part_text(p) for p in split_text(text)) == text
