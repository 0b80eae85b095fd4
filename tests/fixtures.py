import pytest

from cov_visualizer.positions import Position, Region


def region(start_line, start_col, end_line, end_col, count):
    return Region(Position(start_line, start_col), Position(end_line, end_col), count)


def region_dict(start_line, start_col, end_line, end_col, count):
    return {
        "from": {"line": start_line, "column": start_col},
        "to": {"line": end_line, "column": end_col},
        "count": count,
    }


@pytest.fixture()
def small_source():
    """
    Text: "a\\n  b\\n"
    Regions:
      whole text: (1,1)-(3,1), count 3   -> offsets [0, 6)
      "b":        (2,3)-(2,4), count 0   -> offsets [4, 5)
    """
    text = "a\n  b\n"
    regions = [region(1, 1, 3, 1, 3), region(2, 3, 2, 4, 0)]
    return text, regions


@pytest.fixture()
def module_source():
    """
    Text (50 chars):
      main =
          if x then
              1
          else
              2

    Regions:
      declaration:  (1,1)-(5,10), count 1 -> [0, 49)
      if expression (2,5)-(5,10), count 1 -> [11, 49)
      branch "1":   (3,9)-(3,10), count 1 -> [29, 30)
      branch "2":   (5,9)-(5,10), count 0 -> [48, 49)
    The declaration and the if expression end at the same offset.
    """
    text = "main =\n    if x then\n        1\n    else\n        2\n"
    regions = [
        region(3, 9, 3, 10, 1),
        region(2, 5, 5, 10, 1),
        region(5, 9, 5, 10, 0),
        region(1, 1, 5, 10, 1),
    ]
    return text, regions


@pytest.fixture()
def coverage_payload():
    """
    Decoded-JSON shaped coverage of two modules; only Main has a source.
    """
    return {
        "Main": {
            "declarations": [region_dict(1, 1, 5, 10, 1)],
            "ifElseBranches": [region_dict(3, 9, 3, 10, 1), region_dict(5, 9, 5, 10, 0)],
            "expressions": [
                region_dict(2, 5, 5, 10, 1),
                region_dict(3, 9, 3, 10, 1),
                region_dict(5, 9, 5, 10, 0),
            ],
        },
        "Util": {
            "declarations": [region_dict(1, 1, 1, 4, 0)],
        },
    }


@pytest.fixture()
def sources(module_source):
    text, _ = module_source
    return {"Main": text}
