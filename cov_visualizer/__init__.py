"""
cov_visualizer: Render source-code coverage as annotated HTML.

Given a source text and counted regions (character spans with execution
counts), the library produces markup where every region is wrapped in its
own element, and nested regions render as correctly nested elements.

Quick start:
    >>> from cov_visualizer import SourceVisualizer
    >>> vis = SourceVisualizer()
    >>> html = vis.visualize(source_text, regions)
    >>> print(html)

Main visualizers:
    - SourceVisualizer: one source text and its regions
    - ReportVisualizer: every module of a coverage payload, one block per coverage kind
    - SummaryVisualizer: hit/total table per module and kind (pandas)
"""

from cov_visualizer._base import Visualizer, VisualizerException, NestingError, KindConfig
from cov_visualizer.positions import Position, Region, PositionIndex
from cov_visualizer.source import SourceVisualizer, ReportVisualizer, render_source
from cov_visualizer.table import SummaryVisualizer

__version__ = "0.1.0"

__all__ = [
    "Visualizer",
    "VisualizerException",
    "NestingError",
    "KindConfig",
    "Position",
    "Region",
    "PositionIndex",
    "SourceVisualizer",
    "ReportVisualizer",
    "SummaryVisualizer",
    "render_source",
]
