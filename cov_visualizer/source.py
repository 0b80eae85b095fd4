from __future__ import annotations

import json
import logging
from html import escape
from pathlib import Path
from typing import IO, Any, Iterable, Mapping, Union

from cov_visualizer._base import NestingError, Visualizer, VisualizerException
from cov_visualizer.markers import build_markers, resolve_regions
from cov_visualizer.markup import build_nested
from cov_visualizer.positions import PositionIndex, Region
from cov_visualizer.render import Primitive, render_content, to_dicts, to_html
from cov_visualizer.util import ensure_regions, ensure_source, load_coverage, load_sources

LOGGER = logging.getLogger(__name__)

Source = Union[str, bytes, Path, IO]


def render_source(
    text: str,
    regions: Iterable[Region],
    index: PositionIndex | None = None,
) -> list[Primitive]:
    """
    Annotate one source text with its regions.

    Runs the whole pipeline: position index -> markers -> nested content -> primitives.

    Errors:
    - NestingError if the regions cross instead of nesting.
    """
    if index is None:
        index = PositionIndex(text)
    markers = build_markers(regions, index)
    return render_content(build_nested(text, markers))


# ---------- Single source visualizer ----------

class SourceVisualizer(Visualizer):
    """
    Annotated HTML for one source text and one list of regions.

    Pipeline:
    - build: produce {'text': str, 'regions': int, 'primitives': list[Primitive]}
    - render: serialize primitives as 'html' (fragment, or page if page=True) or 'json'
    - visualize: build + render

    Strict mode:
    - If strict=True and no region could be placed in the text, build() raises VisualizerException.
      Otherwise the source renders without annotations.
    """
    def __init__(self, *, page: bool = False, strict: bool = False):
        super().__init__()
        self._page = page
        self._strict = strict

    def build(self, source: Source, regions: Iterable[Any] | None = None) -> dict[str, Any]:
        """
        Build the render spec.

        Errors:
        - NestingError if the regions cross instead of nesting,
        - VisualizerException in strict mode when no region lies inside the text.
        """
        text = ensure_source(source)
        region_list = ensure_regions(regions)
        index = PositionIndex(text)

        placed = resolve_regions(region_list, index)
        if self._strict and not placed:
            raise VisualizerException("No regions could be placed in the source text.")

        primitives = render_content(build_nested(text, build_markers(region_list, index)))
        return {"text": text, "regions": len(placed), "primitives": primitives}

    def render(self, spec: dict[str, Any], *, output_format: str = "html") -> str:
        """
        Supported formats:
        - 'html': a <div class="source"> fragment; wrap to a full page if page=True
        - 'json': the primitives as nested dictionaries

        Errors:
        - VisualizerException on unsupported format.
        """
        fmt = output_format.lower()
        if fmt == "html":
            frag = f'<div class="source">{to_html(spec["primitives"])}</div>'
            return self._wrap_html_page(frag, "SourceVisualizer") if self._page else frag
        if fmt == "json":
            return json.dumps(to_dicts(spec["primitives"]))
        raise VisualizerException(f"Unsupported source output format: {fmt}")

    def visualize(
        self,
        source: Source,
        regions: Iterable[Any] | None = None,
        *,
        output_format: str = "html",
    ) -> str:
        """Convenience: build + render (returns str)."""
        spec = self.build(source, regions)
        return self.render(spec, output_format=output_format)


# ---------- Report visualizer ----------

class ReportVisualizer(Visualizer):
    """
    Annotated sources for a whole coverage payload.

    Input:
    - coverage: module -> kind -> regions (anything load_coverage accepts)
    - sources: module -> source text (anything ensure_source accepts per entry)

    Modules without a source are skipped (listed under 'skipped'). Kinds are
    rendered in configured order first, then any other kind found in the
    payload, labelled "unknown".

    Strict mode:
    - strict=True re-raises a NestingError of any file.
    - strict=False logs it, records it under 'errors' and renders the rest.
    """
    def __init__(
        self,
        kinds: list[str] | None = None,
        *,
        page: bool = False,
        strict: bool = False,
    ):
        super().__init__(kinds)
        self._page = page
        self._strict = strict

    def _ordered_kinds(self, kinds: Mapping[str, Any]) -> list[str]:
        configured = [k for k in self.list_kinds() if k in kinds]
        return configured + [k for k in kinds if k not in configured]

    def build(
        self,
        coverage: Union[Mapping[str, Any], str, bytes, Path, IO],
        sources: Mapping[str, Source],
    ) -> dict[str, Any]:
        """
        Build the report spec.

        Returns:
        - {'modules': {module: [{'kind', 'label', 'color', 'regions', 'primitives'}]},
           'skipped': [module], 'errors': {module: {kind: message}}}
        """
        decoded = load_coverage(coverage)
        texts = load_sources(sources)

        modules: dict[str, list[dict[str, Any]]] = {}
        skipped: list[str] = []
        errors: dict[str, dict[str, str]] = {}

        for module, kinds in decoded.items():
            text = texts.get(module)
            if text is None:
                LOGGER.info("No source for module %s, skipping detailed rendering", module)
                skipped.append(module)
                continue

            index = PositionIndex(text)
            sections: list[dict[str, Any]] = []
            for kind in self._ordered_kinds(kinds):
                regions = kinds[kind]
                try:
                    primitives = render_source(text, regions, index)
                except NestingError as e:
                    if self._strict:
                        raise
                    LOGGER.warning("Cannot render %s of module %s: %s", kind, module, e)
                    errors.setdefault(module, {})[kind] = str(e)
                    continue
                sections.append({
                    "kind": kind,
                    "label": self.resolve_label(kind),
                    "color": self.resolve_color(kind),
                    "regions": len(resolve_regions(regions, index)),
                    "primitives": primitives,
                })
            modules[module] = sections

        if self._strict and not modules:
            raise VisualizerException("No module of the coverage payload has a source to render.")

        return {"modules": modules, "skipped": skipped, "errors": errors}

    def render(self, spec: dict[str, Any], *, output_format: str = "html") -> str:
        """
        Supported formats:
        - 'html': one <section> per module, one block per kind; full page if page=True
        - 'json': the same structure with primitives as nested dictionaries

        Errors:
        - VisualizerException on unsupported format.
        """
        fmt = output_format.lower()
        if fmt == "html":
            frag = self._render_html(spec)
            return self._wrap_html_page(frag, "Coverage report") if self._page else frag
        if fmt == "json":
            modules = {
                module: [{**s, "primitives": to_dicts(s["primitives"])} for s in sections]
                for module, sections in spec["modules"].items()
            }
            return json.dumps({"modules": modules, "skipped": spec["skipped"], "errors": spec["errors"]})
        raise VisualizerException(f"Unsupported report output format: {fmt}")

    def visualize(
        self,
        coverage: Union[Mapping[str, Any], str, bytes, Path, IO],
        sources: Mapping[str, Source],
        *,
        output_format: str = "html",
    ) -> str:
        """Convenience: build + render (returns str)."""
        spec = self.build(coverage, sources)
        return self.render(spec, output_format=output_format)

    @staticmethod
    def _render_html(spec: dict[str, Any]) -> str:
        chunks: list[str] = []
        for module, sections in spec["modules"].items():
            chunks.append(f'<section class="module">\n<h2>{escape(module)}</h2>')
            for section in sections:
                style = f' style="border-left: 4px solid {section["color"]}"' if section["color"] else ""
                chunks.append(
                    f'<div class="kind"{style}>\n'
                    f'<h3>{escape(section["label"])}</h3>\n'
                    f'<div class="source">{to_html(section["primitives"])}</div>\n'
                    "</div>"
                )
            for kind, message in spec["errors"].get(module, {}).items():
                chunks.append(f'<p class="error">{escape(kind)}: {escape(message)}</p>')
            chunks.append("</section>")
        return "\n".join(chunks)
