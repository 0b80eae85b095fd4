from __future__ import annotations

from pathlib import Path
from typing import IO, Any, Mapping, Union

import pandas as pd

from cov_visualizer._base import Visualizer, VisualizerException
from cov_visualizer.util import load_coverage


# ---------- Summary visualizer ----------

class SummaryVisualizer(Visualizer):
    """
    Hit/total table of regions per module and coverage kind.

    Pipeline:
    - build: produce a pandas DataFrame with one row per (module, kind)
    - render: export the DataFrame as HTML, CSV, JSON, or LaTeX (returns str)
    - visualize: build + render

    Parameters:
    - kinds: coverage kinds to configure (defaults to the known kinds)
    - default_render_options: dict of rendering options passed to render()
    - totals: append one "(total)" row per kind summing all modules
    - page: wrap fragment in full HTML page if True
    - strict: raise when DataFrame is empty if True
    """
    COLUMNS = ["module", "kind", "label", "hit", "total", "percent"]
    TOTAL_MODULE = "(total)"

    def __init__(
        self,
        kinds: list[str] | None = None,
        *,
        default_render_options: dict[str, Any] | None = None,
        totals: bool = False,
        page: bool = False,
        strict: bool = True,
    ):
        super().__init__(kinds)
        self._default_render_options = default_render_options or {}
        self._totals = totals
        self._page = page
        self._strict = strict

    def build(self, coverage: Union[Mapping[str, Any], str, bytes, Path, IO]) -> pd.DataFrame:
        """
        Build the summary DataFrame. A region is hit when its count is above zero;
        percent is 0.0 for kinds without regions.
        """
        records: list[dict[str, Any]] = []
        for module, kinds in load_coverage(coverage).items():
            for kind, regions in kinds.items():
                records.append({
                    "module": module,
                    "kind": kind,
                    "label": self.resolve_label(kind),
                    "hit": sum(1 for r in regions if r.covered),
                    "total": len(regions),
                })

        df = pd.DataFrame.from_records(records, columns=self.COLUMNS[:-1])
        if self._totals and not df.empty:
            totals = df.groupby(["kind", "label"], sort=False, as_index=False)[["hit", "total"]].sum()
            totals.insert(0, "module", self.TOTAL_MODULE)
            df = pd.concat([df, totals[self.COLUMNS[:-1]]], ignore_index=True)

        df["percent"] = [
            100.0 * hit / total if total else 0.0 for hit, total in zip(df["hit"], df["total"])
        ]
        return df

    def render(
        self,
        spec: pd.DataFrame,
        *,
        output_format: str = "html",
        render_options: dict[str, Any] | None = None,
    ) -> str:
        """
        Export the table to the requested format.

        Supported formats:
        - 'html': returns an HTML fragment; wrap to a full page if page=True
        - 'csv': returns CSV text (no index)
        - 'json': returns JSON (records orientation)
        - 'latex': returns LaTeX tabular code

        Errors:
        - VisualizerException on unsupported format or empty result in strict mode.
        """
        fmt = output_format.lower()
        opts = {**self._default_render_options, **(render_options or {})}

        if spec.empty and self._strict:
            raise VisualizerException("SummaryVisualizer: empty result (no coverage data).")

        if fmt == "html":
            frag = spec.to_html(**({"index": False, "escape": True, "float_format": "{:.1f}".format} | opts))
            return self._wrap_html_page(frag, "SummaryVisualizer") if self._page else frag

        if fmt == "csv":
            return spec.to_csv(**({"index": False} | opts))

        if fmt == "json":
            return spec.to_json(**({"orient": "records"} | opts))

        if fmt == "latex":
            return spec.to_latex(**({"index": False, "escape": True} | opts))

        raise VisualizerException(f"Unsupported table output format: {fmt}")

    def visualize(
        self,
        coverage: Union[Mapping[str, Any], str, bytes, Path, IO],
        *,
        output_format: str = "html",
    ) -> str:
        """Convenience wrapper: build + render."""
        spec = self.build(coverage)
        return self.render(spec, output_format=output_format)
