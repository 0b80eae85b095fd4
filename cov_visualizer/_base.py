from __future__ import annotations

import abc
from html import escape
from dataclasses import dataclass
from itertools import cycle
from typing import Any, Iterator


class VisualizerException(Exception):
    """
    Domain-specific error for visualizer configuration and rendering.

    Raised when:
    - configuration is invalid (empty kind name),
    - no content can be rendered in strict mode,
    - requested output format is unsupported,
    - the coverage payload cannot be read at all.
    """
    pass


class NestingError(VisualizerException):
    """
    Regions of one file cross instead of nesting.

    Fatal for the render of that file; callers decide whether to skip the
    file or abort the whole report.
    """
    pass


# ---------- Kind configuration ----------

UNKNOWN_KIND_LABEL = "unknown"

KNOWN_KINDS: dict[str, str] = {
    "expressions": "Expressions",
    "caseBranches": "Case branches",
    "declarations": "Declarations",
    "ifElseBranches": "If/else branches",
    "lambdaBodies": "Lambda bodies",
    "letDeclarations": "Let declarations",
}


@dataclass
class KindConfig:
    """
    Per-kind configuration used by visualizers.

    Fields:
    - name: coverage kind identifier as found in the payload (e.g., "caseBranches")
    - label: human-readable heading for the kind
    - color: accent color for the kind's section
    """
    name: str
    label: str | None = None
    color: str | None = None


# ---------- Base visualizer ----------

class Visualizer(abc.ABC):
    """
    Base class for coverage visualizers.

    Responsibilities:
    - hold per-kind configuration (labels, colors),
    - provide helpers to resolve labels and colors,
    - offer an HTML page wrapper (UTF-8 meta, default stylesheet) for fragments.

    Contract:
    - visualize and render return a single string, always.
    - Subclasses validate supported output_format values at runtime and raise VisualizerException otherwise.
    """
    STYLESHEET: str = (
        ".source { font-family: monospace; white-space: pre; line-height: 1.4; }\n"
        ".covered { background-color: rgba(0, 200, 0, 0.15); }\n"
        ".uncovered { background-color: rgba(255, 30, 30, 0.5); }\n"
        ".whitespace { white-space: pre; }\n"
    )

    def __init__(self, kinds: list[str] | None = None):
        # Registered kind configs keyed by kind identifier
        self._kind_configs: dict[str, KindConfig] = {}

        # Default color iterator (cycled, never exhausted)
        color_list = [
            "steelblue", "orangered", "mediumseagreen", "plum", "orange",
            "skyblue", "navajowhite", "mediumpurple", "rosybrown", "gray",
        ]
        self._default_colors: Iterator[str] = cycle(color_list)

        for name in kinds if kinds is not None else KNOWN_KINDS:
            self.add_kind(name)

    # ----- Configuration API -----

    def add_kind(self, name: str, label: str | None = None, color: str | None = None) -> None:
        """
        Register or update a kind configuration.

        Parameters:
        - name: coverage kind identifier
        - label: display label (optional; known kinds have a built-in one, others fall back to the name)
        - color: accent color (optional; if omitted, a new default is assigned)
        """
        if not name:
            raise VisualizerException("kind name cannot be empty")

        cfg = self._kind_configs.get(name)
        if cfg is None:
            cfg = KindConfig(name=name)
            self._kind_configs[name] = cfg

        if label is not None:
            cfg.label = label
        elif cfg.label is None:
            cfg.label = KNOWN_KINDS.get(name, name)

        if color is not None:
            cfg.color = color
        elif cfg.color is None:
            cfg.color = next(self._default_colors)

    def remove_kind(self, name: str) -> None:
        """Remove a kind configuration."""
        if not name:
            raise VisualizerException("kind name cannot be empty")
        self._kind_configs.pop(name, None)

    def clear_kinds(self) -> None:
        """Remove all kind configurations."""
        self._kind_configs.clear()

    # ----- Resolvers / Helpers -----

    def list_kinds(self) -> list[str]:
        """List configured kinds (in insertion order)."""
        return list(self._kind_configs.keys())

    def iter_kind_configs(self):
        """Iterate over (kind, KindConfig) pairs."""
        return self._kind_configs.items()

    def resolve_label(self, kind: str) -> str:
        """Display label for a kind; kinds neither registered nor built in are labelled "unknown"."""
        cfg = self._kind_configs.get(kind)
        if cfg is None or cfg.label is None:
            return KNOWN_KINDS.get(kind, UNKNOWN_KIND_LABEL)
        return cfg.label

    def resolve_color(self, kind: str) -> str | None:
        cfg = self._kind_configs.get(kind)
        return cfg.color if cfg else None

    @classmethod
    def _wrap_html_page(cls, fragment: str, title: str = "Coverage") -> str:
        """Wrap an HTML fragment into a full document with UTF-8 meta and the default stylesheet."""
        return (
            "<!doctype html>\n"
            "<html lang=\"en\">\n"
            "<head>\n<meta charset=\"utf-8\">\n"
            f"<title>{escape(title)}</title>\n"
            f"<style>\n{cls.STYLESHEET}</style>\n</head>\n<body>\n"
            f"{fragment}\n"
            "</body>\n</html>"
        )

    @abc.abstractmethod
    def visualize(self, *args: Any, output_format: str = "html", **kwargs: Any) -> str:
        """
        Build and render a visualization.

        Returns:
        - a single string (HTML, JSON, CSV or LaTeX depending on the visualizer and selected format)

        Errors:
        - VisualizerException on unsupported format or when strict mode requires content but none is found.
        """
        raise NotImplementedError
