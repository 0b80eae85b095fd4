from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import IO, Any, Iterable, Mapping, Union

from cov_visualizer._base import VisualizerException
from cov_visualizer.positions import Position, Region

LOGGER = logging.getLogger(__name__)

Coverage = dict[str, dict[str, list[Region]]]


def ensure_source(source: Union[str, bytes, Path, IO]) -> str:
    """Normalize source text given as str, UTF-8 bytes, a Path or a file-like object."""
    # Already text
    if isinstance(source, str):
        return source

    if isinstance(source, (bytes, bytearray)):
        return bytes(source).decode("utf-8")

    # Path to a source file
    if isinstance(source, Path):
        return source.read_text(encoding="utf-8")

    # File-like
    if hasattr(source, "read"):
        content = source.read()
        return content.decode("utf-8") if isinstance(content, (bytes, bytearray)) else content

    raise TypeError(f"Unsupported type for source: {type(source).__name__}")


def _int_field(mapping: Mapping[str, Any], name: str) -> int:
    value = mapping[name]
    # bool is an int subclass but never a valid line/column/count
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f'"{name}" must be an integer, got {type(value).__name__}')
    return value


def position_from_dict(data: Mapping[str, Any]) -> Position:
    return Position(_int_field(data, "line"), _int_field(data, "column"))


def region_from_dict(data: Mapping[str, Any]) -> Region:
    """
    Decode one region: {"from": {"line", "column"}, "to": {"line", "column"}, "count"}.

    Raises KeyError, TypeError or ValueError on malformed data.
    """
    count = _int_field(data, "count")
    if count < 0:
        raise ValueError(f"count must not be negative, got {count}")
    return Region(position_from_dict(data["from"]), position_from_dict(data["to"]), count)


def ensure_regions(regions: Iterable[Union[Region, Mapping[str, Any]]] | None) -> list[Region]:
    """Normalize a region list whose items are Region objects or payload dicts."""
    if regions is None:
        return []
    out: list[Region] = []
    for item in regions:
        if isinstance(item, Region):
            out.append(item)
        elif isinstance(item, Mapping):
            out.append(region_from_dict(item))
        else:
            raise TypeError(f"Unsupported type for region: {type(item).__name__}")
    return out


def _decode_module(module: str, kinds: Any) -> dict[str, list[Region]]:
    if not isinstance(kinds, Mapping):
        raise TypeError(f"coverage of module {module} must be a mapping of kind -> regions")
    decoded: dict[str, list[Region]] = {}
    for kind, regions in kinds.items():
        if not isinstance(regions, list):
            raise TypeError(f'regions of kind "{kind}" must be a list')
        decoded[str(kind)] = ensure_regions(regions)
    return decoded


def load_coverage(payload: Union[Mapping[str, Any], str, bytes, Path, IO]) -> Coverage:
    """
    Decode a coverage payload into module -> kind -> regions.

    The payload is a mapping (or its JSON text, bytes, file path or file-like
    object) of module name -> coverage kind -> list of region dicts. A module
    whose entry is malformed is logged and reported as having no coverage
    data (an empty kind mapping).

    Errors:
    - VisualizerException if the payload is not valid JSON or not a mapping.
    """
    if isinstance(payload, Mapping):
        raw: Any = payload
    else:
        if isinstance(payload, Path):
            text = payload.read_text(encoding="utf-8")
        else:
            text = ensure_source(payload)
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as e:
            raise VisualizerException(f"Coverage payload is not valid JSON: {e}") from e

    if not isinstance(raw, Mapping):
        raise VisualizerException(
            f"Coverage payload must map module names to coverage kinds, got {type(raw).__name__}"
        )

    coverage: Coverage = {}
    for module, kinds in raw.items():
        try:
            coverage[str(module)] = _decode_module(module, kinds)
        except (KeyError, TypeError, ValueError) as e:
            LOGGER.warning("Ignoring malformed coverage data for module %s: %s", module, e)
            coverage[str(module)] = {}
    return coverage


def load_sources(sources: Mapping[str, Union[str, bytes, Path, IO]]) -> dict[str, str]:
    """
    Normalize module -> source mapping. Paths that cannot be read are skipped.
    """
    texts: dict[str, str] = {}
    for module, source in sources.items():
        try:
            texts[module] = ensure_source(source)
        except OSError as e:
            LOGGER.info("Skipping source of module %s: %s", module, e)
    return texts
