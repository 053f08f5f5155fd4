# stepsearch/core/maps.py
#!/usr/bin/env python3
"""
Map loading: turns a file (JSON, text, image) into a grid of terrain codes.

All formats produce cells[row][col] of small integers (see NodeType); the
graph treats codes it does not know as open ground.

JSON schema:
    {"width": W, "height": H, "cells": [[...], ...],
     "start": [x, y], "goal": [x, y]}      # start/goal optional

Text maps hold one row per line, either as contiguous digits ("00120")
or whitespace-separated integers ("0 0 12 0"). Lines starting with '#'
and blank lines are skipped.

Image maps are decoded with pygame; each pixel takes the code of the
closest colour in TERRAIN_COLORS.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from stepsearch.config import TERRAIN_COLORS
from stepsearch.core.graph import Graph
from stepsearch.core.types import Cell

logger = logging.getLogger(__name__)

IMAGE_SUFFIXES = (".png", ".bmp", ".gif", ".jpg", ".jpeg", ".tga")
TEXT_SUFFIXES = (".txt", ".map")


class MapFormatError(ValueError):
    """Raised when a map file cannot be turned into a grid."""


@dataclass
class MapData:
    width: int
    height: int
    cells: List[List[int]]             # [row][col]
    start: Optional[Cell] = None
    goal: Optional[Cell] = None
    name: str = "custom"

    def build_graph(self) -> Graph:
        return Graph.build(self.cells)

    def default_start(self) -> Cell:
        return self.start if self.start is not None else (0, 0)

    def default_goal(self) -> Cell:
        return self.goal if self.goal is not None else (self.width - 1, self.height - 1)


# ---------- validation ----------
def _check(cells: List[List[int]], width: int, height: int,
           start: Optional[Cell], goal: Optional[Cell]) -> None:
    if width <= 0 or height <= 0:
        raise MapFormatError("map must be at least 1x1")
    if len(cells) != height or any(len(r) != width for r in cells):
        raise MapFormatError("cells size mismatch")
    for label, c in (("start", start), ("goal", goal)):
        if c is None:
            continue
        x, y = c
        if not (0 <= x < width and 0 <= y < height):
            raise MapFormatError(f"{label} out of bounds")


def _cell(value) -> Optional[Cell]:
    if value is None:
        return None
    try:
        x, y = value
        return (int(x), int(y))
    except (TypeError, ValueError):
        raise MapFormatError(f"bad cell {value!r}, expected [x, y]") from None


# ---------- loaders ----------
def load_json_map(path: Path) -> MapData:
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as ex:
            raise MapFormatError(f"{path.name}: {ex}") from ex
    try:
        cells = [[int(v) for v in row] for row in data["cells"]]
    except KeyError:
        raise MapFormatError(f"{path.name}: missing 'cells'") from None
    except (TypeError, ValueError):
        raise MapFormatError(f"{path.name}: cells must be integers") from None
    height = int(data.get("height", len(cells)))
    width = int(data.get("width", len(cells[0]) if cells else 0))
    start = _cell(data.get("start"))
    goal = _cell(data.get("goal"))
    _check(cells, width, height, start, goal)
    return MapData(width, height, cells, start, goal, name=path.stem)


def parse_text_map(text: str, name: str = "custom") -> MapData:
    cells: List[List[int]] = []
    for lineno, raw in enumerate(text.splitlines(), 1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        tokens = line.split() if any(ch.isspace() for ch in line) else list(line)
        try:
            cells.append([int(t) for t in tokens])
        except ValueError:
            raise MapFormatError(f"{name}:{lineno}: non-numeric terrain code") from None
    if not cells:
        raise MapFormatError(f"{name}: no rows")
    _check(cells, len(cells[0]), len(cells), None, None)
    return MapData(len(cells[0]), len(cells), cells, name=name)


def load_text_map(path: Path) -> MapData:
    return parse_text_map(path.read_text(encoding="utf-8"), name=path.stem)


def nearest_code(rgb: Tuple[int, int, int],
                 palette: Dict[int, Tuple[int, int, int]] = TERRAIN_COLORS) -> int:
    r, g, b = rgb[:3]
    return min(palette, key=lambda code: (palette[code][0] - r) ** 2
                                         + (palette[code][1] - g) ** 2
                                         + (palette[code][2] - b) ** 2)


def load_image_map(path: Path) -> MapData:
    import pygame

    try:
        surface = pygame.image.load(str(path))
    except pygame.error as ex:
        raise MapFormatError(f"{path.name}: {ex}") from ex
    width, height = surface.get_size()
    cells = [[nearest_code(tuple(surface.get_at((x, y))))
              for x in range(width)] for y in range(height)]
    _check(cells, width, height, None, None)
    return MapData(width, height, cells, name=path.stem)


def load_map(path: Union[str, Path]) -> MapData:
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == ".json":
        data = load_json_map(path)
    elif suffix in TEXT_SUFFIXES:
        data = load_text_map(path)
    elif suffix in IMAGE_SUFFIXES:
        data = load_image_map(path)
    else:
        raise MapFormatError(f"unsupported map format: {path.suffix or path.name}")
    logger.info(f"Loaded map '{data.name}' ({data.width}x{data.height}) from {path}")
    return data


def make_map(width: int, height: int, fill: int = 0) -> MapData:
    """Procedural map: every cell set to `fill`."""
    cells = [[fill] * width for _ in range(height)]
    _check(cells, width, height, None, None)
    return MapData(width, height, cells, name=f"open_{width}x{height}")
