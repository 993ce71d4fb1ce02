"""Grid construction and edit helpers.

Every edit returns a new :class:`Grid`; the snapshot handed in is never
mutated, so a caller can keep it for rendering while the next edit runs.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Iterable, List

from ..core.constants import BLACK_CHAR, EMPTY_CHAR
from ..core.exceptions import GridSizeError
from ..core.models import Cell, CellPatch, Grid
from ..data.normalization import normalize_letter
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


@dataclass
class GridConfig:
    """Size used for a fresh editing session."""

    width: int = 15
    height: int = 15
    name: str = ""

    def build(self) -> Grid:
        return build_empty_grid(self.width, self.height, name=self.name)


# ----------------------------------------------------------------------
# Construction
# ----------------------------------------------------------------------
def build_empty_grid(width: int, height: int, name: str = "") -> Grid:
    if width <= 0 or height <= 0:
        raise GridSizeError(f"Grid size must be positive, got {width}x{height}")
    return Grid(width=width, height=height, name=name)


def grid_from_rows(rows: Iterable[str], name: str = "") -> Grid:
    """Build a grid from ``#``/``.``/letter row strings.

    Short rows are padded with empty cells up to the longest row.
    """

    lines = list(rows)
    height = len(lines)
    width = max((len(line) for line in lines), default=0)
    if width == 0 or height == 0:
        raise GridSizeError("Cannot build a grid from empty rows")
    cells: List[List[Cell]] = []
    for y, line in enumerate(lines):
        row: List[Cell] = []
        for x in range(width):
            char = line[x] if x < len(line) else EMPTY_CHAR
            if char == BLACK_CHAR:
                row.append(Cell(x=x, y=y, is_black=True))
            else:
                row.append(Cell(x=x, y=y, value=normalize_letter(char)))
        cells.append(row)
    return Grid(width=width, height=height, cells=cells, name=name)


def grid_rows(grid: Grid) -> List[str]:
    """Inverse of :func:`grid_from_rows`."""

    return [
        "".join(BLACK_CHAR if cell.is_black else (cell.value or EMPTY_CHAR) for cell in row)
        for row in grid.cells
    ]


def copy_grid(grid: Grid) -> Grid:
    return copy.deepcopy(grid)


# ----------------------------------------------------------------------
# Edits
# ----------------------------------------------------------------------
def resize_grid(grid: Grid, width: int, height: int) -> Grid:
    """Replace ``grid`` with an empty grid of the new size, keeping its name."""

    resized = build_empty_grid(width, height, name=grid.name)
    LOGGER.debug("Resized grid %r from %sx%s to %sx%s", grid.name, grid.width, grid.height, width, height)
    return resized


def apply_patch(grid: Grid, x: int, y: int, patch: CellPatch) -> Grid:
    """Return a copy of ``grid`` with ``patch`` applied to ``(x, y)``.

    Blackening a cell clears its letter. A letter patch on a black cell is
    ignored unless the same patch also turns the cell white. Out-of-bounds
    coordinates leave the grid unchanged.
    """

    if not grid.in_bounds(x, y):
        LOGGER.debug("Ignoring patch outside grid at (%s,%s)", x, y)
        return grid
    current = grid.cell(x, y)
    is_black = current.is_black if patch.is_black is None else patch.is_black
    if patch.is_black is None and patch.value is not None and current.is_black:
        return grid

    value = current.value
    if patch.value is not None:
        value = normalize_letter(patch.value)
    if is_black:
        value = ""
    if is_black == current.is_black and value == current.value:
        return grid

    updated = copy_grid(grid)
    cell = updated.cell(x, y)
    cell.is_black = is_black
    cell.value = value
    return updated


def toggle_black(grid: Grid, x: int, y: int) -> Grid:
    if not grid.in_bounds(x, y):
        return grid
    return apply_patch(grid, x, y, CellPatch(is_black=not grid.cell(x, y).is_black))


def rename_grid(grid: Grid, name: str) -> Grid:
    renamed = copy_grid(grid)
    renamed.name = name
    return renamed
