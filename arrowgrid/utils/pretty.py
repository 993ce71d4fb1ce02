"""Pretty-print helpers for arrow-word grids."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, List, Mapping, Optional, Sequence

from ..core.constants import ArrowDirection, ArrowVariant
from ..core.models import ArrowPlacement, Grid, PlacementMaps, WordDefinitionData, cell_key

if TYPE_CHECKING:
    from ..core.models import WordPosition
    from ..engine.validator import ValidationResult


STRAIGHT_GLYPHS = {
    ArrowDirection.LEFT: "←",
    ArrowDirection.RIGHT: "→",
    ArrowDirection.UP: "↑",
    ArrowDirection.DOWN: "↓",
}


def arrow_glyph(arrow: ArrowPlacement) -> str:
    if arrow.variant == ArrowVariant.CURVED_LEFT:
        return "↲" if arrow.direction == ArrowDirection.DOWN else "↰"
    if arrow.variant == ArrowVariant.CURVED_RIGHT:
        return "↳" if arrow.direction == ArrowDirection.DOWN else "↱"
    return STRAIGHT_GLYPHS[arrow.direction]


def cell_symbol(grid: Grid, maps: PlacementMaps, x: int, y: int) -> str:
    cell = grid.cell(x, y)
    key = cell_key(x, y)
    if cell.is_black:
        count = len(maps.definition_placements.get(key, []))
        return str(count) if count else "#"
    arrows = maps.arrow_placements.get(key, [])
    letter = cell.value or "."
    if arrows:
        return letter + "".join(arrow_glyph(arrow) for arrow in arrows)
    return letter


def format_grid(grid: Grid, maps: Optional[PlacementMaps] = None) -> str:
    """Render the grid as text.

    Black cells show how many definitions they hold; playable cells show
    their letter followed by any arrow glyphs.
    """

    maps = maps or PlacementMaps()
    header_cells = [f"{x:>3}" for x in range(grid.width)]
    lines = ["    " + " ".join(header_cells)]
    lines.append("    " + "-" * (4 * grid.width - 1))
    for y in range(grid.height):
        row_render = " ".join(f"{cell_symbol(grid, maps, x, y):>3}" for x in range(grid.width))
        lines.append(f"{y:>2} | {row_render}")
    return "\n".join(lines)


def format_definitions(
    definitions: Mapping[str, WordDefinitionData],
    positions: Sequence["WordPosition"],
) -> List[str]:
    lines: List[str] = []
    for word in sorted({position.word for position in positions}):
        data = definitions.get(word)
        text = data.definition if data and data.definition else "-"
        where = ""
        if data and data.placement:
            placement = data.placement
            where = f" @({placement.x},{placement.y}) {placement.direction.value}"
        lines.append(f"  {word:<15} {text}{where}")
    return lines


def pretty_print_grid(
    grid: Grid,
    maps: Optional[PlacementMaps] = None,
    *,
    label: str | None = None,
    stream=None,
) -> None:
    """Print the grid in a human-friendly format."""

    stream = stream or sys.stdout
    if label:
        print(label, file=stream)
    print(format_grid(grid, maps), file=stream)


def print_validation(result: "ValidationResult", *, stream=None) -> None:
    stream = stream or sys.stdout
    if result.ok:
        print("Grid is valid", file=stream)
        return
    print("--- Validation ---", file=stream)
    for message in result.messages:
        print(f"  {message}", file=stream)
