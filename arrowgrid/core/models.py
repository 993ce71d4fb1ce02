"""Data models supporting the arrow-word editor."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional, Tuple

from .constants import (AnchorRole, ArrowDirection, ArrowVariant, Attachment,
                        Bounds, WordDirection)

Point = Tuple[int, int]


def cell_key(x: int, y: int) -> str:
    """Render-map key for the cell at ``(x, y)``."""
    return f"{x}-{y}"


@dataclass
class Cell:
    """Represents a grid cell."""

    x: int
    y: int
    is_black: bool = False
    value: str = ""

    def has_letter(self) -> bool:
        return not self.is_black and bool(self.value)


@dataclass(frozen=True)
class CellPatch:
    """Field-level update request for a single cell.

    ``None`` means "leave the field alone".
    """

    is_black: Optional[bool] = None
    value: Optional[str] = None


@dataclass
class Grid:
    """Rectangular cell array, replaced wholesale on resize or load."""

    width: int
    height: int
    cells: List[List[Cell]] = field(default_factory=list)
    name: str = ""

    def __post_init__(self) -> None:
        if not self.cells:
            self.cells = [
                [Cell(x=x, y=y) for x in range(self.width)] for y in range(self.height)
            ]

    @property
    def bounds(self) -> Bounds:
        return Bounds(width=self.width, height=self.height)

    def cell(self, x: int, y: int) -> Cell:
        return self.cells[y][x]

    def in_bounds(self, x: int, y: int) -> bool:
        return self.bounds.contains(x, y)

    def is_black(self, x: int, y: int) -> bool:
        """True when ``(x, y)`` is inside the grid and black."""
        return self.in_bounds(x, y) and self.cells[y][x].is_black


@dataclass(frozen=True)
class WordPosition:
    """A maximal run of lettered cells, derived from a grid snapshot."""

    word: str
    direction: WordDirection
    start: Point
    end: Point
    cells: Tuple[Point, ...]

    @property
    def length(self) -> int:
        return len(self.cells)

    def endpoint(self, role: AnchorRole) -> Point:
        return self.start if role == AnchorRole.START else self.end


@dataclass(frozen=True)
class Anchor:
    """Placement of a definition on a black cell next to one end of its word."""

    x: int
    y: int
    direction: ArrowDirection
    anchor: Point
    anchor_role: AnchorRole
    word_direction: WordDirection

    @property
    def cell(self) -> Point:
        return (self.x, self.y)


@dataclass
class WordDefinitionData:
    definition: str = ""
    placement: Optional[Anchor] = None


@dataclass(frozen=True)
class DefinitionSlot:
    """One stacked definition shown inside a black cell."""

    word: str
    definition: str


@dataclass(frozen=True)
class ArrowPlacement:
    """Arrow glyph drawn in a playable cell."""

    direction: ArrowDirection
    variant: ArrowVariant
    attachment: Attachment
    origin: Point


@dataclass
class PlacementMaps:
    definition_placements: Dict[str, List[DefinitionSlot]] = field(default_factory=dict)
    arrow_placements: Dict[str, List[ArrowPlacement]] = field(default_factory=dict)


DEFAULT_FONT = "'Inter', 'Segoe UI', system-ui, -apple-system, sans-serif"


@dataclass
class Appearance:
    """Colour and font settings shared by every grid of a set."""

    black_cell_color: str = "#000000"
    cell_background_color: str = "#ffffff"
    arrow_color: str = "#7a7a7a"
    letter_color: str = "#000000"
    definition_text_color: str = "#f5f5f5"
    border_color: str = "#cccccc"
    separator_color: str = "#ffffff"
    grid_font: str = DEFAULT_FONT
    definition_font: str = DEFAULT_FONT

    @staticmethod
    def _json_key(name: str) -> str:
        head, *rest = name.split("_")
        return head + "".join(part.capitalize() for part in rest)

    def to_dict(self) -> Dict[str, str]:
        return {self._json_key(f.name): getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Appearance":
        """Merge ``data`` over the defaults, ignoring unknown or non-string keys."""
        appearance = cls()
        if not data:
            return appearance
        for f in fields(cls):
            value = data.get(cls._json_key(f.name))
            if isinstance(value, str):
                setattr(appearance, f.name, value)
        return appearance


@dataclass
class SavedGrid:
    id: str
    name: str
    timestamp: int
    grid: Grid
    definitions: Dict[str, WordDefinitionData] = field(default_factory=dict)


@dataclass
class GridSet:
    """A named collection of grids sharing one appearance; the export unit."""

    id: str
    name: str
    appearance: Appearance = field(default_factory=Appearance)
    grids: List[SavedGrid] = field(default_factory=list)
