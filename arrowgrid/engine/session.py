"""Editing session: one grid, its definitions, and the derived render maps.

Each mutating call runs the same pipeline before returning::

    grid' = edit(grid)
    positions = extract_word_positions(grid'.cells)
    store.reconcile(grid', positions)
    maps = resolve_placements(grid', store.filtered(positions))

so ``positions`` and ``maps`` always describe the current grid.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Set

from ..core.constants import MAX_DEFINITIONS_PER_CELL, ArrowDirection
from ..core.models import (Anchor, CellPatch, Grid, PlacementMaps, WordDefinitionData,
                           WordPosition, cell_key)
from ..utils.logger import get_logger
from .extractor import extract_word_positions, find_occurrences, list_words
from .grid import GridConfig, apply_patch, copy_grid, rename_grid, resize_grid, toggle_black
from .placement import PlacementStore, ReconcileReport
from .resolver import resolve_placements


LOGGER = get_logger(__name__)


@dataclass
class EditorConfig:
    """Settings for a fresh editing session."""

    default_width: int = 15
    default_height: int = 15
    max_definitions_per_cell: int = MAX_DEFINITIONS_PER_CELL

    def to_grid_config(self) -> GridConfig:
        return GridConfig(width=self.default_width, height=self.default_height)


@dataclass(frozen=True)
class SessionSnapshot:
    """Deep copy handed to renderers so they never share mutable state."""

    grid: Grid
    definitions: Dict[str, WordDefinitionData]


class EditorSession:
    def __init__(
        self,
        config: Optional[EditorConfig] = None,
        grid: Optional[Grid] = None,
        definitions: Optional[Mapping[str, WordDefinitionData]] = None,
    ) -> None:
        self.config = config or EditorConfig()
        self.grid: Grid = grid if grid is not None else self.config.to_grid_config().build()
        self.store = PlacementStore(
            copy.deepcopy(dict(definitions or {})),
            max_per_cell=self.config.max_definitions_per_cell,
        )
        self.selected_word: Optional[str] = None
        self.placement_target: Optional[str] = None
        self.positions: List[WordPosition] = []
        self.maps = PlacementMaps()
        self.last_report = ReconcileReport()
        self._refresh()

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------
    def _refresh(self) -> None:
        self.positions = extract_word_positions(self.grid.cells)
        self.last_report = self.store.reconcile(self.grid, self.positions)
        if self.selected_word is not None and not find_occurrences(self.positions, self.selected_word):
            self.selected_word = None
            self.placement_target = None
        self.maps = resolve_placements(self.grid, self.definitions)

    def _replace_grid(self, grid: Grid) -> None:
        if grid is self.grid:
            return
        self.grid = grid
        self._refresh()

    @property
    def definitions(self) -> Dict[str, WordDefinitionData]:
        """Reconciled definitions of the words present in the grid."""
        return self.store.filtered(self.positions)

    @property
    def words(self) -> List[str]:
        return list_words(self.positions)

    # ------------------------------------------------------------------
    # Grid edits
    # ------------------------------------------------------------------
    def update_cell(self, x: int, y: int, patch: CellPatch) -> None:
        self._replace_grid(apply_patch(self.grid, x, y, patch))

    def toggle_black(self, x: int, y: int) -> None:
        self._replace_grid(toggle_black(self.grid, x, y))

    def resize(self, width: int, height: int) -> None:
        self._replace_grid(resize_grid(self.grid, width, height))

    def rename(self, name: str) -> None:
        self.grid = rename_grid(self.grid, name)

    def load_grid(self, grid: Grid, definitions: Optional[Mapping[str, WordDefinitionData]] = None) -> None:
        """Replace the grid and its definitions, clearing any selection."""

        self.selected_word = None
        self.placement_target = None
        self.store = PlacementStore(
            copy.deepcopy(dict(definitions or {})),
            max_per_cell=self.config.max_definitions_per_cell,
        )
        self.grid = grid
        self._refresh()

    # ------------------------------------------------------------------
    # Definitions
    # ------------------------------------------------------------------
    def select_word(self, word: Optional[str]) -> None:
        self.selected_word = word
        self.placement_target = None

    def set_definition(self, text: str) -> None:
        if self.selected_word is None:
            return
        self.store.set_definition_text(self.selected_word, text)
        self.maps = resolve_placements(self.grid, self.definitions)

    def request_placement(self) -> None:
        """Arm placement mode: the next cell click anchors the selected word."""
        if self.selected_word is not None:
            self.placement_target = self.selected_word

    def cancel_placement(self) -> None:
        self.placement_target = None

    def click_cell(self, x: int, y: int) -> Optional[Anchor]:
        """Handle a cell click; anchors the target word when placement mode is armed.

        Placement mode ends after the click whether or not the attempt worked.
        """

        word = self.placement_target
        if word is None:
            return None
        self.placement_target = None
        anchor = self.store.attempt_placement(word, x, y, self.grid, self.positions)
        if anchor is not None:
            self.selected_word = word
            self.maps = resolve_placements(self.grid, self.definitions)
        return anchor

    def update_arrow_direction(self, direction: ArrowDirection) -> bool:
        if self.selected_word is None:
            return False
        changed = self.store.update_arrow_direction(self.selected_word, direction)
        if changed:
            self.maps = resolve_placements(self.grid, self.definitions)
        return changed

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def highlighted_cells(self) -> Set[str]:
        """Cell keys of the first occurrence of the selected word."""

        if self.selected_word is None:
            return set()
        occurrences = find_occurrences(self.positions, self.selected_word)
        if not occurrences:
            return set()
        return {cell_key(x, y) for x, y in occurrences[0].cells}

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(grid=copy_grid(self.grid), definitions=copy.deepcopy(self.definitions))
