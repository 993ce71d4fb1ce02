"""Grid sets and the saved grids they hold.

The library owns the list of sets and which one is current. Saving a grid
into the current set creates a set on the fly when none is selected.
"""

from __future__ import annotations

import copy
from typing import Callable, Iterable, List, Mapping, Optional

from ..core.exceptions import SetOperationError
from ..core.models import Appearance, Grid, GridSet, SavedGrid, WordDefinitionData
from ..io.codec import now_ms
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

DEFAULT_SET_NAME = "Nouveau set"


def copy_name(base: str, taken: Iterable[str]) -> str:
    """First free ``"<base> (copie)"`` / ``"<base> (copie N)"`` name."""

    names = set(taken)
    candidate = f"{base} (copie)"
    index = 1
    while candidate in names:
        index += 1
        candidate = f"{base} (copie {index})"
    return candidate


class SetLibrary:
    def __init__(
        self,
        sets: Optional[List[GridSet]] = None,
        current_set_id: Optional[str] = None,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        self.sets: List[GridSet] = list(sets or [])
        self.current_set_id = current_set_id if self.find_set(current_set_id) else None
        self._clock = clock or now_ms

    # ------------------------------------------------------------------
    # Sets
    # ------------------------------------------------------------------
    @property
    def current_set(self) -> Optional[GridSet]:
        return self.find_set(self.current_set_id)

    def find_set(self, set_id: Optional[str]) -> Optional[GridSet]:
        if set_id is None:
            return None
        return next((grid_set for grid_set in self.sets if grid_set.id == set_id), None)

    def create_set(self, name: str = "") -> GridSet:
        """Append an empty set with default appearance and make it current."""

        grid_set = GridSet(id=self._new_id(), name=name.strip() or DEFAULT_SET_NAME, appearance=Appearance())
        self.sets.append(grid_set)
        self.current_set_id = grid_set.id
        LOGGER.info("Created set %r (%s)", grid_set.name, grid_set.id)
        return grid_set

    def select_set(self, set_id: str) -> GridSet:
        grid_set = self._require_set(set_id)
        self.current_set_id = grid_set.id
        return grid_set

    def rename_set(self, set_id: str, name: str) -> GridSet:
        grid_set = self._require_set(set_id)
        if not name.strip():
            raise SetOperationError("Set name cannot be blank")
        grid_set.name = name.strip()
        return grid_set

    def delete_set(self, set_id: str) -> bool:
        """Remove a set; deleting the current set leaves no set selected."""

        before = len(self.sets)
        self.sets = [grid_set for grid_set in self.sets if grid_set.id != set_id]
        if len(self.sets) == before:
            return False
        if self.current_set_id == set_id:
            self.current_set_id = None
        LOGGER.info("Deleted set %s", set_id)
        return True

    # ------------------------------------------------------------------
    # Saved grids
    # ------------------------------------------------------------------
    def save_grid(
        self,
        name: str,
        grid: Grid,
        definitions: Mapping[str, WordDefinitionData],
        replace: bool = True,
    ) -> SavedGrid:
        """Store ``grid`` under ``name`` in the current set.

        When a saved grid already has that name it is replaced in place
        (keeping its id), or with ``replace=False`` the new grid is added as
        ``"<name> (copie)"``, ``"<name> (copie 2)"``, ...
        """

        base = name.strip()
        if not base:
            raise SetOperationError("Grid name cannot be blank")
        grid_set = self.current_set or self.create_set()
        timestamp = self._clock()
        existing_index = next(
            (index for index, saved in enumerate(grid_set.grids) if saved.name == base),
            None,
        )

        final_name = base
        if existing_index is not None and replace:
            saved_id = grid_set.grids[existing_index].id
        else:
            if existing_index is not None:
                final_name = copy_name(base, (saved.name for saved in grid_set.grids))
            saved_id = self._unique(str(timestamp), (saved.id for saved in grid_set.grids))

        stored_grid = copy.deepcopy(grid)
        stored_grid.name = final_name
        saved = SavedGrid(
            id=saved_id,
            name=final_name,
            timestamp=timestamp,
            grid=stored_grid,
            definitions=copy.deepcopy(dict(definitions)),
        )
        if existing_index is not None and replace:
            grid_set.grids[existing_index] = saved
        else:
            grid_set.grids.append(saved)
        LOGGER.info("Saved grid %r into set %r", final_name, grid_set.name)
        return saved

    def delete_grid(self, grid_id: str) -> bool:
        grid_set = self.current_set
        if grid_set is None:
            return False
        before = len(grid_set.grids)
        grid_set.grids = [saved for saved in grid_set.grids if saved.id != grid_id]
        return len(grid_set.grids) != before

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _require_set(self, set_id: str) -> GridSet:
        grid_set = self.find_set(set_id)
        if grid_set is None:
            raise SetOperationError(f"Unknown set {set_id!r}")
        return grid_set

    def _new_id(self) -> str:
        return self._unique(str(self._clock()), (grid_set.id for grid_set in self.sets))

    @staticmethod
    def _unique(candidate: str, taken: Iterable[str]) -> str:
        used = set(taken)
        unique = candidate
        suffix = 1
        while unique in used:
            suffix += 1
            unique = f"{candidate}-{suffix}"
        return unique
