"""Definition store and anchor geometry.

Definitions are keyed by word text: two occurrences of the same word in a
grid share one definition and one placement.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field, replace
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from ..core.constants import (ARROW_STEPS, MAX_DEFINITIONS_PER_CELL, AnchorRole,
                              ArrowDirection)
from ..core.exceptions import InvalidPlacementAttempt, StaleReferenceError
from ..core.models import Anchor, Grid, Point, WordDefinitionData, WordPosition
from ..utils.logger import get_logger
from .extractor import find_occurrences


LOGGER = get_logger(__name__)


# ----------------------------------------------------------------------
# Geometry
# ----------------------------------------------------------------------
def manhattan_distance(a: Point, b: Point) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def is_adjacent(a: Point, b: Point) -> bool:
    return manhattan_distance(a, b) == 1


def direction_towards(source: Point, target: Point) -> ArrowDirection:
    """Compass direction from ``source`` to an orthogonally adjacent ``target``."""

    if target[0] > source[0]:
        return ArrowDirection.RIGHT
    if target[0] < source[0]:
        return ArrowDirection.LEFT
    if target[1] > source[1]:
        return ArrowDirection.DOWN
    return ArrowDirection.UP


def step(point: Point, direction: ArrowDirection) -> Point:
    dx, dy = ARROW_STEPS[direction]
    return (point[0] + dx, point[1] + dy)


@dataclass
class ReconcileReport:
    removed_words: List[str] = field(default_factory=list)
    cleared_placements: List[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.removed_words or self.cleared_placements)


class PlacementStore:
    """Mapping of word text to its definition and optional anchor."""

    def __init__(
        self,
        entries: Optional[Dict[str, WordDefinitionData]] = None,
        max_per_cell: int = MAX_DEFINITIONS_PER_CELL,
    ) -> None:
        self._entries: Dict[str, WordDefinitionData] = dict(entries or {})
        self.max_per_cell = max_per_cell

    # ------------------------------------------------------------------
    # Mapping access
    # ------------------------------------------------------------------
    def __contains__(self, word: object) -> bool:
        return word in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PlacementStore):
            return NotImplemented
        return self._entries == other._entries

    def get(self, word: str) -> Optional[WordDefinitionData]:
        return self._entries.get(word)

    def items(self) -> List[Tuple[str, WordDefinitionData]]:
        return list(self._entries.items())

    def as_dict(self) -> Dict[str, WordDefinitionData]:
        return copy.deepcopy(self._entries)

    def copy(self) -> "PlacementStore":
        return PlacementStore(self.as_dict(), max_per_cell=self.max_per_cell)

    def placements_at(self, x: int, y: int) -> List[str]:
        """Words whose definition is anchored on ``(x, y)``, in insertion order."""
        return [
            word
            for word, data in self._entries.items()
            if data.placement is not None and data.placement.cell == (x, y)
        ]

    def filtered(self, positions: Sequence[WordPosition]) -> Dict[str, WordDefinitionData]:
        """Entries whose word is present among ``positions``."""
        present = {position.word for position in positions}
        return {word: data for word, data in self._entries.items() if word in present}

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def set_definition_text(self, word: str, text: str) -> None:
        entry = self._entries.get(word)
        if entry is None:
            self._entries[word] = WordDefinitionData(definition=text)
        else:
            entry.definition = text

    def remove(self, word: str) -> bool:
        return self._entries.pop(word, None) is not None

    def remove_placement(self, word: str) -> bool:
        entry = self._entries.get(word)
        if entry is None or entry.placement is None:
            return False
        entry.placement = None
        return True

    def attempt_placement(
        self,
        word: str,
        x: int,
        y: int,
        grid: Grid,
        positions: Sequence[WordPosition],
    ) -> Optional[Anchor]:
        """Anchor ``word``'s definition on the black cell ``(x, y)``.

        Returns the stored anchor, or ``None`` when the attempt is rejected.
        A rejection leaves the store untouched.
        """

        try:
            return self.place_or_raise(word, x, y, grid, positions)
        except InvalidPlacementAttempt as exc:
            LOGGER.debug("Placement of %r at (%s,%s) rejected: %s", word, x, y, exc)
            return None

    def place_or_raise(
        self,
        word: str,
        x: int,
        y: int,
        grid: Grid,
        positions: Sequence[WordPosition],
    ) -> Anchor:
        if not grid.is_black(x, y):
            raise InvalidPlacementAttempt(f"cell ({x},{y}) is not black")

        others = [placed for placed in self.placements_at(x, y) if placed != word]
        if len(others) >= self.max_per_cell:
            raise InvalidPlacementAttempt(
                f"cell ({x},{y}) already holds {len(others)} definitions"
            )

        cell = (x, y)
        candidate = next(
            (
                position
                for position in find_occurrences(positions, word)
                if is_adjacent(cell, position.start) or is_adjacent(cell, position.end)
            ),
            None,
        )
        if candidate is None:
            raise InvalidPlacementAttempt(f"no occurrence of {word!r} touches ({x},{y})")

        role = AnchorRole.START if is_adjacent(cell, candidate.start) else AnchorRole.END
        endpoint = candidate.endpoint(role)
        anchor = Anchor(
            x=x,
            y=y,
            direction=direction_towards(cell, endpoint),
            anchor=endpoint,
            anchor_role=role,
            word_direction=candidate.direction,
        )
        entry = self._entries.get(word)
        self._entries[word] = WordDefinitionData(
            definition=entry.definition if entry is not None else "",
            placement=anchor,
        )
        return anchor

    def update_arrow_direction(self, word: str, direction: ArrowDirection) -> bool:
        """Override the arrow direction of an existing placement.

        Adjacency is not re-checked; the arrow may then point away from the
        word it belongs to.
        """

        entry = self._entries.get(word)
        if entry is None or entry.placement is None:
            return False
        entry.placement = replace(entry.placement, direction=ArrowDirection(direction))
        return True

    # ------------------------------------------------------------------
    # Reconciliation
    # ------------------------------------------------------------------
    def reconcile(self, grid: Grid, positions: Sequence[WordPosition]) -> ReconcileReport:
        """Drop entries and placements the current grid no longer supports.

        A placement survives while its cell is black and some occurrence of
        the word still has the stored endpoint next to that cell. Cells over
        the per-cell cap keep their earliest placements.
        """

        report = ReconcileReport()
        for word in list(self._entries):
            occurrences = find_occurrences(positions, word)
            if not occurrences:
                del self._entries[word]
                report.removed_words.append(word)
                continue
            entry = self._entries[word]
            if entry.placement is None:
                continue
            try:
                matched = self._check_anchor(grid, entry.placement, occurrences)
            except StaleReferenceError as exc:
                LOGGER.debug("Clearing placement of %r: %s", word, exc)
                entry.placement = None
                report.cleared_placements.append(word)
                continue
            if matched.direction != entry.placement.word_direction:
                entry.placement = replace(entry.placement, word_direction=matched.direction)
        self._enforce_cap(report)
        if report.changed:
            LOGGER.debug(
                "Reconciled store: %s removed, %s placements cleared",
                len(report.removed_words),
                len(report.cleared_placements),
            )
        return report

    def _enforce_cap(self, report: ReconcileReport) -> None:
        usage: Dict[Point, int] = {}
        for word, entry in self._entries.items():
            if entry.placement is None:
                continue
            cell = entry.placement.cell
            usage[cell] = usage.get(cell, 0) + 1
            if usage[cell] > self.max_per_cell:
                LOGGER.debug("Clearing placement of %r: cell %s is over capacity", word, cell)
                entry.placement = None
                report.cleared_placements.append(word)

    @staticmethod
    def _check_anchor(grid: Grid, placement: Anchor, occurrences: Sequence[WordPosition]) -> WordPosition:
        if not grid.is_black(placement.x, placement.y):
            raise StaleReferenceError(f"cell ({placement.x},{placement.y}) is no longer black")
        # Prefer an occurrence that kept the stored reading direction.
        ordered = sorted(occurrences, key=lambda occurrence: occurrence.direction != placement.word_direction)
        for occurrence in ordered:
            endpoint = occurrence.endpoint(placement.anchor_role)
            if endpoint == placement.anchor and is_adjacent(placement.cell, endpoint):
                return occurrence
        raise StaleReferenceError(
            f"no {placement.anchor_role.value} endpoint at {placement.anchor} next to "
            f"({placement.x},{placement.y})"
        )
