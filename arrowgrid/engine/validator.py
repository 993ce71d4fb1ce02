"""Deterministic integrity checks for an edited grid."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import List, Mapping, Sequence

from ..core.constants import MAX_DEFINITIONS_PER_CELL
from ..core.exceptions import ValidationError
from ..core.models import Grid, WordDefinitionData, WordPosition
from ..utils.logger import get_logger
from .placement import is_adjacent


LOGGER = get_logger(__name__)


@dataclass
class ValidationResult:
    ok: bool
    messages: List[str] = field(default_factory=list)


class GridValidator:
    """Collects every rule violation of a grid and its definitions."""

    def __init__(self, max_per_cell: int = MAX_DEFINITIONS_PER_CELL) -> None:
        self.max_per_cell = max_per_cell

    def validate(
        self,
        grid: Grid,
        definitions: Mapping[str, WordDefinitionData],
        positions: Sequence[WordPosition],
    ) -> ValidationResult:
        messages: List[str] = []
        for check in (self._check_black_cells, self._check_definitions, self._check_anchors):
            try:
                check(grid, definitions, positions)
            except ValidationError as exc:
                messages.append(str(exc))
        if messages:
            LOGGER.info("Validation found %s issue(s)", len(messages))
        return ValidationResult(ok=not messages, messages=messages)

    @staticmethod
    def _check_black_cells(grid: Grid, definitions, positions) -> None:
        for row in grid.cells:
            for cell in row:
                if cell.is_black and cell.value:
                    raise ValidationError(f"Black cell at ({cell.x},{cell.y}) holds letter {cell.value!r}")

    @staticmethod
    def _check_definitions(grid: Grid, definitions, positions: Sequence[WordPosition]) -> None:
        missing = sorted(
            {
                position.word
                for position in positions
                if not (definitions.get(position.word) and definitions[position.word].definition.strip())
            }
        )
        if missing:
            raise ValidationError(f"{len(missing)} word(s) without definition: {', '.join(missing)}")

    def _check_anchors(self, grid: Grid, definitions, positions) -> None:
        usage: Counter = Counter()
        for word, data in definitions.items():
            placement = data.placement
            if placement is None:
                continue
            if not is_adjacent(placement.cell, placement.anchor):
                raise ValidationError(
                    f"Definition of {word!r} at ({placement.x},{placement.y}) is not next to {placement.anchor}"
                )
            if not grid.is_black(placement.x, placement.y):
                raise ValidationError(f"Definition of {word!r} sits on a playable cell")
            usage[placement.cell] += 1
        for (x, y), count in usage.items():
            if count > self.max_per_cell:
                raise ValidationError(f"Cell ({x},{y}) holds {count} definitions (max {self.max_per_cell})")
