"""Shared constants and enumerations for the arrow-word editor."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple


class WordDirection(str, Enum):
    """Reading direction of an extracted word."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class ArrowDirection(str, Enum):
    """Compass direction from a definition cell toward its word."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


class AnchorRole(str, Enum):
    """Which end of the word a definition is attached to."""

    START = "start"
    END = "end"


class ArrowVariant(str, Enum):
    STRAIGHT = "straight"
    CURVED_RIGHT = "curved-right"
    CURVED_LEFT = "curved-left"


class Attachment(str, Enum):
    """Side of the arrow cell nearest the definition cell."""

    LEFT = "left"
    RIGHT = "right"
    TOP = "top"
    BOTTOM = "bottom"


BLACK_CHAR = "#"
EMPTY_CHAR = "."
MIN_WORD_LENGTH = 2
MAX_DEFINITIONS_PER_CELL = 2

# (dx, dy) unit steps, x grows to the right and y grows downward.
ARROW_STEPS: Dict[ArrowDirection, Tuple[int, int]] = {
    ArrowDirection.UP: (0, -1),
    ArrowDirection.DOWN: (0, 1),
    ArrowDirection.LEFT: (-1, 0),
    ArrowDirection.RIGHT: (1, 0),
}


@dataclass(frozen=True)
class Bounds:
    """Simple rectangle bounds helper."""

    width: int
    height: int

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height
