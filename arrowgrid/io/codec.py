"""Compact JSON codec for grids, definitions and grid sets.

Packed set layout::

    {"i": set_id, "n": set_name, "a": appearance,
     "g": [{"i": grid_id, "n": grid_name, "t": timestamp_ms,
            "r": {"n": name, "s": [width, height], "r": [row, ...]},
            "d": [[word, definition, anchor_tuple_or_null], ...]}]}

Rows hold one character per column: ``#`` for black, ``.`` for empty and an
uppercase letter otherwise. Anchor tuples are
``[x, y, direction, [anchor_x, anchor_y], anchor_role, word_direction]``.
"""

from __future__ import annotations

import json
import time
from typing import Any, Dict, List, Mapping, Optional

from ..core.constants import (BLACK_CHAR, EMPTY_CHAR, AnchorRole, ArrowDirection,
                              WordDirection)
from ..core.exceptions import ImportDecodeError
from ..core.models import (Anchor, Appearance, Cell, Grid, GridSet, SavedGrid,
                           WordDefinitionData)
from ..data.normalization import normalize_letter
from ..engine.grid import grid_rows
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

LEGACY_SET_ID = "legacy"
LEGACY_SET_NAME = "Set local"
DEFAULT_SET_NAME = "Set importé"
DEFAULT_GRID_NAME = "Grille"


def now_ms() -> int:
    return int(time.time() * 1000)


# ----------------------------------------------------------------------
# Grid
# ----------------------------------------------------------------------
def pack_grid(grid: Grid) -> Dict[str, Any]:
    return {"n": grid.name or "", "s": [grid.width, grid.height], "r": grid_rows(grid)}


def unpack_grid(packed: Any) -> Grid:
    if not isinstance(packed, dict):
        raise ImportDecodeError("Packed grid must be an object")
    size = packed.get("s")
    if (
        not isinstance(size, list)
        or len(size) != 2
        or not all(_is_int(value) and value > 0 for value in size)
    ):
        raise ImportDecodeError(f"Packed grid has an invalid size field: {size!r}")
    width, height = size
    rows = packed.get("r")
    if not isinstance(rows, list) or len(rows) != height:
        raise ImportDecodeError(f"Packed grid must hold {height} rows")
    name = packed.get("n") or ""
    if not isinstance(name, str):
        raise ImportDecodeError("Packed grid name must be a string")

    cells: List[List[Cell]] = []
    for y, row in enumerate(rows):
        if not isinstance(row, str) or len(row) != width:
            raise ImportDecodeError(f"Row {y} must be a string of {width} characters")
        cells.append([_unpack_cell(char, x, y) for x, char in enumerate(row)])
    return Grid(width=width, height=height, cells=cells, name=name)


def _unpack_cell(char: str, x: int, y: int) -> Cell:
    if char == BLACK_CHAR:
        return Cell(x=x, y=y, is_black=True)
    if char == EMPTY_CHAR:
        return Cell(x=x, y=y)
    letter = normalize_letter(char)
    if len(letter) != 1:
        raise ImportDecodeError(f"Invalid cell character {char!r} at ({x},{y})")
    return Cell(x=x, y=y, value=letter)


# ----------------------------------------------------------------------
# Definitions
# ----------------------------------------------------------------------
def pack_anchor(anchor: Anchor) -> List[Any]:
    return [
        anchor.x,
        anchor.y,
        anchor.direction.value,
        [anchor.anchor[0], anchor.anchor[1]],
        anchor.anchor_role.value,
        anchor.word_direction.value,
    ]


def unpack_anchor(packed: Any) -> Anchor:
    if not isinstance(packed, list) or len(packed) != 6:
        raise ImportDecodeError(f"Anchor tuple must have 6 fields: {packed!r}")
    x, y, direction, endpoint, role, word_direction = packed
    if not (_is_int(x) and _is_int(y)):
        raise ImportDecodeError(f"Anchor coordinates must be integers: {packed!r}")
    if (
        not isinstance(endpoint, list)
        or len(endpoint) != 2
        or not all(_is_int(value) for value in endpoint)
    ):
        raise ImportDecodeError(f"Anchor endpoint must be [x, y]: {endpoint!r}")
    try:
        return Anchor(
            x=x,
            y=y,
            direction=ArrowDirection(direction),
            anchor=(endpoint[0], endpoint[1]),
            anchor_role=AnchorRole(role),
            word_direction=WordDirection(word_direction),
        )
    except ValueError as exc:
        raise ImportDecodeError(f"Invalid anchor tuple {packed!r}: {exc}") from exc


def pack_definitions(definitions: Mapping[str, WordDefinitionData]) -> List[List[Any]]:
    return [
        [word, data.definition, pack_anchor(data.placement) if data.placement else None]
        for word, data in definitions.items()
    ]


def unpack_definitions(packed: Any) -> Dict[str, WordDefinitionData]:
    if not isinstance(packed, list):
        raise ImportDecodeError("Packed definitions must be a list")
    result: Dict[str, WordDefinitionData] = {}
    for entry in packed:
        if not isinstance(entry, list) or len(entry) not in (2, 3):
            raise ImportDecodeError(f"Definition entry must be [word, text, anchor]: {entry!r}")
        word, definition = entry[0], entry[1]
        if not isinstance(word, str) or not isinstance(definition, str):
            raise ImportDecodeError(f"Definition word and text must be strings: {entry!r}")
        anchor = entry[2] if len(entry) == 3 else None
        result[word] = WordDefinitionData(
            definition=definition,
            placement=unpack_anchor(anchor) if anchor is not None else None,
        )
    return result


# ----------------------------------------------------------------------
# Sets
# ----------------------------------------------------------------------
def pack_saved_grid(saved: SavedGrid) -> Dict[str, Any]:
    return {
        "i": saved.id,
        "n": saved.name,
        "t": saved.timestamp,
        "r": pack_grid(saved.grid),
        "d": pack_definitions(saved.definitions),
    }


def unpack_saved_grid(packed: Any) -> SavedGrid:
    if not isinstance(packed, dict):
        raise ImportDecodeError("Packed grid entry must be an object")
    if "r" not in packed:
        raise ImportDecodeError("Packed grid entry is missing its grid")
    timestamp = packed.get("t") or now_ms()
    if not _is_int(timestamp):
        raise ImportDecodeError(f"Grid timestamp must be an integer: {timestamp!r}")
    return SavedGrid(
        id=str(packed.get("i") or timestamp),
        name=str(packed.get("n") or DEFAULT_GRID_NAME),
        timestamp=timestamp,
        grid=unpack_grid(packed["r"]),
        definitions=unpack_definitions(packed.get("d") or []),
    )


def pack_set(grid_set: GridSet) -> Dict[str, Any]:
    return {
        "i": grid_set.id,
        "n": grid_set.name,
        "a": grid_set.appearance.to_dict(),
        "g": [pack_saved_grid(saved) for saved in grid_set.grids],
    }


def unpack_set(payload: Any) -> GridSet:
    if not isinstance(payload, dict):
        raise ImportDecodeError("Packed set must be an object")
    appearance = payload.get("a")
    if appearance is not None and not isinstance(appearance, dict):
        raise ImportDecodeError("Set appearance must be an object")
    grids = payload.get("g")
    return GridSet(
        id=str(payload.get("i") or now_ms()),
        name=str(payload.get("n") or DEFAULT_SET_NAME),
        appearance=Appearance.from_dict(appearance),
        grids=[unpack_saved_grid(entry) for entry in grids] if isinstance(grids, list) else [],
    )


def serialize_set(grid_set: GridSet) -> str:
    return json.dumps(pack_set(grid_set), ensure_ascii=False, separators=(",", ":"))


def deserialize_set(raw: str) -> GridSet:
    """Decode an exported set; raises :class:`ImportDecodeError` on any defect."""

    grid_set = unpack_set(_load_json(raw))
    LOGGER.info("Decoded set %r with %s grid(s)", grid_set.name, len(grid_set.grids))
    return grid_set


# ----------------------------------------------------------------------
# Legacy saves
# ----------------------------------------------------------------------
def upgrade_legacy_grids(raw: str) -> Optional[GridSet]:
    """Read the pre-set ``savedGrids`` array into a single local set.

    Legacy entries store full cell objects and carry neither appearance nor
    anchors. Returns ``None`` when the array is empty.
    """

    entries = _load_json(raw)
    if not isinstance(entries, list):
        raise ImportDecodeError("Legacy saves must be a list")
    grids = [_upgrade_legacy_entry(entry) for entry in entries]
    if not grids:
        return None
    LOGGER.info("Upgraded %s legacy grid(s) into a local set", len(grids))
    return GridSet(id=LEGACY_SET_ID, name=LEGACY_SET_NAME, grids=grids)


def _upgrade_legacy_entry(entry: Any) -> SavedGrid:
    if not isinstance(entry, dict) or not isinstance(entry.get("grid"), dict):
        raise ImportDecodeError("Legacy entry must hold a grid object")
    raw_grid = entry["grid"]
    raw_cells = raw_grid.get("cells")
    if not isinstance(raw_cells, list) or not raw_cells or not isinstance(raw_cells[0], list):
        raise ImportDecodeError("Legacy grid is missing its cells")
    height = len(raw_cells)
    width = len(raw_cells[0])
    cells: List[List[Cell]] = []
    for y, raw_row in enumerate(raw_cells):
        if not isinstance(raw_row, list) or len(raw_row) != width:
            raise ImportDecodeError(f"Legacy row {y} must hold {width} cells")
        row: List[Cell] = []
        for x, raw_cell in enumerate(raw_row):
            if not isinstance(raw_cell, dict):
                raise ImportDecodeError(f"Legacy cell ({x},{y}) must be an object")
            is_black = bool(raw_cell.get("isBlack"))
            value = normalize_letter(str(raw_cell.get("value") or ""))
            row.append(Cell(x=x, y=y, is_black=is_black, value="" if is_black else value))
        cells.append(row)

    timestamp = entry.get("timestamp") or now_ms()
    if not _is_int(timestamp):
        raise ImportDecodeError(f"Legacy timestamp must be an integer: {timestamp!r}")
    name = str(entry.get("name") or raw_grid.get("name") or DEFAULT_GRID_NAME)
    return SavedGrid(
        id=str(entry.get("id") or timestamp),
        name=name,
        timestamp=timestamp,
        grid=Grid(width=width, height=height, cells=cells, name=str(raw_grid.get("name") or name)),
    )


def _load_json(raw: str) -> Any:
    try:
        return json.loads(raw)
    except (TypeError, json.JSONDecodeError) as exc:
        raise ImportDecodeError(f"Set payload is not valid JSON: {exc}") from exc


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
