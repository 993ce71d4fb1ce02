"""Word extraction from a grid snapshot."""

from __future__ import annotations

from typing import List, Sequence

from ..core.constants import MIN_WORD_LENGTH, WordDirection
from ..core.models import Cell, Point, WordPosition


def extract_word_positions(cells: Sequence[Sequence[Cell]]) -> List[WordPosition]:
    """Derive every word currently written in ``cells``.

    A word is a maximal run of non-black cells holding a letter, at least
    two cells long. Horizontal words come first in row-major order, then
    vertical words in column-major order. The result is recomputed from
    scratch on every call.
    """

    if not cells or not cells[0]:
        return []
    height = len(cells)
    width = len(cells[0])

    positions: List[WordPosition] = []
    for y in range(height):
        run: List[Point] = []
        for x in range(width):
            if cells[y][x].has_letter():
                run.append((x, y))
                continue
            _flush(cells, run, WordDirection.HORIZONTAL, positions)
            run = []
        _flush(cells, run, WordDirection.HORIZONTAL, positions)

    for x in range(width):
        run = []
        for y in range(height):
            if cells[y][x].has_letter():
                run.append((x, y))
                continue
            _flush(cells, run, WordDirection.VERTICAL, positions)
            run = []
        _flush(cells, run, WordDirection.VERTICAL, positions)
    return positions


def _flush(
    cells: Sequence[Sequence[Cell]],
    run: List[Point],
    direction: WordDirection,
    out: List[WordPosition],
) -> None:
    if len(run) < MIN_WORD_LENGTH:
        return
    word = "".join(cells[y][x].value for x, y in run)
    out.append(
        WordPosition(
            word=word,
            direction=direction,
            start=run[0],
            end=run[-1],
            cells=tuple(run),
        )
    )


def list_words(positions: Sequence[WordPosition]) -> List[str]:
    """Sorted distinct word texts, as shown in the sidebar."""

    return sorted({position.word for position in positions})


def find_occurrences(positions: Sequence[WordPosition], word: str) -> List[WordPosition]:
    return [position for position in positions if position.word == word]
