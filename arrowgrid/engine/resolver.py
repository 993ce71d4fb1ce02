"""Render maps derived from a grid and its definition store."""

from __future__ import annotations

from typing import Mapping

from ..core.constants import AnchorRole, ArrowDirection, ArrowVariant, Attachment, WordDirection
from ..core.models import (Anchor, ArrowPlacement, DefinitionSlot, Grid, PlacementMaps,
                           Point, WordDefinitionData, cell_key)
from .placement import step


def arrow_variant(placement: Anchor) -> ArrowVariant:
    """Curve the arrow when a horizontal word's definition sits above or below it."""

    if placement.word_direction == WordDirection.HORIZONTAL and placement.direction in (
        ArrowDirection.UP,
        ArrowDirection.DOWN,
    ):
        if placement.anchor_role == AnchorRole.START:
            return ArrowVariant.CURVED_RIGHT
        return ArrowVariant.CURVED_LEFT
    return ArrowVariant.STRAIGHT


def attachment_side(source: Point, target: Point) -> Attachment:
    if source[0] < target[0]:
        return Attachment.LEFT
    if source[0] > target[0]:
        return Attachment.RIGHT
    if source[1] < target[1]:
        return Attachment.TOP
    return Attachment.BOTTOM


def resolve_placements(grid: Grid, definitions: Mapping[str, WordDefinitionData]) -> PlacementMaps:
    """Map black cells to their definitions and playable cells to their arrows.

    Placements whose cell is not black in ``grid`` are skipped. An arrow
    whose target falls outside the grid or on a black cell is omitted while
    the definition itself is still listed.
    """

    maps = PlacementMaps()
    for word, data in definitions.items():
        placement = data.placement
        if placement is None or not grid.is_black(placement.x, placement.y):
            continue
        maps.definition_placements.setdefault(cell_key(placement.x, placement.y), []).append(
            DefinitionSlot(word=word, definition=data.definition)
        )

        target = step(placement.cell, placement.direction)
        if not grid.in_bounds(*target) or grid.is_black(*target):
            continue
        maps.arrow_placements.setdefault(cell_key(*target), []).append(
            ArrowPlacement(
                direction=placement.direction,
                variant=arrow_variant(placement),
                attachment=attachment_side(placement.cell, target),
                origin=placement.anchor,
            )
        )
    return maps
