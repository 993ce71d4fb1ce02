"""Arrow-word grid authoring engine.

This package exposes the public API surface via:

- ``arrowgrid.engine.session.EditorSession``: edits a grid and keeps its
  definitions and render maps in sync.
- ``arrowgrid.engine.extractor.extract_word_positions``: finds the words of a grid.
- ``arrowgrid.engine.placement.PlacementStore``: anchors definitions on black cells.
- ``arrowgrid.engine.resolver.resolve_placements``: derives render maps.
- ``arrowgrid.io.codec`` helpers: packed JSON set import/export.
"""

from .engine.extractor import extract_word_positions
from .engine.placement import PlacementStore
from .engine.resolver import resolve_placements
from .engine.session import EditorConfig, EditorSession
from .io.codec import deserialize_set, serialize_set

__all__ = [
    "EditorConfig",
    "EditorSession",
    "PlacementStore",
    "deserialize_set",
    "extract_word_positions",
    "resolve_placements",
    "serialize_set",
]

__version__ = "0.1.0"
