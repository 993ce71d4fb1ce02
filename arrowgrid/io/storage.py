"""Local persistence of grid sets behind a small key-value port."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Optional, Protocol

from ..core.exceptions import ImportDecodeError
from ..core.models import GridSet
from ..engine.library import SetLibrary
from ..utils.logger import get_logger
from .codec import deserialize_set, now_ms, pack_set, unpack_set, upgrade_legacy_grids


LOGGER = get_logger(__name__)

SETS_KEY = "gridSets"
CURRENT_SET_KEY = "currentSetId"
LEGACY_GRIDS_KEY = "savedGrids"

DEFAULT_STORE_PATH = Path("local_db/arrowgrid.json")


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        """Return the stored string or ``None``."""

    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``."""

    def remove(self, key: str) -> None:
        """Forget ``key``; missing keys are ignored."""


class MemoryKeyValueStore:
    """In-process store, mainly for tests and one-shot CLI runs."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileKeyValueStore:
    """Keeps every key in a single JSON document on disk."""

    def __init__(self, path: Path | str = DEFAULT_STORE_PATH) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            LOGGER.warning("Store file %s is corrupt; starting empty", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, str]) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
        tmp_path.replace(self.path)

    def get(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)


class SetRepository:
    """Loads and saves the list of grid sets through a :class:`KeyValueStore`."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------
    def load_sets(self) -> List[GridSet]:
        """Return the stored sets, upgrading legacy saves when no sets exist."""

        raw_sets = self.store.get(SETS_KEY)
        if raw_sets:
            try:
                return self._decode_sets(raw_sets)
            except ImportDecodeError as exc:
                LOGGER.warning("Unable to read saved sets: %s", exc)

        raw_legacy = self.store.get(LEGACY_GRIDS_KEY)
        if raw_legacy:
            try:
                legacy = upgrade_legacy_grids(raw_legacy)
            except ImportDecodeError as exc:
                LOGGER.warning("Unable to read legacy grids: %s", exc)
                return []
            return [legacy] if legacy is not None else []
        return []

    def save_sets(self, sets: List[GridSet], current_set_id: Optional[str]) -> None:
        payload = json.dumps([pack_set(grid_set) for grid_set in sets], ensure_ascii=False)
        self.store.set(SETS_KEY, payload)
        if current_set_id:
            self.store.set(CURRENT_SET_KEY, current_set_id)
        else:
            self.store.remove(CURRENT_SET_KEY)
        LOGGER.info("Saved %s set(s)", len(sets))

    def load_library(self) -> SetLibrary:
        sets = self.load_sets()
        return SetLibrary(sets, self.current_set_id(sets))

    def save_library(self, library: SetLibrary) -> None:
        self.save_sets(library.sets, library.current_set_id)

    def current_set_id(self, sets: List[GridSet]) -> Optional[str]:
        stored = self.store.get(CURRENT_SET_KEY)
        if stored and any(grid_set.id == stored for grid_set in sets):
            return stored
        return sets[0].id if sets else None

    def import_set(self, raw: str, existing: List[GridSet]) -> GridSet:
        """Decode an exported set, renaming its id if it collides.

        ``existing`` is never modified; on failure the error propagates and
        nothing has changed.
        """

        grid_set = deserialize_set(raw)
        if any(other.id == grid_set.id for other in existing):
            grid_set.id = f"{grid_set.id}-{now_ms()}"
        LOGGER.info("Imported set %r as %s", grid_set.name, grid_set.id)
        return grid_set

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _decode_sets(raw: str) -> List[GridSet]:
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ImportDecodeError(f"Stored sets are not valid JSON: {exc}") from exc
        if not isinstance(payload, list):
            raise ImportDecodeError("Stored sets must be a list")
        return [unpack_set(entry) for entry in payload]
