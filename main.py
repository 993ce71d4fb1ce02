"""CLI entrypoint for the arrow-word grid editor."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from arrowgrid.core.exceptions import ExportRenderError, ImportDecodeError
from arrowgrid.core.models import GridSet, SavedGrid
from arrowgrid.engine.session import EditorSession
from arrowgrid.engine.validator import GridValidator
from arrowgrid.io.codec import deserialize_set
from arrowgrid.io.pdf import PdfRenderer
from arrowgrid.io.storage import JsonFileKeyValueStore, SetRepository
from arrowgrid.utils.logger import configure_logging
from arrowgrid.utils.pretty import format_definitions, pretty_print_grid, print_validation


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Inspect, validate and export arrow-word grid sets",
    )
    parser.add_argument("set_file", type=Path, help="Exported set (.json)")
    parser.add_argument(
        "--grid",
        type=str,
        default=None,
        help="Grid name or zero-based index within the set (default: first grid)",
    )
    parser.add_argument("--words", action="store_true", help="List words and their definitions")
    parser.add_argument("--validate", action="store_true", help="Report grid integrity issues")
    parser.add_argument("--pdf", type=Path, help="Export the selected grid to this PDF file")
    parser.add_argument("--pdf-set", type=Path, help="Export every grid of the set to this PDF file")
    parser.add_argument(
        "--save-local",
        type=Path,
        metavar="STORE",
        help="Import the set into a local JSON store file",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser


def pick_grid(grid_set: GridSet, selector: Optional[str]) -> Optional[SavedGrid]:
    if not grid_set.grids:
        return None
    if selector is None:
        return grid_set.grids[0]
    for saved in grid_set.grids:
        if saved.name == selector or saved.id == selector:
            return saved
    if selector.isdigit() and int(selector) < len(grid_set.grids):
        return grid_set.grids[int(selector)]
    return None


def save_local(store_path: Path, raw: str) -> GridSet:
    repository = SetRepository(JsonFileKeyValueStore(store_path))
    library = repository.load_library()
    imported = repository.import_set(raw, library.sets)
    library.sets.append(imported)
    library.select_set(imported.id)
    repository.save_library(library)
    return imported


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    level = getattr(logging, args.log_level.upper(), logging.INFO)
    configure_logging(level)

    try:
        raw = args.set_file.read_text(encoding="utf-8")
        grid_set = deserialize_set(raw)
    except (OSError, ImportDecodeError) as exc:
        print(f"Unable to load set: {exc}", file=sys.stderr)
        return 1

    saved = pick_grid(grid_set, args.grid)
    if saved is None:
        parser.error(f"no grid matches {args.grid!r} in set {grid_set.name!r}")

    session = EditorSession(grid=saved.grid, definitions=saved.definitions)
    pretty_print_grid(session.grid, session.maps, label=f"{grid_set.name} / {saved.name}")

    if args.words:
        print()
        print("\n".join(format_definitions(session.definitions, session.positions)))

    status = 0
    if args.validate:
        print()
        result = GridValidator().validate(session.grid, session.definitions, session.positions)
        print_validation(result)
        status = 0 if result.ok else 2

    renderer = PdfRenderer()
    try:
        if args.pdf:
            snapshot = session.snapshot()
            renderer.render_grid(args.pdf, snapshot.grid, snapshot.definitions, grid_set.appearance, saved.name)
        if args.pdf_set:
            renderer.render_set(args.pdf_set, grid_set)
    except ExportRenderError as exc:
        print(f"Export failed: {exc}", file=sys.stderr)
        return 1

    if args.save_local:
        imported = save_local(args.save_local, raw)
        print(f"Saved set {imported.name!r} as {imported.id}")
    return status


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
