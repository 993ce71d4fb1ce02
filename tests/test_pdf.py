import tempfile
import unittest
from pathlib import Path

from arrowgrid.core.exceptions import ExportRenderError
from arrowgrid.core.models import Appearance, GridSet, SavedGrid
from arrowgrid.engine.grid import grid_from_rows
from arrowgrid.engine.session import EditorSession
from arrowgrid.io.pdf import PdfConfig, PdfRenderer


class PdfRendererTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.out_dir = Path(self.tmp.name)
        session = EditorSession(grid=grid_from_rows(["CAT#", "O...", "W..."], name="Mini"))
        session.select_word("CAT")
        session.set_definition("Animal domestique qui ronronne")
        session.request_placement()
        session.click_cell(3, 0)
        self.snapshot = session.snapshot()

    def test_render_grid_writes_pdf(self) -> None:
        target = self.out_dir / "grid.pdf"

        result = PdfRenderer().render_grid(target, self.snapshot.grid, self.snapshot.definitions, label="Mini")

        self.assertEqual(result, target)
        self.assertTrue(target.read_bytes().startswith(b"%PDF"))
        self.assertEqual(sorted(p.name for p in self.out_dir.iterdir()), ["grid.pdf"])

    def test_render_set_writes_one_file(self) -> None:
        saved = SavedGrid("g1", "Mini", 1, self.snapshot.grid, self.snapshot.definitions)
        grid_set = GridSet("s1", "Semaine", grids=[saved, saved])
        target = self.out_dir / "set.pdf"

        PdfRenderer().render_set(target, grid_set)

        self.assertTrue(target.read_bytes().startswith(b"%PDF"))

    def test_empty_set_cannot_be_exported(self) -> None:
        with self.assertRaises(ExportRenderError):
            PdfRenderer().render_set(self.out_dir / "empty.pdf", GridSet("s1", "Vide"))

    def test_failed_export_leaves_no_file(self) -> None:
        target = self.out_dir / "broken.pdf"

        with self.assertRaises(ExportRenderError):
            PdfRenderer().render_grid(
                target,
                self.snapshot.grid,
                self.snapshot.definitions,
                Appearance(black_cell_color="not-a-colour"),
            )

        self.assertEqual(list(self.out_dir.iterdir()), [])

    def test_definition_font_shrinks_with_text(self) -> None:
        renderer = PdfRenderer(PdfConfig(cell_size=40))

        short = renderer.fit_definition_size("Chat", 1)
        long = renderer.fit_definition_size("Animal domestique qui ronronne", 1)
        stacked = renderer.fit_definition_size("Chat", 2)

        self.assertGreater(short, long)
        self.assertLessEqual(stacked, short)
        self.assertGreaterEqual(long, renderer.config.min_definition_font)


if __name__ == "__main__":
    unittest.main()
