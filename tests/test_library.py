import itertools
import unittest

from arrowgrid.core.exceptions import SetOperationError
from arrowgrid.core.models import Appearance, GridSet, WordDefinitionData
from arrowgrid.engine.grid import grid_from_rows
from arrowgrid.engine.library import DEFAULT_SET_NAME, SetLibrary, copy_name


class SetLibraryTests(unittest.TestCase):
    def setUp(self) -> None:
        ticks = itertools.count(1000)
        self.library = SetLibrary(clock=lambda: next(ticks))
        self.grid = grid_from_rows(["CAT#"])

    def test_copy_name_skips_taken_names(self) -> None:
        self.assertEqual(copy_name("Mini", ["Mini"]), "Mini (copie)")
        self.assertEqual(copy_name("Mini", ["Mini", "Mini (copie)", "Mini (copie 2)"]), "Mini (copie 3)")

    def test_saving_without_a_set_creates_one(self) -> None:
        saved = self.library.save_grid("Mini", self.grid, {"CAT": WordDefinitionData("Félin")})

        current = self.library.current_set
        self.assertIsNotNone(current)
        self.assertEqual(current.name, DEFAULT_SET_NAME)
        self.assertEqual(current.grids, [saved])
        self.assertEqual(saved.grid.name, "Mini")
        self.assertEqual(saved.definitions["CAT"].definition, "Félin")

    def test_saved_grid_is_a_copy(self) -> None:
        definitions = {"CAT": WordDefinitionData("Félin")}
        saved = self.library.save_grid("Mini", self.grid, definitions)

        definitions["CAT"].definition = "changed"
        self.grid.cell(0, 0).value = "Z"

        self.assertEqual(saved.definitions["CAT"].definition, "Félin")
        self.assertEqual(saved.grid.cell(0, 0).value, "C")

    def test_same_name_replaces_in_place(self) -> None:
        first = self.library.save_grid("Mini", self.grid, {})
        self.library.save_grid("Other", self.grid, {})

        second = self.library.save_grid("Mini", grid_from_rows(["DOG#"]), {})

        grids = self.library.current_set.grids
        self.assertEqual([saved.name for saved in grids], ["Mini", "Other"])
        self.assertEqual(second.id, first.id)
        self.assertGreater(second.timestamp, first.timestamp)
        self.assertEqual(grids[0].grid.cell(0, 0).value, "D")

    def test_same_name_without_replace_adds_copies(self) -> None:
        self.library.save_grid("Mini", self.grid, {})

        copy_one = self.library.save_grid(" Mini ", self.grid, {}, replace=False)
        copy_two = self.library.save_grid("Mini", self.grid, {}, replace=False)

        self.assertEqual(copy_one.name, "Mini (copie)")
        self.assertEqual(copy_one.grid.name, "Mini (copie)")
        self.assertEqual(copy_two.name, "Mini (copie 2)")
        self.assertEqual(len({saved.id for saved in self.library.current_set.grids}), 3)

    def test_blank_grid_name_is_rejected(self) -> None:
        with self.assertRaises(SetOperationError):
            self.library.save_grid("  ", self.grid, {})
        self.assertEqual(self.library.sets, [])

    def test_delete_grid(self) -> None:
        saved = self.library.save_grid("Mini", self.grid, {})

        self.assertTrue(self.library.delete_grid(saved.id))
        self.assertFalse(self.library.delete_grid(saved.id))
        self.assertEqual(self.library.current_set.grids, [])

    def test_create_rename_and_delete_sets(self) -> None:
        first = self.library.create_set("  Semaine ")
        second = self.library.create_set()

        self.assertEqual(first.name, "Semaine")
        self.assertEqual(second.name, DEFAULT_SET_NAME)
        self.assertEqual(second.appearance, Appearance())
        self.assertNotEqual(first.id, second.id)
        self.assertEqual(self.library.current_set_id, second.id)

        self.library.rename_set(first.id, "Week-end")
        self.assertEqual(self.library.select_set(first.id).name, "Week-end")
        with self.assertRaises(SetOperationError):
            self.library.rename_set(first.id, " ")

        self.assertTrue(self.library.delete_set(first.id))
        self.assertIsNone(self.library.current_set)
        self.assertFalse(self.library.delete_set(first.id))
        self.assertEqual(self.library.sets, [second])

    def test_unknown_set_is_rejected(self) -> None:
        with self.assertRaises(SetOperationError):
            self.library.select_set("missing")

    def test_stale_current_id_is_dropped(self) -> None:
        library = SetLibrary([GridSet("a", "A")], current_set_id="gone")

        self.assertIsNone(library.current_set_id)


if __name__ == "__main__":
    unittest.main()
