import unittest

from arrowgrid.core.constants import AnchorRole, ArrowDirection, WordDirection
from arrowgrid.core.exceptions import InvalidPlacementAttempt
from arrowgrid.core.models import Anchor, CellPatch, WordDefinitionData
from arrowgrid.engine.extractor import extract_word_positions
from arrowgrid.engine.grid import apply_patch, grid_from_rows
from arrowgrid.engine.placement import (PlacementStore, direction_towards, is_adjacent,
                                        manhattan_distance, step)


class GeometryTests(unittest.TestCase):
    def test_adjacency_is_orthogonal(self) -> None:
        self.assertTrue(is_adjacent((1, 1), (1, 2)))
        self.assertFalse(is_adjacent((1, 1), (2, 2)))
        self.assertFalse(is_adjacent((1, 1), (1, 1)))
        self.assertEqual(manhattan_distance((0, 0), (2, 3)), 5)

    def test_direction_and_step(self) -> None:
        self.assertEqual(direction_towards((3, 0), (2, 0)), ArrowDirection.LEFT)
        self.assertEqual(direction_towards((0, 0), (0, 1)), ArrowDirection.DOWN)
        self.assertEqual(step((2, 2), ArrowDirection.UP), (2, 1))


class PlacementStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self.grid = grid_from_rows(["CAT#"])
        self.positions = extract_word_positions(self.grid.cells)
        self.store = PlacementStore()

    def test_placement_at_word_end(self) -> None:
        anchor = self.store.attempt_placement("CAT", 3, 0, self.grid, self.positions)

        self.assertIsNotNone(anchor)
        self.assertEqual(anchor.anchor_role, AnchorRole.END)
        self.assertEqual(anchor.direction, ArrowDirection.LEFT)
        self.assertEqual(anchor.anchor, (2, 0))
        self.assertEqual(anchor.word_direction, WordDirection.HORIZONTAL)
        self.assertEqual(self.store.get("CAT").placement, anchor)

    def test_placement_keeps_definition_text(self) -> None:
        self.store.set_definition_text("CAT", "Feline")

        self.store.attempt_placement("CAT", 3, 0, self.grid, self.positions)

        self.assertEqual(self.store.get("CAT").definition, "Feline")

    def test_rejects_non_black_and_distant_cells(self) -> None:
        grid = grid_from_rows(["#CAT.", "#...."])
        positions = extract_word_positions(grid.cells)

        self.assertIsNone(self.store.attempt_placement("CAT", 4, 0, grid, positions))
        self.assertIsNone(self.store.attempt_placement("CAT", 0, 1, grid, positions))
        self.assertIsNone(self.store.attempt_placement("DOG", 0, 0, grid, positions))
        self.assertEqual(len(self.store), 0)
        with self.assertRaises(InvalidPlacementAttempt):
            self.store.place_or_raise("CAT", 4, 0, grid, positions)

    def test_cell_below_word_start_points_up(self) -> None:
        grid = grid_from_rows(["AB", "#."])
        positions = extract_word_positions(grid.cells)

        anchor = self.store.attempt_placement("AB", 0, 1, grid, positions)

        self.assertEqual(anchor.anchor_role, AnchorRole.START)
        self.assertEqual(anchor.anchor, (0, 0))
        self.assertEqual(anchor.direction, ArrowDirection.UP)

    def test_first_touching_occurrence_wins(self) -> None:
        grid = grid_from_rows(["ON#ON"])
        positions = extract_word_positions(grid.cells)

        anchor = self.store.attempt_placement("ON", 2, 0, grid, positions)

        self.assertEqual(anchor.anchor_role, AnchorRole.END)
        self.assertEqual(anchor.anchor, (1, 0))
        self.assertEqual(anchor.direction, ArrowDirection.LEFT)

    def test_third_definition_on_a_cell_is_rejected(self) -> None:
        grid = grid_from_rows(["AB.", "#CD", "EF."])
        positions = extract_word_positions(grid.cells)
        self.assertIsNotNone(self.store.attempt_placement("AB", 0, 1, grid, positions))
        self.assertIsNotNone(self.store.attempt_placement("CD", 0, 1, grid, positions))
        before = self.store.as_dict()

        self.assertIsNone(self.store.attempt_placement("EF", 0, 1, grid, positions))

        self.assertEqual(self.store.as_dict(), before)
        self.assertNotIn("EF", self.store)
        self.assertEqual(self.store.placements_at(0, 1), ["AB", "CD"])

    def test_moving_a_word_within_a_full_cell_is_allowed(self) -> None:
        grid = grid_from_rows(["AB.", "#CD", "EF."])
        positions = extract_word_positions(grid.cells)
        self.store.attempt_placement("AB", 0, 1, grid, positions)
        self.store.attempt_placement("CD", 0, 1, grid, positions)

        self.assertIsNotNone(self.store.attempt_placement("CD", 0, 1, grid, positions))

    def test_update_arrow_direction(self) -> None:
        self.assertFalse(self.store.update_arrow_direction("CAT", ArrowDirection.UP))
        self.store.attempt_placement("CAT", 3, 0, self.grid, self.positions)

        self.assertTrue(self.store.update_arrow_direction("CAT", ArrowDirection.DOWN))
        self.assertEqual(self.store.get("CAT").placement.direction, ArrowDirection.DOWN)

    def test_remove_placement(self) -> None:
        self.store.attempt_placement("CAT", 3, 0, self.grid, self.positions)

        self.assertTrue(self.store.remove_placement("CAT"))
        self.assertFalse(self.store.remove_placement("CAT"))
        self.assertIn("CAT", self.store)


class ReconcileTests(unittest.TestCase):
    def test_whitening_anchor_cell_clears_placement_only(self) -> None:
        grid = grid_from_rows(["CAT#"])
        store = PlacementStore()
        store.set_definition_text("CAT", "Feline")
        store.attempt_placement("CAT", 3, 0, grid, extract_word_positions(grid.cells))

        grid = apply_patch(grid, 3, 0, CellPatch(is_black=False))
        report = store.reconcile(grid, extract_word_positions(grid.cells))

        self.assertEqual(report.cleared_placements, ["CAT"])
        self.assertIsNone(store.get("CAT").placement)
        self.assertEqual(store.get("CAT").definition, "Feline")

    def test_vanished_words_are_dropped(self) -> None:
        grid = grid_from_rows(["CAT#"])
        store = PlacementStore({"CAT": WordDefinitionData("Feline"), "DOG": WordDefinitionData("Canine")})

        report = store.reconcile(grid, extract_word_positions(grid.cells))

        self.assertEqual(report.removed_words, ["DOG"])
        self.assertEqual(list(store), ["CAT"])

    def test_mismatched_endpoint_clears_placement(self) -> None:
        grid = grid_from_rows(["CAT#"])
        stale = Anchor(3, 0, ArrowDirection.LEFT, (2, 0), AnchorRole.START, WordDirection.HORIZONTAL)
        store = PlacementStore({"CAT": WordDefinitionData("Feline", stale)})

        report = store.reconcile(grid, extract_word_positions(grid.cells))

        self.assertEqual(report.cleared_placements, ["CAT"])
        self.assertEqual(store.get("CAT").definition, "Feline")

    def test_word_turning_around_its_start_keeps_placement(self) -> None:
        grid = grid_from_rows(["#AB", "..."])
        store = PlacementStore()
        store.set_definition_text("AB", "clue")
        store.attempt_placement("AB", 0, 0, grid, extract_word_positions(grid.cells))

        grid = apply_patch(grid, 2, 0, CellPatch(value=""))
        grid = apply_patch(grid, 1, 1, CellPatch(value="B"))
        report = store.reconcile(grid, extract_word_positions(grid.cells))

        placement = store.get("AB").placement
        self.assertIsNotNone(placement)
        self.assertEqual(placement.anchor, (1, 0))
        self.assertEqual(placement.anchor_role, AnchorRole.START)
        self.assertEqual(placement.word_direction, WordDirection.VERTICAL)
        self.assertFalse(report.changed)

    def test_overfull_cell_keeps_earliest_placements(self) -> None:
        grid = grid_from_rows(["AB.", "#CD", "EF."])
        entries = {
            word: WordDefinitionData(word.lower(), Anchor(0, 1, direction, endpoint, AnchorRole.START, WordDirection.HORIZONTAL))
            for word, direction, endpoint in (
                ("EF", ArrowDirection.DOWN, (0, 2)),
                ("AB", ArrowDirection.UP, (0, 0)),
                ("CD", ArrowDirection.RIGHT, (1, 1)),
            )
        }
        store = PlacementStore(entries)

        report = store.reconcile(grid, extract_word_positions(grid.cells))

        self.assertEqual(report.cleared_placements, ["CD"])
        self.assertEqual(store.placements_at(0, 1), ["EF", "AB"])
        self.assertEqual(store.get("CD").definition, "cd")
        self.assertFalse(store.reconcile(grid, extract_word_positions(grid.cells)).changed)

    def test_reconcile_is_idempotent(self) -> None:
        grid = grid_from_rows(["CAT#", "O..A", "W..X"])
        positions = extract_word_positions(grid.cells)
        store = PlacementStore({"GONE": WordDefinitionData("x")})
        store.attempt_placement("CAT", 3, 0, grid, positions)

        store.reconcile(grid, positions)
        once = store.copy()
        report = store.reconcile(grid, positions)

        self.assertFalse(report.changed)
        self.assertEqual(store, once)
        self.assertIsNotNone(store.get("CAT").placement)


if __name__ == "__main__":
    unittest.main()
