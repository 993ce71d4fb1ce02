import unittest

from arrowgrid.core.constants import WordDirection
from arrowgrid.engine.extractor import extract_word_positions, find_occurrences, list_words
from arrowgrid.engine.grid import build_empty_grid, grid_from_rows


class ExtractWordPositionsTests(unittest.TestCase):
    def test_single_horizontal_word(self) -> None:
        grid = grid_from_rows(["HELLO"])

        positions = extract_word_positions(grid.cells)

        self.assertEqual(len(positions), 1)
        word = positions[0]
        self.assertEqual(word.word, "HELLO")
        self.assertEqual(word.direction, WordDirection.HORIZONTAL)
        self.assertEqual(word.start, (0, 0))
        self.assertEqual(word.end, (4, 0))
        self.assertEqual(word.length, 5)

    def test_single_letters_are_not_words(self) -> None:
        grid = grid_from_rows(["A#B", "#.#", "C.D"])

        self.assertEqual(extract_word_positions(grid.cells), [])

    def test_empty_cells_split_runs(self) -> None:
        grid = grid_from_rows(["AB.CD"])

        words = [position.word for position in extract_word_positions(grid.cells)]

        self.assertEqual(words, ["AB", "CD"])

    def test_horizontal_words_come_before_vertical(self) -> None:
        grid = grid_from_rows(["AB", "CD"])

        positions = extract_word_positions(grid.cells)

        self.assertEqual(
            [(p.word, p.direction) for p in positions],
            [
                ("AB", WordDirection.HORIZONTAL),
                ("CD", WordDirection.HORIZONTAL),
                ("AC", WordDirection.VERTICAL),
                ("BD", WordDirection.VERTICAL),
            ],
        )
        self.assertEqual(positions[2].cells, ((0, 0), (0, 1)))

    def test_extraction_is_deterministic(self) -> None:
        grid = grid_from_rows(["CAT#", "O#.A", "W.OX"])

        self.assertEqual(extract_word_positions(grid.cells), extract_word_positions(grid.cells))

    def test_empty_grid_has_no_words(self) -> None:
        self.assertEqual(extract_word_positions([]), [])
        self.assertEqual(extract_word_positions(build_empty_grid(4, 4).cells), [])

    def test_list_words_and_occurrences(self) -> None:
        grid = grid_from_rows(["ON#ON", "#####", "ZOO.."])
        positions = extract_word_positions(grid.cells)

        self.assertEqual(list_words(positions), ["ON", "ZOO"])
        occurrences = find_occurrences(positions, "ON")
        self.assertEqual([o.start for o in occurrences], [(0, 0), (3, 0)])
        self.assertEqual(find_occurrences(positions, "MISSING"), [])


if __name__ == "__main__":
    unittest.main()
