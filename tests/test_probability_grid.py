import unittest

from adaptive_battleship.domain.geometry import possibility_matrix
from adaptive_battleship.domain.types import Position
from adaptive_battleship.scoring.grid import ProbabilityGrid, format_matrix

SIZES = [2, 3, 3, 4, 5]


class ProbabilityGridTests(unittest.TestCase):
    def test_initial_total_matches_possibilities(self):
        grid = ProbabilityGrid(10, 10, SIZES)
        expected = sum(sum(row) for row in possibility_matrix(10, 10, SIZES))
        self.assertEqual(grid.total, expected)
        self.assertEqual(grid.snapshot(), possibility_matrix(10, 10, SIZES))

    def test_invalidate_keeps_total_in_sync(self):
        grid = ProbabilityGrid(10, 10, SIZES)
        for pos in [Position(4, 4), Position(4, 6), Position(0, 1), Position(9, 9)]:
            grid.invalidate(pos)
            self.assertEqual(grid.score(pos), 0)
            self.assertEqual(grid.total, grid.recalculate())

    def test_invalidate_twice_is_idempotent(self):
        grid = ProbabilityGrid(10, 10, SIZES)
        grid.invalidate(Position(3, 3))
        grid.invalidate(Position(3, 5))
        before = grid.snapshot()
        total = grid.total
        grid.invalidate(Position(3, 5))
        self.assertEqual(grid.snapshot(), before)
        self.assertEqual(grid.total, total)

    def test_split_shrinks_run(self):
        grid = ProbabilityGrid(10, 10, [5])
        grid.invalidate(Position(0, 3))
        # three cells to the left can no longer hold a horizontal 5-ship
        self.assertEqual(grid.cell(Position(0, 1)).horizontal.total, 0)
        self.assertEqual(grid.cell(Position(0, 1)).vertical.total, 1)
        # six cells to the right still can
        self.assertEqual(grid.cell(Position(0, 6)).horizontal.total, 3)

    def test_clear_leaves_neighbours(self):
        grid = ProbabilityGrid(10, 10, SIZES)
        before = grid.snapshot()
        grid.clear(Position(4, 4))
        self.assertEqual(grid.score(Position(4, 4)), 0)
        self.assertEqual(grid.score(Position(4, 5)), before[4][5])
        self.assertEqual(grid.score(Position(3, 4)), before[3][4])
        self.assertEqual(grid.total, grid.recalculate())

    def test_collapse_cascades(self):
        # a 3x1 strip with one 2-ship: ruling out the middle leaves no room anywhere
        grid = ProbabilityGrid(3, 1, [2])
        self.assertEqual(grid.snapshot(), [[1, 2, 1]])
        grid.invalidate(Position(0, 1))
        self.assertEqual(grid.total, 0)
        self.assertEqual(list(grid.open_cells()), [])

    def test_zeroed_cell_never_comes_back(self):
        grid = ProbabilityGrid(10, 10, SIZES)
        grid.invalidate(Position(5, 5))
        for pos in [Position(5, 4), Position(5, 6), Position(4, 5), Position(6, 5)]:
            grid.invalidate(pos)
            self.assertEqual(grid.score(Position(5, 5)), 0)
        grid.sink(3)
        self.assertEqual(grid.score(Position(5, 5)), 0)

    def test_sink_removes_one_ship(self):
        grid = ProbabilityGrid(10, 10, [2, 3])
        grid.sink(3)
        self.assertEqual(grid.snapshot(), ProbabilityGrid(10, 10, [2]).snapshot())
        self.assertEqual(grid.total, grid.recalculate())

    def test_sink_removes_only_one_of_a_size(self):
        grid = ProbabilityGrid(10, 10, [3, 3])
        grid.sink(3)
        self.assertEqual(grid.snapshot(), ProbabilityGrid(10, 10, [3]).snapshot())

    def test_format_matrix(self):
        self.assertEqual(format_matrix([[1, 2]]), "\t0\t1\nA\t1\t2")
        self.assertEqual(format_matrix([]), "")


if __name__ == "__main__":
    unittest.main()
