import unittest

from dotknot.grid import Grid, is_adjacent
from dotknot.level import Level
from dotknot.solver.paths import best_first_path, enumerate_paths


def _grid(text: str) -> Grid:
    return Grid.from_level(Level.from_flow_text(text))


class EnumeratePathsTests(unittest.TestCase):
    def test_single_corridor(self) -> None:
        grid = _grid("A.A\n")
        self.assertEqual(enumerate_paths(grid, "A", (0, 0), (0, 2)), [[(0, 0), (0, 1), (0, 2)]])

    def test_order_follows_direction_order(self) -> None:
        grid = _grid("AA\n..\n")
        self.assertEqual(
            enumerate_paths(grid, "A", (0, 0), (0, 1)),
            [[(0, 0), (0, 1)], [(0, 0), (1, 0), (1, 1), (0, 1)]],
        )

    def test_counts_every_simple_path(self) -> None:
        grid = _grid("A..\n...\n..A\n")
        paths = enumerate_paths(grid, "A", (0, 0), (2, 2))
        self.assertEqual(len(paths), 12)
        self.assertEqual(len({tuple(p) for p in paths}), 12)
        for path in paths:
            self.assertEqual(path[0], (0, 0))
            self.assertEqual(path[-1], (2, 2))
            self.assertEqual(len(set(path)), len(path))
            for prev, cur in zip(path, path[1:]):
                self.assertTrue(is_adjacent(prev, cur))

    def test_same_inputs_same_output(self) -> None:
        grid = _grid("A..\n...\n..A\n")
        first = enumerate_paths(grid, "A", (0, 0), (2, 2))
        second = enumerate_paths(grid, "A", (0, 0), (2, 2))
        self.assertEqual(first, second)
        self.assertEqual(grid.empty_count(), 7)

    def test_other_colors_block_cells(self) -> None:
        grid = _grid("A.A\n")
        grid.set_color((0, 1), "B")
        self.assertEqual(enumerate_paths(grid, "A", (0, 0), (0, 2)), [])

    def test_max_paths_keeps_prefix(self) -> None:
        grid = _grid("A..\n...\n..A\n")
        everything = enumerate_paths(grid, "A", (0, 0), (2, 2))
        capped = enumerate_paths(grid, "A", (0, 0), (2, 2), max_paths=3)
        self.assertEqual(capped, everything[:3])

    def test_step_budget_falls_back_to_best_first(self) -> None:
        grid = _grid("A..\n...\n..A\n")
        with self.assertLogs("dotknot.solver.paths", level="WARNING"):
            paths = enumerate_paths(grid, "A", (0, 0), (2, 2), max_steps=0)
        self.assertEqual(paths, [[(0, 0), (0, 1), (0, 2), (1, 2), (2, 2)]])


class BestFirstPathTests(unittest.TestCase):
    def test_returns_none_when_blocked(self) -> None:
        grid = _grid("A.A\n")
        grid.set_color((0, 1), "B")
        self.assertIsNone(best_first_path(grid, (0, 0), (0, 2)))

    def test_walks_toward_the_goal(self) -> None:
        grid = _grid("A...\n...A\n")
        path = best_first_path(grid, (0, 0), (1, 3))
        self.assertIsNotNone(path)
        self.assertEqual(path[0], (0, 0))
        self.assertEqual(path[-1], (1, 3))
        self.assertEqual(len(path), 5)


if __name__ == "__main__":
    unittest.main()
