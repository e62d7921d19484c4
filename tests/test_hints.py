import unittest

from dotknot.grid import Grid
from dotknot.hints import Hint, find_hint, local_extension_hint, solution_hint
from dotknot.level import Level


class LocalHintTests(unittest.TestCase):
    def test_single_gap(self) -> None:
        level = Level.from_flow_text("A.A\n")
        hint = find_hint(level, Grid.from_level(level))
        self.assertEqual(hint, Hint("A", (0, 1)))
        self.assertEqual(hint.label, "Soft Indigo")
        self.assertEqual(hint.to_dict(), {"color": "A", "label": "Soft Indigo", "position": [0, 1]})

    def test_connected_colors_are_skipped(self) -> None:
        level = Level.from_flow_text("A.A\nB.B\nC.C\n")
        grid = Grid.from_token_rows(level, ["AAA", "B.B", "C.C"])
        self.assertEqual(find_hint(level, grid), Hint("B", (1, 1)))

    def test_neighbors_scanned_up_down_left_right(self) -> None:
        level = Level.from_flow_text("A..\n...\n..A\n")
        grid = Grid.from_token_rows(level, ["A..", ".AA", "..A"])
        self.assertEqual(local_extension_hint(level, grid), Hint("A", (1, 0)))

    def test_branching_extension_is_not_suggested(self) -> None:
        level = Level.from_flow_text("A..A\n")
        self.assertIsNone(local_extension_hint(level, Grid.from_level(level)))


class SolutionHintTests(unittest.TestCase):
    def test_falls_back_to_canonical_solution(self) -> None:
        level = Level.from_flow_text("A..A\n")
        grid = Grid.from_level(level)
        self.assertEqual(find_hint(level, grid), Hint("A", (0, 1)))

    def test_continues_the_players_path(self) -> None:
        level = Level.from_flow_text("A...A\n")
        grid = Grid.from_token_rows(level, ["AA..A"])
        self.assertEqual(solution_hint(level, grid), Hint("A", (0, 2)))

    def test_no_hint_on_finished_board(self) -> None:
        level = Level.from_flow_text("A.A\n")
        grid = Grid.from_token_rows(level, ["AAA"])
        self.assertIsNone(find_hint(level, grid))

    def test_no_hint_for_unsolvable_level(self) -> None:
        level = Level.from_flow_text("A.\n.A\n")
        self.assertIsNone(solution_hint(level, Grid.from_level(level)))

    def test_board_is_not_modified(self) -> None:
        level = Level.from_flow_text("A..A\nB..B\n")
        grid = Grid.from_token_rows(level, ["AA.A", "B..B"])
        before = grid.snapshot()
        find_hint(level, grid)
        self.assertEqual(grid.snapshot(), before)


if __name__ == "__main__":
    unittest.main()
