import dataclasses
import tempfile
import unittest
from pathlib import Path

from dotknot.grid import Grid
from dotknot.level import Level, parse_flow_text


class LevelParsingTests(unittest.TestCase):
    def test_flow_text_anchors_and_size(self) -> None:
        level = Level.from_flow_text("A.B\n...\nA.B\n")
        self.assertEqual((level.rows, level.cols), (3, 3))
        self.assertEqual(level.colors(), ["A", "B"])
        self.assertEqual(level.anchors["A"], ((0, 0), (2, 0)))
        self.assertEqual(level.anchors["B"], ((0, 2), (2, 2)))

    def test_comments_and_metadata(self) -> None:
        text = "# just a comment\n# author: someone\nA..A\n"
        level = Level.from_flow_text(text, source_name="inline")
        self.assertEqual(level.meta["author"], "someone")
        self.assertEqual(level.meta["source"], "inline")
        self.assertEqual(level.anchors["A"], ((0, 0), (0, 3)))

    def test_whitespace_separated_tokens(self) -> None:
        level = Level.from_flow_text("RED . RED\n. . .\n")
        self.assertEqual(level.anchors["RED"], ((0, 0), (0, 2)))

    def test_letter_must_appear_twice(self) -> None:
        with self.assertRaises(ValueError):
            Level.from_flow_text("A.A\n.A.\n")

    def test_holes_are_rejected(self) -> None:
        with self.assertRaises(ValueError):
            Level.from_flow_text("A#A\n")

    def test_ragged_rows_are_rejected(self) -> None:
        with self.assertRaises(ValueError):
            parse_flow_text("A.A\n..\n")

    def test_round_trip_through_text(self) -> None:
        level = Level(rows=2, cols=3, anchors={"B": ((0, 0), (1, 2)), "A": ((0, 2), (1, 0))})
        again = Level.from_flow_text(level.to_flow_text())
        self.assertEqual(set(again.anchors.items()), set(level.anchors.items()))

    def test_from_file_and_dict(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "one.flow"
            path.write_text("A.A\n", encoding="utf-8")
            level = Level.from_file(path)
        self.assertEqual(Level.from_dict(level.to_dict()), level)


class LevelInvariantTests(unittest.TestCase):
    def test_shared_anchor_cell_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            Level(rows=2, cols=2, anchors={"A": ((0, 0), (0, 1)), "B": ((0, 1), (1, 1))})

    def test_anchor_pair_must_be_distinct(self) -> None:
        with self.assertRaises(ValueError):
            Level(rows=2, cols=2, anchors={"A": ((0, 0), (0, 0))})

    def test_anchor_must_be_in_bounds(self) -> None:
        with self.assertRaises(ValueError):
            Level(rows=2, cols=2, anchors={"A": ((0, 0), (2, 0))})

    def test_level_is_immutable(self) -> None:
        level = Level.from_flow_text("A.A\n")
        with self.assertRaises(dataclasses.FrozenInstanceError):
            level.rows = 4  # type: ignore[misc]
        with self.assertRaises(TypeError):
            level.anchors["B"] = ((0, 1), (0, 1))  # type: ignore[index]

    def test_levels_hash_like_they_compare(self) -> None:
        first = Level(rows=2, cols=2, anchors={"A": ((0, 0), (0, 1)), "B": ((1, 0), (1, 1))})
        second = Level(rows=2, cols=2, anchors={"B": ((1, 0), (1, 1)), "A": ((0, 0), (0, 1))}, meta={"k": "v"})
        self.assertEqual(first, second)
        self.assertEqual(hash(first), hash(second))
        self.assertEqual(len({first, second}), 1)

    def test_anchor_cells(self) -> None:
        level = Level.from_flow_text("AB\nBA\n")
        self.assertEqual(level.anchor_cells(), {(0, 0): "A", (1, 1): "A", (0, 1): "B", (1, 0): "B"})


class GridStateTests(unittest.TestCase):
    def test_from_level_marks_anchors(self) -> None:
        level = Level.from_flow_text("A.A\n")
        grid = Grid.from_level(level)
        self.assertTrue(grid.is_anchor((0, 0)))
        self.assertFalse(grid.is_anchor((0, 1)))
        self.assertEqual(grid.color_at((0, 2)), "A")
        self.assertTrue(grid.is_empty((0, 1)))
        self.assertEqual(grid.empty_count(), 1)

    def test_anchor_color_cannot_change(self) -> None:
        grid = Grid.from_level(Level.from_flow_text("AB\nAB\n"))
        with self.assertRaises(ValueError):
            grid.set_color((0, 0), "B")
        with self.assertRaises(ValueError):
            grid.clear((0, 0))
        grid.set_color((0, 0), "A")
        self.assertEqual(grid.color_at((0, 0)), "A")

    def test_neighbors_follow_up_right_down_left(self) -> None:
        grid = Grid(3, 3)
        self.assertEqual(list(grid.neighbors((1, 1))), [(0, 1), (1, 2), (2, 1), (1, 0)])
        self.assertEqual(list(grid.neighbors((0, 0))), [(0, 1), (1, 0)])

    def test_copy_is_independent(self) -> None:
        grid = Grid.from_level(Level.from_flow_text("A..A\n"))
        clone = grid.copy()
        clone.set_color((0, 1), "A")
        self.assertTrue(grid.is_empty((0, 1)))

    def test_state_rows_load_user_cells(self) -> None:
        level = Level.from_flow_text("A..A\nB..B\n")
        grid = Grid.from_token_rows(level, ["AA.A", "B..B"])
        self.assertEqual(grid.color_at((0, 1)), "A")
        self.assertEqual(grid.cells_of("A"), [(0, 0), (0, 1), (0, 3)])
        self.assertEqual(grid.to_token_rows(), ["AA.A", "B..B"])

    def test_state_rows_must_keep_anchors(self) -> None:
        level = Level.from_flow_text("A..A\nB..B\n")
        with self.assertRaises(ValueError):
            Grid.from_token_rows(level, ["B..A", "B..B"])
        with self.assertRaises(ValueError):
            Grid.from_token_rows(level, ["A.ZA", "B..B"])

    def test_out_of_bounds_cells_are_rejected(self) -> None:
        grid = Grid.from_level(Level.from_flow_text("A.A\n...\n"))
        with self.assertRaises(KeyError):
            grid.color_at((-1, 0))
        with self.assertRaises(KeyError):
            grid.is_empty((0, -1))
        with self.assertRaises(KeyError):
            grid.set_color((-1, 1), "A")
        with self.assertRaises(KeyError):
            grid.clear((2, 0))
        self.assertTrue(grid.is_empty((1, 2)))

    def test_remove_color_keeps_anchors(self) -> None:
        level = Level.from_flow_text("A..A\n")
        grid = Grid.from_token_rows(level, ["AAAA"])
        grid.remove_color("A")
        self.assertEqual(grid.to_token_rows(), ["A..A"])


if __name__ == "__main__":
    unittest.main()
