import unittest

from dotknot.config import DEFAULT_MAX_ATTEMPTS, GeneratorConfig, SearchLimits
from dotknot.palette import PALETTE, color_hex, color_label


class GeneratorConfigTests(unittest.TestCase):
    def test_defaults_without_environment(self) -> None:
        config = GeneratorConfig.from_env({})
        self.assertEqual((config.rows, config.cols, config.pairs), (5, 5, 3))
        self.assertFalse(config.require_unique)
        self.assertEqual(config.max_attempts, DEFAULT_MAX_ATTEMPTS)
        self.assertIsNone(config.seed)
        self.assertEqual(config.limits, SearchLimits())

    def test_reads_environment(self) -> None:
        config = GeneratorConfig.from_env(
            {
                "DOTKNOT_ROWS": "6",
                "DOTKNOT_COLS": "7",
                "DOTKNOT_PAIRS": "4",
                "DOTKNOT_REQUIRE_UNIQUE": "yes",
                "DOTKNOT_MAX_ATTEMPTS": "50",
                "DOTKNOT_SEED": "-3",
                "DOTKNOT_MAX_PATHS": "200",
                "DOTKNOT_MAX_STEPS": "10000",
            }
        )
        self.assertEqual((config.rows, config.cols, config.pairs), (6, 7, 4))
        self.assertTrue(config.require_unique)
        self.assertEqual(config.max_attempts, 50)
        self.assertEqual(config.seed, -3)
        self.assertEqual(config.limits, SearchLimits(max_paths=200, max_steps=10000))

    def test_malformed_values_fall_back(self) -> None:
        config = GeneratorConfig.from_env(
            {"DOTKNOT_ROWS": "many", "DOTKNOT_PAIRS": "-2", "DOTKNOT_SEED": "x", "DOTKNOT_MAX_PATHS": "0"}
        )
        self.assertEqual(config.rows, 5)
        self.assertEqual(config.pairs, 3)
        self.assertIsNone(config.seed)
        self.assertIsNone(config.limits.max_paths)


class PaletteTests(unittest.TestCase):
    def test_palette_has_nine_distinct_colors(self) -> None:
        self.assertEqual(len(PALETTE), 9)
        self.assertEqual(len({p.code for p in PALETTE}), 9)
        self.assertEqual(len({p.hex for p in PALETTE}), 9)

    def test_labels_and_unknown_colors(self) -> None:
        self.assertEqual(color_label("A"), "Soft Indigo")
        self.assertEqual(color_label("RED"), "RED")
        self.assertTrue(color_hex("RED").startswith("#"))


if __name__ == "__main__":
    unittest.main()
