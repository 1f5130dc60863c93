from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

from linechart.config import (
    CATEGORY10,
    ChartConfig,
    color_from_hex,
    config_from_mapping,
    lighten,
    load_config,
    with_alpha,
)


class ColorHelperTests(unittest.TestCase):
    def test_hex_int_and_string(self) -> None:
        self.assertEqual(color_from_hex(0x607D8B), (96, 125, 139, 255))
        self.assertEqual(color_from_hex("#eeeeee"), (238, 238, 238, 255))
        self.assertEqual(color_from_hex("1f77b480"), (31, 119, 180, 128))

    def test_invalid_hex_rejected(self) -> None:
        for bad in ("#12345", "zzzzzz", 0x1000000, -1, True):
            with self.assertRaises(ValueError):
                color_from_hex(bad)  # type: ignore[arg-type]

    def test_lighten_scales_brightness(self) -> None:
        self.assertEqual(lighten((100, 50, 0, 255)), (150, 75, 0, 255))
        self.assertEqual(lighten((255, 255, 255, 200)), (255, 255, 255, 200))

    def test_with_alpha_scales_existing_alpha(self) -> None:
        self.assertEqual(with_alpha((10, 20, 30, 255), 0.2), (10, 20, 30, 51))
        self.assertEqual(with_alpha((10, 20, 30, 100), 2.0), (10, 20, 30, 100))


class ChartConfigTests(unittest.TestCase):
    def test_defaults(self) -> None:
        cfg = ChartConfig()
        self.assertTrue(cfg.area)
        self.assertEqual(cfg.line_width, 2.0)
        self.assertEqual(cfg.x.grid.count, 10)
        self.assertEqual(cfg.y.grid.color, (238, 238, 238, 255))
        self.assertEqual(cfg.x.axis.color, (96, 125, 139, 255))
        self.assertEqual(cfg.y.axis.inset, 15.0)
        self.assertEqual(cfg.dots.outer_radius, 12.0)
        self.assertEqual(cfg.highlight_line.line_width, 0.5)
        self.assertEqual(cfg.colors, CATEGORY10)

    def test_line_colors_cycle(self) -> None:
        cfg = ChartConfig()
        self.assertEqual(cfg.line_color(0), CATEGORY10[0])
        self.assertEqual(cfg.line_color(10), CATEGORY10[0])
        self.assertEqual(cfg.line_color(13), CATEGORY10[3])

    def test_load_config_from_toml(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "chart.toml"
            path.write_text(
                "\n".join(
                    [
                        "area = false",
                        "line_width = 3",
                        'colors = ["#ff0000", "00ff00"]',
                        "[x.grid]",
                        "count = 5",
                        "[x.labels]",
                        'values = ["mon", "tue"]',
                        "[y.axis]",
                        "inset = 20",
                        'color = "#112233"',
                        "[dots]",
                        "visible = false",
                    ]
                ),
                encoding="utf-8",
            )
            cfg = load_config(path)
        self.assertFalse(cfg.area)
        self.assertEqual(cfg.line_width, 3.0)
        self.assertIsInstance(cfg.line_width, float)
        self.assertEqual(cfg.colors, ((255, 0, 0, 255), (0, 255, 0, 255)))
        self.assertEqual(cfg.x.grid.count, 5)
        self.assertEqual(cfg.x.labels.values, ("mon", "tue"))
        self.assertEqual(cfg.y.axis.inset, 20.0)
        self.assertEqual(cfg.y.axis.color, (17, 34, 51, 255))
        self.assertFalse(cfg.dots.visible)
        # Untouched sections keep their defaults.
        self.assertEqual(cfg.y.grid.count, 10)
        self.assertTrue(cfg.x.axis.visible)

    def test_missing_file(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_config("/nonexistent/chart.toml")

    def test_rejects_unknown_keys_and_bad_types(self) -> None:
        bad_inputs = [
            {"nope": 1},
            {"x": {"grid": {"density": 3}}},
            {"area": "yes"},
            {"line_width": True},
            {"x": {"grid": {"count": 2.5}}},
            {"x": 3},
            {"colors": []},
            {"y": {"grid": {"count": 0}}},
            {"font_family": 12},
        ]
        for raw in bad_inputs:
            with self.assertRaises(ValueError, msg=str(raw)):
                config_from_mapping(raw)


if __name__ == "__main__":
    unittest.main()
