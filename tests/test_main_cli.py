from __future__ import annotations

import contextlib
import io
import json
from pathlib import Path
import tempfile
import unittest

from PIL import Image

import main as cli
from linechart.errors import ChartDataError


class MainCliTests(unittest.TestCase):
    def _run(self, argv: list[str]) -> tuple[int, str]:
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            code = cli.main(argv)
        return code, out.getvalue()

    def test_ticks_command_prints_inclusive_values(self) -> None:
        code, out = self._run(["ticks", "1", "83", "--count", "10"])
        self.assertEqual(code, 0)
        lines = out.strip().splitlines()
        self.assertEqual(lines[0], "start=10 stop=85 step=10")
        self.assertEqual(lines[1], "10 20 30 40 50 60 70 80")

    def test_ticks_command_rejects_zero_span(self) -> None:
        with self.assertRaises(ValueError):
            self._run(["ticks", "5", "5"])

    def test_render_command_writes_png_and_reports_selection(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            data_path = Path(tmp) / "data.json"
            data_path.write_text(
                json.dumps({"lines": [[1, 3, 2, 5], [2, 2, 4, 1]], "x_labels": ["q1", "q2", "q3", "q4"]}),
                encoding="utf-8",
            )
            png_path = Path(tmp) / "chart.png"
            code, out = self._run(
                [
                    "render",
                    str(data_path),
                    "--out",
                    str(png_path),
                    "--width",
                    "320",
                    "--touch-x",
                    "5000",
                ]
            )
            self.assertEqual(code, 0)
            self.assertIn("selected x=3 y=[5.0, 1.0]", out)
            with Image.open(png_path) as img:
                self.assertEqual(img.size, (320, 180))

    def test_render_command_accepts_flat_list(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            data_path = Path(tmp) / "data.json"
            data_path.write_text("[4, 8, 6]", encoding="utf-8")
            png_path = Path(tmp) / "flat.png"
            code, _ = self._run(["render", str(data_path), "--out", str(png_path), "--height", "90"])
            self.assertEqual(code, 0)
            with Image.open(png_path) as img:
                self.assertEqual(img.size, (160, 90))

    def test_render_command_elapsed_uses_animation_duration(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            data_path = Path(tmp) / "data.json"
            data_path.write_text("[1, 4, 2, 6, 3]", encoding="utf-8")
            config_path = Path(tmp) / "chart.toml"
            config_path.write_text("[animation]\nduration = 4.0\n", encoding="utf-8")
            frames: dict[str, bytes] = {}
            for name, extra in (("start", ["--elapsed", "0"]), ("late", ["--elapsed", "10"]), ("final", [])):
                png_path = Path(tmp) / f"{name}.png"
                code, _ = self._run(
                    ["render", str(data_path), "--out", str(png_path), "--config", str(config_path), *extra]
                )
                self.assertEqual(code, 0)
                with Image.open(png_path) as img:
                    frames[name] = img.tobytes()
            self.assertNotEqual(frames["start"], frames["final"])
            self.assertEqual(frames["late"], frames["final"])

    def test_render_command_ignores_non_finite_touch(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            data_path = Path(tmp) / "data.json"
            data_path.write_text("[1, 2, 3]", encoding="utf-8")
            code, out = self._run(
                ["render", str(data_path), "--out", str(Path(tmp) / "c.png"), "--touch-x", "inf"]
            )
            self.assertEqual(code, 0)
            self.assertNotIn("selected", out)

    def test_render_command_rejects_bad_data(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            data_path = Path(tmp) / "data.json"
            data_path.write_text(json.dumps({"series": []}), encoding="utf-8")
            with self.assertRaises(ChartDataError):
                self._run(["render", str(data_path), "--out", str(Path(tmp) / "x.png")])


if __name__ == "__main__":
    unittest.main()
