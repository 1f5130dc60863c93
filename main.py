from __future__ import annotations

import argparse
from dataclasses import replace
import json
import logging
from pathlib import Path
from typing import Any, Sequence

from linechart import ChartConfig, LineChart, LinearScale, load_config
from linechart.errors import ChartDataError

LOGGER = logging.getLogger("linechart.cli")

DEFAULT_ASPECT_RATIO = 16.0 / 9.0
DEFAULT_SIZE = (640, 360)


class _PrintingDelegate:
    def did_select_data_point(self, x: int, y_values: list[float]) -> None:
        print(f"selected x={x} y={json.dumps(y_values)}")


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="linechart")
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render a JSON data file to PNG.")
    render.add_argument("data", type=Path, help="JSON list of lines, or {\"lines\": [...], \"x_labels\": [...]}.")
    render.add_argument("--out", type=Path, required=True)
    render.add_argument("--width", type=int, default=None, help="Canvas width. Default: 640, or derived from --height.")
    render.add_argument("--height", type=int, default=None, help="Canvas height. Default: 360, or derived from --width.")
    render.add_argument("--config", type=Path, default=None, help="Chart config TOML.")
    render.add_argument("--touch-x", type=float, default=None, help="Simulate a touch at this canvas x.")
    timing = render.add_mutually_exclusive_group()
    timing.add_argument("--progress", type=float, default=None, help="Animation progress in [0, 1]. Default: 1.")
    timing.add_argument("--elapsed", type=float, default=None, help="Seconds into the configured animation.")

    ticks = sub.add_parser("ticks", help="Print the nice tick range for a domain.")
    ticks.add_argument("d0", type=float)
    ticks.add_argument("d1", type=float)
    ticks.add_argument("--count", type=int, default=10)
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    if args.command == "render":
        width, height = _resolve_dimensions(args.width, args.height)
        config = load_config(args.config) if args.config is not None else ChartConfig()
        lines, x_labels = _load_data(args.data)
        if x_labels:
            config = replace(config, x=replace(config.x, labels=replace(config.x.labels, values=tuple(x_labels))))
        chart = LineChart(width, height, config=config, delegate=_PrintingDelegate())
        for values in lines:
            chart.add_line(values)
        if args.touch_x is not None:
            chart.touch_moved(args.touch_x)
        if args.elapsed is not None:
            progress = chart.progress_at(args.elapsed)
        else:
            progress = 1.0 if args.progress is None else args.progress
        out = chart.save_png(args.out, progress=progress)
        LOGGER.info("wrote %s (%dx%d, %d lines)", out, width, height, len(lines))
        print(f"wrote {out}")
        return 0

    if args.command == "ticks":
        if args.count <= 0:
            raise ValueError("count must be > 0")
        if args.d0 == args.d1:
            raise ValueError("domain must span a non-zero interval")
        tick_range = LinearScale(domain=(args.d0, args.d1)).ticks(args.count)
        print(f"start={tick_range.start:g} stop={tick_range.stop:g} step={tick_range.step:g}")
        print(" ".join(f"{v:g}" for v in tick_range))
        return 0

    raise RuntimeError(f"unsupported command: {args.command}")


def _load_data(path: Path) -> tuple[list[Any], list[str]]:
    if not path.exists():
        raise FileNotFoundError(f"data file not found: {path}")
    raw = json.loads(path.read_text(encoding="utf-8"))
    x_labels: list[str] = []
    if isinstance(raw, dict):
        if "lines" not in raw:
            raise ChartDataError("data object missing required field: lines")
        x_labels = [str(v) for v in raw.get("x_labels", [])]
        raw = raw["lines"]
    if not isinstance(raw, list) or not raw:
        raise ChartDataError("data must contain at least one line")
    # A flat list of numbers is a single line.
    if all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in raw):
        return [raw], x_labels
    return list(raw), x_labels


def _resolve_dimensions(width: int | None, height: int | None) -> tuple[int, int]:
    if width is not None and width <= 0:
        raise ValueError("width must be > 0")
    if height is not None and height <= 0:
        raise ValueError("height must be > 0")

    if width is not None and height is not None:
        return width, height
    if width is not None:
        return width, max(1, int(round(width / DEFAULT_ASPECT_RATIO)))
    if height is not None:
        return max(1, int(round(height * DEFAULT_ASPECT_RATIO))), height
    return DEFAULT_SIZE


if __name__ == "__main__":
    raise SystemExit(main())
