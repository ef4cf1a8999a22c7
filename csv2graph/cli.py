from __future__ import annotations

import argparse
import base64
import json
import logging
from pathlib import Path
import sys
from typing import Sequence

from csv2graph.options import DEFAULT_SIZE, DEFAULT_TITLE, PlotOptions
from csv2graph.render import generate_plot


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="csv2graph", description="Render CSV columns as a PNG scatter/line chart.")
    parser.add_argument("csv", help="CSV file to plot, or '-' to read stdin.")
    parser.add_argument("--columns", nargs="+", required=True, help="Column names to plot as Y series.")
    parser.add_argument("--title", default=DEFAULT_TITLE)
    parser.add_argument("--size", default=DEFAULT_SIZE, help="Image size as WIDTHxHEIGHT.")
    parser.add_argument("--max-range", type=float, default=None, help="Drop rows whose X value exceeds this.")
    parser.add_argument("--skip", type=int, default=1, help="Keep every Nth row (1 keeps all).")
    parser.add_argument("--xdata", action="store_true", help="Use the first column as X instead of the row number.")
    parser.add_argument("--xscale", default=None, help="Fixed X axis range as START,END.")
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the PNG here. Default: print the JSON result to stdout.",
    )
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    if args.csv == "-":
        csv_text = sys.stdin.read()
    else:
        csv_text = Path(args.csv).read_text(encoding="utf-8")

    options = PlotOptions(
        columns=tuple(args.columns),
        title=args.title,
        size=args.size,
        max_range=args.max_range,
        skip=args.skip,
        xdata=args.xdata,
        xscale=args.xscale,
    )
    result = generate_plot(csv_text, options)
    if result.base64_image is None:
        print(f"error: {result.error}", file=sys.stderr)
        return 1

    if args.output is not None:
        args.output.write_bytes(base64.b64decode(result.base64_image))
        print(f"wrote {args.output}")
    else:
        print(json.dumps(result.to_dict()))
    return 0
