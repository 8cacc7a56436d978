"""
simplex-solve — evaluate a simplex system from the command line.

Usage:
  simplex-solve face.json 1.0 0.5          # nonzero shape weights, one per line
  simplex-solve face.json 1.0 0.5 --all    # include zero weights
  simplex-solve face.json 1.0 0.5 --json   # {"shape": weight, ...}
  simplex-solve face.json 1 1 --exact      # exact combo matching
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from simplex.config import settings
from simplex.engine.config import SolverConfig
from simplex.engine.solver import Simplex

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Simplex solver — slider values to shape weights")
    parser.add_argument("system", help="Simplex system JSON file")
    parser.add_argument("values", nargs="*", type=float, help="One value per slider")
    parser.add_argument("--exact", action="store_true", help="Exact combo matching")
    parser.add_argument("--all", action="store_true", help="Print zero weights too")
    parser.add_argument("--json", action="store_true", help="Print a JSON object")
    return parser


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    logging.basicConfig(
        level=getattr(logging, settings.simplex_log_level.upper(), logging.WARNING),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    args = build_parser().parse_args(argv)

    try:
        text = Path(args.system).read_bytes()
    except OSError as e:
        print(f"Error: cannot read {args.system}: {e}", file=sys.stderr)
        return 1

    config = SolverConfig(exact_solve=args.exact or settings.simplex_exact_solve)
    system = Simplex(text, config=config)
    if system.has_parse_error:
        print(f"Error: {system.parse_error} (byte {system.parse_error_offset})", file=sys.stderr)
        return 1

    values = args.values or [0.0] * len(system.sliders)
    logger.debug("Solving %s with %d slider values", args.system, len(values))
    if len(values) != len(system.sliders):
        names = ", ".join(s.name for s in system.sliders)
        print(f"Error: expected {len(system.sliders)} values ({names}), got {len(values)}", file=sys.stderr)
        return 2

    weights = system.shape_weights(system.solve(values))
    if not args.all:
        weights = {name: w for name, w in weights.items() if w != 0.0}

    if args.json:
        print(json.dumps(weights, indent=2))
    else:
        for name, w in weights.items():
            print(f"{name}: {w:.6g}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
