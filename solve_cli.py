#!/usr/bin/env python3
"""
Reassemble a tile set from the command line and print the answer.

Reads ``Tile <id>:`` blocks from a file (or stdin) and prints one integer:
  - ``--answer corners``: product of the four corner tile ids
  - ``--answer roughness`` (default): marked cells not covered by the motif
"""

import argparse
import sys
from typing import List, Optional

from config import CFG
from errors import JigsawError
from solver.compositor import image_to_text
from solver.orchestrator import ENGINES, solve_orchestrator


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Reassemble square tiles and scan the image for the motif.")
    parser.add_argument("input", nargs="?", default="-", help="tile file ('-' for stdin)")
    parser.add_argument(
        "--answer", choices=("corners", "roughness"), default="roughness",
        help="which number to print",
    )
    parser.add_argument("--engine", choices=ENGINES, default=CFG.SOLVER, help="placement engine")
    parser.add_argument(
        "--show-image", action="store_true",
        help="print the oriented image to stderr before the answer",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.input == "-":
        text = sys.stdin.read()
    else:
        with open(args.input, "r", encoding="utf-8") as fh:
            text = fh.read()

    full = args.answer == "roughness" or args.show_image
    try:
        result = solve_orchestrator(text, full=full, engine=args.engine)
    except JigsawError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if args.show_image and result.scan is not None:
        sys.stderr.write(image_to_text(result.scan.image))

    if args.answer == "corners":
        print(result.corner_product)
    else:
        print(result.roughness)
    return 0


if __name__ == "__main__":
    sys.exit(main())
