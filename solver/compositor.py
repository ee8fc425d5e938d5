# solver/compositor.py
"""Assemble the final image from a finished placement.

Each placed tile loses its one-cell border; the remaining interiors are laid
side by side in grid order. The image is a tuple of text rows, so the square
transforms from :mod:`solver.orientation` apply to it directly.
"""
from __future__ import annotations

from typing import List, Sequence

from config import CFG
from models import Rows, Variant
from solver.orientation import flip_horizontal, flip_vertical, rotate_right


def compose_image(placement: Sequence[Variant], geom: int) -> Rows:
    if len(placement) != geom * geom:
        raise ValueError(f"placement holds {len(placement)} tiles, expected {geom * geom}")

    rows: List[str] = []
    for tile_row in range(geom):
        blocks = [placement[tile_row * geom + col].interior() for col in range(geom)]
        for i in range(len(blocks[0])):
            rows.append("".join(block[i] for block in blocks))
    return tuple(rows)


def image_to_text(image: Rows) -> str:
    return "".join(row + "\n" for row in image)


def image_from_text(text: str) -> Rows:
    return tuple(line.rstrip("\r") for line in text.split("\n") if line.strip())


def marked_cells(image: Rows) -> int:
    return sum(row.count(CFG.MARKED) for row in image)


__all__ = [
    "compose_image",
    "flip_horizontal",
    "flip_vertical",
    "image_from_text",
    "image_to_text",
    "marked_cells",
    "rotate_right",
]
