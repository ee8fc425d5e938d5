# solver/orientation.py
"""Grid transforms and the eight symmetries of a square.

The transforms work on any grid given as a tuple of equal-length strings, so
the same functions serve single tiles and the assembled image.
"""
from typing import List, Set, Tuple

from models import Orientation, Rows, Tile, Variant


def rotate_right(rows: Rows) -> Rows:
    """Quarter turn clockwise: column ``y`` read bottom-up becomes row ``y``."""
    if not rows:
        return ()
    return tuple("".join(row[y] for row in reversed(rows)) for y in range(len(rows[0])))


def flip_vertical(rows: Rows) -> Rows:
    return tuple(reversed(rows))


def flip_horizontal(rows: Rows) -> Rows:
    return tuple(row[::-1] for row in rows)


# Identity, three rotations, then the same four on the mirrored grid.
ORIENTATIONS: Tuple[Orientation, ...] = tuple(
    Orientation(turns, flipped) for flipped in (False, True) for turns in range(4)
)


def apply_orientation(rows: Rows, orientation: Orientation) -> Rows:
    if orientation.flipped:
        rows = flip_vertical(rows)
    for _ in range(orientation.rotations % 4):
        rows = rotate_right(rows)
    return rows


def variants(tile: Tile) -> List[Variant]:
    """All distinct orientations of ``tile``.

    Symmetric tiles produce the same grid under several orientations; only
    the first label reaching a given grid is kept.
    """
    seen: Set[Rows] = set()
    out: List[Variant] = []
    for orientation in ORIENTATIONS:
        rows = apply_orientation(tile.rows, orientation)
        if rows in seen:
            continue
        seen.add(rows)
        out.append(Variant(tile.id, rows, orientation))
    return out


__all__ = [
    "ORIENTATIONS",
    "apply_orientation",
    "flip_horizontal",
    "flip_vertical",
    "rotate_right",
    "variants",
]
