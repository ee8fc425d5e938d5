# solver/motif.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from config import CFG
from errors import MotifNotFound
from models import Orientation, Rows
from solver.compositor import marked_cells
from solver.orientation import ORIENTATIONS, apply_orientation

# '#' cells must be marked in the image, everything else is ignored.
MOTIF_TEMPLATE: Tuple[str, ...] = (
    "..................#.",
    "#....##....##....###",
    ".#..#..#..#..#..#...",
)


def template_offsets(template: Sequence[str]) -> Tuple[Tuple[int, int], ...]:
    return tuple(
        (r, c)
        for r, line in enumerate(template)
        for c, ch in enumerate(line)
        if ch == "#"
    )


MOTIF_OFFSETS = template_offsets(MOTIF_TEMPLATE)
MOTIF_CELLS = len(MOTIF_OFFSETS)


@dataclass
class MotifScan:
    orientation: Orientation
    image: Rows                  # the composite turned to ``orientation``
    matches: List[Tuple[int, int]] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.matches)

    def covered_cells(self) -> set:
        return {(r + dr, c + dc) for r, c in self.matches for dr, dc in MOTIF_OFFSETS}


def find_matches(image: Rows, offsets: Sequence[Tuple[int, int]] = MOTIF_OFFSETS) -> List[Tuple[int, int]]:
    """Top-left corners of every window where all ``offsets`` are marked.

    Windows may overlap; each position counts on its own.
    """
    if not image or not offsets:
        return []
    height = max(r for r, _ in offsets) + 1
    width = max(c for _, c in offsets) + 1
    mark = CFG.MARKED
    found: List[Tuple[int, int]] = []
    for row in range(len(image) - height + 1):
        for col in range(len(image[0]) - width + 1):
            if all(image[row + dr][col + dc] == mark for dr, dc in offsets):
                found.append((row, col))
    return found


def scan_orientations(image: Rows) -> MotifScan:
    """Turn the image through its eight orientations until the motif shows up.

    Only one orientation is upright relative to the motif, so the first one
    with any match is used. Raises :class:`MotifNotFound` when none has.
    """
    for orientation in ORIENTATIONS:
        oriented = apply_orientation(image, orientation)
        matches = find_matches(oriented)
        if matches:
            return MotifScan(orientation, oriented, matches)
    raise MotifNotFound(
        f"motif not found in any orientation of the {len(image)}x{len(image[0]) if image else 0} image"
    )


def roughness(image: Rows, scan: Optional[MotifScan] = None) -> int:
    """Marked cells left over once every motif occurrence is taken out."""
    if scan is None:
        scan = scan_orientations(image)
    return marked_cells(image) - MOTIF_CELLS * scan.count


__all__ = [
    "MOTIF_CELLS",
    "MOTIF_OFFSETS",
    "MOTIF_TEMPLATE",
    "MotifScan",
    "find_matches",
    "roughness",
    "scan_orientations",
]
