from dataclasses import dataclass
from typing import Iterable, List, NamedTuple, Tuple

from config import CFG

Rows = Tuple[str, ...]


def reverse_bits(n: int, width: int = 10) -> int:
    out = 0
    for i in range(width):
        if n & (1 << i):
            out |= 1 << (width - 1 - i)
    return out


def fingerprint(cells: Iterable[str]) -> int:
    """Fold a run of border cells into an integer, first cell in the high bit."""
    value = 0
    for c in cells:
        value = (value << 1) | (1 if c == CFG.MARKED else 0)
    return value


def fits(a_edge: int, b_edge: int, width: int = 10) -> bool:
    """True when ``b_edge`` can sit against ``a_edge``.

    Edges are read clockwise, so two touching borders are read in opposite
    directions and match when one is the bit-reversal of the other.
    """
    return b_edge == reverse_bits(a_edge, width)


class Orientation(NamedTuple):
    rotations: int   # quarter turns clockwise, applied after the flip
    flipped: bool    # mirrored top-to-bottom first

    @property
    def label(self) -> str:
        base = f"r{90 * self.rotations}"
        return f"flip+{base}" if self.flipped else base


IDENTITY = Orientation(0, False)


class _Bordered:
    rows: Rows

    @property
    def size(self) -> int:
        return len(self.rows)

    # Every side is read clockwise around the tile.
    @property
    def top(self) -> int:
        return fingerprint(self.rows[0])

    @property
    def right(self) -> int:
        return fingerprint(row[-1] for row in self.rows)

    @property
    def bottom(self) -> int:
        return fingerprint(reversed(self.rows[-1]))

    @property
    def left(self) -> int:
        return fingerprint(row[0] for row in reversed(self.rows))

    def edges(self) -> Tuple[int, int, int, int]:
        return self.top, self.right, self.bottom, self.left

    def marked_count(self) -> int:
        return sum(row.count(CFG.MARKED) for row in self.rows)


@dataclass(frozen=True)
class Tile(_Bordered):
    id: int
    rows: Rows

    def __post_init__(self):
        n = len(self.rows)
        if n == 0 or any(len(row) != n for row in self.rows):
            raise ValueError(f"tile {self.id} is not square")

    def __str__(self) -> str:
        return "\n".join([f"Tile {self.id}:", *self.rows])


@dataclass(frozen=True)
class Variant(_Bordered):
    tile_id: int
    rows: Rows
    orientation: Orientation = IDENTITY

    def interior(self) -> Rows:
        return tuple(row[1:-1] for row in self.rows[1:-1])


Placement = List[Variant]


def corner_product(placement: Placement, geom: int) -> int:
    last = geom * geom - 1
    return (
        placement[0].tile_id
        * placement[geom - 1].tile_id
        * placement[last - geom + 1].tile_id
        * placement[last].tile_id
    )
