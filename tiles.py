# tiles.py — tile block parser
from __future__ import annotations

import math
import re
from typing import Dict, List, Optional

from config import CFG
from errors import TileParseError
from models import Tile

_HEADER_RE = re.compile(r"^Tile\s+(?P<id>\d+)\s*:$")


def _is_blank(line: str) -> bool:
    return not line.strip()


def _check_row(row: str, size: int, tile_id: int, *, line: int, block: int) -> None:
    if _HEADER_RE.match(row.strip()):
        raise TileParseError(
            f"tile {tile_id}: header found where a row was expected (missing blank line?)",
            line=line, block=block,
        )
    if len(row) != size:
        raise TileParseError(
            f"tile {tile_id}: row has {len(row)} cells, expected {size}",
            line=line, block=block,
        )
    bad = sorted(set(row) - {CFG.MARKED, CFG.UNMARKED})
    if bad:
        raise TileParseError(
            f"tile {tile_id}: unexpected character(s) {''.join(bad)!r}",
            line=line, block=block,
        )


def parse_tiles(text: str, *, size: Optional[int] = None) -> List[Tile]:
    """Parse ``Tile <id>:`` blocks separated by blank lines.

    Tiles come back in input order. Any malformed block raises
    :class:`TileParseError` naming the block and line.
    """
    size = int(size or CFG.TILE_SIZE)
    lines = text.replace("\r\n", "\n").split("\n")

    tiles: List[Tile] = []
    first_block: Dict[int, int] = {}
    block = 0
    i = 0
    while i < len(lines):
        if _is_blank(lines[i]):
            i += 1
            continue

        block += 1
        header_line = i + 1
        m = _HEADER_RE.match(lines[i].strip())
        if not m:
            raise TileParseError(
                f"expected 'Tile <id>:' header, got {lines[i]!r}",
                line=header_line, block=block,
            )
        tile_id = int(m.group("id"))
        if tile_id in first_block:
            raise TileParseError(
                f"duplicate tile id {tile_id} (first seen in block {first_block[tile_id]})",
                line=header_line, block=block,
            )
        first_block[tile_id] = block

        rows: List[str] = []
        i += 1
        while i < len(lines) and not _is_blank(lines[i]):
            row = lines[i].rstrip()
            _check_row(row, size, tile_id, line=i + 1, block=block)
            rows.append(row)
            i += 1

        if len(rows) != size:
            raise TileParseError(
                f"tile {tile_id} has {len(rows)} rows, expected {size}",
                line=header_line, block=block,
            )
        tiles.append(Tile(tile_id, tuple(rows)))

    if not tiles:
        raise TileParseError("no tiles found in input")
    return tiles


def derive_geom(count: int) -> int:
    """Side length of the square arrangement holding ``count`` tiles."""
    geom = math.isqrt(max(0, count))
    if count <= 0 or geom * geom != count:
        raise TileParseError(f"tile count {count} is not a perfect square")
    return geom


__all__ = ["parse_tiles", "derive_geom"]
