# solver/cache.py
from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from models import Tile, Variant
from solver.orientation import variants

EdgePair = Tuple[int, int]


@dataclass
class CandidateCache:
    """Every orientation of every tile, indexed by the edges the placer asks for.

    ``lefts`` and ``tops`` are keyed by the left/top fingerprint and
    ``lefttops`` by the ``(left, top)`` pair. Built once before the search and
    only read afterwards.
    """

    all: List[Variant] = field(default_factory=list)
    lefts: Dict[int, List[Variant]] = field(default_factory=dict)
    tops: Dict[int, List[Variant]] = field(default_factory=dict)
    lefttops: Dict[EdgePair, List[Variant]] = field(default_factory=dict)
    tile_ids: Tuple[int, ...] = ()
    edge_width: int = 10

    @classmethod
    def populate(cls, tiles: Iterable[Tile]) -> "CandidateCache":
        everything: List[Variant] = []
        lefts: Dict[int, List[Variant]] = defaultdict(list)
        tops: Dict[int, List[Variant]] = defaultdict(list)
        lefttops: Dict[EdgePair, List[Variant]] = defaultdict(list)
        ids: List[int] = []
        width: Optional[int] = None

        for tile in tiles:
            ids.append(tile.id)
            if width is None:
                width = tile.size
            elif tile.size != width:
                raise ValueError(f"tile {tile.id} is {tile.size} wide, expected {width}")
            for v in variants(tile):
                left, top = v.left, v.top
                everything.append(v)
                lefts[left].append(v)
                tops[top].append(v)
                lefttops[(left, top)].append(v)

        return cls(
            all=everything,
            lefts=dict(lefts),
            tops=dict(tops),
            lefttops=dict(lefttops),
            tile_ids=tuple(ids),
            edge_width=width or 10,
        )

    def by_left(self, edge: int) -> List[Variant]:
        return self.lefts.get(edge, [])

    def by_top(self, edge: int) -> List[Variant]:
        return self.tops.get(edge, [])

    def by_left_top(self, left: int, top: int) -> List[Variant]:
        return self.lefttops.get((left, top), [])

    def __len__(self) -> int:
        return len(self.all)


__all__ = ["CandidateCache"]
