# solver/backtrack.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, FrozenSet, Iterator, List, Optional, Sequence, Tuple

from config import CFG
from errors import PlacementInvariantError, SearchAborted, SearchExhausted
from models import Placement, Variant, fits, reverse_bits
from solver.cache import CandidateCache

ProgressFn = Callable[[int, int], None]


@dataclass
class SearchStats:
    nodes: int = 0      # tentative placements tried
    deepest: int = 0    # most tiles placed at once


def adjacent_pairs(geom: int) -> Iterator[Tuple[int, int, str]]:
    """Yield ``(a, b, axis)`` for every touching pair of row-major positions.

    ``axis`` is ``"h"`` when ``b`` sits right of ``a`` and ``"v"`` when it sits
    below.
    """
    for pos in range(geom * geom):
        row, col = divmod(pos, geom)
        if col + 1 < geom:
            yield pos, pos + 1, "h"
        if row + 1 < geom:
            yield pos, pos + geom, "v"


def candidates_for(pos: int, geom: int, placed: Sequence[Variant], cache: CandidateCache) -> List[Variant]:
    """Cache lookup for the variants allowed at ``pos`` given what is placed."""
    width = cache.edge_width
    if pos == 0:
        return cache.all
    if pos < geom:
        return cache.by_left(reverse_bits(placed[pos - 1].right, width))
    if pos % geom == 0:
        return cache.by_top(reverse_bits(placed[pos - geom].bottom, width))
    return cache.by_left_top(
        reverse_bits(placed[pos - 1].right, width),
        reverse_bits(placed[pos - geom].bottom, width),
    )


def place_tiles(
    geom: int,
    cache: CandidateCache,
    *,
    node_limit: Optional[int] = None,
    on_progress: Optional[ProgressFn] = None,
    progress_every: Optional[int] = None,
    stats: Optional[SearchStats] = None,
) -> Placement:
    """Depth-first fill of a ``geom`` x ``geom`` grid in row-major order.

    Each position only tries the cached variants whose left/top edges match
    the neighbours already placed, so every accepted placement satisfies the
    edge rule by construction. The first complete arrangement wins.

    The set of unused tile ids is an immutable ``frozenset`` handed down to
    each call; backing out of a branch only pops the placement list.

    Raises :class:`SearchExhausted` when no arrangement exists and
    :class:`SearchAborted` when ``node_limit`` tentative placements were
    tried without a verdict. ``on_progress(deepest, nodes)`` is called every
    ``progress_every`` placements. Pass a :class:`SearchStats` to get the
    node count and depth back, whether the search succeeds or not.
    """
    if geom <= 0:
        raise ValueError(f"grid side must be positive, got {geom}")
    ids = frozenset(cache.tile_ids)
    if len(ids) != len(cache.tile_ids) or len(ids) != geom * geom:
        raise ValueError(
            f"{geom}x{geom} grid needs {geom * geom} distinct tiles, cache holds {len(cache.tile_ids)}"
        )

    limit = CFG.BACKTRACK_NODE_LIMIT if node_limit is None else node_limit
    every = max(1, int(progress_every or CFG.PROGRESS_EVERY))

    placed: Placement = []
    nodes = 0
    deepest = 0

    def _search(remaining: FrozenSet[int]) -> bool:
        nonlocal nodes, deepest
        if not remaining:
            return True
        pos = len(placed)
        for cand in candidates_for(pos, geom, placed, cache):
            if cand.tile_id not in remaining:
                continue
            nodes += 1
            if limit and nodes > limit:
                raise SearchAborted(
                    f"backtracking stopped after {limit} placements (deepest {deepest}/{geom * geom})"
                )
            placed.append(cand)
            if len(placed) > deepest:
                deepest = len(placed)
            if on_progress is not None and nodes % every == 0:
                on_progress(deepest, nodes)
            if _search(remaining - {cand.tile_id}):
                return True
            placed.pop()
        return False

    try:
        solved = _search(ids)
    finally:
        if stats is not None:
            stats.nodes, stats.deepest = nodes, deepest

    if not solved:
        raise SearchExhausted(
            f"no arrangement of {len(ids)} tiles fits a {geom}x{geom} grid "
            f"({nodes} placements tried, deepest {deepest})"
        )
    if on_progress is not None:
        on_progress(deepest, nodes)
    return list(placed)


def verify_placement(placement: Sequence[Variant], geom: int) -> None:
    """Raise :class:`PlacementInvariantError` unless every adjacency fits."""
    if len(placement) != geom * geom:
        raise PlacementInvariantError(
            f"placement holds {len(placement)} tiles, expected {geom * geom}"
        )
    seen = set()
    for pos, v in enumerate(placement):
        if v.tile_id in seen:
            raise PlacementInvariantError(f"tile {v.tile_id} placed twice (again at {pos})")
        seen.add(v.tile_id)

    for a, b, axis in adjacent_pairs(geom):
        va, vb = placement[a], placement[b]
        width = va.size
        if axis == "h":
            ok = fits(va.right, vb.left, width)
        else:
            ok = fits(va.bottom, vb.top, width)
        if not ok:
            ra, ca = divmod(a, geom)
            rb, cb = divmod(b, geom)
            raise PlacementInvariantError(
                f"tile {va.tile_id} at ({ra},{ca}) does not fit tile {vb.tile_id} at ({rb},{cb})"
            )


__all__ = ["SearchStats", "adjacent_pairs", "candidates_for", "place_tiles", "verify_placement"]
