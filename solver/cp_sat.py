import time
from collections import defaultdict
from typing import Dict, List, Optional

from ortools.sat.python import cp_model as _cp

from config import CFG
from errors import JigsawError, SearchAborted, SearchExhausted
from models import Placement, Variant, reverse_bits
from progress import log_event
from solver.backtrack import adjacent_pairs
from solver.cache import CandidateCache


def _compat_indices(cache: CandidateCache, index: Dict[Variant, int]):
    """Per variant, the variant indices allowed to its right and below it."""
    width = cache.edge_width
    right: List[List[int]] = []
    below: List[List[int]] = []
    for v in cache.all:
        right.append([
            index[w] for w in cache.by_left(reverse_bits(v.right, width))
            if w.tile_id != v.tile_id
        ])
        below.append([
            index[w] for w in cache.by_top(reverse_bits(v.bottom, width))
            if w.tile_id != v.tile_id
        ])
    return right, below


def place_tiles_cp_sat(
    geom: int,
    cache: CandidateCache,
    *,
    max_seconds: Optional[float] = None,
    workers: Optional[int] = None,
) -> Placement:
    """Solve the placement as a CP-SAT model instead of by backtracking.

    One Boolean per (grid position, variant). Each position takes exactly one
    variant, each tile id is used exactly once, and a variant at a position
    forces its right/lower neighbour into the cached variants whose edge
    matches. Returns the row-major placement; raises :class:`SearchExhausted`
    when the model is infeasible and :class:`SearchAborted` when the time box
    runs out first.
    """
    n_pos = geom * geom
    if len(cache.tile_ids) != n_pos:
        raise ValueError(f"{geom}x{geom} grid needs {n_pos} tiles, cache holds {len(cache.tile_ids)}")

    options = cache.all
    index = {v: k for k, v in enumerate(options)}
    right_ok, below_ok = _compat_indices(cache, index)

    m = _cp.CpModel()
    x = [[m.NewBoolVar(f"x_{p}_{k}") for k in range(len(options))] for p in range(n_pos)]

    for p in range(n_pos):
        m.AddExactlyOne(x[p])

    by_tile: Dict[int, List[int]] = defaultdict(list)
    for k, v in enumerate(options):
        by_tile[v.tile_id].append(k)
    for tile_id, ks in by_tile.items():
        m.AddExactlyOne([x[p][k] for p in range(n_pos) for k in ks])

    for a, b, axis in adjacent_pairs(geom):
        allowed = right_ok if axis == "h" else below_ok
        for k in range(len(options)):
            nxt = allowed[k]
            if not nxt:
                m.Add(x[a][k] == 0)
                continue
            m.AddBoolOr([x[b][j] for j in nxt]).OnlyEnforceIf(x[a][k])

    seconds = float(CFG.CP_SAT_SECONDS if max_seconds is None else max_seconds)
    solver = _cp.CpSolver()
    solver.parameters.max_time_in_seconds = seconds
    solver.parameters.max_memory_in_mb = int(getattr(CFG, "MAX_MEMORY_MB", 2048))
    solver.parameters.num_search_workers = int(workers or getattr(CFG, "CP_SAT_WORKERS", 1))
    solver.parameters.log_search_progress = False

    log_event(
        "CP-SAT model built",
        geom=geom,
        variants=len(options),
        booleans=n_pos * len(options),
        seconds=seconds,
    )
    t0 = time.time()
    res = solver.Solve(m)
    log_event(
        "CP-SAT finished",
        status=solver.StatusName(res),
        duration=f"{time.time() - t0:.2f}s",
    )

    if res in (_cp.OPTIMAL, _cp.FEASIBLE):
        placed: Placement = []
        for p in range(n_pos):
            for k, v in enumerate(options):
                if solver.BooleanValue(x[p][k]):
                    placed.append(v)
                    break
        return placed

    if res == _cp.INFEASIBLE:
        raise SearchExhausted(f"CP-SAT proved no arrangement fits a {geom}x{geom} grid")
    if res == _cp.MODEL_INVALID:
        raise JigsawError("CP-SAT model invalid (configuration error)")
    raise SearchAborted(f"CP-SAT stopped before a solution ({seconds:g}s time box)")


__all__ = ["place_tiles_cp_sat"]
