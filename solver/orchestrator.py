# Orchestrator: parse → index → place → compose → scan
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union

from config import CFG
from errors import JigsawError
from models import Placement, Rows, Tile, corner_product
from progress import (
    begin_run, set_phase, set_attempt, set_grid, set_progress_pct,
    set_best_placed, set_tile_count, set_done, log_event,
)
from solver.backtrack import SearchStats, place_tiles, verify_placement
from solver.cache import CandidateCache
from solver.compositor import compose_image
from solver.motif import MotifScan, roughness, scan_orientations
from tiles import derive_geom, parse_tiles

ENGINES = ("backtrack", "cp_sat")


@dataclass
class SolveResult:
    geom: int
    placement: Placement
    corner_product: int
    engine: str
    elapsed_sec: float = 0.0
    image: Optional[Rows] = None
    scan: Optional[MotifScan] = None
    roughness: Optional[int] = None
    stats: Dict[str, Any] = field(default_factory=dict)

    @property
    def motif_count(self) -> int:
        return self.scan.count if self.scan is not None else 0


def _resolve_engine(engine: Optional[str]) -> str:
    name = (engine or CFG.SOLVER or "backtrack").strip().lower()
    if name not in ENGINES:
        raise JigsawError(f"unknown placement engine {name!r} (expected one of {', '.join(ENGINES)})")
    return name


def _place(engine: str, tiles: List[Tile], geom: int, cache: CandidateCache, stats: SearchStats) -> Placement:
    n = geom * geom

    def _on_progress(deepest: int, nodes: int) -> None:
        set_best_placed(deepest)
        # placement is the long phase; it owns the 10–80% band
        set_progress_pct(10.0 + 70.0 * deepest / n)

    if engine == "cp_sat":
        if CFG.CP_SAT_ISOLATE:
            from solver.cp_isolate import run_cp_sat_isolated
            placed = run_cp_sat_isolated(tiles, geom, CFG.CP_SAT_SECONDS)
        else:
            from solver.cp_sat import place_tiles_cp_sat
            placed = place_tiles_cp_sat(geom, cache)
        _on_progress(len(placed), 0)
        return placed

    placed = place_tiles(geom, cache, on_progress=_on_progress, stats=stats)
    log_event("Backtracking finished", nodes=stats.nodes, deepest=stats.deepest)
    return placed


def solve_orchestrator(
    source: Union[str, Sequence[Tile]],
    *,
    full: bool = True,
    engine: Optional[str] = None,
) -> SolveResult:
    """Run the whole pipeline on tile text (or already parsed tiles).

    With ``full=False`` the run stops after placement and only the corner
    product is filled in. Engine errors are recorded in the progress state
    and then re-raised unchanged.
    """
    t0 = time.time()
    begin_run()
    try:
        name = _resolve_engine(engine)

        set_phase("parse")
        tiles = parse_tiles(source) if isinstance(source, str) else list(source)
        geom = derive_geom(len(tiles))
        set_tile_count(len(tiles))
        set_grid(f"{geom} × {geom} tiles")
        set_progress_pct(5.0)

        set_phase("index")
        cache = CandidateCache.populate(tiles)
        log_event("Cache populated", tiles=len(tiles), variants=len(cache),
                  left_keys=len(cache.lefts), top_keys=len(cache.tops))
        set_progress_pct(10.0)

        set_phase("place")
        set_attempt(name)
        stats = SearchStats()
        placement = _place(name, tiles, geom, cache, stats)
        if CFG.VERIFY_PLACEMENT:
            verify_placement(placement, geom)
        result = SolveResult(
            geom=geom,
            placement=placement,
            corner_product=corner_product(placement, geom),
            engine=name,
            stats={"nodes": stats.nodes, "deepest": stats.deepest} if name == "backtrack" else {},
        )
        set_progress_pct(80.0)

        if full:
            set_phase("compose")
            result.image = compose_image(placement, geom)
            set_progress_pct(85.0)

            set_phase("scan")
            result.scan = scan_orientations(result.image)
            result.roughness = roughness(result.image, result.scan)
            log_event("Motif scan", orientation=result.scan.orientation.label,
                  matches=result.scan.count, roughness=result.roughness)
    except JigsawError as exc:
        set_done(False, reason=f"{type(exc).__name__}: {exc}")
        raise

    result.elapsed_sec = time.time() - t0
    set_done(True, reason=f"corner product {result.corner_product}"
             + (f", roughness {result.roughness}" if result.roughness is not None else ""))
    return result


__all__ = ["ENGINES", "SolveResult", "solve_orchestrator"]
