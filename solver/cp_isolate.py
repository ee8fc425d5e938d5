# solver/cp_isolate.py
import multiprocessing as mp
import queue
import time
import traceback
from typing import List

from errors import JigsawError, SearchAborted
from models import Placement, Tile


# Worker must be top-level (picklable on Windows spawn)
def _solve_worker(q, tiles: List[Tile], geom: int, max_seconds: float):
    try:
        from solver.cache import CandidateCache  # import inside child
        from solver.cp_sat import place_tiles_cp_sat
        placed = place_tiles_cp_sat(geom, CandidateCache.populate(tiles), max_seconds=max_seconds)
        q.put(("ok", placed))
    except JigsawError as e:
        q.put(("err", e))
    except MemoryError:
        q.put(("exc", "Child ran out of memory"))
    except Exception as e:
        q.put(("exc", f"{e}\n{traceback.format_exc()}"))


def run_cp_sat_isolated(tiles: List[Tile], geom: int, max_seconds: float) -> Placement:
    """Run the CP-SAT placer in a spawned child so a native crash cannot take
    the caller down. Engine errors raised in the child are re-raised here.
    """
    ctx = mp.get_context("spawn")  # safest on Windows
    q = ctx.Queue()
    p = ctx.Process(target=_solve_worker, args=(q, list(tiles), int(geom), float(max_seconds)))
    p.daemon = True
    p.start()

    # Allow a small buffer beyond model time for teardown
    deadline = time.time() + float(max_seconds) + 5.0
    tag, payload = "timeout", None
    while True:
        try:
            tag, payload = q.get(timeout=0.25)
            break
        except queue.Empty:
            if p.is_alive() and time.time() < deadline:
                continue
        # child gone or out of time: take anything it flushed on the way out
        try:
            tag, payload = q.get(timeout=0.5)
        except queue.Empty:
            pass
        break

    killed = False
    p.join(2.0)
    if p.is_alive():
        p.terminate()
        killed = True
        p.join(2.0)

    if tag == "ok":
        return payload
    if tag == "err":
        raise payload
    if tag == "timeout":
        if killed or p.exitcode in (0, None):
            raise SearchAborted(f"CP-SAT child stopped before solution ({float(max_seconds):g}s time box)")
        raise JigsawError(f"CP-SAT child exited with code {p.exitcode} before answering")
    raise JigsawError(f"CP-SAT child failed: {payload}")


__all__ = ["run_cp_sat_isolated"]
