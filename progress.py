"""Run state shared by the solver, the CLI and the ``/progress3`` endpoint.

One ``PROGRESS`` dict behind a lock. Every change is mirrored to a JSON state
file, so a web process can follow a run started by another process, and phase
or engine switches go to the ``solver.attempt_log`` run log with durations.
"""
from __future__ import annotations

import json
import logging
import os
import threading
import time
from pathlib import Path
from typing import Any, Dict

_HERE = Path(__file__).resolve().parent

PROGRESS_LOCK = threading.Lock()
STATE_FILE = Path(os.environ.get("PROGRESS_STATE_FILE") or _HERE / "logs" / "progress_state.json")
_state_mtime = 0.0

RUN_LOG = logging.getLogger("solver.attempt_log")
RUN_LOG.propagate = False
if not RUN_LOG.handlers:
    try:
        (_HERE / "logs").mkdir(parents=True, exist_ok=True)
        _handler = logging.FileHandler(_HERE / "logs" / "solver_attempts.log", encoding="utf-8")
    except OSError:
        _handler = None  # read-only checkout: runs go unlogged
    if _handler is not None:
        _handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
        )
        RUN_LOG.addHandler(_handler)
        RUN_LOG.setLevel(logging.INFO)

# Per-run fields; begin_run() puts these back before every solve.
_FRESH: Dict[str, Any] = {
    "status": "Idle",       # Idle | Solving | Solved | Error
    "phase": "",            # parse | index | place | compose | scan
    "attempt": "",          # placement engine
    "grid": "",             # e.g. "12 × 12 tiles"
    "percent": 0.0,
    "best_placed": 0,       # deepest the placer got this run
    "tile_count": 0,
    "elapsed": 0.0,
    "done": False,
    "ok": None,
    "message": "",          # failure reason or answer summary
    "result_url": "",
}

PROGRESS: Dict[str, Any] = dict(_FRESH, run_id=0, started=None)

# phase / attempt -> when it began, for the duration log lines
_since: Dict[str, float] = {}


def fmt_elapsed(seconds: float) -> str:
    seconds = max(0.0, float(seconds))
    m, s = divmod(int(seconds), 60)
    if m == 0:
        return f"{s}s"
    h, m = divmod(m, 60)
    if h == 0:
        return f"{m}m {s}s"
    return f"{h}h {m}m {s}s"


def _log(event: str, **fields: Any) -> None:
    extras = " ".join(f"{k}={v}" for k, v in fields.items() if v is not None and v != "")
    if extras:
        RUN_LOG.info("%s | %s", event, extras)
    else:
        RUN_LOG.info("%s", event)


def log_event(event: str, **fields: Any) -> None:
    """Run log entry tagged with the current phase."""
    with PROGRESS_LOCK:
        phase = PROGRESS["phase"]
    _log(event, phase=phase, **fields)


def _save_locked() -> None:
    global _state_mtime
    tmp = STATE_FILE.with_name(STATE_FILE.name + ".tmp")
    try:
        STATE_FILE.parent.mkdir(parents=True, exist_ok=True)
        tmp.write_text(json.dumps(PROGRESS, ensure_ascii=False), encoding="utf-8")
        tmp.replace(STATE_FILE)
        _state_mtime = STATE_FILE.stat().st_mtime
    except OSError:
        pass  # state file is best effort; the in-process dict stays authoritative


def _refresh_locked(force: bool = False) -> None:
    """Pick up a state file written by another process since our last save."""
    global _state_mtime
    try:
        mtime = STATE_FILE.stat().st_mtime
        if not force and mtime <= _state_mtime:
            return
        data = json.loads(STATE_FILE.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return
    if isinstance(data, dict):
        PROGRESS.update({k: data[k] for k in PROGRESS if k in data})
        _state_mtime = mtime


def _tick_locked() -> None:
    started = PROGRESS.get("started")
    if started is not None and not PROGRESS["done"]:
        PROGRESS["elapsed"] = time.time() - float(started)


def _finish_locked(key: str, now: float) -> None:
    began = _since.pop(key, None)
    if began is not None:
        _log(f"{key.capitalize()} finished", **{key: PROGRESS[key]}, duration=f"{now - began:.2f}s")


def _switch_locked(key: str, value: str) -> None:
    if value == PROGRESS[key]:
        return
    now = time.time()
    _finish_locked(key, now)
    PROGRESS[key] = value
    if value:
        _since[key] = now
        _log(f"{key.capitalize()} started", **{key: value}, grid=PROGRESS["grid"])


def _update(**fields: Any) -> None:
    with PROGRESS_LOCK:
        PROGRESS.update(fields)
        _tick_locked()
        _save_locked()


def begin_run() -> int:
    """Forget the previous run, start the clock and return the new run id."""
    with PROGRESS_LOCK:
        now = time.time()
        for key in ("attempt", "phase"):
            _finish_locked(key, now)
        run_id = int(PROGRESS.get("run_id") or 0) + 1
        PROGRESS.update(_FRESH, status="Solving", run_id=run_id, started=now)
        _log("Run started", run_id=run_id)
        _save_locked()
    return run_id


def set_phase(name: str) -> None:
    with PROGRESS_LOCK:
        _switch_locked("phase", name or "")
        _tick_locked()
        _save_locked()


def set_attempt(engine: str) -> None:
    with PROGRESS_LOCK:
        _switch_locked("attempt", engine or "")
        _save_locked()


def set_grid(label: str) -> None:
    _update(grid=label or "")


def set_tile_count(n: int) -> None:
    _update(tile_count=max(0, int(n)))


def set_progress_pct(pct: float) -> None:
    _update(percent=max(0.0, min(100.0, float(pct))))


def set_best_placed(n: int) -> None:
    with PROGRESS_LOCK:
        PROGRESS["best_placed"] = max(int(n), int(PROGRESS["best_placed"]))
        _save_locked()


def set_result_url(url: str) -> None:
    _update(result_url=url or "")


def set_done(ok: bool, *, reason: Any = None) -> None:
    """Close the run as Solved or Error; ``reason`` lands in ``message``."""
    with PROGRESS_LOCK:
        _tick_locked()
        now = time.time()
        for key in ("attempt", "phase"):
            _finish_locked(key, now)
        PROGRESS.update(
            status="Solved" if ok else "Error",
            ok=bool(ok),
            done=True,
            percent=100.0,
            message="" if reason is None else str(reason),
        )
        _log(
            "Run finished",
            run_id=PROGRESS["run_id"],
            ok=PROGRESS["ok"],
            duration=f"{PROGRESS['elapsed']:.2f}s",
            best_placed=PROGRESS["best_placed"],
            tiles=PROGRESS["tile_count"],
            message=PROGRESS["message"],
        )
        _save_locked()


def snapshot() -> Dict[str, Any]:
    with PROGRESS_LOCK:
        _refresh_locked()
        _tick_locked()
        out = {k: v for k, v in PROGRESS.items() if k != "started"}
    out["elapsed_str"] = fmt_elapsed(out["elapsed"])
    return out


with PROGRESS_LOCK:
    _refresh_locked(force=True)
