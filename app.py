# app.py — tile upload, solve, progress polling, downloads
from __future__ import annotations
import os
import time
from typing import Any, Dict, Optional, Tuple

from flask import Flask, abort, request, send_from_directory, jsonify, url_for

from config import CFG
from errors import JigsawError
from io_files import OUTPUTS, output_path, remove_output, write_placement, write_image, write_image_view_html
from render import render_image
from solver.orchestrator import SolveResult, solve_orchestrator

from progress import fmt_elapsed, set_result_url, snapshot as progress_snapshot

BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# LAST_RESULT key naming the file written for each output kind
_FILENAME_KEYS = {
    "placement": "placement_filename",
    "image": "image_filename",
    "html": "html_filename",
}

LAST_RESULT: Dict[str, Any] = {
    "ok": False,
    "reason": "no run yet",
    "geom": 0,
    "tile_count": 0,
    "engine": "",
    "corner_product": None,
    "roughness": None,
    "motif_count": 0,
    "orientation": "",
    "elapsed_str": "0s",
    "placement_filename": "",
    "image_filename": "",
    "html_filename": "",
}

INDEX_HTML = """<!doctype html>
<html><head><meta charset='utf-8'><title>Jigsaw</title></head>
<body>
<h1>Reassemble tiles</h1>
<form method='post' action='/solve'>
<textarea name='tiles' rows='24' cols='40' placeholder='Tile 1234:'></textarea><br>
<label><input type='checkbox' name='part' value='corners'> corners only</label>
<button type='submit'>Solve</button>
</form>
</body></html>"""

app = Flask(__name__)


@app.after_request
def _no_cache_progress(resp):
    if request.path == "/progress3":
        resp.headers["Cache-Control"] = "no-store, max-age=0"
        resp.headers["Pragma"] = "no-cache"
        resp.headers["Expires"] = "0"
    return resp


@app.route("/")
def index():
    return INDEX_HTML


@app.route("/result/latest")
def result_latest():
    return jsonify(LAST_RESULT)


def _request_tiles_and_options() -> Tuple[str, Dict[str, Any]]:
    """Tile text from JSON ``{"tiles": ...}``, a ``tiles`` form field, or the raw body."""
    options: Dict[str, Any] = dict(request.args.to_dict())
    payload = request.get_json(silent=True)
    if isinstance(payload, dict):
        options.update({k: v for k, v in payload.items() if k != "tiles"})
        return str(payload.get("tiles") or ""), options

    if request.form:
        options.update({k: v for k, v in request.form.to_dict().items() if k != "tiles"})
        return request.form.get("tiles", ""), options

    return request.get_data(as_text=True) or "", options


def _result_payload(result: SolveResult, elapsed: float) -> Dict[str, Any]:
    scan = result.scan
    return {
        "ok": True,
        "reason": "",
        "geom": result.geom,
        "tile_count": result.geom * result.geom,
        "engine": result.engine,
        "corner_product": result.corner_product,
        "roughness": result.roughness,
        "motif_count": result.motif_count,
        "orientation": scan.orientation.label if scan is not None else "",
        "elapsed_str": fmt_elapsed(elapsed),
    }


def _write_outputs(result: Optional[SolveResult]) -> Dict[str, str]:
    """Write this run's artifacts and delete any an earlier run left behind.

    Returns the file name per ``LAST_RESULT`` key, blank where nothing was
    written.
    """
    written: Dict[str, str] = {}
    if result is not None:
        written["placement"] = write_placement(result.placement, result.geom, BASE_DIR)
        if result.image is not None:
            written["image"] = write_image(result.image, BASE_DIR)
            svg, legend = render_image(result.image, result.scan)
            written["html"] = write_image_view_html(
                svg, legend, BASE_DIR, title=f"{result.geom} × {result.geom} tiles"
            )
    for kind in OUTPUTS:
        if kind not in written:
            remove_output(kind, BASE_DIR)
    return {key: os.path.basename(written.get(kind, "")) for kind, key in _FILENAME_KEYS.items()}


@app.route("/solve", methods=["POST"])
def solve():
    t0 = time.time()

    text, options = _request_tiles_and_options()
    full = str(options.get("part") or "").strip().lower() != "corners"
    engine: Optional[str] = options.get("engine") or None

    try:
        result = solve_orchestrator(text, full=full, engine=engine)
    except JigsawError as e:
        LAST_RESULT.update({
            "ok": False,
            "reason": f"{type(e).__name__}: {e}",
            "geom": 0,
            "tile_count": 0,
            "engine": engine or CFG.SOLVER,
            "corner_product": None,
            "roughness": None,
            "motif_count": 0,
            "orientation": "",
            "elapsed_str": fmt_elapsed(time.time() - t0),
        })
        LAST_RESULT.update(_write_outputs(None))
        set_result_url(url_for("result_latest"))
        return jsonify(LAST_RESULT), 422

    LAST_RESULT.update(_result_payload(result, time.time() - t0))
    LAST_RESULT.update(_write_outputs(result))
    set_result_url(url_for("result_latest"))
    return jsonify(LAST_RESULT)


def _download(kind: str):
    path = output_path(kind, BASE_DIR)
    if not os.path.isfile(path):
        abort(404)
    return send_from_directory(os.path.dirname(path), os.path.basename(path), as_attachment=True)


@app.route("/download/placement")
def download_placement():
    return _download("placement")


@app.route("/download/image")
def download_image():
    return _download("image")


@app.route("/download/html")
def download_html():
    return _download("html")


@app.route("/progress3")
def progress3():
    return jsonify(progress_snapshot())


if __name__ == "__main__":
    app.run(debug=False)
