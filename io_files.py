"""Helpers for writing solver outputs to disk."""

from __future__ import annotations

import os
from typing import Dict, Sequence, Tuple

from config import CFG
from models import Rows, Variant
from solver.compositor import image_to_text


# output kind -> (CFG attribute, fallback file name)
OUTPUTS: Dict[str, Tuple[str, str]] = {
    "placement": ("PLACEMENT_OUT", "placement.txt"),
    "image": ("IMAGE_OUT", "image.txt"),
    "html": ("IMAGE_HTML", "image_view.html"),
}


def output_path(kind: str, base_dir: str) -> str:
    """Where the ``kind`` artifact lives for the current configuration."""

    attr, fallback = OUTPUTS[kind]
    name = (getattr(CFG, attr) or "").strip() or fallback
    if os.path.isabs(name):
        return name
    return os.path.join(base_dir, name)


def write_placement(placement: Sequence[Variant], geom: int, base_dir: str) -> str:
    """Write one ``<id> <orientation> @ (row,col)`` line per placed tile."""

    path = output_path("placement", base_dir)
    os.makedirs(os.path.dirname(path), exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        if not placement:
            f.write("No solution\n")
        else:
            for pos, v in enumerate(placement):
                row, col = divmod(pos, geom)
                f.write(f"{v.tile_id} {v.orientation.label} @ ({row},{col})\n")
    return path


def write_image(image: Rows, base_dir: str) -> str:
    """Write the composite bitmap, one text row per line."""

    path = output_path("image", base_dir)
    os.makedirs(os.path.dirname(path), exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        f.write(image_to_text(image))
    return path


def write_image_view_html(svg: str, legend_html: str, base_dir: str, *, title: str = "Image View") -> str:
    """Write the rendered SVG/legend preview to the configured HTML file."""

    path = output_path("html", base_dir)
    os.makedirs(os.path.dirname(path), exist_ok=True)

    with open(path, "w", encoding="utf-8") as vf:
        vf.write(
            f"""<!doctype html>
<html><head><meta charset='utf-8'><title>{title}</title></head>
<body>
<h1>{title}</h1>
<section class='card'>{svg}</section>
<section class='card'><h3>Legend</h3><ul>{legend_html}</ul></section>
</body></html>"""
        )
    return path


def remove_output(kind: str, base_dir: str) -> None:
    """Delete a stale artifact so it cannot be served for a later run."""

    try:
        os.remove(output_path(kind, base_dir))
    except FileNotFoundError:
        pass


__all__ = ["OUTPUTS", "output_path", "remove_output", "write_placement", "write_image", "write_image_view_html"]
