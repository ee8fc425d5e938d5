from typing import Optional, Set, Tuple

from config import CFG
from models import Rows
from solver.motif import MotifScan

PALETTE = {
    "marked": "rgb(40,70,160)",
    "unmarked": "rgb(225,235,245)",
    "motif": "rgb(200,60,40)",
}


def render_image(image: Rows, scan: Optional[MotifScan] = None, *, scale: int = 8):
    """SVG of the composite; motif cells are coloured when a scan is given.

    With a scan the image is drawn in the scan's orientation, since that is
    where the match coordinates live.
    """
    if scan is not None:
        image = scan.image
    motif_cells: Set[Tuple[int, int]] = scan.covered_cells() if scan is not None else set()

    height = len(image)
    width = len(image[0]) if image else 0
    svg_w = width * scale + 2
    svg_h = height * scale + 2

    rects = []
    for r, row in enumerate(image):
        for c, ch in enumerate(row):
            if (r, c) in motif_cells:
                fill = PALETTE["motif"]
            elif ch == CFG.MARKED:
                fill = PALETTE["marked"]
            else:
                fill = PALETTE["unmarked"]
            rects.append(
                f'<rect x="{c * scale + 1}" y="{r * scale + 1}" width="{scale}" height="{scale}" fill="{fill}"/>'
            )
    frame = f'<rect x="0" y="0" width="{svg_w}" height="{svg_h}" fill="none" stroke="black" stroke-width="1"/>'
    svg = (
        f'<svg class="image-svg" xmlns="http://www.w3.org/2000/svg" '
        f'width="{svg_w}" height="{svg_h}" '
        f'viewBox="0 0 {svg_w} {svg_h}" preserveAspectRatio="xMinYMin meet">'
        f'{frame}{"".join(rects)}</svg>'
    )

    labels = {"marked": "marked cell", "unmarked": "empty cell"}
    if scan is not None:
        labels["motif"] = f"motif cell ({scan.count} found, {scan.orientation.label})"
    legend = "".join(
        f"<li><span class='swatch' style='background:{PALETTE[k]}'></span>{text}</li>"
        for k, text in labels.items()
    )
    return svg, legend
