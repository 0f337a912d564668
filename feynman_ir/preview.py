"""Raster preview of a diagram drawn with matplotlib.

Strokes come from :func:`feynman_ir.paths.build_polyline` so the preview
matches the editor canvas; label text is handed to matplotlib's mathtext.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
from matplotlib.patches import Circle, Ellipse as EllipsePatch, Polygon  # noqa: E402

from .config import StrokeConfig, get_stroke_config  # noqa: E402
from .ir import Diagram  # noqa: E402
from .paths import Arrowhead, CrossTicks, build_polyline, dash_pattern, markers_for_edge  # noqa: E402

logger = logging.getLogger(__name__)

ELLIPSE_FILL = "#e5e5e5"
MARGIN = 20.0


def _hex(color) -> str:
    return "#{:02x}{:02x}{:02x}".format(*color)


def render_diagram(diagram: Diagram, ax=None, config: Optional[StrokeConfig] = None):
    """Draw ``diagram`` on ``ax`` (a new figure when omitted) and return the axes."""

    cfg = config or get_stroke_config()
    if ax is None:
        _, ax = plt.subplots(figsize=(6, 4))

    xs, ys = [], []

    for ellipse in diagram.ellipses.values():
        ax.add_patch(
            EllipsePatch(
                ellipse.center,
                2 * ellipse.rx,
                2 * ellipse.ry,
                facecolor=ELLIPSE_FILL,
                edgecolor=_hex(ellipse.color),
                linewidth=ellipse.stroke_width,
            )
        )
        xs.extend([ellipse.center[0] - ellipse.rx, ellipse.center[0] + ellipse.rx])
        ys.extend([ellipse.center[1] - ellipse.ry, ellipse.center[1] + ellipse.ry])

    for edge in diagram.edges.values():
        color = _hex(edge.style.color)
        polyline = build_polyline(edge, cfg)
        (line,) = ax.plot(polyline[:, 0], polyline[:, 1], color=color, linewidth=edge.style.stroke_width)
        dashes = dash_pattern(edge.style.stroke_kind)
        if dashes is not None:
            line.set_dashes(dashes)
        xs.extend(polyline[:, 0].tolist())
        ys.extend(polyline[:, 1].tolist())
        for marker in markers_for_edge(edge, cfg):
            if isinstance(marker, Arrowhead):
                ax.add_patch(Polygon(marker.polygon, closed=True, facecolor=color, edgecolor=color))
            elif isinstance(marker, CrossTicks):
                for a, b in marker.segments:
                    ax.plot([a[0], b[0]], [a[1], b[1]], color=color, linewidth=edge.style.stroke_width)

    for point in diagram.points.values():
        ax.add_patch(Circle(point.position, point.radius, color="black"))
        xs.append(point.position[0])
        ys.append(point.position[1])

    for label in diagram.labels.values():
        x, y = diagram.resolve_label_position(label)
        ax.text(x, y, f"${label.text}$" if label.text else "", ha="center", va="center")
        xs.append(x)
        ys.append(y)

    if xs:
        ax.set_xlim(min(xs) - MARGIN, max(xs) + MARGIN)
        # editor space grows downwards
        ax.set_ylim(max(ys) + MARGIN, min(ys) - MARGIN)
    ax.set_aspect("equal", adjustable="datalim")
    ax.set_axis_off()
    return ax


def save_png(diagram: Diagram, path: Union[str, Path], dpi: int = 150) -> Path:
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    fig, ax = plt.subplots(figsize=(6, 4))
    try:
        render_diagram(diagram, ax)
        fig.savefig(output, dpi=dpi)
    finally:
        plt.close(fig)
    logger.info("Wrote preview to %s", output)
    return output
