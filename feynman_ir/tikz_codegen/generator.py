"""Diagram IR -> TikZ subset serializer.

The output is the canonical text form of a diagram: a complete
``tikzpicture`` whose statements the parser maps back to the same IR.
Decorations are written declaratively (``snake`` / ``coil``); the sampled
polylines of :mod:`feynman_ir.paths` never leak into the text.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from .utils import (
    format_coord,
    format_length,
    format_line_width,
    format_number,
    strip_math_delimiters,
    tikz_color,
)
from ..config import CodecConfig, get_codec_config
from ..ir import Diagram, Edge, EdgeStyle, Ellipse, Label, Point

logger = logging.getLogger(__name__)

HEADER_LINES = (
    "% Auto-generated by feynman-ir",
    "% Editable subset: \\draw / \\fill / \\node",
    "% Requires \\usetikzlibrary{decorations.pathmorphing,decorations.markings,arrows.meta}",
)
BEGIN_PICTURE = "\\begin{tikzpicture}"
END_PICTURE = "\\end{tikzpicture}"
INDENT = "  "

STROKE_ATTRS = {
    "solid": [],
    "dashed": ["dashed"],
    "dotted": ["dotted"],
    "wavy": ["decorate", "decoration={snake, segment length=10pt, amplitude=2pt}"],
    "spring": ["decorate", "decoration={coil, segment length=5pt, amplitude=3pt}"],
}

# arrow styles whose native TikZ rendering does not survive a round trip
COMMENTED_ARROWS = ("mid-forward", "mid-backward", "mid-cross")

_CROSS_MARK = (
    "\\pgfpathmoveto{\\pgfpoint{-2pt}{-2pt}}\\pgfpathlineto{\\pgfpoint{2pt}{2pt}}"
    "\\pgfpathmoveto{\\pgfpoint{-2pt}{2pt}}\\pgfpathlineto{\\pgfpoint{2pt}{-2pt}}"
    "\\pgfusepath{stroke}"
)


def _mid_mark(body: str) -> str:
    return f"postaction={{decorate, decoration={{markings, mark=at position 0.5 with {{{body}}}}}}}"


def arrow_attrs(arrow: str, tip: str = "Stealth") -> List[str]:
    if arrow == "forward":
        return [f"-{{{tip}}}"]
    if arrow == "backward":
        return [f"{{{tip}}}-"]
    if arrow == "both":
        return [f"{{{tip}}}-{{{tip}}}"]
    if arrow == "mid-forward":
        return [_mid_mark(f"\\arrow{{{tip}}}")]
    if arrow == "mid-backward":
        return [_mid_mark(f"\\arrow{{{tip}}}[reversed]")]
    if arrow == "mid-cross":
        return [_mid_mark(_CROSS_MARK)]
    return []


def line_style_attrs(style: EdgeStyle, config: Optional[CodecConfig] = None) -> str:
    cfg = config or get_codec_config()
    parts = [
        f"draw={tikz_color(style.color)}",
        f"line width={format_line_width(style.stroke_width, cfg)}",
    ]
    parts.extend(STROKE_ATTRS.get(style.stroke_kind, []))
    parts.extend(arrow_attrs(style.arrow, cfg.tip_name))
    return ", ".join(parts)


def format_point(point: Point, config: Optional[CodecConfig] = None) -> str:
    cfg = config or get_codec_config()
    radius = max(cfg.min_point_radius, point.radius / cfg.scale)
    return f"\\fill {format_coord(point.position, cfg)} circle ({format_number(radius, cfg)});"


def format_edge(edge: Edge, config: Optional[CodecConfig] = None) -> str:
    cfg = config or get_codec_config()
    start = format_coord(edge.start, cfg)
    end = format_coord(edge.end, cfg)
    if edge.kind == "curve" and edge.control is not None:
        path = f"{start} .. controls {format_coord(edge.control, cfg)} .. {end}"
    else:
        path = f"{start} -- {end}"
    line = f"\\draw[{line_style_attrs(edge.style, cfg)}] {path};"
    if edge.style.arrow in COMMENTED_ARROWS:
        line += f" % {cfg.arrow_comment_key}: {edge.style.arrow}"
    return line


def format_ellipse(ellipse: Ellipse, config: Optional[CodecConfig] = None) -> str:
    cfg = config or get_codec_config()
    attrs = ", ".join(
        [
            f"fill={cfg.ellipse_fill}",
            f"draw={tikz_color(ellipse.color)}",
            f"line width={format_line_width(ellipse.stroke_width, cfg)}",
        ]
    )
    radii = f"{format_length(ellipse.rx, cfg)} and {format_length(ellipse.ry, cfg)}"
    return f"\\draw[{attrs}] {format_coord(ellipse.center, cfg)} ellipse ({radii});"


def format_label(label: Label, diagram: Optional[Diagram] = None, config: Optional[CodecConfig] = None) -> str:
    cfg = config or get_codec_config()
    position = diagram.resolve_label_position(label) if diagram is not None else label.position
    text = strip_math_delimiters(label.text)
    return f"\\node at {format_coord(position, cfg)} {{${text}$}};"


def generate_tikz_code(diagram: Diagram, config: Optional[CodecConfig] = None) -> str:
    """Return the statement lines of ``diagram`` (no document wrapper)."""

    cfg = config or get_codec_config()
    lines: List[str] = []
    lines.extend(format_point(p, cfg) for p in diagram.points.values())
    lines.extend(format_edge(e, cfg) for e in diagram.edges.values())
    lines.extend(format_ellipse(el, cfg) for el in diagram.ellipses.values())
    lines.extend(format_label(lb, diagram, cfg) for lb in diagram.labels.values())
    logger.debug(
        "Serialized %d point(s), %d edge(s), %d ellipse(s), %d label(s)",
        len(diagram.points),
        len(diagram.edges),
        len(diagram.ellipses),
        len(diagram.labels),
    )
    return "\n".join(INDENT + line for line in lines)


def generate_tikz_document(diagram: Diagram, config: Optional[CodecConfig] = None) -> str:
    """Serialize ``diagram`` into a complete, self-contained TikZ document."""

    body = generate_tikz_code(diagram, config)
    parts = list(HEADER_LINES) + [BEGIN_PICTURE]
    if body:
        parts.append(body)
    parts.append(END_PICTURE)
    return "\n".join(parts) + "\n"
