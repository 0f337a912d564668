"""Polyline generators for edge strokes and marker geometry.

Every edge is treated as a cubic Bezier: a straight edge is the degenerate
chord, a curve edge uses its single control as both inner control points.
The same ``point_at`` / ``angle_at`` queries therefore serve marker placement,
label anchors and the decorated (photon / gluon) stroke generators.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, List, Optional, Tuple, Union

import numpy as np

from .config import StrokeConfig, get_stroke_config
from .geometry import (
    Vec2,
    evaluate_cubic,
    lerp,
    norm,
    normalize,
    rotate90,
    sample_cubic,
    sample_cubic_tangents,
    tangent_cubic,
    vec_sub,
)
from .logging_utils import apply_debug_logging

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .ir import Edge

logger = logging.getLogger(__name__)

ANCHOR_T = {"start": 0.0, "mid": 0.5, "end": 1.0}

_EPS = 1e-12


def _is_curve(edge: "Edge") -> bool:
    return edge.kind == "curve" and edge.control is not None


def _cubic(edge: "Edge") -> Tuple[Vec2, Vec2, Vec2, Vec2]:
    c = edge.control
    return edge.start, c, c, edge.end


def anchor_t(anchor: str) -> float:
    try:
        return ANCHOR_T[anchor]
    except KeyError:
        raise ValueError(f"unknown anchor {anchor!r}") from None


def point_at(edge: "Edge", t: float) -> Vec2:
    if _is_curve(edge):
        return evaluate_cubic(*_cubic(edge), t)
    return lerp(edge.start, edge.end, t)


def tangent_at(edge: "Edge", t: float) -> Vec2:
    """Unit tangent at ``t``; a vanishing curve tangent falls back to the chord."""

    chord = normalize(vec_sub(edge.end, edge.start))
    if _is_curve(edge):
        return normalize(tangent_cubic(*_cubic(edge), t), fallback=chord)
    return chord


def angle_at(edge: "Edge", t: float) -> float:
    tx, ty = tangent_at(edge, t)
    return math.atan2(ty, tx)


def default_curve_control(start: Vec2, end: Vec2) -> Vec2:
    """Control point bowing a new curve off its chord."""

    dx, dy = vec_sub(end, start)
    length = math.hypot(dx, dy) or 1.0
    nx, ny = -dy / length, dx / length
    offset = min(60.0, max(20.0, length * 0.2))
    mx = (start[0] + end[0]) / 2.0
    my = (start[1] + end[1]) / 2.0
    return mx + nx * offset, my + ny * offset


def dash_pattern(stroke_kind: str) -> Optional[Tuple[float, float]]:
    if stroke_kind == "dashed":
        return (8.0, 6.0)
    if stroke_kind == "dotted":
        return (2.0, 6.0)
    return None


# ---------------------------------------------------------------------------
# stroke generators

def _pin_ends(points: np.ndarray, start: Vec2, end: Vec2) -> np.ndarray:
    points[0] = start
    points[-1] = end
    return points


def _chord(start: Vec2, end: Vec2) -> np.ndarray:
    return np.array([start, end], dtype=float)


def plain_path(start: Vec2, end: Vec2, control: Optional[Vec2] = None, *, samples: int = 64) -> np.ndarray:
    if control is None:
        return _chord(start, end)
    ts = np.linspace(0.0, 1.0, max(2, samples) + 1)
    return _pin_ends(sample_cubic(start, control, control, end, ts), start, end)


def _decorate_straight(
    start: Vec2,
    end: Vec2,
    *,
    amplitude: float,
    wavelength: float,
    step: float,
    min_steps: int,
    min_length: float,
    normal_wave: Callable[[np.ndarray], np.ndarray],
    tangential_ratio: float,
) -> np.ndarray:
    length = norm(vec_sub(end, start))
    if length < min_length:
        return _chord(start, end)
    ux, uy = vec_sub(end, start)
    ux, uy = ux / length, uy / length
    nx, ny = rotate90((ux, uy))

    steps = max(min_steps, int(length // step))
    k = 2.0 * math.pi / wavelength
    s = np.linspace(0.0, length, steps + 1)
    n_off = amplitude * normal_wave(k * s)
    along = s + tangential_ratio * amplitude * np.sin(k * s)

    points = np.column_stack(
        (start[0] + ux * along + nx * n_off, start[1] + uy * along + ny * n_off)
    )
    return _pin_ends(points, start, end)


def _decorate_curve(
    start: Vec2,
    control: Vec2,
    end: Vec2,
    *,
    amplitude: float,
    wavelength: float,
    samples: int,
    min_length: float,
    normal_wave: Callable[[np.ndarray], np.ndarray],
    tangential_ratio: float,
) -> np.ndarray:
    ts = np.linspace(0.0, 1.0, samples + 1)
    base = sample_cubic(start, control, control, end, ts)
    seg = np.hypot(*np.diff(base, axis=0).T)
    if float(seg.sum()) < min_length:
        return _chord(start, end)
    # arc length of the sampled polyline; uniform in t, not in s
    s = np.concatenate(([0.0], np.cumsum(seg)))

    tangents = sample_cubic_tangents(start, control, control, end, ts)
    lengths = np.hypot(tangents[:, 0], tangents[:, 1])
    chord = np.array(normalize(vec_sub(end, start)))
    degenerate = lengths <= _EPS
    units = np.where(
        degenerate[:, None], chord, tangents / np.where(degenerate, 1.0, lengths)[:, None]
    )
    normals = np.column_stack((-units[:, 1], units[:, 0]))

    k = 2.0 * math.pi / wavelength
    n_off = amplitude * normal_wave(k * s)
    t_off = tangential_ratio * amplitude * np.sin(k * s)
    points = base + normals * n_off[:, None] + units * t_off[:, None]
    return _pin_ends(points, start, end)


def wavy_straight(start: Vec2, end: Vec2, config: Optional[StrokeConfig] = None) -> np.ndarray:
    cfg = config or get_stroke_config()
    return _decorate_straight(
        start,
        end,
        amplitude=cfg.wavy_amplitude,
        wavelength=cfg.wavy_wavelength,
        step=cfg.wavy_step,
        min_steps=cfg.wavy_min_steps,
        min_length=cfg.min_decorated_length,
        normal_wave=np.sin,
        tangential_ratio=0.0,
    )


def spring_straight(start: Vec2, end: Vec2, config: Optional[StrokeConfig] = None) -> np.ndarray:
    cfg = config or get_stroke_config()
    return _decorate_straight(
        start,
        end,
        amplitude=cfg.spring_amplitude,
        wavelength=cfg.spring_wavelength,
        step=cfg.spring_step,
        min_steps=cfg.spring_min_steps,
        min_length=cfg.min_decorated_length,
        normal_wave=np.cos,
        tangential_ratio=cfg.spring_tangential_ratio,
    )


def wavy_curve(start: Vec2, control: Vec2, end: Vec2, config: Optional[StrokeConfig] = None) -> np.ndarray:
    cfg = config or get_stroke_config()
    return _decorate_curve(
        start,
        control,
        end,
        amplitude=cfg.wavy_amplitude,
        wavelength=cfg.wavy_wavelength,
        samples=cfg.wavy_curve_samples,
        min_length=cfg.min_decorated_length,
        normal_wave=np.sin,
        tangential_ratio=0.0,
    )


def spring_curve(start: Vec2, control: Vec2, end: Vec2, config: Optional[StrokeConfig] = None) -> np.ndarray:
    cfg = config or get_stroke_config()
    return _decorate_curve(
        start,
        control,
        end,
        amplitude=cfg.spring_amplitude,
        wavelength=cfg.spring_wavelength,
        samples=cfg.spring_curve_samples,
        min_length=cfg.min_decorated_length,
        normal_wave=np.cos,
        tangential_ratio=cfg.spring_tangential_ratio,
    )


def build_polyline(edge: "Edge", config: Optional[StrokeConfig] = None) -> np.ndarray:
    """Return the ``(N, 2)`` polyline drawn for ``edge`` under its stroke kind."""

    cfg = config or get_stroke_config()
    stroke = edge.style.stroke_kind
    if _is_curve(edge):
        if stroke == "wavy":
            return wavy_curve(edge.start, edge.control, edge.end, cfg)
        if stroke == "spring":
            return spring_curve(edge.start, edge.control, edge.end, cfg)
        return plain_path(edge.start, edge.end, edge.control, samples=cfg.plain_curve_samples)
    if stroke == "wavy":
        return wavy_straight(edge.start, edge.end, cfg)
    if stroke == "spring":
        return spring_straight(edge.start, edge.end, cfg)
    return plain_path(edge.start, edge.end)


# ---------------------------------------------------------------------------
# markers

@dataclass(frozen=True)
class Arrowhead:
    """Filled triangle with its tip on the edge."""

    tip: Vec2
    left: Vec2
    right: Vec2

    @property
    def polygon(self) -> List[Vec2]:
        return [self.tip, self.left, self.right]


@dataclass(frozen=True)
class CrossTicks:
    """Two short strokes crossing the edge at +-45 degrees."""

    center: Vec2
    first: Tuple[Vec2, Vec2]
    second: Tuple[Vec2, Vec2]

    @property
    def segments(self) -> List[Tuple[Vec2, Vec2]]:
        return [self.first, self.second]


Marker = Union[Arrowhead, CrossTicks]


def arrowhead(
    tip: Vec2,
    angle: float,
    size: float = 10.0,
    *,
    setback: float = 1.1,
    half_width: float = 0.45,
) -> Arrowhead:
    base_x = tip[0] - math.cos(angle) * size * setback
    base_y = tip[1] - math.sin(angle) * size * setback
    w = size * half_width
    left = (base_x + math.cos(angle + math.pi / 2) * w, base_y + math.sin(angle + math.pi / 2) * w)
    right = (base_x + math.cos(angle - math.pi / 2) * w, base_y + math.sin(angle - math.pi / 2) * w)
    return Arrowhead(tip=tip, left=left, right=right)


def cross_ticks(center: Vec2, angle: float, half_length: float = 6.0) -> CrossTicks:
    def _tick(theta: float) -> Tuple[Vec2, Vec2]:
        dx = math.cos(theta) * half_length
        dy = math.sin(theta) * half_length
        return (center[0] - dx, center[1] - dy), (center[0] + dx, center[1] + dy)

    return CrossTicks(
        center=center,
        first=_tick(angle + math.pi / 4),
        second=_tick(angle - math.pi / 4),
    )


def markers_for_edge(edge: "Edge", config: Optional[StrokeConfig] = None) -> List[Marker]:
    """Marker shapes implied by the edge's arrow style.

    Arrow styles are mutually exclusive, so the result is either empty, one
    or two arrowheads, or a single cross.
    """

    cfg = config or get_stroke_config()
    arrow = edge.style.arrow

    def _head(t: float, reverse: bool) -> Arrowhead:
        angle = angle_at(edge, t) + (math.pi if reverse else 0.0)
        return arrowhead(
            point_at(edge, t),
            angle,
            cfg.arrow_size,
            setback=cfg.arrow_setback,
            half_width=cfg.arrow_half_width,
        )

    if arrow == "none":
        return []
    if arrow == "forward":
        return [_head(1.0, False)]
    if arrow == "backward":
        return [_head(0.0, True)]
    if arrow == "both":
        return [_head(1.0, False), _head(0.0, True)]
    if arrow == "mid-forward":
        return [_head(0.5, False)]
    if arrow == "mid-backward":
        return [_head(0.5, True)]
    if arrow == "mid-cross":
        return [cross_ticks(point_at(edge, 0.5), angle_at(edge, 0.5), cfg.cross_half_length)]
    raise ValueError(f"unknown arrow style {arrow!r}")


apply_debug_logging(globals(), logger=logger)
