from __future__ import annotations

import math
from typing import Sequence, Tuple

import numpy as np

Vec2 = Tuple[float, float]


def vec_add(a: Vec2, b: Vec2) -> Vec2:
    return a[0] + b[0], a[1] + b[1]


def vec_sub(a: Vec2, b: Vec2) -> Vec2:
    return a[0] - b[0], a[1] - b[1]


def vec_scale(v: Vec2, k: float) -> Vec2:
    return v[0] * k, v[1] * k


def norm(v: Vec2) -> float:
    return math.hypot(v[0], v[1])


def rotate90(v: Vec2) -> Vec2:
    return -v[1], v[0]


def normalize(v: Vec2, fallback: Vec2 = (1.0, 0.0), eps: float = 1e-12) -> Vec2:
    """Return ``v`` scaled to unit length, or ``fallback`` when ``v`` is degenerate."""

    length = norm(v)
    if length <= eps:
        return fallback
    return v[0] / length, v[1] / length


def lerp(a: Vec2, b: Vec2, t: float) -> Vec2:
    # (1 - t) * a + t * b keeps both endpoints bit-exact
    u = 1.0 - t
    return u * a[0] + t * b[0], u * a[1] + t * b[1]


def evaluate_cubic(p0: Vec2, p1: Vec2, p2: Vec2, p3: Vec2, t: float) -> Vec2:
    u = 1.0 - t
    uu = u * u
    tt = t * t
    a = uu * u
    b = 3.0 * uu * t
    c = 3.0 * u * tt
    d = tt * t
    return (
        a * p0[0] + b * p1[0] + c * p2[0] + d * p3[0],
        a * p0[1] + b * p1[1] + c * p2[1] + d * p3[1],
    )


def tangent_cubic(p0: Vec2, p1: Vec2, p2: Vec2, p3: Vec2, t: float) -> Vec2:
    """Derivative of the cubic at ``t``. Not normalized; may be (0, 0)."""

    u = 1.0 - t
    a = 3.0 * u * u
    b = 6.0 * u * t
    c = 3.0 * t * t
    return (
        a * (p1[0] - p0[0]) + b * (p2[0] - p1[0]) + c * (p3[0] - p2[0]),
        a * (p1[1] - p0[1]) + b * (p2[1] - p1[1]) + c * (p3[1] - p2[1]),
    )


def _bernstein(ts: np.ndarray) -> np.ndarray:
    u = 1.0 - ts
    return np.stack([u ** 3, 3.0 * u * u * ts, 3.0 * u * ts * ts, ts ** 3], axis=1)


def sample_cubic(p0: Vec2, p1: Vec2, p2: Vec2, p3: Vec2, ts: np.ndarray) -> np.ndarray:
    """Evaluate the cubic at every parameter in ``ts``; returns an ``(N, 2)`` array."""

    ctrl = np.array([p0, p1, p2, p3], dtype=float)
    return _bernstein(np.asarray(ts, dtype=float)) @ ctrl


def sample_cubic_tangents(p0: Vec2, p1: Vec2, p2: Vec2, p3: Vec2, ts: np.ndarray) -> np.ndarray:
    ts = np.asarray(ts, dtype=float)
    u = 1.0 - ts
    d0 = np.subtract(p1, p0, dtype=float)
    d1 = np.subtract(p2, p1, dtype=float)
    d2 = np.subtract(p3, p2, dtype=float)
    return (
        (3.0 * u * u)[:, None] * d0
        + (6.0 * u * ts)[:, None] * d1
        + (3.0 * ts * ts)[:, None] * d2
    )


def polyline_length(points: Sequence[Vec2]) -> float:
    arr = np.asarray(points, dtype=float)
    if len(arr) < 2:
        return 0.0
    return float(np.sum(np.hypot(*np.diff(arr, axis=0).T)))
