"""
Planar vector geometry helpers.
"""

import math
from typing import Optional, Sequence, Tuple

import numpy as np


Point = Tuple[float, float]


def signed_angle(heading: Sequence[float], target: Sequence[float]) -> Optional[float]:
    """
    Signed angle from heading to target, in radians.

    Positive angles are counter-clockwise. Result lies in [-pi, pi].

    Returns:
        The angle, or None when either vector is zero (no direction defined)
    """
    h = np.asarray(heading, dtype=float)
    t = np.asarray(target, dtype=float)
    if not h.any() or not t.any():
        return None
    cross = h[0] * t[1] - h[1] * t[0]
    dot = float(np.dot(h, t))
    return float(np.arctan2(cross, dot))


def unit_vector(angle: float) -> Point:
    """Unit vector pointing along angle (radians)"""
    return math.cos(angle), math.sin(angle)


def normalize_angle(angle: float) -> float:
    """Wrap angle into [-pi, pi)"""
    return (angle + math.pi) % (2.0 * math.pi) - math.pi


def _orientation(a: np.ndarray, b: np.ndarray, c: np.ndarray) -> float:
    return float((b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0]))


def _on_segment(a: np.ndarray, b: np.ndarray, p: np.ndarray) -> bool:
    return bool(
        min(a[0], b[0]) <= p[0] <= max(a[0], b[0])
        and min(a[1], b[1]) <= p[1] <= max(a[1], b[1])
    )


def segments_intersect(p1: Point, p2: Point, q1: Point, q2: Point) -> bool:
    """
    Check whether segment p1-p2 intersects segment q1-q2.

    Touching endpoints and collinear overlap count as intersections.
    """
    a, b, c, d = (np.asarray(p, dtype=float) for p in (p1, p2, q1, q2))

    d1 = _orientation(c, d, a)
    d2 = _orientation(c, d, b)
    d3 = _orientation(a, b, c)
    d4 = _orientation(a, b, d)

    if ((d1 > 0 > d2) or (d1 < 0 < d2)) and ((d3 > 0 > d4) or (d3 < 0 < d4)):
        return True

    # Collinear cases
    if d1 == 0 and _on_segment(c, d, a):
        return True
    if d2 == 0 and _on_segment(c, d, b):
        return True
    if d3 == 0 and _on_segment(a, b, c):
        return True
    if d4 == 0 and _on_segment(a, b, d):
        return True
    return False
