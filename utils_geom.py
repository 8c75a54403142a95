# utils_geom.py

from PyQt5.QtCore import QPointF
from typing import Tuple, Union
import math
import random

PARALLEL_EPS = 1e-10

PointLike = Union[QPointF, Tuple[float, float]]


def to_point(p: PointLike) -> QPointF:
    if isinstance(p, QPointF):
        return QPointF(p.x(), p.y())
    x, y = p  # type: ignore[misc]
    return QPointF(float(x), float(y))

def v_dist(a: QPointF, b: QPointF) -> float:
    return math.hypot(a.x() - b.x(), a.y() - b.y())

def point_in_circle(p: QPointF, center: QPointF, radius: float) -> bool:
    return v_dist(p, center) <= radius

def clamp(value: float, lo: float, hi: float) -> float:
    return min(max(value, lo), hi)

def clamp_point(p: QPointF, extent: QPointF, inset: float) -> QPointF:
    """Clamp each axis of p into [inset, extent - inset]."""
    return QPointF(
        clamp(p.x(), inset, extent.x() - inset),
        clamp(p.y(), inset, extent.y() - inset),
    )

def segments_intersect(p1: QPointF, p2: QPointF, p3: QPointF, p4: QPointF) -> bool:
    """
    Parametric test for segments p1p2 and p3p4.
    Parallel or collinear pairs never intersect; touching at an endpoint does.
    """
    denom = (p4.y() - p3.y()) * (p2.x() - p1.x()) - (p4.x() - p3.x()) * (p2.y() - p1.y())
    if abs(denom) < PARALLEL_EPS:
        return False
    ua = ((p4.x() - p3.x()) * (p1.y() - p3.y()) - (p4.y() - p3.y()) * (p1.x() - p3.x())) / denom
    ub = ((p2.x() - p1.x()) * (p1.y() - p3.y()) - (p2.y() - p1.y()) * (p1.x() - p3.x())) / denom
    return 0.0 <= ua <= 1.0 and 0.0 <= ub <= 1.0

def point_segment_distance(p: QPointF, a: QPointF, b: QPointF) -> float:
    ax, ay = a.x(), a.y()
    abx, aby = (b.x() - ax), (b.y() - ay)
    denom = abx * abx + aby * aby
    if denom <= 1e-18:
        return math.hypot(p.x() - ax, p.y() - ay)
    t = ((p.x() - ax) * abx + (p.y() - ay) * aby) / denom
    t = 0.0 if t < 0.0 else (1.0 if t > 1.0 else t)
    return math.hypot(p.x() - (ax + t * abx), p.y() - (ay + t * aby))

def min_distance_to(p: QPointF, others) -> float:
    best = math.inf
    for q in others:
        d = v_dist(p, q)
        if d < best:
            best = d
    return best

def random_position_distributed(rng: random.Random, extent: QPointF, margin: float = 50.0) -> QPointF:
    """
    Uniform point inside a uniformly chosen cell of an approximately square
    grid laid over the playable area (cell count ~ area / margin^2).
    """
    w = extent.x() - 2 * margin
    h = extent.y() - 2 * margin
    if w <= 0.0 or h <= 0.0 or margin <= 0.0:
        return QPointF(extent.x() * 0.5, extent.y() * 0.5)
    cols = max(1, int(math.floor(math.sqrt(w * h / (margin * margin)))))
    rows = max(1, int(math.floor(h / margin)))
    cell_w = w / cols
    cell_h = h / rows
    col = rng.randrange(cols)
    row = rng.randrange(rows)
    return QPointF(
        margin + col * cell_w + rng.random() * cell_w,
        margin + row * cell_h + rng.random() * cell_h,
    )

def point_on_circle(center: QPointF, radius: float, theta_rad: float) -> QPointF:
    return QPointF(center.x() + radius * math.cos(theta_rad),
                   center.y() + radius * math.sin(theta_rad))
