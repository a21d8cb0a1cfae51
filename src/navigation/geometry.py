"""
Polyline Geometry

Projection helpers shared by the path trackers.

Conventions:
- X = forward (front of robot)
- Y = left
- Angles are counter-clockwise from X axis, wrapped to (-pi, pi]
"""

import math
from typing import Optional, Sequence, Tuple


Point = Tuple[float, float]

# Segments shorter than this (squared length) are ignored
DEGENERATE_SEG2 = 1e-6
MIN_LOOKAHEAD = 0.1


def normalize_angle(angle: float) -> float:
    """Normalize angle to (-pi, pi]."""
    while angle > math.pi:
        angle -= 2 * math.pi
    while angle <= -math.pi:
        angle += 2 * math.pi
    return angle


def world_to_body(dx: float, dy: float, theta: float) -> Point:
    """Rotate a world-frame offset into the body frame (rotation by -theta)."""
    cos_t = math.cos(-theta)
    sin_t = math.sin(-theta)
    return cos_t * dx - sin_t * dy, sin_t * dx + cos_t * dy


def project_onto_segment(p: Point, a: Point, b: Point) -> Optional[Tuple[float, Point, float]]:
    """
    Clamped projection of p onto segment a-b.

    Returns:
        (t, projection, distance) with t in [0, 1], or None if the
        segment is degenerate
    """
    abx = b[0] - a[0]
    aby = b[1] - a[1]
    ab2 = abx * abx + aby * aby
    if ab2 < DEGENERATE_SEG2:
        return None

    t = ((p[0] - a[0]) * abx + (p[1] - a[1]) * aby) / ab2
    t = max(0.0, min(1.0, t))
    proj = (a[0] + t * abx, a[1] + t * aby)
    dist = math.hypot(p[0] - proj[0], p[1] - proj[1])
    return t, proj, dist


def closest_point_on_path(p: Point, path: Sequence[Point]) -> Tuple[int, float]:
    """
    Find the closest point on a polyline.

    Returns:
        (segment_index, t) of the closest point; (0, 0.0) when the path
        has no usable segment
    """
    best_seg = 0
    best_t = 0.0
    best_dist = math.inf

    for i in range(len(path) - 1):
        res = project_onto_segment(p, path[i], path[i + 1])
        if res is None:
            continue
        t, _, dist = res
        if dist < best_dist:
            best_dist = dist
            best_seg = i
            best_t = t

    return best_seg, best_t


def lookahead_point(p: Point, path: Sequence[Point], lookahead: float) -> Point:
    """
    Point at `lookahead` arc length ahead of the closest point on the path.

    The end of the path is returned when the remaining path is shorter
    than the lookahead distance.
    """
    if len(path) < 2:
        return (p[0], p[1])

    seg, t = closest_point_on_path(p, path)
    remain = max(MIN_LOOKAHEAD, lookahead)

    a, b = path[seg], path[seg + 1]
    cur = (a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t)

    i = seg
    while remain > 0.0 and i + 1 < len(path):
        a, b = path[i], path[i + 1]
        from_pt = (a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t)
        sx = b[0] - from_pt[0]
        sy = b[1] - from_pt[1]
        seg_len = math.hypot(sx, sy)

        if seg_len >= remain:
            if seg_len > 1e-6:
                ux, uy = sx / seg_len, sy / seg_len
            else:
                ux, uy = 0.0, 0.0
            cur = (from_pt[0] + ux * remain, from_pt[1] + uy * remain)
            break

        remain -= seg_len
        i += 1
        t = 0.0
        cur = (b[0], b[1])

    return cur


def lateral_error(p: Point, path: Sequence[Point]) -> float:
    """
    Signed distance from p to the nearest path segment.

    Positive when p is left of the path direction (cross product of the
    segment tangent and the error vector). 0.0 for paths without a usable
    segment.
    """
    if len(path) < 2:
        return 0.0

    best = math.inf
    sign = 1.0

    for i in range(len(path) - 1):
        a, b = path[i], path[i + 1]
        res = project_onto_segment(p, a, b)
        if res is None:
            continue
        _, proj, dist = res

        cross = (b[0] - a[0]) * (p[1] - proj[1]) - (b[1] - a[1]) * (p[0] - proj[0])
        if dist < best:
            best = dist
            sign = 1.0 if cross >= 0.0 else -1.0

    if math.isinf(best):
        return 0.0
    return sign * best
