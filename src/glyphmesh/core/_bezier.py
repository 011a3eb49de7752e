"""Internal Bezier curve flattening algorithms.

This is an internal module containing helper functions for the curve
flattener. Not intended for public use.

Curves are subdivided with De Casteljau's algorithm on an explicit work
stack; every entry carries its depth so pathological control points cannot
recurse without bound.
"""

from glyphmesh.core.geometry import distance_to_segment
from glyphmesh.domain import Point

_Coords = list[tuple[float, float]]


def _is_flat(ctrl: _Coords, tolerance: float) -> bool:
    """All inner control points lie within tolerance of the chord."""
    x0, y0 = ctrl[0]
    x1, y1 = ctrl[-1]
    for cx, cy in ctrl[1:-1]:
        if distance_to_segment(cx, cy, x0, y0, x1, y1) > tolerance:
            return False
    return True


def _split(ctrl: _Coords) -> tuple[_Coords, _Coords]:
    """Split a Bezier curve of any degree at t=0.5."""
    left = [ctrl[0]]
    right = [ctrl[-1]]
    level = ctrl
    while len(level) > 1:
        level = [
            ((ax + bx) / 2, (ay + by) / 2)
            for (ax, ay), (bx, by) in zip(level, level[1:])
        ]
        left.append(level[0])
        right.append(level[-1])
    right.reverse()
    return left, right


def flatten_bezier(points: list[Point], tolerance: float, max_depth: int) -> list[Point]:
    """Approximate a Bezier curve by a polyline.

    Because a Bezier curve lies inside the convex hull of its control points,
    a piece whose control points are all within ``tolerance`` of its chord
    deviates from that chord by at most ``tolerance``.

    Args:
        points: Control points, first and last on the curve
        tolerance: Maximum distance from true curve
        max_depth: Subdivision depth after which a piece is emitted as is

    Returns:
        Polyline from the first to the last control point, both included
    """
    out = [points[0]]
    stack: list[tuple[_Coords, int]] = [([p.to_tuple() for p in points], 0)]

    while stack:
        ctrl, depth = stack.pop()
        if depth >= max_depth or _is_flat(ctrl, tolerance):
            x, y = ctrl[-1]
            out.append(Point(x, y))
            continue

        left, right = _split(ctrl)
        # Right half is pushed first so the left half is emitted first
        stack.append((right, depth + 1))
        stack.append((left, depth + 1))

    # Keep the exact endpoint rather than the value rebuilt by subdivision
    out[-1] = points[-1]
    return out
