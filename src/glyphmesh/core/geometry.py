"""Geometric primitives shared by the classifier and the triangulator.

This module provides core mathematical utilities for:
- Signed area calculation (shoelace formula)
- Orientation of point triples (cross product)
- Point-in-polygon testing (ray casting algorithm)
- Point-in-triangle testing
- Segment intersection
- Point-to-segment distance

Polygon-level functions take lists of Point. The low-level primitives take
raw coordinates so the triangulator can call them in tight loops without
allocating intermediate objects. All functions are pure and stateless.
"""

import math

from glyphmesh.domain import Point


def signed_area(points: list[Point]) -> float:
    """Calculate signed area of a polygon using the shoelace formula.

    The sign of the area indicates winding direction:
    - Positive area: counter-clockwise winding
    - Negative area: clockwise winding

    Args:
        points: List of points forming the polygon boundary

    Returns:
        Signed area in square units. Returns 0.0 for degenerate polygons.

    Examples:
        >>> p1 = Point(0.0, 0.0)
        >>> p2 = Point(1.0, 0.0)
        >>> p3 = Point(1.0, 1.0)
        >>> p4 = Point(0.0, 1.0)
        >>> signed_area([p1, p2, p3, p4])  # CCW square
        1.0
        >>> signed_area([p1, p4, p3, p2])  # CW square
        -1.0
    """
    n = len(points)
    if n < 3:
        return 0.0

    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += points[i].x * points[j].y
        area -= points[j].x * points[i].y

    return area / 2.0


def cross(ax: float, ay: float, bx: float, by: float, cx: float, cy: float) -> float:
    """Z component of (b - a) x (c - a).

    Positive when a, b, c turn counter-clockwise, negative when they turn
    clockwise and zero when they are collinear. Equals twice the signed area
    of triangle abc.
    """
    return (bx - ax) * (cy - ay) - (by - ay) * (cx - ax)


def point_in_polygon(point: Point, polygon: list[Point]) -> bool:
    """Determine if a point is inside a polygon using ray casting algorithm.

    Casts a horizontal ray from the point to the right and counts intersections
    with polygon edges. Odd number of intersections = inside, even = outside.

    Args:
        point: The point to test
        polygon: List of points forming the polygon boundary

    Returns:
        True if point is inside polygon, False otherwise

    Examples:
        >>> square = [Point(0.0, 0.0), Point(2.0, 0.0), Point(2.0, 2.0), Point(0.0, 2.0)]
        >>> point_in_polygon(Point(1.0, 1.0), square)
        True
        >>> point_in_polygon(Point(3.0, 3.0), square)
        False
    """
    n = len(polygon)
    if n < 3:
        return False

    inside = False
    x, y = point.x, point.y
    j = n - 1

    for i in range(n):
        xi, yi = polygon[i].x, polygon[i].y
        xj, yj = polygon[j].x, polygon[j].y

        # Check if ray from point intersects edge (j, i)
        if ((yi > y) != (yj > y)) and (x < (xj - xi) * (y - yi) / (yj - yi) + xi):
            inside = not inside

        j = i

    return inside


def point_in_triangle(
    px: float,
    py: float,
    ax: float,
    ay: float,
    bx: float,
    by: float,
    cx: float,
    cy: float,
) -> bool:
    """Check whether p lies inside or on the boundary of triangle abc.

    Works for either triangle orientation.
    """
    d1 = cross(ax, ay, bx, by, px, py)
    d2 = cross(bx, by, cx, cy, px, py)
    d3 = cross(cx, cy, ax, ay, px, py)

    has_neg = d1 < 0 or d2 < 0 or d3 < 0
    has_pos = d1 > 0 or d2 > 0 or d3 > 0

    return not (has_neg and has_pos)


def _on_segment(px: float, py: float, ax: float, ay: float, bx: float, by: float) -> bool:
    # p is known to be collinear with ab
    return min(ax, bx) <= px <= max(ax, bx) and min(ay, by) <= py <= max(ay, by)


def segments_intersect(
    ax: float,
    ay: float,
    bx: float,
    by: float,
    cx: float,
    cy: float,
    dx: float,
    dy: float,
    proper: bool = False,
) -> bool:
    """Check whether segment ab intersects segment cd.

    Args:
        ax, ay, bx, by: Endpoints of the first segment
        cx, cy, dx, dy: Endpoints of the second segment
        proper: If True, only count crossings where each segment has its
            endpoints strictly on opposite sides of the other. Touching and
            collinear overlaps are then ignored.

    Returns:
        True if the segments intersect
    """
    d1 = cross(cx, cy, dx, dy, ax, ay)
    d2 = cross(cx, cy, dx, dy, bx, by)
    d3 = cross(ax, ay, bx, by, cx, cy)
    d4 = cross(ax, ay, bx, by, dx, dy)

    if ((d1 > 0 and d2 < 0) or (d1 < 0 and d2 > 0)) and (
        (d3 > 0 and d4 < 0) or (d3 < 0 and d4 > 0)
    ):
        return True

    if proper:
        return False

    if d1 == 0 and _on_segment(ax, ay, cx, cy, dx, dy):
        return True
    if d2 == 0 and _on_segment(bx, by, cx, cy, dx, dy):
        return True
    if d3 == 0 and _on_segment(cx, cy, ax, ay, bx, by):
        return True
    if d4 == 0 and _on_segment(dx, dy, ax, ay, bx, by):
        return True

    return False


def distance_to_segment(
    px: float, py: float, ax: float, ay: float, bx: float, by: float
) -> float:
    """Distance from point p to the closest point of segment ab.

    Projects the point onto the infinite line, then clamps to the segment
    endpoints. A zero-length segment degrades to point distance.
    """
    dx = bx - ax
    dy = by - ay

    segment_length_sq = dx * dx + dy * dy
    if segment_length_sq < 1e-20:
        return math.hypot(px - ax, py - ay)

    t = ((px - ax) * dx + (py - ay) * dy) / segment_length_sq
    t = max(0.0, min(1.0, t))

    return math.hypot(px - (ax + t * dx), py - (ay + t * dy))


def polygon_self_intersects(points: list[Point]) -> bool:
    """Check whether any two non-adjacent edges of a closed polygon cross.

    Only proper crossings count; edges that merely touch are accepted.
    """
    n = len(points)
    if n < 4:
        return False

    for i in range(n):
        a = points[i]
        b = points[(i + 1) % n]
        min_x, max_x = min(a.x, b.x), max(a.x, b.x)
        min_y, max_y = min(a.y, b.y), max(a.y, b.y)
        # Edges i and i+1 share a vertex; so do the last and the first edge
        for j in range(i + 2, n):
            if i == 0 and j == n - 1:
                continue
            c = points[j]
            d = points[(j + 1) % n]
            if max(c.x, d.x) < min_x or min(c.x, d.x) > max_x:
                continue
            if max(c.y, d.y) < min_y or min(c.y, d.y) > max_y:
                continue
            if segments_intersect(a.x, a.y, b.x, b.y, c.x, c.y, d.x, d.y, proper=True):
                return True

    return False
