"""Curve flattening: turn segment contours into closed polygons.

Line segments pass through unchanged. Quadratic and cubic segments are
subdivided until every piece is within the flattening tolerance of its
chord (or the subdivision depth limit is hit). Shared segment endpoints
become single polygon vertices and near-coincident consecutive points are
collapsed so the triangulator never sees zero-length edges.
"""

from glyphmesh.config import TessellationConfig
from glyphmesh.core._bezier import flatten_bezier
from glyphmesh.core.geometry import polygon_self_intersects
from glyphmesh.domain import Contour, FlatContour, LineSegment, Point, Segment
from glyphmesh.exceptions import (
    DegenerateContourError,
    OpenContourError,
    SelfIntersectionError,
)


def flatten_segment(segment: Segment, tolerance: float, max_depth: int = 16) -> list[Point]:
    """Approximate one segment by a polyline.

    Args:
        segment: Line, quadratic or cubic segment
        tolerance: Maximum distance from true curve
        max_depth: Maximum subdivision depth

    Returns:
        Polyline from the segment's start to its end, both included
    """
    if isinstance(segment, LineSegment):
        return [segment.p0, segment.p1]
    return flatten_bezier(list(segment.control_points()), tolerance, max_depth)


def collapse_points(points: list[Point], epsilon: float) -> list[Point]:
    """Drop points closer than ``epsilon`` to their predecessor.

    The polygon is treated as closed, so trailing points that coincide with
    the first point are dropped too.
    """
    out: list[Point] = []
    for point in points:
        if out and point.distance_to(out[-1]) <= epsilon:
            continue
        out.append(point)

    while len(out) > 1 and out[-1].distance_to(out[0]) <= epsilon:
        out.pop()

    return out


class CurveFlattener:
    """Flattens contours into closed polygons.

    The flattener is stateless apart from its configuration and safe for use
    in parallel processing.
    """

    def __init__(self, config: TessellationConfig | None = None) -> None:
        self.config = config if config is not None else TessellationConfig()

    def flatten(self, contour: Contour, index: int | None = None) -> FlatContour:
        """Flatten a contour.

        Args:
            contour: Closed contour of segments
            index: Index of the contour in its glyph, used in error reports

        Returns:
            FlatContour with at least three vertices

        Raises:
            OpenContourError: If the segments do not form a closed chain
            DegenerateContourError: If fewer than three points survive collapsing
            SelfIntersectionError: If enabled and the polygon crosses itself
        """
        epsilon = self.config.merge_epsilon

        if not contour.segments:
            raise DegenerateContourError(f"Contour {index} has no segments", index)

        if not contour.is_closed(epsilon):
            raise OpenContourError(f"Contour {index} is not closed", index)

        points = [contour.segments[0].start]
        for segment in contour.segments:
            polyline = flatten_segment(
                segment,
                self.config.flatten_tolerance,
                self.config.max_subdivision_depth,
            )
            points.extend(polyline[1:])

        points = collapse_points(points, epsilon)

        if len(points) < 3:
            raise DegenerateContourError(
                f"Contour {index} collapsed to {len(points)} points", index
            )

        if self.config.check_self_intersection and polygon_self_intersects(points):
            raise SelfIntersectionError(f"Contour {index} intersects itself", index)

        return FlatContour(points=points)


def flatten_contour(
    contour: Contour,
    config: TessellationConfig | None = None,
    index: int | None = None,
) -> FlatContour:
    """Flatten a single contour with the given configuration.

    Convenience wrapper around CurveFlattener.
    """
    return CurveFlattener(config).flatten(contour, index)
