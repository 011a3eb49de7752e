"""Unit tests for curve flattening."""

import pytest

from glyphmesh.config import TessellationConfig
from glyphmesh.core.flattener import (
    CurveFlattener,
    collapse_points,
    flatten_contour,
    flatten_segment,
)
from glyphmesh.core.geometry import distance_to_segment
from glyphmesh.domain import Contour, CubicSegment, LineSegment, Point, QuadSegment
from glyphmesh.exceptions import (
    DegenerateContourError,
    OpenContourError,
    SelfIntersectionError,
)


def quad_at(segment: QuadSegment, t: float) -> Point:
    u = 1 - t
    x = u * u * segment.p0.x + 2 * u * t * segment.c.x + t * t * segment.p1.x
    y = u * u * segment.p0.y + 2 * u * t * segment.c.y + t * t * segment.p1.y
    return Point(x, y)


def cubic_at(segment: CubicSegment, t: float) -> Point:
    u = 1 - t
    a, b, c, d = u * u * u, 3 * u * u * t, 3 * u * t * t, t * t * t
    x = a * segment.p0.x + b * segment.c0.x + c * segment.c1.x + d * segment.p1.x
    y = a * segment.p0.y + b * segment.c0.y + c * segment.c1.y + d * segment.p1.y
    return Point(x, y)


def distance_to_polyline(point: Point, polyline: list[Point]) -> float:
    return min(
        distance_to_segment(point.x, point.y, a.x, a.y, b.x, b.y)
        for a, b in zip(polyline, polyline[1:])
    )


QUAD = QuadSegment(Point(0, 0), Point(50, 100), Point(100, 0))
CUBIC = CubicSegment(Point(0, 0), Point(0, 120), Point(100, -60), Point(100, 40))


class TestFlattenSegment:
    """Tests for flatten_segment."""

    def test_line_passes_through(self):
        """Test line segments are not subdivided."""
        segment = LineSegment(Point(0, 0), Point(10, 5))
        assert flatten_segment(segment, 0.01) == [Point(0, 0), Point(10, 5)]

    @pytest.mark.parametrize("tolerance", [0.5, 0.25, 0.05])
    def test_quad_within_tolerance(self, tolerance):
        """Test every point of the quadratic curve lies near the polyline."""
        polyline = flatten_segment(QUAD, tolerance)
        for i in range(101):
            assert distance_to_polyline(quad_at(QUAD, i / 100), polyline) <= tolerance + 1e-9

    @pytest.mark.parametrize("tolerance", [0.5, 0.25, 0.05])
    def test_cubic_within_tolerance(self, tolerance):
        """Test every point of the cubic curve lies near the polyline."""
        polyline = flatten_segment(CUBIC, tolerance)
        for i in range(101):
            assert distance_to_polyline(cubic_at(CUBIC, i / 100), polyline) <= tolerance + 1e-9

    def test_vertices_lie_on_curve(self):
        """Test polyline vertices are points of the curve itself."""
        polyline = flatten_segment(QUAD, 0.5)
        for point in polyline:
            nearest = min(point.distance_to(quad_at(QUAD, i / 4096)) for i in range(4097))
            assert nearest < 0.1

    def test_finer_tolerance_adds_points(self):
        """Test halving the tolerance never reduces the point count."""
        coarse = flatten_segment(CUBIC, 1.0)
        fine = flatten_segment(CUBIC, 0.5)
        assert len(fine) >= len(coarse)
        assert len(coarse) > 2

    def test_exact_endpoints(self):
        """Test the polyline starts and ends exactly on the segment endpoints."""
        polyline = flatten_segment(CUBIC, 0.1)
        assert polyline[0] == CUBIC.p0
        assert polyline[-1] == CUBIC.p1

    def test_depth_limit(self):
        """Test subdivision stops at the depth limit."""
        polyline = flatten_segment(QUAD, 1e-9, max_depth=1)
        assert len(polyline) == 3

    def test_degenerate_curve(self):
        """Test a curve with coincident control points collapses to its chord."""
        p = Point(5, 5)
        assert flatten_segment(CubicSegment(p, p, p, p), 0.5) == [p, p]


class TestCollapsePoints:
    """Tests for collapse_points."""

    def test_consecutive_duplicates(self):
        """Test repeated points are dropped."""
        points = [Point(0, 0), Point(0, 0), Point(1, 0), Point(1, 1e-9), Point(1, 1)]
        assert collapse_points(points, 1e-6) == [Point(0, 0), Point(1, 0), Point(1, 1)]

    def test_closing_duplicate(self):
        """Test a trailing copy of the first point is dropped."""
        points = [Point(0, 0), Point(1, 0), Point(1, 1), Point(0, 0)]
        assert collapse_points(points, 1e-6) == [Point(0, 0), Point(1, 0), Point(1, 1)]


class TestCurveFlattener:
    """Tests for CurveFlattener."""

    def test_polygon_round_trip(self):
        """Test a pure-line contour flattens to exactly its input points."""
        points = [Point(0, 0), Point(100, 0), Point(100, 50), Point(40, 80), Point(0, 50)]
        flat = flatten_contour(Contour.from_points(points))
        assert flat.points == points

    def test_shared_endpoints_appear_once(self):
        """Test segment joints become single vertices."""
        contour = Contour(
            segments=[
                LineSegment(Point(0, 0), Point(100, 0)),
                QuadSegment(Point(100, 0), Point(100, 100), Point(0, 100)),
                LineSegment(Point(0, 100), Point(0, 0)),
            ]
        )
        flat = CurveFlattener(TessellationConfig(flatten_tolerance=0.5)).flatten(contour)

        assert flat.points[0] == Point(0, 0)
        assert flat.points[1] == Point(100, 0)
        assert flat.points.count(Point(0, 100)) == 1
        assert len(flat.points) > 4
        for a, b in flat.edges():
            assert a.distance_to(b) > 1e-6

    def test_circle_area(self, make_circle):
        """Test a flattened circle has nearly the circle's area."""
        flat = flatten_contour(make_circle(0, 0, 100), TessellationConfig(flatten_tolerance=0.05))
        assert flat.signed_area() == pytest.approx(3.14159265 * 100 * 100, rel=1e-3)

    def test_winding_preserved(self, make_circle):
        """Test flattening keeps the source winding."""
        config = TessellationConfig(flatten_tolerance=0.5)
        assert flatten_contour(make_circle(0, 0, 10, ccw=True), config).signed_area() > 0
        assert flatten_contour(make_circle(0, 0, 10, ccw=False), config).signed_area() < 0

    def test_empty_contour(self):
        """Test a contour without segments is degenerate."""
        with pytest.raises(DegenerateContourError) as exc_info:
            flatten_contour(Contour(segments=[]), index=4)
        assert exc_info.value.contour_index == 4

    def test_open_contour(self):
        """Test an open chain is rejected."""
        contour = Contour(
            segments=[
                LineSegment(Point(0, 0), Point(10, 0)),
                LineSegment(Point(10, 0), Point(10, 10)),
            ]
        )
        with pytest.raises(OpenContourError):
            flatten_contour(contour, index=0)

    def test_collapsed_contour(self):
        """Test a contour with fewer than three distinct points is degenerate."""
        contour = Contour.from_points([Point(0, 0), Point(10, 0), Point(10, 0)])
        with pytest.raises(DegenerateContourError):
            flatten_contour(contour)

    def test_self_intersection(self):
        """Test crossing contours are rejected unless the check is disabled."""
        bow_tie = Contour.from_points([Point(0, 0), Point(20, 20), Point(20, 0), Point(0, 20)])
        with pytest.raises(SelfIntersectionError):
            flatten_contour(bow_tie)

        config = TessellationConfig(check_self_intersection=False)
        assert len(flatten_contour(bow_tie, config)) == 4
