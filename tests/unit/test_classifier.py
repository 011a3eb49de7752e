"""Unit tests for winding and hole classification."""

from glyphmesh.config import OrphanHolePolicy, TessellationConfig
from glyphmesh.core.classifier import ContourClassifier, classify_contours, topmost_point
from glyphmesh.domain import ContourRole, FlatContour, Point, WindingDirection


def rect_points(x0: float, y0: float, x1: float, y1: float, ccw: bool = True) -> list[Point]:
    points = [Point(x0, y0), Point(x1, y0), Point(x1, y1), Point(x0, y1)]
    return points if ccw else list(reversed(points))


def flat(points: list[Point]) -> FlatContour:
    return FlatContour(points=points)


class TestWindingClassification:
    """Tests for outer/hole roles."""

    def test_single_outer(self):
        """Test a lone CCW contour is an outer."""
        result = classify_contours([flat(rect_points(0, 0, 10, 10))])

        assert len(result.polygons) == 1
        assert result.polygons[0].holes == []
        contour = result.contours[0]
        assert contour.role == ContourRole.OUTER
        assert contour.direction == WindingDirection.COUNTER_CLOCKWISE
        assert contour.signed_area == 100.0
        assert result.diagnostics == []

    def test_hole_assigned_to_outer(self):
        """Test an opposite-winding contour inside an outer becomes its hole."""
        result = classify_contours(
            [
                flat(rect_points(0, 0, 10, 10)),
                flat(rect_points(3, 3, 6, 6, ccw=False)),
            ]
        )

        assert len(result.polygons) == 1
        polygon = result.polygons[0]
        assert [h.index for h in polygon.holes] == [1]
        assert polygon.holes[0].owner == 0
        assert result.hole_owners() == {1: 0}

    def test_clockwise_outer_convention(self):
        """Test TrueType convention: clockwise outers, counter-clockwise holes."""
        config = TessellationConfig(outer_winding=WindingDirection.CLOCKWISE)
        result = classify_contours(
            [
                flat(rect_points(0, 0, 10, 10, ccw=False)),
                flat(rect_points(3, 3, 6, 6, ccw=True)),
            ],
            config,
        )

        assert [c.role for c in result.contours] == [ContourRole.OUTER, ContourRole.HOLE]
        assert result.hole_owners() == {1: 0}

    def test_two_islands(self):
        """Test separate outers become separate polygons in source order."""
        result = classify_contours(
            [flat(rect_points(0, 0, 10, 10)), flat(rect_points(20, 0, 30, 10))]
        )
        assert [p.outer.index for p in result.polygons] == [0, 1]


class TestHoleOwnership:
    """Tests for assigning holes to the smallest enclosing outer."""

    def test_nested_outer_in_counter(self):
        """Test a hole inside an island inside a counter goes to the island."""
        contours = [
            flat(rect_points(0, 0, 100, 100)),  # outer
            flat(rect_points(10, 10, 90, 90, ccw=False)),  # counter
            flat(rect_points(20, 20, 80, 80)),  # island inside the counter
            flat(rect_points(40, 40, 60, 60, ccw=False)),  # hole of the island
        ]
        result = classify_contours(contours)

        assert result.hole_owners() == {1: 0, 3: 2}
        assert [len(p.holes) for p in result.polygons] == [1, 1]

    def test_disjoint_outers(self):
        """Test each hole goes to the outer that contains it."""
        contours = [
            flat(rect_points(0, 0, 10, 10)),
            flat(rect_points(20, 0, 30, 10)),
            flat(rect_points(22, 2, 28, 8, ccw=False)),
            flat(rect_points(2, 2, 8, 8, ccw=False)),
        ]
        result = classify_contours(contours)
        assert result.hole_owners() == {2: 1, 3: 0}

    def test_explicit_indices(self):
        """Test source indices are kept when contours were skipped upstream."""
        classifier = ContourClassifier()
        result = classifier.classify(
            [flat(rect_points(0, 0, 10, 10)), flat(rect_points(2, 2, 8, 8, ccw=False))],
            indices=[1, 3],
        )
        assert result.hole_owners() == {3: 1}


class TestOrphansAndDegenerates:
    """Tests for recovered classification problems."""

    def test_orphan_hole_discarded(self):
        """Test a hole outside every outer is reported and dropped."""
        result = classify_contours(
            [flat(rect_points(0, 0, 10, 10)), flat(rect_points(20, 20, 30, 30, ccw=False))]
        )

        assert len(result.polygons) == 1
        assert result.polygons[0].holes == []
        assert [d.kind for d in result.diagnostics] == ["UnresolvedHoleError"]
        assert result.diagnostics[0].contour_index == 1

    def test_orphan_hole_promoted(self):
        """Test the promote policy turns an orphan hole into an outer."""
        config = TessellationConfig(orphan_hole_policy=OrphanHolePolicy.PROMOTE)
        result = classify_contours([flat(rect_points(20, 20, 30, 30, ccw=False))], config)

        assert len(result.polygons) == 1
        promoted = result.polygons[0].outer
        assert promoted.role == ContourRole.OUTER
        assert promoted.signed_area > 0
        assert promoted.contour.signed_area() > 0
        assert [d.kind for d in result.diagnostics] == ["UnresolvedHoleError"]

    def test_zero_area_contour(self):
        """Test a contour with zero area is skipped with a diagnostic."""
        line = flat([Point(0, 0), Point(5, 5), Point(10, 10)])
        result = classify_contours([line, flat(rect_points(0, 0, 10, 10))])

        assert [p.outer.index for p in result.polygons] == [1]
        assert result.diagnostics[0].kind == "DegenerateContourError"
        assert result.diagnostics[0].contour_index == 0


class TestTopmostPoint:
    """Tests for topmost_point."""

    def test_leftmost_on_ties(self):
        """Test ties on y resolve to the smallest x."""
        points = [Point(5, 10), Point(0, 10), Point(3, 2)]
        assert topmost_point(points) == Point(0, 10)
