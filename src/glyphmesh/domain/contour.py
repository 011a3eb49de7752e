"""Core geometric types for outline representation.

This module defines the fundamental geometric types used throughout glyphmesh:
- Point: A 2D point in glyph units
- LineSegment, QuadSegment, CubicSegment: Outline segments as supplied by a font
- Contour: A closed chain of segments
- FlatContour: A closed polygon produced by curve flattening
- ClassifiedContour: A flat contour with winding, area and role
- PolygonWithHoles: One outer contour with the holes it owns
- WindingDirection: Enum for contour winding direction
- ContourRole: Enum for outer/hole classification
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class WindingDirection(str, Enum):
    """Contour winding direction.

    In TrueType/OpenType convention:
    - Outer contours typically wind clockwise
    - Inner contours (holes) typically wind counter-clockwise

    PostScript/CFF fonts use the opposite convention.
    """

    CLOCKWISE = "cw"
    COUNTER_CLOCKWISE = "ccw"

    @property
    def opposite(self) -> "WindingDirection":
        """The other winding direction."""
        if self is WindingDirection.CLOCKWISE:
            return WindingDirection.COUNTER_CLOCKWISE
        return WindingDirection.CLOCKWISE

    @classmethod
    def from_area(cls, area: float) -> "WindingDirection":
        """Winding of a polygon with the given signed area (positive = CCW)."""
        return cls.COUNTER_CLOCKWISE if area > 0 else cls.CLOCKWISE


class ContourRole(str, Enum):
    """Role of a contour inside a glyph."""

    OUTER = "outer"
    HOLE = "hole"


@dataclass(frozen=True, slots=True)
class Point:
    """A point in 2D space.

    Immutable and hashable for use in sets/dicts.

    Attributes:
        x: X coordinate in glyph units
        y: Y coordinate in glyph units
    """

    x: float
    y: float

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple."""
        return (self.x, self.y)

    def distance_to(self, other: "Point") -> float:
        """Euclidean distance to another point."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def scaled(self, factor: float) -> "Point":
        """Return this point multiplied by ``factor``."""
        return Point(self.x * factor, self.y * factor)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Point":
        """Deserialize from dictionary."""
        return cls(x=data["x"], y=data["y"])


@dataclass(frozen=True, slots=True)
class LineSegment:
    """Straight segment from ``p0`` to ``p1``."""

    p0: Point
    p1: Point

    kind = "line"

    @property
    def start(self) -> Point:
        return self.p0

    @property
    def end(self) -> Point:
        return self.p1

    def control_points(self) -> tuple[Point, ...]:
        return (self.p0, self.p1)


@dataclass(frozen=True, slots=True)
class QuadSegment:
    """Quadratic Bezier segment with one control point."""

    p0: Point
    c: Point
    p1: Point

    kind = "quad"

    @property
    def start(self) -> Point:
        return self.p0

    @property
    def end(self) -> Point:
        return self.p1

    def control_points(self) -> tuple[Point, ...]:
        return (self.p0, self.c, self.p1)


@dataclass(frozen=True, slots=True)
class CubicSegment:
    """Cubic Bezier segment with two control points."""

    p0: Point
    c0: Point
    c1: Point
    p1: Point

    kind = "cubic"

    @property
    def start(self) -> Point:
        return self.p0

    @property
    def end(self) -> Point:
        return self.p1

    def control_points(self) -> tuple[Point, ...]:
        return (self.p0, self.c0, self.c1, self.p1)


Segment = LineSegment | QuadSegment | CubicSegment

_SEGMENT_TYPES: dict[str, type] = {
    "line": LineSegment,
    "quad": QuadSegment,
    "cubic": CubicSegment,
}


def segment_to_dict(segment: Segment) -> dict[str, Any]:
    """Serialize a segment to a dictionary for IPC."""
    return {
        "type": segment.kind,
        "points": [p.to_dict() for p in segment.control_points()],
    }


def segment_from_dict(data: dict[str, Any]) -> Segment:
    """Deserialize a segment from a dictionary.

    Raises:
        ValueError: If the segment type is unknown
    """
    segment_type = _SEGMENT_TYPES.get(data["type"])
    if segment_type is None:
        raise ValueError(f"Unknown segment type: {data['type']!r}")
    return segment_type(*(Point.from_dict(p) for p in data["points"]))


def scale_segment(segment: Segment, factor: float) -> Segment:
    """Return a copy of ``segment`` with every point scaled by ``factor``."""
    return type(segment)(*(p.scaled(factor) for p in segment.control_points()))


@dataclass
class Contour:
    """A closed outline loop made of segments.

    The first point of each segment equals the last point of the previous
    one, and the last segment ends where the first begins.

    Attributes:
        segments: Ordered segments forming the loop
    """

    segments: list[Segment]

    @classmethod
    def from_points(cls, points: list[Point]) -> "Contour":
        """Build a closed polygonal contour from its vertices."""
        n = len(points)
        return cls(segments=[LineSegment(points[i], points[(i + 1) % n]) for i in range(n)])

    def is_closed(self, epsilon: float = 1e-9) -> bool:
        """Check that the segments form a closed chain.

        Args:
            epsilon: Maximum gap between consecutive segment endpoints

        Returns:
            True if every segment starts where the previous one ends
        """
        if not self.segments:
            return False

        previous_end = self.segments[-1].end
        for segment in self.segments:
            if segment.start.distance_to(previous_end) > epsilon:
                return False
            previous_end = segment.end
        return True

    def on_curve_points(self) -> list[Point]:
        """Start point of every segment."""
        return [segment.start for segment in self.segments]

    def scaled(self, factor: float) -> "Contour":
        """Return a copy of this contour scaled by ``factor``."""
        return Contour(segments=[scale_segment(s, factor) for s in self.segments])

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {"segments": [segment_to_dict(s) for s in self.segments]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Contour":
        """Deserialize from dictionary."""
        return cls(segments=[segment_from_dict(s) for s in data["segments"]])


@dataclass
class FlatContour:
    """A closed polygon approximating a contour.

    The polygon is implicitly closed (last point connects to the first) and
    never holds two consecutive coincident points.

    Attributes:
        points: Polygon vertices
    """

    points: list[Point]
    _cached_area: float | None = field(default=None, repr=False, init=False)
    _cached_bbox: tuple[float, float, float, float] | None = field(
        default=None, repr=False, init=False
    )

    def __len__(self) -> int:
        return len(self.points)

    def signed_area(self) -> float:
        """Calculate signed area using shoelace formula.

        The sign of the area indicates winding direction:
        - Positive area: counter-clockwise winding
        - Negative area: clockwise winding

        Result is cached for efficiency.

        Returns:
            Signed area of the contour
        """
        if self._cached_area is not None:
            return self._cached_area

        n = len(self.points)
        if n < 3:
            self._cached_area = 0.0
            return 0.0

        area = 0.0
        for i in range(n):
            j = (i + 1) % n
            area += self.points[i].x * self.points[j].y
            area -= self.points[j].x * self.points[i].y

        self._cached_area = area / 2.0
        return self._cached_area

    def bounding_box(self) -> tuple[float, float, float, float]:
        """Calculate bounding box of the contour.

        Returns:
            Tuple of (min_x, min_y, max_x, max_y)
        """
        if self._cached_bbox is not None:
            return self._cached_bbox

        if not self.points:
            self._cached_bbox = (0.0, 0.0, 0.0, 0.0)
            return self._cached_bbox

        xs = [p.x for p in self.points]
        ys = [p.y for p in self.points]

        self._cached_bbox = (min(xs), min(ys), max(xs), max(ys))
        return self._cached_bbox

    def edges(self) -> list[tuple[Point, Point]]:
        """All edges including the closing edge."""
        n = len(self.points)
        return [(self.points[i], self.points[(i + 1) % n]) for i in range(n)]

    def reversed(self) -> "FlatContour":
        """Same polygon traversed in the opposite direction."""
        return FlatContour(points=list(reversed(self.points)))


@dataclass
class ClassifiedContour:
    """A flattened contour with its winding classification.

    Attributes:
        contour: The flattened polygon
        index: Index of the source contour in the glyph
        signed_area: Shoelace area of the polygon (positive = CCW)
        direction: Winding direction derived from the area sign
        role: Outer boundary or hole
        owner: Index of the owning outer contour (holes only)
    """

    contour: FlatContour
    index: int
    signed_area: float
    direction: WindingDirection
    role: ContourRole
    owner: int | None = None

    @property
    def is_outer(self) -> bool:
        return self.role is ContourRole.OUTER

    @property
    def points(self) -> list[Point]:
        return self.contour.points

    @property
    def area(self) -> float:
        """Unsigned area."""
        return abs(self.signed_area)


@dataclass
class PolygonWithHoles:
    """One outer contour together with the holes it owns.

    This is the unit of triangulation.

    Attributes:
        outer: The outer contour
        holes: Holes whose owner is ``outer``
    """

    outer: ClassifiedContour
    holes: list[ClassifiedContour] = field(default_factory=list)

    def net_area(self) -> float:
        """Outer area minus the area of every hole."""
        return self.outer.area - sum(hole.area for hole in self.holes)

    def vertex_count(self) -> int:
        return len(self.outer.points) + sum(len(hole.points) for hole in self.holes)
