"""Winding and hole classification for flattened contours.

This module classifies the flattened contours of a glyph:
- Outer contours (winding matches the configured outer winding)
- Holes (opposite winding)
- Ownership of each hole by the smallest outer contour enclosing it

The analysis uses signed area calculation to determine winding direction
and point-in-polygon tests to establish containment relationships.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field

from glyphmesh.config import OrphanHolePolicy, TessellationConfig
from glyphmesh.core.geometry import point_in_polygon, signed_area
from glyphmesh.domain import (
    ClassifiedContour,
    ContourRole,
    Diagnostic,
    FlatContour,
    Point,
    PolygonWithHoles,
    WindingDirection,
)
from glyphmesh.exceptions import DegenerateContourError, UnresolvedHoleError


@dataclass
class ClassificationResult:
    """Classification of every usable contour in a glyph.

    Attributes:
        polygons: One PolygonWithHoles per outer contour, in source order
        contours: Every classified contour, in source order
        diagnostics: Degenerate contours and unresolved holes
    """

    polygons: list[PolygonWithHoles]
    contours: list[ClassifiedContour]
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def hole_owners(self) -> dict[int, int]:
        """Map each owned hole's contour index to its outer contour index."""
        return {
            hole.index: polygon.outer.index
            for polygon in self.polygons
            for hole in polygon.holes
        }


def topmost_point(points: list[Point]) -> Point:
    """Vertex with the largest y (leftmost on ties)."""
    return max(points, key=lambda p: (p.y, -p.x))


class ContourClassifier:
    """Classifies flattened contours into outers and holes.

    This classifier uses geometric properties of each contour:
    - Winding direction (via signed area calculation)
    - Point containment (via ray casting algorithm)

    The classifier is stateless apart from its configuration and safe for
    use in parallel processing.
    """

    def __init__(self, config: TessellationConfig | None = None) -> None:
        self.config = config if config is not None else TessellationConfig()

    def classify(
        self,
        contours: Sequence[FlatContour],
        indices: Sequence[int] | None = None,
    ) -> ClassificationResult:
        """Classify the flattened contours of one glyph.

        Process:
        1. Compute signed area and winding for each contour
        2. Split contours into outers and holes by winding
        3. Assign each hole to the smallest enclosing outer
        4. Group every outer with its holes

        Args:
            contours: Flattened contours of the glyph
            indices: Source contour index of each flattened contour
                (defaults to positions in ``contours``)

        Returns:
            ClassificationResult with polygons and diagnostics
        """
        if indices is None:
            indices = range(len(contours))

        outer_winding = self.config.outer_winding
        diagnostics: list[Diagnostic] = []
        classified: list[ClassifiedContour] = []
        outers: list[ClassifiedContour] = []
        holes: list[ClassifiedContour] = []

        for index, contour in zip(indices, contours):
            area = signed_area(contour.points)
            if abs(area) <= self.config.area_epsilon:
                error = DegenerateContourError(f"Contour {index} has zero area", index)
                diagnostics.append(Diagnostic.from_exception(error))
                continue

            direction = WindingDirection.from_area(area)
            role = ContourRole.OUTER if direction == outer_winding else ContourRole.HOLE
            entry = ClassifiedContour(
                contour=contour,
                index=index,
                signed_area=area,
                direction=direction,
                role=role,
            )
            classified.append(entry)
            (outers if role is ContourRole.OUTER else holes).append(entry)

        holes_by_outer: dict[int, list[ClassifiedContour]] = {o.index: [] for o in outers}
        promoted: list[ClassifiedContour] = []

        for hole in holes:
            owner = self._find_owner(hole, outers)
            if owner is not None:
                hole.owner = owner.index
                holes_by_outer[owner.index].append(hole)
                continue

            diagnostics.append(Diagnostic.from_exception(UnresolvedHoleError(hole.index)))
            if self.config.orphan_hole_policy == OrphanHolePolicy.PROMOTE:
                promoted.append(self._promote(hole))

        polygons = [PolygonWithHoles(outer=o, holes=holes_by_outer[o.index]) for o in outers]
        polygons.extend(PolygonWithHoles(outer=p) for p in promoted)

        # Promoted holes replace their original entry
        promoted_indices = {p.index for p in promoted}
        contours_out = [c for c in classified if c.index not in promoted_indices] + promoted
        contours_out.sort(key=lambda c: c.index)

        return ClassificationResult(
            polygons=polygons,
            contours=contours_out,
            diagnostics=diagnostics,
        )

    def _find_owner(
        self,
        hole: ClassifiedContour,
        outers: list[ClassifiedContour],
    ) -> ClassifiedContour | None:
        """Find the smallest outer contour that encloses a hole.

        Tests the topmost vertex of the hole against each outer contour.
        Choosing the smallest enclosing outer handles shapes nested inside
        other shapes' counters.

        Args:
            hole: The hole to place
            outers: Outer contour candidates

        Returns:
            The owning outer contour, or None if no outer encloses the hole
        """
        test_point = topmost_point(hole.points)
        candidates: list[ClassifiedContour] = []

        for outer in outers:
            min_x, min_y, max_x, max_y = outer.contour.bounding_box()
            if not (min_x <= test_point.x <= max_x and min_y <= test_point.y <= max_y):
                continue
            if point_in_polygon(test_point, outer.points):
                candidates.append(outer)

        if not candidates:
            return None

        return min(candidates, key=lambda c: c.area)

    def _promote(self, hole: ClassifiedContour) -> ClassifiedContour:
        """Turn an orphan hole into an outer by reversing its winding."""
        return ClassifiedContour(
            contour=hole.contour.reversed(),
            index=hole.index,
            signed_area=-hole.signed_area,
            direction=hole.direction.opposite,
            role=ContourRole.OUTER,
        )


def classify_contours(
    contours: Sequence[FlatContour],
    config: TessellationConfig | None = None,
) -> ClassificationResult:
    """Classify contours with the given configuration.

    Convenience wrapper around ContourClassifier.
    """
    return ContourClassifier(config).classify(contours)
