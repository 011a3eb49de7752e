"""Domain models for glyphmesh.

This module contains the domain models representing glyph outlines, the
intermediate polygons of the pipeline and the resulting meshes. All models
are designed to be:

- Immutable where possible (using frozen dataclasses)
- Serializable for inter-process communication (parallel processing)
- Independent of fonttools implementation details

Key classes:
- Point: A 2D point in glyph units
- LineSegment, QuadSegment, CubicSegment: Outline segments
- Contour: A closed chain of segments
- FlatContour: A flattened closed polygon
- ClassifiedContour, PolygonWithHoles: Classifier output
- Triangulation, MeshPart, Mesh, BoundingBox: Triangulator and assembler output
- GlyphOutline: A glyph with its contours
- Diagnostic, TessellationResult: Per-glyph result with recovered problems
"""

from glyphmesh.domain.contour import (
    ClassifiedContour,
    ContourRole,
    Contour,
    CubicSegment,
    FlatContour,
    LineSegment,
    Point,
    PolygonWithHoles,
    QuadSegment,
    Segment,
    WindingDirection,
)
from glyphmesh.domain.glyph import GlyphMetadata, GlyphOutline
from glyphmesh.domain.mesh import BoundingBox, Mesh, MeshPart, Triangulation
from glyphmesh.domain.diagnostic import Diagnostic
from glyphmesh.domain.result import TessellationResult

__all__: list[str] = [
    # Enums
    "WindingDirection",
    "ContourRole",
    # Outline types
    "Point",
    "LineSegment",
    "QuadSegment",
    "CubicSegment",
    "Segment",
    "Contour",
    "GlyphMetadata",
    "GlyphOutline",
    # Pipeline types
    "FlatContour",
    "ClassifiedContour",
    "PolygonWithHoles",
    "Triangulation",
    "MeshPart",
    "BoundingBox",
    "Mesh",
    # Results
    "Diagnostic",
    "TessellationResult",
]
