"""Converters from fonttools glyphs to domain models.

This module turns the drawing commands fonttools emits for a glyph into
the segment contours (GlyphOutline, Contour) the pipeline consumes.
"""

from typing import Any

from fontTools.pens.basePen import decomposeQuadraticSegment, decomposeSuperBezierSegment
from fontTools.pens.boundsPen import BoundsPen
from fontTools.pens.recordingPen import RecordingPen
from fontTools.ttLib import TTFont

from glyphmesh.domain.contour import Contour, CubicSegment, LineSegment, Point, QuadSegment, Segment
from glyphmesh.domain.glyph import GlyphMetadata, GlyphOutline


def fonttools_glyph_to_domain(
    name: str,
    fonttools_glyph: Any,
    font: TTFont,
) -> GlyphOutline:
    """Convert fonttools glyph to domain GlyphOutline model.

    Handles both TrueType (quadratic curves) and OpenType/CFF (cubic curves).
    Uses a RecordingPen to extract the glyph outline as a series of
    drawing commands, then converts these to Contour objects. Composite
    glyphs are decomposed by the glyph set while drawing.

    Winding is left as stored in the font: TrueType outers run clockwise
    and CFF outers counter-clockwise.

    Args:
        name: Name of the glyph
        fonttools_glyph: The fonttools glyph object from GlyphSet
        font: The TTFont object for accessing metadata

    Returns:
        Domain GlyphOutline model
    """
    pen = RecordingPen()
    fonttools_glyph.draw(pen)

    contours = recording_to_contours(pen.value)

    bounds_pen = BoundsPen(None)
    pen.replay(bounds_pen)

    metadata = _extract_glyph_metadata(name, font, bounds_pen.bounds)
    return GlyphOutline(metadata=metadata, contours=contours)


def recording_to_contours(recording: list[tuple[str, tuple[Any, ...]]]) -> list[Contour]:
    """Convert RecordingPen recording to list of Contour objects.

    The RecordingPen records drawing commands like:
    - ('moveTo', ((x, y),))
    - ('lineTo', ((x, y),))
    - ('qCurveTo', ((x1, y1), (x2, y2), ...))  # Quadratic, implied on-curves
    - ('curveTo', ((x1, y1), (x2, y2), (x3, y3), ...))  # Cubic
    - ('closePath', ())

    Runs of quadratic off-curve points are split at their implied on-curve
    midpoints; cubic runs with more than two control points are split into
    plain cubic segments. closePath adds the closing line when the last
    point differs from the first. Contours ended with endPath stay open.

    Args:
        recording: List of drawing commands from RecordingPen

    Returns:
        List of Contour objects
    """
    contours: list[Contour] = []
    segments: list[Segment] = []
    start: Point | None = None
    current: Point | None = None

    for command, args in recording:
        if command == "moveTo":
            if segments:
                contours.append(Contour(segments=segments))
            segments = []
            start = current = Point(*args[0])

        elif command == "lineTo":
            end = Point(*args[0])
            if current is not None:
                segments.append(LineSegment(current, end))
            current = end

        elif command == "qCurveTo":
            if args[-1] is None:
                # Closed contour without on-curve points
                off_curves = [Point(*p) for p in args[:-1]]
                start = current = _midpoint(off_curves[-1], off_curves[0])
                points = [p.to_tuple() for p in off_curves] + [current.to_tuple()]
            else:
                points = list(args)

            if len(points) == 1:
                end = Point(*points[0])
                segments.append(LineSegment(current, end))
                current = end
                continue

            for control, on_curve in decomposeQuadraticSegment(points):
                end = Point(*on_curve)
                segments.append(QuadSegment(current, Point(*control), end))
                current = end

        elif command == "curveTo":
            if len(args) < 3:
                # One point is a line, two points a quadratic curve
                end = Point(*args[-1])
                if len(args) == 1:
                    segments.append(LineSegment(current, end))
                else:
                    segments.append(QuadSegment(current, Point(*args[0]), end))
                current = end
                continue

            for c0, c1, on_curve in decomposeSuperBezierSegment(list(args)):
                end = Point(*on_curve)
                segments.append(CubicSegment(current, Point(*c0), Point(*c1), end))
                current = end

        elif command == "closePath":
            if start is not None and current is not None and current != start:
                segments.append(LineSegment(current, start))
            if segments:
                contours.append(Contour(segments=segments))
            segments = []
            start = current = None

        elif command == "endPath":
            if segments:
                contours.append(Contour(segments=segments))
            segments = []
            start = current = None

    if segments:
        contours.append(Contour(segments=segments))

    return contours


def _midpoint(a: Point, b: Point) -> Point:
    return Point((a.x + b.x) / 2, (a.y + b.y) / 2)


def _extract_glyph_metadata(
    name: str,
    font: TTFont,
    bounds: tuple[float, float, float, float] | None,
) -> GlyphMetadata:
    """Extract glyph metadata from font.

    Args:
        name: Glyph name
        font: The TTFont object
        bounds: Control bounds of the drawn outline, None for empty glyphs

    Returns:
        GlyphMetadata object
    """
    hmtx = font.get("hmtx")
    advance_width = 0

    if hmtx and name in hmtx.metrics:
        advance_width, _lsb = hmtx.metrics[name]

    cmap = font.getBestCmap()
    unicode_value = None

    if cmap:
        for code_point, glyph_name in cmap.items():
            if glyph_name == name:
                unicode_value = code_point
                break

    return GlyphMetadata(
        name=name,
        unicode=unicode_value,
        advance_width=float(advance_width),
        bounds=tuple(float(v) for v in bounds) if bounds is not None else None,  # type: ignore[arg-type]
    )
