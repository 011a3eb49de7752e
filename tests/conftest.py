"""Shared fixtures: outline builders and small generated fonts.

The fonts are built with fontTools' FontBuilder so the I/O tests and the
end-to-end tests run against real TTF/OTF binaries without shipping any
font files.
"""

import math
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.t2CharStringPen import T2CharStringPen
from fontTools.pens.ttGlyphPen import TTGlyphPen

from glyphmesh.domain import Contour, CubicSegment, Point
from glyphmesh.io import FontReader

# Cubic control point distance for a quarter circle
KAPPA = 0.5522847498

UPM = 1000
ASCENT = 800
DESCENT = -200


def rect_points(x0: float, y0: float, x1: float, y1: float, ccw: bool = True) -> list[Point]:
    """Axis-aligned rectangle in the requested winding."""
    points = [Point(x0, y0), Point(x1, y0), Point(x1, y1), Point(x0, y1)]
    return points if ccw else list(reversed(points))


def cubic_circle(cx: float, cy: float, r: float, ccw: bool = True) -> Contour:
    """Circle made of four cubic quarter arcs."""
    k = KAPPA * r
    east, north, west, south = (
        Point(cx + r, cy),
        Point(cx, cy + r),
        Point(cx - r, cy),
        Point(cx, cy - r),
    )
    segments = [
        CubicSegment(east, Point(cx + r, cy + k), Point(cx + k, cy + r), north),
        CubicSegment(north, Point(cx - k, cy + r), Point(cx - r, cy + k), west),
        CubicSegment(west, Point(cx - r, cy - k), Point(cx - k, cy - r), south),
        CubicSegment(south, Point(cx + k, cy - r), Point(cx + r, cy - k), east),
    ]
    if ccw:
        return Contour(segments=segments)
    return Contour(
        segments=[
            CubicSegment(s.p1, s.c1, s.c0, s.p0) for s in reversed(segments)
        ]
    )


@pytest.fixture
def make_circle() -> Callable[..., Contour]:
    return cubic_circle


# ----------------------------------------------------------------------
# Generated fonts
# ----------------------------------------------------------------------


def _draw_rect(pen, x0: float, y0: float, x1: float, y1: float, clockwise: bool) -> None:
    points = [(x0, y0), (x0, y1), (x1, y1), (x1, y0)]
    if not clockwise:
        points.reverse()
    pen.moveTo(points[0])
    for point in points[1:]:
        pen.lineTo(point)
    pen.closePath()


def _draw_quadratic_circle(
    pen,
    cx: float,
    cy: float,
    r: float,
    clockwise: bool,
    implied_only: bool = False,
) -> None:
    """Eight quadratic arcs; with implied_only every on-curve point is implied."""
    count = 8
    step = 2 * math.pi / count * (-1 if clockwise else 1)
    k = r / math.cos(math.pi / count)
    controls = [
        (cx + k * math.cos((i + 0.5) * step), cy + k * math.sin((i + 0.5) * step))
        for i in range(count)
    ]

    if implied_only:
        pen.qCurveTo(*controls, None)
        pen.closePath()
        return

    start = (cx + r, cy)
    pen.moveTo(start)
    for i, control in enumerate(controls):
        angle = (i + 1) * step
        end = start if i == count - 1 else (cx + r * math.cos(angle), cy + r * math.sin(angle))
        pen.qCurveTo(control, end)
    pen.closePath()


def _draw_cubic_circle(pen, cx: float, cy: float, r: float, clockwise: bool) -> None:
    contour = cubic_circle(cx, cy, r, ccw=not clockwise)
    pen.moveTo(contour.segments[0].p0.to_tuple())
    for segment in contour.segments:
        pen.curveTo(segment.c0.to_tuple(), segment.c1.to_tuple(), segment.p1.to_tuple())
    pen.closePath()


TTF_GLYPH_ORDER = [".notdef", "space", "o", "i", "l"]
TTF_CMAP = {0x20: "space", ord("o"): "o", ord("i"): "i", ord("l"): "l"}


def build_ttf() -> FontBuilder:
    """TrueType font: outers clockwise, counters counter-clockwise."""
    fb = FontBuilder(UPM, isTTF=True)
    fb.setupGlyphOrder(TTF_GLYPH_ORDER)
    fb.setupCharacterMap(TTF_CMAP)

    def notdef(pen: TTGlyphPen) -> None:
        _draw_rect(pen, 50, 0, 450, 700, clockwise=True)
        _draw_rect(pen, 100, 50, 400, 650, clockwise=False)

    def o(pen: TTGlyphPen) -> None:
        _draw_quadratic_circle(pen, 300, 250, 250, clockwise=True)
        _draw_quadratic_circle(pen, 300, 250, 150, clockwise=False, implied_only=True)

    def i(pen: TTGlyphPen) -> None:
        _draw_rect(pen, 250, 0, 350, 500, clockwise=True)
        _draw_quadratic_circle(pen, 300, 650, 60, clockwise=True)

    def l(pen: TTGlyphPen) -> None:  # noqa: E741
        _draw_rect(pen, 250, 0, 350, 750, clockwise=True)

    drawings = {".notdef": notdef, "o": o, "i": i, "l": l}

    glyphs = {}
    for name in TTF_GLYPH_ORDER:
        pen = TTGlyphPen(None)
        if name in drawings:
            drawings[name](pen)
        glyphs[name] = pen.glyph()
    fb.setupGlyf(glyphs)

    # glyf outlines are drawn shifted by lsb - xMin
    glyph_table = fb.font["glyf"]
    fb.setupHorizontalMetrics({name: (600, glyph_table[name].xMin) for name in TTF_GLYPH_ORDER})
    fb.setupHorizontalHeader(ascent=ASCENT, descent=DESCENT)
    fb.setupNameTable({"familyName": "Glyphmesh Test", "styleName": "Regular"})
    fb.setupOS2(sTypoAscender=ASCENT, usWinAscent=ASCENT, usWinDescent=-DESCENT)
    fb.setupPost()
    return fb


OTF_GLYPH_ORDER = [".notdef", "space", "o"]
OTF_CMAP = {0x20: "space", ord("o"): "o"}


def build_otf() -> FontBuilder:
    """CFF font: outers counter-clockwise, counters clockwise."""
    fb = FontBuilder(UPM, isTTF=False)
    fb.setupGlyphOrder(OTF_GLYPH_ORDER)
    fb.setupCharacterMap(OTF_CMAP)

    def notdef(pen: T2CharStringPen) -> None:
        _draw_rect(pen, 50, 0, 450, 700, clockwise=False)

    def o(pen: T2CharStringPen) -> None:
        _draw_cubic_circle(pen, 300, 250, 250, clockwise=False)
        _draw_cubic_circle(pen, 300, 250, 150, clockwise=True)

    drawings = {".notdef": notdef, "o": o}

    char_strings = {}
    for name in OTF_GLYPH_ORDER:
        pen = T2CharStringPen(600, None)
        if name in drawings:
            drawings[name](pen)
        char_strings[name] = pen.getCharString()

    fb.setupCFF("GlyphmeshTest-Regular", {"FullName": "Glyphmesh Test"}, char_strings, {})
    fb.setupHorizontalMetrics({name: (600, 0) for name in OTF_GLYPH_ORDER})
    fb.setupHorizontalHeader(ascent=ASCENT, descent=DESCENT)
    fb.setupNameTable({"familyName": "Glyphmesh Test", "styleName": "Regular"})
    fb.setupOS2(sTypoAscender=ASCENT, usWinAscent=ASCENT, usWinDescent=-DESCENT)
    fb.setupPost()
    return fb


@pytest.fixture
def ttf_path(tmp_path: Path) -> Path:
    """Path of a generated TrueType font."""
    path = tmp_path / "GlyphmeshTest.ttf"
    build_ttf().save(str(path))
    return path


@pytest.fixture
def otf_path(tmp_path: Path) -> Path:
    """Path of a generated CFF-flavoured OpenType font."""
    path = tmp_path / "GlyphmeshTest.otf"
    build_otf().save(str(path))
    return path


@pytest.fixture
def ttf_reader(ttf_path: Path) -> Generator[FontReader, None, None]:
    """Loaded reader for the generated TrueType font."""
    reader = FontReader(ttf_path)
    reader.load()
    yield reader
    reader.close()


@pytest.fixture
def otf_reader(otf_path: Path) -> Generator[FontReader, None, None]:
    """Loaded reader for the generated OpenType font."""
    reader = FontReader(otf_path)
    reader.load()
    yield reader
    reader.close()
