"""Reading glyph outlines out of TTF and OTF files.

FontReader wraps a fontTools TTFont and hands out GlyphOutline domain
models, together with the metrics the mesh generator needs (UPM, font
height, outer contour winding).
"""

from collections.abc import Iterator
from pathlib import Path

import structlog
from fontTools.ttLib import TTFont, TTLibError

from glyphmesh.domain import GlyphOutline, WindingDirection
from glyphmesh.exceptions import FontLoadError, GlyphNotFoundError
from glyphmesh.io.converter import fonttools_glyph_to_domain

logger = structlog.get_logger(__name__)

NOTDEF = ".notdef"


class FontReader:
    """Glyph outlines and metrics of one font file.

    Both flavours are handled: glyf-based TrueType outlines with quadratic
    curves and CFF-based OpenType outlines with cubic curves.

    Example:
        with FontReader(Path("font.otf")) as reader:
            outline = reader.glyph_for_char("a")
    """

    def __init__(self, font_path: Path) -> None:
        """Remember the path; nothing is read until load().

        Args:
            font_path: Location of the .ttf or .otf file
        """
        self._font_path = font_path
        self._font: TTFont | None = None

    @classmethod
    def from_font(cls, font: TTFont, font_path: Path | None = None) -> "FontReader":
        """Wrap an already opened TTFont."""
        reader = cls(font_path if font_path is not None else Path("<memory>"))
        reader._font = font
        return reader

    def load(self) -> None:
        """Open the font with fontTools.

        Raises:
            FontLoadError: If the path is missing or fontTools cannot parse it
        """
        if not self._font_path.exists():
            raise FontLoadError(str(self._font_path), "file not found")

        try:
            self._font = TTFont(str(self._font_path))
        except (TTLibError, OSError) as e:
            raise FontLoadError(str(self._font_path), str(e)) from e

        logger.debug("Font loaded", path=str(self._font_path), format=self.format)

    def _require_font(self) -> TTFont:
        if self._font is None:
            raise RuntimeError("Font not loaded. Call load() first.")
        return self._font

    @property
    def format(self) -> str:
        """'OpenType' when the font carries CFF outlines, else 'TrueType'."""
        font = self._require_font()
        if "CFF " in font or "CFF2" in font:
            return "OpenType"
        return "TrueType"

    @property
    def outer_winding(self) -> WindingDirection:
        """Winding of outer contours in this font.

        TrueType outlines wind outers clockwise, CFF outlines
        counter-clockwise.
        """
        if self.format == "OpenType":
            return WindingDirection.COUNTER_CLOCKWISE
        return WindingDirection.CLOCKWISE

    @property
    def units_per_em(self) -> int:
        """Size of the em square in font units, from the head table."""
        return self._require_font()["head"].unitsPerEm  # type: ignore[attr-defined]

    @property
    def font_height(self) -> int:
        """Ascender minus descender from the hhea table.

        Falls back to the UPM when the font has no usable vertical metrics.
        """
        font = self._require_font()
        hhea = font.get("hhea")
        if hhea is not None:
            height = hhea.ascent - hhea.descent  # type: ignore[attr-defined]
            if height > 0:
                return height
        return self.units_per_em

    @property
    def glyph_count(self) -> int:
        return self._require_font()["maxp"].numGlyphs  # type: ignore[attr-defined]

    def iter_glyphs(self) -> Iterator[GlyphOutline]:
        """Outlines of every glyph, in glyph order.

        Raises:
            RuntimeError: If load() has not been called
        """
        font = self._require_font()
        for glyph_name in font.getGlyphOrder():
            yield self.get_glyph(glyph_name)

    def get_glyph(self, name: str) -> GlyphOutline:
        """Outline and metadata of the glyph called ``name``.

        Raises:
            GlyphNotFoundError: If the font has no glyph with that name
            RuntimeError: If load() has not been called
        """
        font = self._require_font()

        if name not in font.getGlyphOrder():
            raise GlyphNotFoundError(name)

        glyph_set = font.getGlyphSet()

        return fonttools_glyph_to_domain(name=name, fonttools_glyph=glyph_set[name], font=font)

    def glyph_name_for_char(self, char: str) -> str:
        """Name of the glyph mapped to ``char``.

        Unmapped characters resolve to ``.notdef``.

        Raises:
            GlyphNotFoundError: If the character is unmapped and the font has
                no ``.notdef`` glyph
        """
        font = self._require_font()
        cmap = font.getBestCmap() or {}
        name = cmap.get(ord(char))
        if name is not None:
            return name

        if NOTDEF in font.getGlyphOrder():
            logger.debug("Character not mapped, using .notdef", char=char)
            return NOTDEF
        raise GlyphNotFoundError(f"U+{ord(char):04X}")

    def glyph_for_char(self, char: str) -> GlyphOutline:
        """Outline of the glyph mapped to ``char``."""
        return self.get_glyph(self.glyph_name_for_char(char))

    def close(self) -> None:
        """Close the font file and free resources."""
        if self._font is not None:
            self._font.close()
            self._font = None

    def __enter__(self) -> "FontReader":
        """Context manager entry."""
        if self._font is None:
            self.load()
        return self

    def __exit__(self, _exc_type: object, _exc_val: object, _exc_tb: object) -> None:
        """Context manager exit."""
        self.close()
