"""Per-font mesh generation.

A FontMeshGenerator handles exactly one font: it resolves characters to
glyph outlines, adapts the tessellation settings to the font (UPM, outer
winding, optional normalization to the font height) and runs the pipeline.
"""

from dataclasses import dataclass

from glyphmesh.config import TessellationConfig
from glyphmesh.core.pipeline import tessellate_glyph
from glyphmesh.domain import BoundingBox, GlyphOutline, TessellationResult
from glyphmesh.io.reader import FontReader


@dataclass
class GlyphMesh:
    """Mesh of one character together with its layout metrics.

    Attributes:
        char: The requested character
        glyph_name: Name of the glyph the character resolved to
        result: Tessellation result (mesh and diagnostics)
        bounding_box: Glyph bounds in output units; z spans the extrusion
        advance_width: Horizontal advance in output units
    """

    char: str
    glyph_name: str
    result: TessellationResult
    bounding_box: BoundingBox
    advance_width: float


class FontMeshGenerator:
    """Generates glyph meshes for one font.

    Example:
        with FontReader(Path("font.ttf")) as reader:
            generator = FontMeshGenerator(reader, normalize=True)
            glyph_mesh = generator.generate("A")
    """

    def __init__(
        self,
        reader: FontReader,
        config: TessellationConfig | None = None,
        normalize: bool = False,
    ) -> None:
        """Initialize the generator.

        Args:
            reader: Loaded font reader
            config: Tessellation settings; tolerances are in font units at
                the config's reference UPM
            normalize: Scale output so the font height (ascender minus
                descender) is one unit
        """
        self.reader = reader
        self.config = config if config is not None else TessellationConfig()
        self.normalize = normalize

    @property
    def scale(self) -> float:
        """Factor from font units to output units."""
        if self.normalize:
            return 1.0 / self.reader.font_height
        return 1.0

    def tessellation_config(self) -> TessellationConfig:
        """Settings adapted to this font.

        Tolerances are scaled to the font's UPM and then into output units;
        the outer winding is taken from the font format.
        """
        config = self.config.scaled_for_upm(self.reader.units_per_em)
        scale = self.scale
        return config.model_copy(
            update={
                "outer_winding": self.reader.outer_winding,
                "scale": scale,
                "flatten_tolerance": config.flatten_tolerance * scale,
            }
        )

    def generate(self, char: str) -> GlyphMesh:
        """Tessellate the glyph for ``char``.

        Raises:
            GlyphNotFoundError: If the font cannot map the character
        """
        outline = self.reader.glyph_for_char(char)
        return self.generate_outline(outline, char)

    def generate_outline(self, outline: GlyphOutline, char: str = "") -> GlyphMesh:
        """Tessellate an outline read from this generator's font."""
        config = self.tessellation_config()
        result = tessellate_glyph(outline, config)
        return self.wrap(outline, result, char, config)

    def wrap(
        self,
        outline: GlyphOutline,
        result: TessellationResult,
        char: str = "",
        config: TessellationConfig | None = None,
    ) -> GlyphMesh:
        """Attach layout metrics to a result tessellated elsewhere."""
        if config is None:
            config = self.tessellation_config()
        scale = config.scale

        bounds = outline.metadata.bounds
        if bounds is None or result.is_empty:
            bounding_box = BoundingBox.empty()
        else:
            x_min, y_min, x_max, y_max = bounds
            bounding_box = BoundingBox(
                min=(x_min * scale, y_min * scale, 0.0),
                max=(x_max * scale, y_max * scale, config.extrusion_depth),
            )

        return GlyphMesh(
            char=char,
            glyph_name=outline.name,
            result=result,
            bounding_box=bounding_box,
            advance_width=outline.metadata.advance_width * scale,
        )
