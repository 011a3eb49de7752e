"""Font I/O layer for glyphmesh.

This module handles reading font files using fonttools. It provides a
clean abstraction layer between fonttools and the domain models.

Key responsibilities:
- Load TTF/OTF fonts
- Convert fonttools drawing commands to segment contours
- Format and winding detection (TrueType vs CFF)
- Per-font mesh generation

Key classes:
- FontReader: Load fonts and extract glyph outlines
- FontMeshGenerator: Tessellate characters of one font
"""

from glyphmesh.io.generator import FontMeshGenerator, GlyphMesh
from glyphmesh.io.reader import FontReader

__all__ = [
    "FontMeshGenerator",
    "FontReader",
    "GlyphMesh",
]
