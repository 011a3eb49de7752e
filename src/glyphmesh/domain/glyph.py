"""Glyph outline representation and metadata.

This module defines the glyph outline handed to the tessellation pipeline by
the font-reading collaborator: an ordered list of closed contours plus the
metrics used for optional scaling.
"""

from dataclasses import dataclass, field
from typing import Any

from glyphmesh.domain.contour import Contour


@dataclass
class GlyphMetadata:
    """Metadata about a glyph.

    Attributes:
        name: Glyph name (e.g., "A", "B", "exclam")
        unicode: Unicode code point (None for unencoded glyphs)
        advance_width: Horizontal advance width in font units
        bounds: Nominal (x_min, y_min, x_max, y_max) in font units, if known
    """

    name: str
    unicode: int | None = None
    advance_width: float = 0.0
    bounds: tuple[float, float, float, float] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {
            "name": self.name,
            "unicode": self.unicode,
            "advance_width": self.advance_width,
            "bounds": list(self.bounds) if self.bounds is not None else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GlyphMetadata":
        """Deserialize from dictionary."""
        bounds = data.get("bounds")
        return cls(
            name=data["name"],
            unicode=data.get("unicode"),
            advance_width=data.get("advance_width", 0.0),
            bounds=tuple(bounds) if bounds is not None else None,  # type: ignore[arg-type]
        )


@dataclass
class GlyphOutline:
    """A glyph as supplied by the font collaborator.

    Attributes:
        metadata: Glyph metadata (name, unicode, metrics)
        contours: Closed contours in font units
    """

    metadata: GlyphMetadata
    contours: list[Contour] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.metadata.name

    def is_empty(self) -> bool:
        """Check if glyph has no outlines.

        Empty glyphs include spaces and other non-printing characters.
        """
        return len(self.contours) == 0

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {
            "metadata": self.metadata.to_dict(),
            "contours": [c.to_dict() for c in self.contours],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GlyphOutline":
        """Deserialize from dictionary."""
        return cls(
            metadata=GlyphMetadata.from_dict(data["metadata"]),
            contours=[Contour.from_dict(c) for c in data["contours"]],
        )
