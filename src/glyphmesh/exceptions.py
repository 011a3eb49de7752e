"""Exception hierarchy for Glyphmesh."""


class GlyphMeshError(Exception):
    """Base exception for all Glyphmesh errors."""

    pass


class ConfigurationError(GlyphMeshError):
    """Invalid combination of tessellation settings."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid configuration: {reason}")


class FontError(GlyphMeshError):
    """Errors related to font loading."""

    pass


class FontLoadError(FontError):
    """Error loading a font file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load font '{path}': {reason}")


class GlyphNotFoundError(FontError):
    """Requested glyph not found in font."""

    def __init__(self, glyph_name: str) -> None:
        self.glyph_name = glyph_name
        super().__init__(f"Glyph '{glyph_name}' not found in font")


class ContourError(GlyphMeshError):
    """A single contour could not be used.

    Contour errors are recovered by the pipeline: the offending contour is
    skipped and the rest of the glyph is still tessellated.
    """

    def __init__(self, message: str, contour_index: int | None = None) -> None:
        self.contour_index = contour_index
        super().__init__(message)


class DegenerateContourError(ContourError):
    """Contour collapsed to fewer than three usable points or zero area."""


class OpenContourError(ContourError):
    """Contour segments do not form a closed chain."""


class SelfIntersectionError(ContourError):
    """Flattened contour crosses itself."""


class UnresolvedHoleError(GlyphMeshError):
    """A hole contour has no enclosing outer contour."""

    def __init__(self, contour_index: int) -> None:
        self.contour_index = contour_index
        super().__init__(f"Hole contour {contour_index} is not enclosed by any outer contour")


class BridgeFailureError(GlyphMeshError):
    """No valid bridge connects a hole to its outer contour."""

    def __init__(self, contour_index: int | None, reason: str) -> None:
        self.contour_index = contour_index
        self.reason = reason
        super().__init__(f"Bridge for hole {contour_index} failed: {reason}")


class EarClipFailure(GlyphMeshError):
    """Ear clipping fell back to a best-effort clip.

    Never raised out of the triangulator; it names the diagnostic recorded
    when the fallback path is taken.
    """

    def __init__(self, remaining: int) -> None:
        self.remaining = remaining
        super().__init__(f"No valid ear among {remaining} remaining vertices; used fallback clip")

