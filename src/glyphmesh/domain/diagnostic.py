"""Diagnostics for recovered problems.

Recoverable failures (skipped contours, unresolved holes, failed bridges,
ear-clipping fallbacks) never abort a glyph. They are collected as
Diagnostic entries instead and surfaced to the caller with the result.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Diagnostic:
    """A recovered problem found while tessellating a glyph.

    Attributes:
        kind: Name of the error class (e.g. "DegenerateContourError")
        message: Human-readable description
        contour_index: Index of the source contour involved, if any
    """

    kind: str
    message: str
    contour_index: int | None = None

    @classmethod
    def from_exception(cls, error: Exception, contour_index: int | None = None) -> "Diagnostic":
        """Build a diagnostic from a recovered exception."""
        if contour_index is None:
            contour_index = getattr(error, "contour_index", None)
        return cls(kind=type(error).__name__, message=str(error), contour_index=contour_index)

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "message": self.message, "contour_index": self.contour_index}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Diagnostic":
        return cls(
            kind=data["kind"],
            message=data["message"],
            contour_index=data.get("contour_index"),
        )
