"""Per-glyph tessellation result."""

from dataclasses import dataclass, field
from typing import Any

from glyphmesh.domain.diagnostic import Diagnostic
from glyphmesh.domain.mesh import Mesh


@dataclass
class TessellationResult:
    """Mesh of one glyph together with everything that went wrong.

    Attributes:
        mesh: The assembled mesh (possibly empty)
        diagnostics: Recovered problems, in the order they were found
        quality_warning: True if any polygon needed the ear-clipping fallback
        polygon_count: Number of polygons with holes that were triangulated
    """

    mesh: Mesh
    diagnostics: list[Diagnostic] = field(default_factory=list)
    quality_warning: bool = False
    polygon_count: int = 0

    @property
    def is_empty(self) -> bool:
        """True when the glyph produced no geometry (e.g. a space)."""
        return self.mesh.is_empty()

    def has_warnings(self) -> bool:
        return bool(self.diagnostics) or self.quality_warning

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {
            "mesh": self.mesh.to_dict(),
            "diagnostics": [d.to_dict() for d in self.diagnostics],
            "quality_warning": self.quality_warning,
            "polygon_count": self.polygon_count,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TessellationResult":
        """Deserialize from dictionary."""
        return cls(
            mesh=Mesh.from_dict(data["mesh"]),
            diagnostics=[Diagnostic.from_dict(d) for d in data.get("diagnostics", [])],
            quality_warning=data.get("quality_warning", False),
            polygon_count=data.get("polygon_count", 0),
        )
