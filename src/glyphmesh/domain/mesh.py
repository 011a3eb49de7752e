"""Mesh types produced by the tessellation pipeline.

This module defines:
- Triangulation: 2D triangles of one polygon with holes, plus its boundary edges
- MeshPart: Raw vertices and triangles handed to the assembler
- BoundingBox: Axis-aligned bounds of a mesh
- Mesh: Final deduplicated vertex/index buffers with optional normals
"""

from dataclasses import dataclass, field
from typing import Any

from glyphmesh.domain.contour import Point
from glyphmesh.domain.diagnostic import Diagnostic

Vertex = tuple[float, ...]
Triangle = tuple[int, int, int]
Edge = tuple[int, int]


@dataclass
class Triangulation:
    """Result of triangulating one polygon with holes.

    Triangle indices refer to ``vertices``. Bridge vertices are never
    duplicated in ``vertices``; both copies of a bridged vertex map to the
    same index.

    Attributes:
        vertices: Vertices of the outer contour followed by every merged hole
        triangles: Triangles in the winding of the source outer contour
        boundary_edges: Outer and hole edges in source traversal order;
            synthetic bridge edges are excluded
        quality_warning: True if ear clipping had to use the fallback clip
        diagnostics: Holes that could not be bridged and fallback clips
    """

    vertices: list[Point]
    triangles: list[Triangle]
    boundary_edges: list[Edge]
    quality_warning: bool = False
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def dropped_holes(self) -> list[int]:
        """Contour indices of holes left out of the triangulation."""
        return [
            d.contour_index
            for d in self.diagnostics
            if d.kind == "BridgeFailureError" and d.contour_index is not None
        ]

    def as_part(self) -> "MeshPart":
        """Flat 2D mesh part of this triangulation."""
        return MeshPart(
            vertices=[p.to_tuple() for p in self.vertices],
            triangles=list(self.triangles),
        )

    def area(self) -> float:
        """Sum of unsigned triangle areas."""
        total = 0.0
        for a, b, c in self.triangles:
            pa, pb, pc = self.vertices[a], self.vertices[b], self.vertices[c]
            total += abs((pb.x - pa.x) * (pc.y - pa.y) - (pb.y - pa.y) * (pc.x - pa.x)) / 2.0
        return total


@dataclass
class MeshPart:
    """Vertices and triangles of one polygon, before assembly.

    Attributes:
        vertices: 2D or 3D vertex positions
        triangles: Triangles indexing ``vertices``
    """

    vertices: list[Vertex]
    triangles: list[Triangle]


@dataclass(frozen=True)
class BoundingBox:
    """A bounding box for a mesh. If the mesh is flat, the z-coordinates are zero.

    Attributes:
        min: The coordinates of the minimum point
        max: The coordinates of the maximum point
    """

    min: tuple[float, float, float]
    max: tuple[float, float, float]

    @classmethod
    def empty(cls) -> "BoundingBox":
        """Bounding box of an empty mesh."""
        return cls(min=(0.0, 0.0, 0.0), max=(0.0, 0.0, 0.0))

    def center(self) -> tuple[float, float, float]:
        """Point in the geometric center of this box.

        Example:
            >>> BoundingBox((0.0, 0.0, 0.0), (1.0, 1.0, 1.0)).center()
            (0.5, 0.5, 0.5)
        """
        return (
            self.min[0] + (self.max[0] - self.min[0]) * 0.5,
            self.min[1] + (self.max[1] - self.min[1]) * 0.5,
            self.min[2] + (self.max[2] - self.min[2]) * 0.5,
        )

    def size(self) -> tuple[float, float, float]:
        """Extent of this box along each coordinate axis.

        Example:
            >>> BoundingBox((0.0, 0.0, 1.0), (1.0, 1.0, 3.0)).size()
            (1.0, 1.0, 2.0)
        """
        return (
            abs(self.max[0] - self.min[0]),
            abs(self.max[1] - self.min[1]),
            abs(self.max[2] - self.min[2]),
        )


@dataclass
class Mesh:
    """Indexed triangle mesh for one glyph.

    Attributes:
        vertices: Vertex positions, (x, y) for flat meshes or (x, y, z)
        triangles: Vertex index triples
        dimension: 2 for flat meshes, 3 for extruded meshes
        face_normals: One unit normal per triangle (3D meshes only)
        vertex_normals: One averaged unit normal per vertex (smooth 3D meshes only)
    """

    vertices: list[Vertex]
    triangles: list[Triangle]
    dimension: int = 2
    face_normals: list[tuple[float, float, float]] | None = None
    vertex_normals: list[tuple[float, float, float]] | None = None

    @classmethod
    def empty(cls, dimension: int = 2) -> "Mesh":
        """Mesh without geometry, used for glyphs like space."""
        return cls(vertices=[], triangles=[], dimension=dimension)

    def is_empty(self) -> bool:
        return not self.triangles

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def triangle_count(self) -> int:
        return len(self.triangles)

    def bounding_box(self) -> BoundingBox:
        """Axis-aligned bounds of all vertices; z is zero for flat meshes."""
        if not self.vertices:
            return BoundingBox.empty()

        xs = [v[0] for v in self.vertices]
        ys = [v[1] for v in self.vertices]
        zs = [v[2] if len(v) > 2 else 0.0 for v in self.vertices]
        return BoundingBox(
            min=(min(xs), min(ys), min(zs)),
            max=(max(xs), max(ys), max(zs)),
        )

    def flat_vertices(self) -> list[float]:
        """Vertex coordinates as one flat list, ready for a vertex buffer."""
        return [c for v in self.vertices for c in v]

    def flat_indices(self) -> list[int]:
        """Triangle indices as one flat list, ready for an index buffer."""
        return [i for t in self.triangles for i in t]

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {
            "vertices": [list(v) for v in self.vertices],
            "triangles": [list(t) for t in self.triangles],
            "dimension": self.dimension,
            "face_normals": (
                [list(n) for n in self.face_normals] if self.face_normals is not None else None
            ),
            "vertex_normals": (
                [list(n) for n in self.vertex_normals] if self.vertex_normals is not None else None
            ),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Mesh":
        """Deserialize from dictionary."""
        face_normals = data.get("face_normals")
        vertex_normals = data.get("vertex_normals")
        return cls(
            vertices=[tuple(v) for v in data["vertices"]],
            triangles=[tuple(t) for t in data["triangles"]],  # type: ignore[misc]
            dimension=data.get("dimension", 2),
            face_normals=(
                [tuple(n) for n in face_normals] if face_normals is not None else None  # type: ignore[misc]
            ),
            vertex_normals=(
                [tuple(n) for n in vertex_normals] if vertex_normals is not None else None  # type: ignore[misc]
            ),
        )
