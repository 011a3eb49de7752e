"""Mesh assembly: merge per-polygon parts into one indexed mesh.

Parts are concatenated with their triangle indices offset, vertices closer
than the merge epsilon are welded together, triangles that collapse to a
repeated index are dropped and, for 3D meshes, normals are computed.
"""

import math
from collections.abc import Iterable, Sequence

from glyphmesh.config import NormalMode, TessellationConfig
from glyphmesh.domain import Mesh, MeshPart
from glyphmesh.domain.mesh import Vertex

_Normal = tuple[float, float, float]


def _normalize(x: float, y: float, z: float) -> _Normal:
    length = math.sqrt(x * x + y * y + z * z)
    if length == 0.0:
        return (0.0, 0.0, 0.0)
    return (x / length, y / length, z / length)


def face_normal(a: Vertex, b: Vertex, c: Vertex) -> _Normal:
    """Unit normal of triangle abc by the right-hand rule."""
    ux, uy, uz = b[0] - a[0], b[1] - a[1], b[2] - a[2]
    vx, vy, vz = c[0] - a[0], c[1] - a[1], c[2] - a[2]
    return _normalize(uy * vz - uz * vy, uz * vx - ux * vz, ux * vy - uy * vx)


class VertexWelder:
    """Deduplicates vertices that lie within ``epsilon`` of each other.

    Vertices are hashed into a grid of ``epsilon``-sized cells; a lookup
    checks the vertex's own cell and every neighbouring cell, so any earlier
    vertex within ``epsilon`` is found. The first vertex seen wins.
    """

    def __init__(self, epsilon: float) -> None:
        self.epsilon = epsilon
        self.vertices: list[Vertex] = []
        self._cells: dict[tuple[int, ...], list[int]] = {}

    def _cell(self, vertex: Vertex) -> tuple[int, ...]:
        if self.epsilon <= 0:
            return tuple(vertex)  # type: ignore[arg-type]
        return tuple(math.floor(c / self.epsilon) for c in vertex)

    def _neighbours(self, cell: tuple[int, ...]) -> Iterable[tuple[int, ...]]:
        if self.epsilon <= 0:
            yield cell
            return
        offsets: list[tuple[int, ...]] = [()]
        for _ in cell:
            offsets = [o + (d,) for o in offsets for d in (-1, 0, 1)]
        for offset in offsets:
            yield tuple(c + d for c, d in zip(cell, offset))

    def add(self, vertex: Vertex) -> int:
        """Return the index of ``vertex``, adding it if no close vertex exists."""
        cell = self._cell(vertex)
        for neighbour in self._neighbours(cell):
            for index in self._cells.get(neighbour, ()):
                if math.dist(self.vertices[index], vertex) <= self.epsilon:
                    return index

        index = len(self.vertices)
        self.vertices.append(vertex)
        self._cells.setdefault(cell, []).append(index)
        return index


class MeshAssembler:
    """Builds a single mesh from the parts of one glyph."""

    def __init__(self, config: TessellationConfig | None = None) -> None:
        self.config = config if config is not None else TessellationConfig()

    def assemble(self, parts: Sequence[MeshPart], dimension: int = 2) -> Mesh:
        """Merge parts into one mesh.

        Args:
            parts: Per-polygon parts, all of the same dimension
            dimension: 2 for flat parts, 3 for extruded parts

        Returns:
            Deduplicated Mesh; 3D meshes carry face normals, and vertex
            normals too when the normal mode is smooth
        """
        welder = VertexWelder(self.config.merge_epsilon)
        triangles: list[tuple[int, int, int]] = []

        for part in parts:
            remap = [welder.add(v) for v in part.vertices]
            for a, b, c in part.triangles:
                ra, rb, rc = remap[a], remap[b], remap[c]
                if ra == rb or rb == rc or ra == rc:
                    continue
                triangles.append((ra, rb, rc))

        mesh = Mesh(vertices=welder.vertices, triangles=triangles, dimension=dimension)

        if dimension == 3:
            mesh.face_normals = [
                face_normal(mesh.vertices[a], mesh.vertices[b], mesh.vertices[c])
                for a, b, c in triangles
            ]
            if self.config.normal_mode == NormalMode.SMOOTH:
                mesh.vertex_normals = vertex_normals(mesh)

        return mesh


def vertex_normals(mesh: Mesh) -> list[_Normal]:
    """Average the face normals around each vertex.

    Vertices used by no triangle get a zero normal.
    """
    sums = [[0.0, 0.0, 0.0] for _ in mesh.vertices]
    face_normals = mesh.face_normals
    if face_normals is None:
        face_normals = [
            face_normal(mesh.vertices[a], mesh.vertices[b], mesh.vertices[c])
            for a, b, c in mesh.triangles
        ]

    for (a, b, c), normal in zip(mesh.triangles, face_normals):
        for index in (a, b, c):
            acc = sums[index]
            acc[0] += normal[0]
            acc[1] += normal[1]
            acc[2] += normal[2]

    return [_normalize(x, y, z) for x, y, z in sums]


def assemble(
    parts: Sequence[MeshPart],
    dimension: int = 2,
    config: TessellationConfig | None = None,
) -> Mesh:
    """Merge parts with the given configuration.

    Convenience wrapper around MeshAssembler.
    """
    return MeshAssembler(config).assemble(parts, dimension)
