"""Extrusion of a 2D triangulation into a closed 3D solid.

The front cap sits at z = 0 facing -z, the back cap at z = depth facing +z,
and one quad (two triangles) per boundary edge joins them. Every face is
wound counter-clockwise when seen from outside the solid.
"""

from glyphmesh.core.geometry import cross
from glyphmesh.domain import MeshPart, Triangulation, WindingDirection


def _triangles_ccw(triangulation: Triangulation) -> bool:
    """True if the triangulation's triangles wind counter-clockwise."""
    vertices = triangulation.vertices
    total = 0.0
    for a, b, c in triangulation.triangles:
        pa, pb, pc = vertices[a], vertices[b], vertices[c]
        total += cross(pa.x, pa.y, pb.x, pb.y, pc.x, pc.y)
    return total > 0


def extrude(
    triangulation: Triangulation,
    depth: float,
    outer_winding: WindingDirection = WindingDirection.COUNTER_CLOCKWISE,
) -> MeshPart:
    """Extrude a triangulation along +z.

    Vertex ``i`` of the triangulation becomes vertex ``i`` at z = 0 and
    vertex ``i + n`` at z = depth, where n is the 2D vertex count.

    A depth of zero yields the flat triangulation as a single cap at z = 0
    in its source winding.

    Args:
        triangulation: 2D triangulation with boundary edges
        depth: Extrusion distance (must not be negative)
        outer_winding: Winding of outer contours; decides which side of each
            boundary edge is solid when there are no triangles to inspect

    Returns:
        MeshPart with 3D vertices

    Raises:
        ValueError: If depth is negative
    """
    if depth < 0:
        raise ValueError(f"Extrusion depth must not be negative, got {depth}")

    n = len(triangulation.vertices)
    front = [(p.x, p.y, 0.0) for p in triangulation.vertices]

    if depth == 0:
        return MeshPart(vertices=front, triangles=list(triangulation.triangles))

    if triangulation.triangles:
        ccw = _triangles_ccw(triangulation)
    else:
        ccw = outer_winding == WindingDirection.COUNTER_CLOCKWISE

    back = [(p.x, p.y, depth) for p in triangulation.vertices]
    triangles: list[tuple[int, int, int]] = []

    # A CCW cap faces +z, so the front copy is reversed to face -z
    for a, b, c in triangulation.triangles:
        if ccw:
            triangles.append((a, c, b))
            triangles.append((a + n, b + n, c + n))
        else:
            triangles.append((a, b, c))
            triangles.append((a + n, c + n, b + n))

    # Solid lies to the left of every CCW boundary edge and to the right of
    # every CW one; walls face away from the solid.
    for a, b in triangulation.boundary_edges:
        if not ccw:
            a, b = b, a
        triangles.append((a, b, b + n))
        triangles.append((a, b + n, a + n))

    return MeshPart(vertices=front + back, triangles=triangles)
