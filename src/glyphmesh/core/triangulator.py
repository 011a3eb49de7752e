"""Hole bridging and ear-clipping triangulation.

A polygon with holes is triangulated in two stages:

1. Hole bridging: each hole is spliced into the outer boundary through a
   pair of coincident edges (a "keyhole"), turning the polygon with holes
   into one simple, weakly self-touching ring.
2. Ear clipping: convex vertices whose triangle contains no other reflex
   vertex are cut off one at a time until three vertices remain.

The ring is stored as parallel arrays indexed by node id. Bridging
duplicates the two bridge endpoints as new nodes that point back at the
same output vertex, so the output vertex list never holds duplicates.

Internally the outer ring runs counter-clockwise and hole rings run
clockwise; triangles are flipped back to the source winding on output.
"""

import logging
import math

from glyphmesh.config import TessellationConfig
from glyphmesh.core.geometry import cross, point_in_triangle, segments_intersect
from glyphmesh.domain import (
    ClassifiedContour,
    ContourRole,
    Diagnostic,
    FlatContour,
    Point,
    PolygonWithHoles,
    Triangulation,
    WindingDirection,
)
from glyphmesh.exceptions import BridgeFailureError, EarClipFailure

logger = logging.getLogger(__name__)


class _Ring:
    """Doubly linked vertex rings over a growable node arena."""

    def __init__(self) -> None:
        self.xs: list[float] = []
        self.ys: list[float] = []
        self.vertex: list[int] = []
        self.prev: list[int] = []
        self.next: list[int] = []

    def add(self, x: float, y: float, vertex: int) -> int:
        node = len(self.xs)
        self.xs.append(x)
        self.ys.append(y)
        self.vertex.append(vertex)
        self.prev.append(node)
        self.next.append(node)
        return node

    def link(self, nodes: list[int]) -> int:
        """Close ``nodes`` into a ring in list order and return its first node."""
        count = len(nodes)
        for i, node in enumerate(nodes):
            self.next[node] = nodes[(i + 1) % count]
            self.prev[node] = nodes[i - 1]
        return nodes[0]

    def remove(self, node: int) -> None:
        p, n = self.prev[node], self.next[node]
        self.next[p] = n
        self.prev[n] = p

    def nodes(self, start: int) -> list[int]:
        out = [start]
        node = self.next[start]
        while node != start:
            out.append(node)
            node = self.next[node]
        return out

    def coincident(self, a: int, b: int) -> bool:
        return self.xs[a] == self.xs[b] and self.ys[a] == self.ys[b]

    def turn(self, node: int) -> float:
        """Cross product at ``node``: positive for a left (convex) turn."""
        p, n = self.prev[node], self.next[node]
        return cross(
            self.xs[p], self.ys[p],
            self.xs[node], self.ys[node],
            self.xs[n], self.ys[n],
        )

    def orient(self, a: int, b: int, c: int) -> float:
        return cross(self.xs[a], self.ys[a], self.xs[b], self.ys[b], self.xs[c], self.ys[c])

    def split(self, a: int, b: int) -> int:
        """Connect node ``a`` to node ``b`` with a pair of bridge edges.

        Both endpoints are duplicated. After the split the ring runs
        a -> b -> ... (rest of b's ring) ... -> b' -> a' -> (rest of a's ring).

        Returns:
            The duplicate of ``b``
        """
        a2 = self.add(self.xs[a], self.ys[a], self.vertex[a])
        b2 = self.add(self.xs[b], self.ys[b], self.vertex[b])
        an = self.next[a]
        bp = self.prev[b]

        self.next[a] = b
        self.prev[b] = a

        self.next[a2] = an
        self.prev[an] = a2

        self.next[b2] = a2
        self.prev[a2] = b2

        self.next[bp] = b2
        self.prev[b2] = bp

        return b2


class Triangulator:
    """Triangulates polygons with holes.

    The triangulator is stateless apart from its configuration; every call
    builds its own ring, so one instance may be reused across polygons.
    """

    def __init__(self, config: TessellationConfig | None = None) -> None:
        self.config = config if config is not None else TessellationConfig()
        self._cross_epsilon = 2.0 * self.config.area_epsilon

    def triangulate(self, polygon: PolygonWithHoles) -> Triangulation:
        """Triangulate one outer contour together with its holes.

        Holes that cannot be bridged are left out and reported as
        BridgeFailureError diagnostics; the rest of the polygon is still
        triangulated.

        Args:
            polygon: Outer contour and the holes it owns

        Returns:
            Triangulation in the winding of the source outer contour
        """
        ring = _Ring()
        vertices: list[Point] = list(polygon.outer.points)
        boundary_edges = _closed_edges(0, len(vertices))
        diagnostics: list[Diagnostic] = []

        outer_ccw = polygon.outer.signed_area > 0
        outer_nodes = [ring.add(p.x, p.y, i) for i, p in enumerate(vertices)]
        if not outer_ccw:
            outer_nodes.reverse()
        start = ring.link(outer_nodes)

        # Holes nearest the right edge are merged first so later bridges can
        # run through the keyholes already cut.
        pending = sorted(
            polygon.holes,
            key=lambda h: max(p.x for p in h.points),
            reverse=True,
        )
        for position, hole in enumerate(pending):
            base = len(vertices)
            hole_nodes = [ring.add(p.x, p.y, base + i) for i, p in enumerate(hole.points)]
            if hole.signed_area > 0:
                hole_nodes.reverse()
            hole_start = ring.link(hole_nodes)

            try:
                self._eliminate_hole(ring, start, hole_start, hole.index, pending[position + 1:])
            except BridgeFailureError as e:
                logger.warning("Dropping hole %s: %s", hole.index, e)
                diagnostics.append(Diagnostic.from_exception(e))
                continue

            vertices.extend(hole.points)
            boundary_edges.extend(_closed_edges(base, len(hole.points)))

        start, count, remap = self._remove_coincident(ring, start)
        if remap:
            boundary_edges = _remap_edges(boundary_edges, remap)
        triangles, quality_warning = self._clip_ears(ring, start)

        if quality_warning:
            error = EarClipFailure(count)
            diagnostics.append(Diagnostic.from_exception(error, polygon.outer.index))

        if not outer_ccw:
            triangles = [(a, c, b) for a, b, c in triangles]

        return Triangulation(
            vertices=vertices,
            triangles=triangles,
            boundary_edges=boundary_edges,
            quality_warning=quality_warning,
            diagnostics=diagnostics,
        )

    # ------------------------------------------------------------------
    # Hole bridging
    # ------------------------------------------------------------------

    def _eliminate_hole(
        self,
        ring: _Ring,
        start: int,
        hole_start: int,
        hole_index: int,
        unmerged: list[ClassifiedContour],
    ) -> None:
        """Splice a hole ring into the ring containing ``start``.

        Raises:
            BridgeFailureError: If no bridge to the outer ring is possible
        """
        hole = max(ring.nodes(hole_start), key=lambda n: (ring.xs[n], ring.ys[n]))

        bridge = self._find_bridge(ring, start, hole)
        if bridge is None:
            raise BridgeFailureError(hole_index, "no visible vertex to the right of the hole")

        if not self._bridge_is_clear(ring, start, hole, bridge, unmerged):
            raise BridgeFailureError(hole_index, "bridge crosses an existing edge")

        ring.split(bridge, hole)

    def _find_bridge(self, ring: _Ring, start: int, hole: int) -> int | None:
        """Find a ring node visible from ``hole`` for the bridge.

        A ray is cast from the hole vertex towards +x. The nearest ring edge
        it hits gives a candidate endpoint; reflex vertices inside the
        triangle between the hole vertex, the hit point and the candidate may
        block the view, in which case the one with the smallest angle to the
        ray is used instead.
        """
        xs, ys = ring.xs, ring.ys
        hx, hy = xs[hole], ys[hole]
        qx = math.inf
        m: int | None = None

        # Edges running upwards are the ones the ray enters from the inside
        p = start
        while True:
            n = ring.next[p]
            py, ny = ys[p], ys[n]
            if py <= hy <= ny and py != ny:
                x = xs[p] + (hy - py) * (xs[n] - xs[p]) / (ny - py)
                if hx <= x < qx:
                    qx = x
                    m = p if xs[p] > xs[n] else n
                    if x == hx:
                        # Hole touches the edge; bridge to its far endpoint
                        return m
            p = n
            if p == start:
                break

        if m is None:
            return None

        stop = m
        mx, my = xs[m], ys[m]
        tan_min = math.inf

        p = m
        while True:
            px, py = xs[p], ys[p]
            if (
                hx <= px <= mx
                and px != hx
                and point_in_triangle(px, py, hx, hy, qx, hy, mx, my)
            ):
                tan = abs(hy - py) / (px - hx)
                if self._locally_inside(ring, p, hole) and (
                    tan < tan_min
                    or (
                        tan == tan_min
                        and (px < xs[m] or (px == xs[m] and self._sector_contains(ring, m, p)))
                    )
                ):
                    m = p
                    tan_min = tan
            p = ring.next[p]
            if p == stop:
                break

        return m

    def _bridge_is_clear(
        self,
        ring: _Ring,
        start: int,
        hole: int,
        bridge: int,
        unmerged: list[ClassifiedContour],
    ) -> bool:
        """Check that segment hole -> bridge crosses no ring or hole edge.

        Edges touching either bridge endpoint are ignored.
        """
        xs, ys = ring.xs, ring.ys
        hx, hy = xs[hole], ys[hole]
        bx, by = xs[bridge], ys[bridge]

        def touches(x: float, y: float) -> bool:
            return (x == hx and y == hy) or (x == bx and y == by)

        def crosses(cx: float, cy: float, dx: float, dy: float) -> bool:
            if touches(cx, cy) or touches(dx, dy):
                return False
            return segments_intersect(hx, hy, bx, by, cx, cy, dx, dy)

        for first in (start, hole):
            p = first
            while True:
                n = ring.next[p]
                if crosses(xs[p], ys[p], xs[n], ys[n]):
                    return False
                p = n
                if p == first:
                    break

        for other in unmerged:
            for a, b in other.contour.edges():
                if crosses(a.x, a.y, b.x, b.y):
                    return False

        return True

    def _locally_inside(self, ring: _Ring, a: int, b: int) -> bool:
        """Check whether the diagonal a -> b starts inside the polygon at a."""
        p, n = ring.prev[a], ring.next[a]
        if ring.orient(p, a, n) > 0:
            return ring.orient(a, n, b) >= 0 and ring.orient(p, a, b) >= 0
        return ring.orient(p, a, b) > 0 or ring.orient(a, n, b) > 0

    def _sector_contains(self, ring: _Ring, m: int, p: int) -> bool:
        """Check whether the wedge at ``m`` contains the wedge at ``p``."""
        return (
            ring.orient(ring.prev[m], m, ring.prev[p]) > 0
            and ring.orient(ring.next[p], m, ring.next[m]) > 0
        )

    # ------------------------------------------------------------------
    # Ear clipping
    # ------------------------------------------------------------------

    def _remove_coincident(self, ring: _Ring, start: int) -> tuple[int, int, dict[int, int]]:
        """Drop nodes that coincide with their successor.

        Returns:
            A node still in the ring, the number of nodes left, and the
            output vertices no remaining node uses mapped to the coincident
            vertex that replaced them
        """
        nodes = ring.nodes(start)
        count = len(nodes)
        dropped: dict[int, int] = {}
        for node in nodes:
            if count <= 3:
                break
            if ring.coincident(node, ring.next[node]):
                if node == start:
                    start = ring.next[node]
                dropped[ring.vertex[node]] = ring.vertex[ring.next[node]]
                ring.remove(node)
                count -= 1

        if not dropped:
            return start, count, {}

        used = {ring.vertex[node] for node in ring.nodes(start)}
        remap: dict[int, int] = {}
        for vertex, target in dropped.items():
            if vertex in used:
                continue
            seen = {vertex}
            while target not in used and target in dropped and target not in seen:
                seen.add(target)
                target = dropped[target]
            if target != vertex:
                remap[vertex] = target
        return start, count, remap

    def _clip_ears(
        self, ring: _Ring, start: int
    ) -> tuple[list[tuple[int, int, int]], bool]:
        """Clip ears until three nodes remain.

        Every round the cached ear with the best shape is clipped: the one
        whose smallest triangle angle is largest. Ear status is cached per
        node and only recomputed for nodes whose neighbourhood changed.
        Spikes (zero-area vertices where the boundary doubles back) are cut
        without emitting a triangle.

        Returns:
            Triangles as output vertex index triples, and whether the
            fallback clip was needed
        """
        triangles: list[tuple[int, int, int]] = []
        quality_warning = False
        eps = self._cross_epsilon

        alive = set(ring.nodes(start))
        reflex: set[int] = set()
        spikes: set[int] = set()
        ears: dict[int, float] = {}
        # reflex node -> candidate ears whose triangle it lies in, and back
        blocked: dict[int, set[int]] = {}
        blocked_by: dict[int, int] = {}
        dirty: set[int] = set()

        def rebuild() -> None:
            reflex.clear()
            reflex.update(node for node in alive if ring.turn(node) <= eps)
            ears.clear()
            blocked.clear()
            blocked_by.clear()
            dirty.update(alive)

        def release(blocker: int) -> None:
            for candidate in blocked.pop(blocker, ()):
                blocked_by.pop(candidate, None)
                if candidate in alive:
                    dirty.add(candidate)

        def detach(node: int) -> None:
            p, n = ring.prev[node], ring.next[node]
            ring.remove(node)
            alive.discard(node)
            ears.pop(node, None)
            spikes.discard(node)
            dirty.discard(node)
            blocker = blocked_by.pop(node, None)
            if blocker is not None:
                blocked[blocker].discard(node)
            if node in reflex:
                reflex.discard(node)
                release(node)
            for neighbour in (p, n):
                dirty.add(neighbour)
                if neighbour in reflex and ring.turn(neighbour) > eps:
                    reflex.discard(neighbour)
                    release(neighbour)

        def emit(a: int, b: int, c: int) -> None:
            if ring.orient(a, b, c) > eps:
                triangles.append((ring.vertex[a], ring.vertex[b], ring.vertex[c]))

        rebuild()
        while len(alive) > 3:
            for node in dirty:
                if node not in alive:
                    continue
                if self._is_spike(ring, node):
                    spikes.add(node)
                else:
                    spikes.discard(node)
                self._evaluate(ring, node, reflex, ears, blocked, blocked_by)
            dirty.clear()

            if spikes:
                node = spikes.pop()
                p = ring.prev[node]
                detach(node)
                if len(alive) > 3 and ring.coincident(p, ring.next[p]):
                    detach(ring.next[p])
                # Neighbours of a removed spike may turn reflex
                rebuild()
                continue

            if ears:
                node = max(ears, key=ears.__getitem__)
                emit(ring.prev[node], node, ring.next[node])
                detach(node)
                continue

            # No valid ear: clip the flattest vertex and rebuild every cache
            quality_warning = True
            node = min(alive, key=lambda v: abs(ring.turn(v)))
            logger.warning(
                "No valid ear among %d vertices; clipping vertex %d",
                len(alive), ring.vertex[node],
            )
            emit(ring.prev[node], node, ring.next[node])
            detach(node)
            rebuild()

        if len(alive) == 3:
            a = next(iter(alive))
            emit(ring.prev[a], a, ring.next[a])

        return triangles, quality_warning

    def _evaluate(
        self,
        ring: _Ring,
        node: int,
        reflex: set[int],
        ears: dict[int, float],
        blocked: dict[int, set[int]],
        blocked_by: dict[int, int],
    ) -> None:
        """Recompute the ear status of ``node``."""
        ears.pop(node, None)
        previous = blocked_by.pop(node, None)
        if previous is not None:
            blocked[previous].discard(node)

        turn = ring.turn(node)
        if turn <= self._cross_epsilon:
            return

        a, c = ring.prev[node], ring.next[node]
        xs, ys = ring.xs, ring.ys
        ax, ay = xs[a], ys[a]
        bx, by = xs[node], ys[node]
        cx, cy = xs[c], ys[c]

        for other in reflex:
            if other in (a, node, c):
                continue
            ox, oy = xs[other], ys[other]
            if (ox == ax and oy == ay) or (ox == bx and oy == by) or (ox == cx and oy == cy):
                continue
            if point_in_triangle(ox, oy, ax, ay, bx, by, cx, cy):
                blocked.setdefault(other, set()).add(node)
                blocked_by[node] = other
                return

        ears[node] = _angle_margin(ax, ay, bx, by, cx, cy, turn)

    def _is_spike(self, ring: _Ring, node: int) -> bool:
        """Zero-area vertex where the boundary doubles back on itself."""
        if abs(ring.turn(node)) > self._cross_epsilon:
            return False
        p, n = ring.prev[node], ring.next[node]
        xs, ys = ring.xs, ring.ys
        dot = (xs[node] - xs[p]) * (xs[n] - xs[node]) + (ys[node] - ys[p]) * (ys[n] - ys[node])
        return dot < 0


def _closed_edges(base: int, count: int) -> list[tuple[int, int]]:
    return [(base + i, base + (i + 1) % count) for i in range(count)]


def _remap_edges(
    edges: list[tuple[int, int]], remap: dict[int, int]
) -> list[tuple[int, int]]:
    """Point edges at replacement vertices, dropping edges that collapse."""
    out = []
    for a, b in edges:
        a, b = remap.get(a, a), remap.get(b, b)
        if a != b:
            out.append((a, b))
    return out


def _angle_margin(
    ax: float, ay: float, bx: float, by: float, cx: float, cy: float, turn: float
) -> float:
    """Sine of the smallest angle of triangle abc.

    The smallest angle sits opposite the shortest side, so its sine is twice
    the area over the product of the two longer sides.
    """
    sides = sorted(
        (
            math.hypot(bx - ax, by - ay),
            math.hypot(cx - bx, cy - by),
            math.hypot(ax - cx, ay - cy),
        )
    )
    denominator = sides[1] * sides[2]
    if denominator == 0.0:
        return 0.0
    return turn / denominator


def triangulate(polygon: PolygonWithHoles, config: TessellationConfig | None = None) -> Triangulation:
    """Triangulate a polygon with holes.

    Convenience wrapper around Triangulator.
    """
    return Triangulator(config).triangulate(polygon)


def triangulate_points(
    outer: list[Point],
    holes: list[list[Point]] | None = None,
    config: TessellationConfig | None = None,
) -> Triangulation:
    """Triangulate a polygon given as raw point lists.

    Args:
        outer: Outer boundary, either winding
        holes: Hole boundaries, either winding
        config: Tessellation settings

    Returns:
        Triangulation whose vertices are ``outer`` followed by each hole
    """

    def classify(points: list[Point], index: int, role: ContourRole) -> ClassifiedContour:
        contour = FlatContour(points=list(points))
        area = contour.signed_area()
        return ClassifiedContour(
            contour=contour,
            index=index,
            signed_area=area,
            direction=WindingDirection.from_area(area),
            role=role,
            owner=0 if role is ContourRole.HOLE else None,
        )

    polygon = PolygonWithHoles(
        outer=classify(outer, 0, ContourRole.OUTER),
        holes=[classify(h, i + 1, ContourRole.HOLE) for i, h in enumerate(holes or [])],
    )
    return triangulate(polygon, config)
