"""Constrained triangulation of a constraint graph into a flat mesh.

The algorithm itself is delegated to a backend. Two are shipped:

- ``triangle``: Shewchuk's Triangle in PSLG mode; holes are carved from
  seed points and constraint segments are kept unsplit.
- ``earcut``: mapbox earcut ear clipping; holes come from the ring spans.

Everything around the backend call (topology validation, seed resolution,
output checks, winding normalization) lives here so that both backends
produce the same contract.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Protocol, Set, Tuple

import mapbox_earcut
import numpy as np
import triangle
from shapely.geometry import Point, Polygon
from shapely.validation import explain_validity

from polyprism.constraints import interior_seed
from polyprism.contracts import ConstraintGraph, FlatMesh, TriangulationSettings
from polyprism.errors import (
    DegenerateInputError,
    InvalidHoleError,
    PolyPrismError,
    TriangulationFailure,
)
from polyprism.metrics import area_tolerance, triangle_areas

logger = logging.getLogger(__name__)


class TriangulationBackend(Protocol):
    name: str

    def triangulate(
        self, graph: ConstraintGraph, settings: TriangulationSettings
    ) -> FlatMesh:
        ...


class TriangleBackend:
    """Constrained Delaunay triangulation through the ``triangle`` package."""

    name = "triangle"

    def options(self, settings: TriangulationSettings) -> str:
        opts = "p"
        if settings.restore_boundary:
            opts += "Y"
        if not settings.verbose:
            opts += "Q"
        return opts

    def triangulate(
        self, graph: ConstraintGraph, settings: TriangulationSettings
    ) -> FlatMesh:
        payload = {
            "vertices": np.ascontiguousarray(graph.positions, dtype=np.float64),
            "segments": np.ascontiguousarray(graph.edges, dtype=np.int32),
        }
        if len(graph.hole_seeds) > 0:
            payload["holes"] = np.ascontiguousarray(graph.hole_seeds, dtype=np.float64)

        output = triangle.triangulate(payload, self.options(settings))
        if "triangles" not in output or "vertices" not in output:
            raise TriangulationFailure("Triangle produced no triangles")
        return FlatMesh(
            positions=np.asarray(output["vertices"], dtype=float),
            triangles=np.asarray(output["triangles"], dtype=int).reshape(-1, 3),
        )


_COLLINEAR_TOLERANCE = 1e-9


def _split_edge_at(positions: np.ndarray, triangles: List[List[int]], vertex: int) -> bool:
    point = positions[vertex]
    for t, tri in enumerate(triangles):
        for k in range(3):
            p, q, r = tri[k], tri[(k + 1) % 3], tri[(k + 2) % 3]
            d = positions[q] - positions[p]
            w = point - positions[p]
            length2 = float(d @ d)
            if length2 == 0.0:
                continue
            cross = float(d[0] * w[1] - d[1] * w[0])
            along = float(d @ w)
            if abs(cross) <= _COLLINEAR_TOLERANCE * length2 and 0.0 < along < length2:
                triangles[t] = [p, vertex, r]
                triangles.append([vertex, q, r])
                return True
    return False


def reinsert_dropped_vertices(positions: np.ndarray, triangles: np.ndarray) -> np.ndarray:
    """Split triangles so ring vertices skipped by the backend become mesh vertices.

    Earcut filters out collinear ring vertices. Each one lies on an output
    edge; splitting the triangle that owns the edge restores the ring edges
    on both sides of it. Winding is preserved.
    """
    tris = [list(tri) for tri in np.asarray(triangles, dtype=int).tolist()]
    used = {v for tri in tris for v in tri}
    for vertex in range(len(positions)):
        if vertex not in used and _split_edge_at(positions, tris, vertex):
            used.add(vertex)
    return np.asarray(tris, dtype=int).reshape(-1, 3)


class EarcutBackend:
    """Ear clipping with hole support through ``mapbox_earcut``."""

    name = "earcut"

    def triangulate(
        self, graph: ConstraintGraph, settings: TriangulationSettings
    ) -> FlatMesh:
        ring_ends = np.asarray(
            [start + count for start, count in graph.ring_spans], dtype=np.uint32
        )
        positions = np.ascontiguousarray(graph.positions, dtype=np.float64)
        indices = mapbox_earcut.triangulate_float64(positions, ring_ends)
        triangles = np.asarray(indices, dtype=int).reshape(-1, 3)
        return FlatMesh(
            positions=positions.copy(),
            triangles=reinsert_dropped_vertices(positions, triangles),
        )


BACKENDS: Dict[str, TriangulationBackend] = {
    TriangleBackend.name: TriangleBackend(),
    EarcutBackend.name: EarcutBackend(),
}


def get_backend(name: str) -> TriangulationBackend:
    try:
        return BACKENDS[name]
    except KeyError:
        raise ValueError(
            f"Unknown triangulation backend: {name!r} (expected one of {sorted(BACKENDS)})"
        ) from None


def auto_hole_seeds(graph: ConstraintGraph) -> np.ndarray:
    seeds = [interior_seed(graph.ring(i + 1)) for i in range(graph.hole_count)]
    return np.asarray(seeds, dtype=float).reshape(-1, 2)


def validate_topology(graph: ConstraintGraph) -> None:
    """Reject rings, holes and seeds the backend cannot handle."""
    boundary = Polygon(graph.ring(0))
    if not boundary.is_valid:
        raise TriangulationFailure(
            f"Boundary ring is not a simple polygon: {explain_validity(boundary)}"
        )

    seen = []
    for h in range(graph.hole_count):
        hole = Polygon(graph.ring(h + 1))
        if not hole.is_valid:
            raise TriangulationFailure(
                f"Hole {h} is not a simple polygon: {explain_validity(hole)}"
            )
        if not boundary.contains(hole):
            raise InvalidHoleError(f"Hole {h} does not lie inside the boundary")
        for other_index, other in seen:
            if not hole.disjoint(other):
                raise TriangulationFailure(f"Holes {other_index} and {h} overlap")
        seed = graph.hole_seeds[h]
        if not hole.contains(Point(float(seed[0]), float(seed[1]))):
            raise InvalidHoleError(
                f"Seed ({seed[0]:.6g}, {seed[1]:.6g}) of hole {h} lies outside the hole"
            )
        seen.append((h, hole))


def _edge_set(triangles: np.ndarray) -> Set[Tuple[int, int]]:
    edges = np.vstack(
        [triangles[:, [0, 1]], triangles[:, [1, 2]], triangles[:, [2, 0]]]
    )
    edges.sort(axis=1)
    return set(map(tuple, edges.tolist()))


def missing_constraint_edges(graph: ConstraintGraph, mesh: FlatMesh) -> np.ndarray:
    """Constraint edges that are not an edge of any output triangle."""
    if len(graph.edges) == 0:
        return np.zeros((0, 2), dtype=int)
    present = _edge_set(mesh.triangles) if len(mesh.triangles) else set()
    ordered = np.sort(graph.edges, axis=1)
    mask = np.array([tuple(e) not in present for e in ordered.tolist()], dtype=bool)
    return graph.edges[mask]


def orient_for_up_normals(mesh: FlatMesh) -> FlatMesh:
    """Drop zero-area triangles and wind the rest clockwise in ``(x, z)``.

    Clockwise in ``(x, z)`` gives a +Y geometric normal after lifting to
    ``(x, y, z)``.
    """
    tris = np.asarray(mesh.triangles, dtype=int).reshape(-1, 3)
    if len(tris) == 0:
        return FlatMesh(mesh.positions, tris)
    areas = triangle_areas(mesh.positions, tris)
    keep = np.abs(areas) > area_tolerance(mesh.positions)
    tris = tris[keep]
    areas = areas[keep]
    flip = areas > 0.0
    tris[flip] = tris[flip][:, [0, 2, 1]]
    return FlatMesh(positions=mesh.positions, triangles=tris)


def run_triangulation(
    graph: ConstraintGraph,
    settings: Optional[TriangulationSettings] = None,
    backend: Optional[TriangulationBackend] = None,
) -> FlatMesh:
    """Triangulate *graph*, raising a ``PolyPrismError`` on any failure."""
    if settings is None:
        settings = TriangulationSettings()
    if backend is None:
        backend = BACKENDS[TriangleBackend.name]

    if graph.boundary_count < 3:
        raise DegenerateInputError(
            f"Boundary has {graph.boundary_count} points; at least 3 are required"
        )

    if settings.auto_holes_and_boundary and graph.hole_count:
        graph = ConstraintGraph(
            positions=graph.positions,
            edges=graph.edges,
            hole_seeds=auto_hole_seeds(graph),
            ring_spans=list(graph.ring_spans),
        )

    if settings.validate_input:
        validate_topology(graph)

    try:
        raw = backend.triangulate(graph, settings)
    except PolyPrismError:
        raise
    except Exception as exc:
        raise TriangulationFailure(f"{backend.name} backend failed: {exc}") from exc

    mesh = orient_for_up_normals(raw)
    if len(mesh.triangles) == 0:
        raise TriangulationFailure(f"{backend.name} backend produced an empty mesh")
    if len(mesh.positions) < len(graph.positions):
        raise TriangulationFailure(
            f"{backend.name} backend dropped input positions "
            f"({len(mesh.positions)} < {len(graph.positions)})"
        )

    if settings.restore_boundary:
        missing = missing_constraint_edges(graph, mesh)
        if len(missing):
            raise TriangulationFailure(
                f"{len(missing)} constraint edge(s) missing from the triangulation, "
                f"first {missing[0].tolist()}"
            )

    if settings.verbose:
        logger.debug(
            "%s: %d positions (%d inserted), %d triangles, %d holes",
            backend.name,
            len(mesh.positions),
            len(mesh.positions) - len(graph.positions),
            len(mesh.triangles),
            graph.hole_count,
        )
    return mesh
