"""Extrusion of a flat mesh into bottom cap, top cap and side wall."""

from __future__ import annotations

import logging
import math

import numpy as np

from polyprism.contracts import FlatMesh, PrismMesh, SurfaceMesh
from polyprism.errors import ExtrusionError
from polyprism.metrics import signed_area

logger = logging.getLogger(__name__)


def _side_wall(boundary: np.ndarray, height: float) -> SurfaceMesh:
    """Two triangles per boundary edge, wound for outward normals.

    Vertices ``[0, n)`` are the boundary at y=0 and ``[n, 2n)`` the same
    points at y=height.
    """
    n = len(boundary)
    bottom = np.column_stack([boundary[:, 0], np.zeros(n), boundary[:, 1]])
    top = np.column_stack([boundary[:, 0], np.full(n, height), boundary[:, 1]])

    k = np.arange(n, dtype=int)
    k_next = (k + 1) % n
    b0, b1 = k, k_next
    t0, t1 = n + k, n + k_next

    # (b0, b1, t0) faces left of the edge; left is the interior of a
    # counter-clockwise ring, so those rings get the reversed winding.
    if signed_area(boundary) > 0.0:
        first = np.column_stack([b0, t0, b1])
        second = np.column_stack([b1, t0, t1])
    else:
        first = np.column_stack([b0, b1, t0])
        second = np.column_stack([b1, t1, t0])

    faces = np.empty((2 * n, 3), dtype=int)
    faces[0::2] = first
    faces[1::2] = second
    return SurfaceMesh("side", np.vstack([bottom, top]), faces)


def extrude(flat_mesh: FlatMesh, boundary_edge_count: int, height: float) -> PrismMesh:
    """Extrude *flat_mesh* along +Y.

    The first ``boundary_edge_count`` positions of the flat mesh must be the
    sanitized boundary ring. Holes carve both caps but get no wall.
    """
    try:
        height = float(height)
    except (TypeError, ValueError):
        raise ExtrusionError(f"Extrusion height must be a number, got {height!r}") from None
    if not math.isfinite(height) or height <= 0.0:
        raise ExtrusionError(f"Extrusion height must be positive and finite, got {height!r}")
    if boundary_edge_count < 3:
        raise ExtrusionError(
            f"Need at least 3 boundary edges to build a side wall, got {boundary_edge_count}"
        )
    if boundary_edge_count > len(flat_mesh.positions):
        raise ExtrusionError(
            f"Boundary edge count {boundary_edge_count} exceeds the "
            f"{len(flat_mesh.positions)} flat mesh positions"
        )
    if len(flat_mesh.triangles) == 0:
        raise ExtrusionError("Flat mesh has no triangles to extrude")

    faces = np.asarray(flat_mesh.triangles, dtype=int)
    bottom = SurfaceMesh("bottom", flat_mesh.lift(0.0), faces[:, ::-1].copy())
    top = SurfaceMesh("top", flat_mesh.lift(height), faces.copy())
    boundary = np.asarray(flat_mesh.positions[:boundary_edge_count], dtype=float)
    side = _side_wall(boundary, height)

    logger.debug(
        "Extruded %d cap triangles and %d wall triangles to height %.6g",
        len(faces), len(side.faces), height,
    )
    return PrismMesh(bottom=bottom, top=top, side=side, height=height)
