"""Contracts shared by the polygon triangulation and extrusion stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np
import trimesh

Vec2 = Tuple[float, float]
Vec3 = Tuple[float, float, float]
Ring = List[Vec2]
RGBA = Tuple[int, int, int, int]


@dataclass(frozen=True)
class TriangulationSettings:
    """Switches understood by every triangulation backend."""

    auto_holes_and_boundary: bool = False  # seeds recomputed from hole rings
    restore_boundary: bool = True  # every constraint edge must survive
    validate_input: bool = True
    verbose: bool = True


@dataclass(frozen=True)
class PrismConfig:
    """Configuration for polygon -> renderable prism construction."""

    epsilon: float = 1e-6
    render_outline: bool = True
    assembly: str = "multi"
    hole_seed_strategy: str = "centroid"
    backend: str = "triangle"
    triangulation: TriangulationSettings = field(default_factory=TriangulationSettings)


@dataclass
class ConstraintGraph:
    """Merged ring positions plus the closed-loop edges the mesh must keep.

    ``ring_spans`` holds ``(start, count)`` for the boundary followed by each
    hole, in the order they were appended to ``positions``.
    """

    positions: np.ndarray  # (N, 2)
    edges: np.ndarray  # (E, 2) int
    hole_seeds: np.ndarray  # (H, 2)
    ring_spans: List[Tuple[int, int]]

    @property
    def boundary_count(self) -> int:
        return self.ring_spans[0][1] if self.ring_spans else 0

    @property
    def hole_count(self) -> int:
        return max(0, len(self.ring_spans) - 1)

    def ring(self, index: int) -> np.ndarray:
        start, count = self.ring_spans[index]
        return self.positions[start:start + count]


@dataclass
class FlatMesh:
    """2D triangulation result, wound for +Y normals once lifted."""

    positions: np.ndarray  # (N, 2)
    triangles: np.ndarray  # (M, 3) int

    def lift(self, plane_offset: float = 0.0) -> np.ndarray:
        """Map ``(x, z)`` positions to ``(x, plane_offset, z)``."""
        n = len(self.positions)
        if n == 0:
            return np.zeros((0, 3), dtype=float)
        return np.column_stack(
            [self.positions[:, 0], np.full(n, float(plane_offset)), self.positions[:, 1]]
        )


@dataclass
class SurfaceMesh:
    """One renderable vertex/index buffer."""

    name: str
    vertices: np.ndarray  # (N, 3)
    faces: np.ndarray  # (M, 3) int

    def copy(self) -> "SurfaceMesh":
        return SurfaceMesh(self.name, self.vertices.copy(), self.faces.copy())

    def to_trimesh(self, color: Optional[RGBA] = None) -> trimesh.Trimesh:
        mesh = trimesh.Trimesh(vertices=self.vertices, faces=self.faces, process=False)
        if color is not None:
            mesh.visual.face_colors = np.tile(
                np.asarray(color, dtype=np.uint8), (len(self.faces), 1)
            )
        mesh.metadata["name"] = self.name
        return mesh


@dataclass
class PrismMesh:
    """Bottom cap, top cap and boundary side wall of an extruded polygon."""

    bottom: SurfaceMesh
    top: SurfaceMesh
    side: SurfaceMesh
    height: float

    def surfaces(self, include_bottom: bool = True) -> List[SurfaceMesh]:
        if include_bottom:
            return [self.bottom, self.top, self.side]
        return [self.top, self.side]


@dataclass(frozen=True)
class GeometricProperties:
    """Area and centroid of a sanitized boundary ring (holes not subtracted)."""

    signed_area: float
    centroid: Vec2

    @property
    def area(self) -> float:
        return abs(self.signed_area)

    @property
    def is_counter_clockwise(self) -> bool:
        return self.signed_area > 0.0


def to_ring(points: Sequence[Sequence[float]]) -> Ring:
    """Copy caller points into an owned list of float pairs."""
    ring: Ring = []
    for point in points:
        if len(point) < 2:
            raise ValueError(f"Ring point needs two coordinates, got {point!r}")
        ring.append((float(point[0]), float(point[1])))
    return ring
