"""Multi-mesh and combined-buffer assembly of prism surfaces."""

from __future__ import annotations

from typing import Dict, List, Protocol, Sequence

import numpy as np

from polyprism.contracts import SurfaceMesh


class AssemblyStrategy(Protocol):
    name: str
    supports_outline: bool
    supports_colliders: bool

    def assemble(self, surfaces: Sequence[SurfaceMesh]) -> List[SurfaceMesh]:
        ...


class MultiMeshAssembly:
    """One independent buffer per surface; seams duplicate their vertices."""

    name = "multi"
    supports_outline = True
    supports_colliders = True

    def assemble(self, surfaces: Sequence[SurfaceMesh]) -> List[SurfaceMesh]:
        return [surface.copy() for surface in surfaces]


class CombinedMeshAssembly:
    """A single buffer; per-surface outline and colliders are unavailable."""

    name = "combined"
    supports_outline = False
    supports_colliders = False

    def assemble(self, surfaces: Sequence[SurfaceMesh]) -> List[SurfaceMesh]:
        if not surfaces:
            return []
        vertices: List[np.ndarray] = []
        faces: List[np.ndarray] = []
        offset = 0
        for surface in surfaces:
            vertices.append(np.asarray(surface.vertices, dtype=float).reshape(-1, 3))
            faces.append(np.asarray(surface.faces, dtype=int).reshape(-1, 3) + offset)
            offset += len(surface.vertices)
        return [SurfaceMesh("combined", np.vstack(vertices), np.vstack(faces))]


ASSEMBLY_STRATEGIES: Dict[str, AssemblyStrategy] = {
    MultiMeshAssembly.name: MultiMeshAssembly(),
    CombinedMeshAssembly.name: CombinedMeshAssembly(),
}


def get_assembly_strategy(name: str) -> AssemblyStrategy:
    try:
        return ASSEMBLY_STRATEGIES[name]
    except KeyError:
        raise ValueError(
            f"Unknown assembly strategy: {name!r} (expected one of {sorted(ASSEMBLY_STRATEGIES)})"
        ) from None
