"""Entry points: polygon rings -> flat triangulation -> renderable prism."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Sequence, Tuple, Union

import numpy as np
import trimesh

from polyprism.assembly import get_assembly_strategy
from polyprism.constraints import build_constraint_graph
from polyprism.contracts import (
    RGBA,
    FlatMesh,
    GeometricProperties,
    PrismConfig,
    Ring,
    SurfaceMesh,
    TriangulationSettings,
    Vec2,
)
from polyprism.errors import DegenerateInputError, PolyPrismError
from polyprism.extrude import extrude
from polyprism.metrics import area_tolerance, polygon_properties, signed_area
from polyprism.sanitize import DEFAULT_EPSILON, sanitize_ring
from polyprism.triangulation import (
    TriangulationBackend,
    get_backend,
    run_triangulation,
)

logger = logging.getLogger(__name__)

DEFAULT_COLOR = "#1f77b4"

ColorLike = Union[str, Sequence[float]]
ColliderFactory = Callable[[trimesh.Trimesh], Any]


@dataclass
class TriangulationResult:
    """Outcome of :func:`triangulate`; failed results carry no geometry."""

    success: bool
    triangles: np.ndarray
    vertices: np.ndarray
    flat_mesh: Optional[FlatMesh] = None
    boundary: Ring = field(default_factory=list)
    holes: List[Ring] = field(default_factory=list)
    error: Optional[PolyPrismError] = None

    @classmethod
    def failed(cls, error: PolyPrismError) -> "TriangulationResult":
        return cls(
            success=False,
            triangles=np.zeros((0, 3), dtype=int),
            vertices=np.zeros((0, 3), dtype=float),
            error=error,
        )

    @property
    def error_kind(self) -> Optional[str]:
        return None if self.error is None else self.error.kind

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise self.error


@dataclass
class PolygonPrism:
    """Renderable output of :func:`create_prism`."""

    name: str
    color: RGBA
    is_3d: bool
    height: float
    assembly: str
    properties: GeometricProperties
    surfaces: List[SurfaceMesh]
    outline: List[np.ndarray] = field(default_factory=list)
    colliders: List[Any] = field(default_factory=list)

    @property
    def area(self) -> float:
        return self.properties.area

    @property
    def centroid(self) -> Vec2:
        return self.properties.centroid

    @property
    def meshes(self) -> List[trimesh.Trimesh]:
        return [surface.to_trimesh(self.color) for surface in self.surfaces]

    def to_scene(self) -> trimesh.Scene:
        scene = trimesh.Scene()
        for surface, mesh in zip(self.surfaces, self.meshes):
            scene.add_geometry(mesh, geom_name=f"{self.name}_{surface.name}")
        return scene


def parse_color(color: ColorLike) -> RGBA:
    """Accept ``#RRGGBB``/``#RRGGBBAA`` or an RGB(A) tuple of 0-1 floats or 0-255 ints."""
    if isinstance(color, str):
        c = color.lstrip("#")
        if len(c) not in (6, 8):
            raise ValueError(f"Unsupported hex color: {color!r}")
        channels = [int(c[i:i + 2], 16) for i in range(0, len(c), 2)]
    else:
        values = [float(v) for v in color]
        if len(values) not in (3, 4):
            raise ValueError(f"Color needs 3 or 4 channels, got {len(values)}")
        if all(v <= 1.0 for v in values):
            values = [v * 255.0 for v in values]
        channels = [int(round(min(255.0, max(0.0, v)))) for v in values]
    if len(channels) == 3:
        channels.append(255)
    return (channels[0], channels[1], channels[2], channels[3])


def mesh_collider(mesh: trimesh.Trimesh) -> trimesh.Trimesh:
    """Default collision volume: the surface itself with seams welded."""
    collider = mesh.copy()
    collider.merge_vertices()
    return collider


def _checked_ring(points: Sequence[Sequence[float]], epsilon: float, label: str) -> Ring:
    ring = sanitize_ring(points, epsilon)
    if len(ring) < 3:
        raise DegenerateInputError(
            f"{label} has {len(ring)} distinct point(s) after sanitization; at least 3 are required"
        )
    # n - 2 triangles each above the tolerance need more than this
    if abs(signed_area(ring)) <= len(ring) * area_tolerance(ring):
        raise DegenerateInputError(f"{label} encloses no area")
    return ring


def _resolve_backend(
    backend: Union[str, TriangulationBackend, None]
) -> Optional[TriangulationBackend]:
    if isinstance(backend, str):
        return get_backend(backend)
    return backend


def triangulate(
    boundary_points: Sequence[Sequence[float]],
    holes: Optional[Sequence[Sequence[Sequence[float]]]] = None,
    plane_offset: float = 0.0,
    *,
    epsilon: float = DEFAULT_EPSILON,
    seed_strategy: str = "centroid",
    settings: Optional[TriangulationSettings] = None,
    backend: Union[str, TriangulationBackend, None] = None,
) -> TriangulationResult:
    """Sanitize, build constraints, triangulate and lift to ``y = plane_offset``.

    Geometry failures come back as an unsuccessful result with an error kind;
    configuration mistakes (unknown backend or seed strategy) raise.
    """
    resolved = _resolve_backend(backend)
    try:
        boundary = _checked_ring(boundary_points, epsilon, "Boundary")
        hole_rings = [
            _checked_ring(hole, epsilon, f"Hole {i}") for i, hole in enumerate(holes or [])
        ]
        graph = build_constraint_graph(boundary, hole_rings, seed_strategy)
        flat = run_triangulation(graph, settings, resolved)
    except PolyPrismError as exc:
        logger.warning("Triangulation failed (%s): %s", exc.kind, exc)
        return TriangulationResult.failed(exc)

    return TriangulationResult(
        success=True,
        triangles=flat.triangles,
        vertices=flat.lift(plane_offset),
        flat_mesh=flat,
        boundary=boundary,
        holes=hole_rings,
    )


def _outline_loops(boundary: Ring, heights: Tuple[float, ...]) -> List[np.ndarray]:
    ring = np.asarray(boundary, dtype=float)
    return [
        np.column_stack([ring[:, 0], np.full(len(ring), h), ring[:, 1]]) for h in heights
    ]


def create_prism(
    name: str,
    height: float,
    boundary_points: Sequence[Sequence[float]],
    render_color: ColorLike = DEFAULT_COLOR,
    is_3d: bool = True,
    use_bottom_cap_in_3d: bool = True,
    use_colliders: bool = False,
    *,
    holes: Optional[Sequence[Sequence[Sequence[float]]]] = None,
    config: Optional[PrismConfig] = None,
    collider_factory: Optional[ColliderFactory] = None,
) -> PolygonPrism:
    """Build a flat polygon or an extruded prism ready for rendering.

    Raises the specific ``PolyPrismError`` subclass when any stage fails.
    """
    if config is None:
        config = PrismConfig()
    strategy = get_assembly_strategy(config.assembly)
    color = parse_color(render_color)

    result = triangulate(
        boundary_points,
        holes,
        0.0,
        epsilon=config.epsilon,
        seed_strategy=config.hole_seed_strategy,
        settings=config.triangulation,
        backend=config.backend,
    )
    result.raise_for_error()
    properties = polygon_properties(result.boundary)

    if is_3d:
        prism_mesh = extrude(result.flat_mesh, len(result.boundary), height)
        surfaces = prism_mesh.surfaces(include_bottom=use_bottom_cap_in_3d)
        loop_heights: Tuple[float, ...] = (0.0, prism_mesh.height)
    else:
        surfaces = [SurfaceMesh("flat", result.vertices, result.triangles)]
        loop_heights = (0.0,)
    assembled = strategy.assemble(surfaces)

    outline: List[np.ndarray] = []
    if config.render_outline:
        if strategy.supports_outline:
            outline = _outline_loops(result.boundary, loop_heights)
        else:
            logger.warning(
                "Outline rendering is not available with %s assembly; skipped for %s",
                strategy.name, name,
            )

    colliders: List[Any] = []
    if use_colliders:
        if strategy.supports_colliders:
            factory = collider_factory or mesh_collider
            colliders = [factory(surface.to_trimesh()) for surface in assembled]
        else:
            logger.warning(
                "Per-surface colliders are not available with %s assembly; skipped for %s",
                strategy.name, name,
            )

    logger.info(
        "Built %s prism %s: %d surface(s), %d triangles, area %.6g",
        "3D" if is_3d else "flat",
        name,
        len(assembled),
        sum(len(s.faces) for s in assembled),
        properties.area,
    )
    return PolygonPrism(
        name=name,
        color=color,
        is_3d=is_3d,
        height=float(height) if is_3d else 0.0,
        assembly=strategy.name,
        properties=properties,
        surfaces=assembled,
        outline=outline,
        colliders=colliders,
    )
