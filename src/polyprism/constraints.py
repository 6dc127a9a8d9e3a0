"""Constraint graph construction from a boundary ring and its holes."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np
from shapely.geometry import Polygon

from polyprism.contracts import ConstraintGraph, Vec2

logger = logging.getLogger(__name__)

SEED_STRATEGIES = ("centroid", "interior")


def centroid_seed(hole: np.ndarray) -> Vec2:
    """Vertex mean of the hole; only guaranteed inside convex holes."""
    mean = np.mean(hole, axis=0)
    return (float(mean[0]), float(mean[1]))


def interior_seed(hole: np.ndarray) -> Vec2:
    """A point shapely guarantees to lie inside the hole polygon."""
    polygon = Polygon(hole)
    if not polygon.is_valid or polygon.is_empty:
        return centroid_seed(hole)
    point = polygon.representative_point()
    return (float(point.x), float(point.y))


def _seed_function(strategy: str):
    if strategy == "centroid":
        return centroid_seed
    if strategy == "interior":
        return interior_seed
    raise ValueError(
        f"Unknown hole seed strategy: {strategy!r} (expected one of {SEED_STRATEGIES})"
    )


def _ring_edges(start: int, count: int) -> np.ndarray:
    local = np.arange(count, dtype=int)
    return np.column_stack([start + local, start + (local + 1) % count])


def build_constraint_graph(
    boundary: Sequence[Vec2],
    holes: Optional[Sequence[Sequence[Vec2]]] = None,
    seed_strategy: str = "centroid",
) -> ConstraintGraph:
    """Merge boundary and holes into one buffer with closed-loop edges.

    Boundary points come first, then each hole contiguously in input order.
    Each ring's edges use its local indices shifted by the running offset.
    No containment or overlap checks happen here.
    """
    seed_fn = _seed_function(seed_strategy)

    chunks: List[np.ndarray] = []
    edges: List[np.ndarray] = []
    seeds: List[Vec2] = []
    spans: List[Tuple[int, int]] = []
    offset = 0

    rings = [np.asarray(boundary, dtype=float).reshape(-1, 2)]
    rings.extend(np.asarray(hole, dtype=float).reshape(-1, 2) for hole in (holes or []))

    for ring_index, ring in enumerate(rings):
        count = len(ring)
        chunks.append(ring)
        spans.append((offset, count))
        if count > 0:
            edges.append(_ring_edges(offset, count))
        if ring_index > 0:
            seeds.append(seed_fn(ring) if count > 0 else (0.0, 0.0))
        offset += count

    positions = np.vstack(chunks) if offset else np.zeros((0, 2), dtype=float)
    edge_arr = np.vstack(edges) if edges else np.zeros((0, 2), dtype=int)
    seed_arr = np.asarray(seeds, dtype=float).reshape(-1, 2)

    logger.debug(
        "Constraint graph: %d positions, %d edges, %d hole seeds (%s)",
        len(positions), len(edge_arr), len(seed_arr), seed_strategy,
    )
    return ConstraintGraph(
        positions=positions,
        edges=edge_arr,
        hole_seeds=seed_arr,
        ring_spans=spans,
    )
