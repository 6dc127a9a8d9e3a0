"""Near-duplicate point removal for boundary and hole rings."""

from __future__ import annotations

import math
from typing import List, Sequence

from polyprism.contracts import Ring, Vec2, to_ring

DEFAULT_EPSILON = 1e-6


def _distance(a: Vec2, b: Vec2) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def remove_duplicate_points(ring: List[Vec2], epsilon: float = DEFAULT_EPSILON) -> None:
    """Drop consecutive near-duplicates and a closing duplicate, in place.

    Walks from the last point down to index 1 so removals never shift an
    index still to be visited. A removal can bring two close points next to
    each other, so the walk repeats until a pass removes nothing. A ring with
    fewer than 3 survivors is left as is; callers decide whether that is an
    error.
    """
    if len(ring) <= 1:
        return

    removed = True
    while removed:
        removed = False
        for i in range(len(ring) - 1, 0, -1):
            if _distance(ring[i], ring[i - 1]) < epsilon:
                del ring[i]
                removed = True

    while len(ring) > 1 and _distance(ring[0], ring[-1]) < epsilon:
        del ring[-1]


def sanitize_ring(points: Sequence[Sequence[float]], epsilon: float = DEFAULT_EPSILON) -> Ring:
    """Return an owned, sanitized copy of *points*."""
    ring = to_ring(points)
    remove_duplicate_points(ring, epsilon)
    return ring


def sanitize_rings(
    rings: Sequence[Sequence[Sequence[float]]], epsilon: float = DEFAULT_EPSILON
) -> List[Ring]:
    return [sanitize_ring(ring, epsilon) for ring in rings]
