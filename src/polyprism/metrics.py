"""Shoelace area and area-weighted centroid of a ring."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from polyprism.contracts import GeometricProperties, Vec2
from polyprism.errors import DegenerateInputError

AREA_RELATIVE_EPS = 1e-12


def _as_array(ring: Sequence[Sequence[float]]) -> np.ndarray:
    arr = np.asarray(ring, dtype=float)
    if arr.ndim != 2 or arr.shape[0] == 0:
        return np.zeros((0, 2), dtype=float)
    return arr[:, :2]


def _cross_terms(arr: np.ndarray) -> np.ndarray:
    nxt = np.roll(arr, -1, axis=0)
    return arr[:, 0] * nxt[:, 1] - nxt[:, 0] * arr[:, 1]


def area_tolerance(points: Sequence[Sequence[float]]) -> float:
    """Area below which a ring or triangle counts as degenerate.

    Scales with the squared bounding-box diagonal so tiny but well-formed
    rings are not rejected.
    """
    arr = _as_array(points)
    if len(arr) == 0:
        return 0.0
    extent = arr.max(axis=0) - arr.min(axis=0)
    return AREA_RELATIVE_EPS * float(extent @ extent)


def signed_area(ring: Sequence[Sequence[float]]) -> float:
    """Signed shoelace area; positive for counter-clockwise ``(x, z)`` rings."""
    arr = _as_array(ring)
    if len(arr) < 3:
        return 0.0
    return float(np.sum(_cross_terms(arr)) / 2.0)


def centroid(ring: Sequence[Sequence[float]]) -> Vec2:
    """Area-weighted centroid, not the (biased) vertex average."""
    arr = _as_array(ring)
    area = signed_area(arr)
    if abs(area) <= area_tolerance(arr):
        raise DegenerateInputError("Ring has zero area; centroid is undefined")
    cross = _cross_terms(arr)
    nxt = np.roll(arr, -1, axis=0)
    factor = 1.0 / (6.0 * area)
    cx = factor * float(np.sum((arr[:, 0] + nxt[:, 0]) * cross))
    cz = factor * float(np.sum((arr[:, 1] + nxt[:, 1]) * cross))
    return (cx, cz)


def polygon_properties(ring: Sequence[Sequence[float]]) -> GeometricProperties:
    return GeometricProperties(signed_area=signed_area(ring), centroid=centroid(ring))


def triangle_areas(positions: np.ndarray, triangles: np.ndarray) -> np.ndarray:
    """Signed area of each ``(x, z)`` triangle (positive when counter-clockwise)."""
    if len(triangles) == 0:
        return np.zeros(0, dtype=float)
    pts = np.asarray(positions, dtype=float)[:, :2]
    a = pts[triangles[:, 0]]
    b = pts[triangles[:, 1]]
    c = pts[triangles[:, 2]]
    ab = b - a
    ac = c - a
    return 0.5 * (ab[:, 0] * ac[:, 1] - ab[:, 1] * ac[:, 0])
