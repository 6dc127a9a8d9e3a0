"""Public API for polygon triangulation and prism extrusion."""

from polyprism.contracts import PrismConfig, TriangulationSettings
from polyprism.errors import (
    DegenerateInputError,
    ExtrusionError,
    InvalidHoleError,
    PolyPrismError,
    TriangulationFailure,
)
from polyprism.pipeline import (
    PolygonPrism,
    TriangulationResult,
    create_prism,
    triangulate,
)

__all__ = [
    "DegenerateInputError",
    "ExtrusionError",
    "InvalidHoleError",
    "PolyPrismError",
    "PolygonPrism",
    "PrismConfig",
    "TriangulationFailure",
    "TriangulationResult",
    "TriangulationSettings",
    "create_prism",
    "triangulate",
]
