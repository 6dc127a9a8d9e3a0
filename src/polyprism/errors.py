"""Failure kinds raised by the polygon-to-prism pipeline."""


class PolyPrismError(Exception):
    """Base exception for geometry construction failures."""

    kind = "polyprism_error"


class DegenerateInputError(PolyPrismError):
    """A ring has fewer than 3 distinct points (or no area) after sanitization."""

    kind = "degenerate_input"


class InvalidHoleError(PolyPrismError):
    """A hole lies outside the boundary or its seed misses the hole."""

    kind = "invalid_hole"


class TriangulationFailure(PolyPrismError):
    """The triangulation backend rejected or could not complete the graph."""

    kind = "triangulation_failure"


class ExtrusionError(PolyPrismError):
    """The flat mesh cannot be extruded into a prism."""

    kind = "extrusion_failure"
