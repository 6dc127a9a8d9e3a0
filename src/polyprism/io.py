"""Loading polygon rings from JSON/GeoJSON and exporting built prisms."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Tuple

from shapely.geometry import MultiPolygon, Polygon, shape

from polyprism.contracts import Ring, to_ring
from polyprism.pipeline import PolygonPrism

logger = logging.getLogger(__name__)

EXPORT_SUFFIXES = {".glb", ".stl", ".ply"}


def _read_json(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def write_json(path: Path, payload: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)


def _geojson_geometry(payload: Dict[str, Any]) -> Dict[str, Any]:
    kind = payload.get("type")
    if kind == "FeatureCollection":
        features = payload.get("features") or []
        if not features:
            raise ValueError("FeatureCollection has no features")
        if len(features) > 1:
            logger.warning("FeatureCollection has %d features; using the first", len(features))
        return _geojson_geometry(features[0])
    if kind == "Feature":
        geometry = payload.get("geometry")
        if not isinstance(geometry, dict):
            raise ValueError("Feature has no geometry")
        return geometry
    return payload


def rings_from_polygon(polygon: Polygon) -> Tuple[Ring, List[Ring]]:
    """Exterior and interior rings of a shapely polygon, coordinates as given."""
    boundary = to_ring(polygon.exterior.coords)
    holes = [to_ring(interior.coords) for interior in polygon.interiors]
    return boundary, holes


def load_rings(path: str) -> Tuple[Ring, List[Ring]]:
    """Read ``(boundary, holes)`` from a plain ring file or GeoJSON.

    Plain files look like ``{"boundary": [[x, z], ...], "holes": [[[x, z], ...]]}``.
    GeoJSON rings are closed; the sanitizer drops the closing point later.
    """
    payload = _read_json(Path(path))
    if "boundary" in payload:
        boundary = to_ring(payload["boundary"])
        holes = [to_ring(hole) for hole in payload.get("holes") or []]
        return boundary, holes

    geometry = shape(_geojson_geometry(payload))
    if isinstance(geometry, MultiPolygon):
        logger.warning(
            "MultiPolygon with %d parts; using the largest", len(geometry.geoms)
        )
        geometry = max(geometry.geoms, key=lambda g: g.area)
    if not isinstance(geometry, Polygon):
        raise ValueError(f"Unsupported geometry type: {geometry.geom_type}")
    return rings_from_polygon(geometry)


def export_prism(prism: PolygonPrism, path: str) -> str:
    """Write *prism* as a mesh scene; the format follows the file suffix."""
    out = Path(path)
    suffix = out.suffix.lower()
    if suffix not in EXPORT_SUFFIXES:
        raise ValueError(
            f"Unsupported export format {suffix!r} (expected one of {sorted(EXPORT_SUFFIXES)})"
        )
    out.parent.mkdir(parents=True, exist_ok=True)
    if suffix in {".stl", ".ply"}:
        # single-mesh formats
        mesh = prism.to_scene().to_mesh()
        mesh.export(str(out))
    else:
        prism.to_scene().export(str(out))
    logger.info("Exported prism %s: %s", prism.name, out)
    return str(out.resolve())


def prism_summary(prism: PolygonPrism) -> Dict[str, Any]:
    return {
        "name": prism.name,
        "is_3d": prism.is_3d,
        "height": prism.height,
        "assembly": prism.assembly,
        "area": prism.area,
        "signed_area": prism.properties.signed_area,
        "centroid": list(prism.centroid),
        "surfaces": {
            surface.name: {
                "vertices": int(len(surface.vertices)),
                "triangles": int(len(surface.faces)),
            }
            for surface in prism.surfaces
        },
        "outline_loops": len(prism.outline),
        "colliders": len(prism.colliders),
    }
