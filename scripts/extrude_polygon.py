#!/usr/bin/env python3
"""Build a flat polygon or extruded prism from a ring/GeoJSON file."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from polyprism import PolyPrismError, PrismConfig, TriangulationSettings, create_prism
from polyprism.io import export_prism, load_rings, prism_summary, write_json
from polyprism.preview import render_prism_screenshot

logger = logging.getLogger("extrude_polygon")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Triangulate a 2D region (with optional holes) and extrude it into a prism"
    )
    parser.add_argument(
        "--input", required=True, help="Ring JSON ({boundary, holes}) or GeoJSON polygon"
    )
    parser.add_argument("--name", default=None, help="Prism name (defaults to file stem)")
    parser.add_argument("--height", type=float, default=1.0, help="Extrusion height")
    parser.add_argument(
        "--flat", action="store_true", help="Emit the flat triangulation only (no extrusion)"
    )
    parser.add_argument(
        "--no-bottom-cap", action="store_true", help="Omit the bottom cap of the prism"
    )
    parser.add_argument(
        "--colliders", action="store_true", help="Generate per-surface collision meshes"
    )
    parser.add_argument(
        "--no-outline", action="store_true", help="Do not build boundary outline loops"
    )
    parser.add_argument(
        "--assembly",
        choices=["multi", "combined"],
        default="multi",
        help="One buffer per surface, or a single combined buffer",
    )
    parser.add_argument(
        "--seed-strategy",
        choices=["centroid", "interior"],
        default="centroid",
        help="How hole seed points are chosen",
    )
    parser.add_argument(
        "--backend",
        choices=["triangle", "earcut"],
        default="triangle",
        help="Triangulation backend",
    )
    parser.add_argument("--color", default="#1f77b4", help="Render color (#RRGGBB[AA])")
    parser.add_argument("--output", default=None, help="Mesh output path (.glb/.stl/.ply)")
    parser.add_argument("--screenshot", default=None, help="PNG preview output path")
    parser.add_argument("--metrics", default=None, help="JSON summary output path")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logs"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    name = args.name or Path(args.input).stem
    boundary, holes = load_rings(args.input)
    config = PrismConfig(
        render_outline=not args.no_outline,
        assembly=args.assembly,
        hole_seed_strategy=args.seed_strategy,
        backend=args.backend,
        triangulation=TriangulationSettings(verbose=args.verbose),
    )

    try:
        prism = create_prism(
            name,
            args.height,
            boundary,
            args.color,
            is_3d=not args.flat,
            use_bottom_cap_in_3d=not args.no_bottom_cap,
            use_colliders=args.colliders,
            holes=holes,
            config=config,
        )
    except PolyPrismError as exc:
        print(f"error ({exc.kind}): {exc}", file=sys.stderr)
        return 2

    summary = prism_summary(prism)
    if args.output:
        summary["output"] = export_prism(prism, args.output)
    if args.screenshot:
        summary["screenshot"] = render_prism_screenshot(prism, args.screenshot)
    if args.metrics:
        write_json(Path(args.metrics), summary)

    print(f"Prism: {prism.name}")
    print(f"Area: {prism.area:.6g}")
    print(f"Centroid: ({prism.centroid[0]:.6g}, {prism.centroid[1]:.6g})")
    for surface_name, counts in summary["surfaces"].items():
        print(f"Surface {surface_name}: {counts['triangles']} triangles")
    if args.output:
        print(f"Mesh: {summary['output']}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
