"""Headless PNG previews of built prisms."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

import numpy as np

from polyprism.pipeline import PolygonPrism

logger = logging.getLogger(__name__)


def _to_plot_axes(points: np.ndarray) -> np.ndarray:
    # matplotlib draws Z up; prisms extrude along Y
    return points[:, [0, 2, 1]]


def render_prism_screenshot(
    prism: PolygonPrism,
    output_path: str,
    *,
    opacity: float = 0.6,
    elev: float = 25.0,
    azim: float = -60.0,
    dpi: int = 150,
) -> str:
    """Render *prism* to a PNG at *output_path*.

    Uses matplotlib with the Agg backend so it works headless.
    Returns the absolute path of the written file.
    """
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt
    from mpl_toolkits.mplot3d.art3d import Poly3DCollection

    fig = plt.figure(figsize=(8, 6))
    ax = fig.add_subplot(111, projection="3d")
    bounds: List[np.ndarray] = []

    r, g, b, _ = (channel / 255.0 for channel in prism.color)
    for surface in prism.surfaces:
        if len(surface.vertices) == 0 or len(surface.faces) == 0:
            continue
        verts = _to_plot_axes(surface.vertices)
        ax.add_collection3d(Poly3DCollection(
            verts[surface.faces],
            facecolors=(r, g, b, opacity),
            edgecolors=(r, g, b, min(1.0, opacity + 0.2)),
            linewidths=0.2,
        ))
        bounds.append(verts)

    for loop in prism.outline:
        if len(loop) == 0:
            continue
        closed = _to_plot_axes(np.vstack([loop, loop[:1]]))
        ax.plot(closed[:, 0], closed[:, 1], closed[:, 2], color="black", linewidth=1.0)

    if bounds:
        cloud = np.vstack(bounds)
        mins, maxs = cloud.min(axis=0), cloud.max(axis=0)
        center = (mins + maxs) * 0.5
        radius = max(float(np.max(maxs - mins)) * 0.55, 1e-3)
        ax.set_xlim(center[0] - radius, center[0] + radius)
        ax.set_ylim(center[1] - radius, center[1] + radius)
        ax.set_zlim(center[2] - radius, center[2] + radius)

    ax.set_xlabel("X")
    ax.set_ylabel("Z")
    ax.set_zlabel("Y")
    ax.set_title(prism.name)
    ax.view_init(elev=elev, azim=azim)
    fig.tight_layout()

    out = Path(output_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(str(out), dpi=dpi, bbox_inches="tight")
    plt.close(fig)
    logger.info("Prism screenshot saved: %s", out)
    return str(out.resolve())
