"""Render a largest empty circle result with matplotlib."""

from pathlib import Path
from typing import Sequence, Union

import numpy as np
import structlog
from matplotlib.collections import LineCollection
from matplotlib.figure import Figure
from matplotlib.patches import Circle as CirclePatch

from .core.solver import LargestEmptyCircleResult

logger = structlog.get_logger()

SITE_COLOR = "red"
VORONOI_COLOR = "green"
HULL_COLOR = "blue"
CANDIDATE_COLOR = "orange"
CIRCLE_COLOR = "black"


def render_result(sites: Sequence, result: LargestEmptyCircleResult,
                  output_path: Union[str, Path],
                  show_voronoi: bool = True,
                  show_hull: bool = True,
                  show_candidates: bool = True,
                  dpi: int = 150) -> Path:
    """
    Draw sites, diagram layers and the circle, then save the figure.

    Args:
        sites: Site coordinates
        result: Output of largest_empty_circle
        output_path: Image file to write; format follows the extension
        show_voronoi: Draw the clipped Voronoi edges
        show_hull: Draw the region boundary
        show_candidates: Draw every candidate centre
        dpi: Output resolution

    Returns:
        Path of the written image
    """
    output_path = Path(output_path)
    coords = np.asarray(sites, dtype=float)
    circle = result.circle

    fig = Figure(figsize=(8, 8))
    ax = fig.subplots()

    if show_voronoi and result.voronoi_edges:
        ax.add_collection(LineCollection(result.voronoi_edges, colors=VORONOI_COLOR,
                                         linewidths=0.6, label="Voronoi"))
    if show_hull:
        ring = np.asarray(result.region + result.region[:1])
        ax.plot(ring[:, 0], ring[:, 1], color=HULL_COLOR, linewidth=1.2, label="region")
    if show_candidates and result.candidates:
        cand = np.asarray(result.candidates)
        ax.scatter(cand[:, 0], cand[:, 1], s=8, color=CANDIDATE_COLOR, label="candidates")

    ax.scatter(coords[:, 0], coords[:, 1], s=12, color=SITE_COLOR, zorder=3, label="sites")
    ax.add_patch(CirclePatch(circle.center, circle.radius, fill=False,
                             edgecolor=CIRCLE_COLOR, linewidth=1.5))
    ax.plot(*circle.center, marker="+", color=CIRCLE_COLOR, markersize=10)

    # Frame the region and circle, not the far ends of the clipped rays
    xs = [p[0] for p in result.region] + [circle.center[0] - circle.radius, circle.center[0] + circle.radius]
    ys = [p[1] for p in result.region] + [circle.center[1] - circle.radius, circle.center[1] + circle.radius]
    pad = 0.05 * max(max(xs) - min(xs), max(ys) - min(ys))
    ax.set_xlim(min(xs) - pad, max(xs) + pad)
    ax.set_ylim(min(ys) - pad, max(ys) + pad)
    ax.set_aspect("equal")
    ax.set_title(f"Largest empty circle, r = {circle.radius:.6g}")
    ax.legend(loc="upper right", fontsize="small")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=dpi, bbox_inches="tight")

    logger.info("Result rendered", path=str(output_path),
                voronoi=show_voronoi, hull=show_hull, candidates=show_candidates)
    return output_path
