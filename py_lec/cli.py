"""Command line entry point."""

import argparse
import json
import sys
from typing import List, Optional

import structlog

from .config import settings
from .core.errors import LargestEmptyCircleError
from .core.solver import largest_empty_circle
from .io.geojson import read_sites
from .io.sites import random_sites
from .logging_setup import configure_logging

logger = structlog.get_logger()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="py-lec",
        description="Find the largest empty circle of a set of sites",
    )
    parser.add_argument("boundary", nargs="?", help="GeoJSON file whose first polygon bounds the sites")
    parser.add_argument("points", nargs="?", help="GeoJSON file with Point features inside the boundary")
    parser.add_argument("--random", type=int, metavar="N",
                        help="Use N random sites in [-1, 1] x [-1, 1] instead of GeoJSON input")
    parser.add_argument("--seed", type=int, default=None, help="Seed for --random")
    parser.add_argument("--workers", type=int, default=settings.workers,
                        help=f"Threads for candidate evaluation (default: {settings.workers})")
    parser.add_argument("--margin", type=float, default=settings.margin_factor,
                        help=f"Clipping box margin factor (default: {settings.margin_factor})")
    parser.add_argument("--plot", metavar="PATH", help="Write a rendering of the result to PATH")
    parser.add_argument("--no-voronoi", action="store_true", help="Leave the Voronoi diagram out of the plot")
    parser.add_argument("--no-hull", action="store_true", help="Leave the convex hull out of the plot")
    parser.add_argument("--no-candidates", action="store_true", help="Leave candidate points out of the plot")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.random is None and not (args.boundary and args.points):
        parser.error("give BOUNDARY and POINTS files, or --random N")

    configure_logging(args.log_level, settings.log_format)

    geographic = args.random is None
    sites = []
    try:
        if geographic:
            sites = read_sites(args.boundary, args.points)
        else:
            sites = random_sites(args.random, seed=args.seed)
        result = largest_empty_circle(sites, margin_factor=args.margin, workers=args.workers)
    except LargestEmptyCircleError as e:
        logger.error("Computation failed", error=str(e), sites=len(sites))
        print(f"error: {e}", file=sys.stderr)
        return 1
    except (OSError, ValueError) as e:
        logger.error("Invalid input", error=str(e))
        print(f"error: {e}", file=sys.stderr)
        return 1

    circle = result.circle
    if args.json:
        print(json.dumps({
            "center": list(circle.center),
            "radius": circle.radius,
            "nearest_site": result.nearest_site,
            "site_count": len(sites),
        }))
    elif geographic:
        print(f"Center of the largest empty circle: Longitude: {circle.center[0]} Latitude: {circle.center[1]}")
        print(f"Radius of the largest empty circle: {circle.radius}")
    else:
        print(f"Center of the largest empty circle: x: {circle.center[0]} y: {circle.center[1]}")
        print(f"Radius of the largest empty circle: {circle.radius}")

    if args.plot:
        from .visualizer import render_result

        render_result(sites, result, args.plot,
                      show_voronoi=not args.no_voronoi,
                      show_hull=not args.no_hull,
                      show_candidates=not args.no_candidates)
    return 0


if __name__ == "__main__":
    sys.exit(main())
