"""
GeoJSON site input.

Two files describe a problem: a boundary file whose first feature is a
polygon (its ring vertices become sites), and a points file whose Point
features are the sites inside that boundary.
"""

import json
from pathlib import Path
from typing import List, Union

import structlog
from shapely.geometry import MultiPoint, MultiPolygon, Point, Polygon, shape

from ..core.errors import InvalidSiteError

logger = structlog.get_logger()

PathLike = Union[str, Path]


def _load_features(path: PathLike) -> list:
    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    if data.get("type") == "FeatureCollection":
        return data.get("features", [])
    if data.get("type") == "Feature":
        return [data]
    # Bare geometry
    return [{"type": "Feature", "geometry": data}]


def _ring_sites(polygon: Polygon) -> List[tuple]:
    coords = [(float(x), float(y)) for x, y, *_ in polygon.exterior.coords]
    # Closing vertex repeats the first one
    return coords[:-1]


def read_boundary_sites(path: PathLike) -> List[tuple]:
    """
    Sites on the boundary: exterior ring vertices of the first feature.

    Args:
        path: GeoJSON file

    Returns:
        List of (x, y) sites, closing vertex dropped

    Raises:
        InvalidSiteError: if the first feature is not a (multi)polygon
    """
    features = _load_features(path)
    if not features or features[0].get("geometry") is None:
        raise InvalidSiteError(f"{path}: no boundary feature")

    geometry = shape(features[0]["geometry"])
    if isinstance(geometry, MultiPolygon):
        geometry = geometry.geoms[0]
    if not isinstance(geometry, Polygon):
        raise InvalidSiteError(f"{path}: boundary must be a Polygon, got {geometry.geom_type}")

    sites = _ring_sites(geometry)
    logger.info("Boundary sites read", path=str(path), sites=len(sites))
    return sites


def read_point_sites(path: PathLike) -> List[tuple]:
    """
    Sites from the Point and MultiPoint features of a GeoJSON file.

    Other geometry types are skipped with a warning.
    """
    sites = []
    skipped = 0
    for feature in _load_features(path):
        if feature.get("geometry") is None:
            skipped += 1
            continue
        geometry = shape(feature["geometry"])
        if isinstance(geometry, Point):
            sites.append((float(geometry.x), float(geometry.y)))
        elif isinstance(geometry, MultiPoint):
            sites.extend((float(p.x), float(p.y)) for p in geometry.geoms)
        else:
            skipped += 1

    if skipped:
        logger.warning("Non-point features skipped", path=str(path), skipped=skipped)
    logger.info("Point sites read", path=str(path), sites=len(sites))
    return sites


def read_sites(boundary_path: PathLike, points_path: PathLike) -> List[tuple]:
    """Boundary sites followed by the point sites."""
    return read_boundary_sites(boundary_path) + read_point_sites(points_path)
