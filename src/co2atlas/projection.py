"""Natural Earth projection of feature geometry into SVG path data."""

from __future__ import annotations

import geopandas as gpd
import numpy as np
from pyproj.exceptions import CRSError, ProjError
from shapely.geometry.base import BaseGeometry

from .config import HEIGHT, PROJECTION_SCALE, WIDTH
from .errors import ProjectionError

# Natural Earth I on the authalic sphere; metres are divided back out by the radius
EARTH_RADIUS = 6371008.8
NATURAL_EARTH = f"+proj=natearth +R={EARTH_RADIUS} +lon_0=0 +type=crs"


def project(
    features: gpd.GeoDataFrame,
    width: int = WIDTH,
    height: int = HEIGHT,
    scale: float = PROJECTION_SCALE,
) -> gpd.GeoSeries:
    """Return geometries in screen space: origin top-left, y pointing down."""
    geoms = features.geometry
    if geoms.crs is None:
        geoms = geoms.set_crs("EPSG:4326")
    try:
        projected = geoms.to_crs(NATURAL_EARTH)
    except (CRSError, ProjError) as exc:
        raise ProjectionError(f"cannot project features to Natural Earth: {exc}") from exc
    k = scale / EARTH_RADIUS
    return projected.affine_transform([k, 0, 0, -k, width / 2, height / 2])


def _ring(coords, close: bool) -> str:
    pts = np.asarray(coords, dtype=float)[:, :2]
    if len(pts) == 0:
        return ""
    body = "L".join(f"{x:.2f},{y:.2f}" for x, y in pts)
    return f"M{body}{'Z' if close else ''}"


def svg_path(geom: BaseGeometry | None) -> str:
    if geom is None or geom.is_empty:
        return ""
    kind = geom.geom_type
    if kind == "Polygon":
        rings = [geom.exterior, *geom.interiors]
        return "".join(_ring(r.coords, close=True) for r in rings)
    if kind in ("LineString", "LinearRing"):
        return _ring(geom.coords, close=kind == "LinearRing")
    if hasattr(geom, "geoms"):
        return "".join(svg_path(g) for g in geom.geoms)
    return ""


def svg_paths(features: gpd.GeoDataFrame, **kwargs) -> list[str]:
    return [svg_path(g) for g in project(features, **kwargs)]
