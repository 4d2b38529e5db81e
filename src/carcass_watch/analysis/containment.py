"""Spatial containment filter: keep points that intersect a boundary polygon."""

from __future__ import annotations

import logging

import geopandas as gpd

from carcass_watch.errors import CrsMismatchError

logger = logging.getLogger(__name__)


def ensure_same_crs(points: gpd.GeoDataFrame, boundary: gpd.GeoDataFrame) -> None:
    """Raise ``CrsMismatchError`` unless both layers declare the same CRS."""
    if points.crs is None or boundary.crs is None:
        msg = f"Undeclared CRS: points={points.crs}, boundary={boundary.crs}"
        raise CrsMismatchError(msg)
    if points.crs != boundary.crs:
        msg = (
            f"CRS mismatch: points are {points.crs.to_string()}, "
            f"boundary is {boundary.crs.to_string()}; reproject before filtering"
        )
        raise CrsMismatchError(msg)


def clip_to_boundary(
    points: gpd.GeoDataFrame,
    boundary: gpd.GeoDataFrame,
    *,
    layer: str = "points",
) -> gpd.GeoDataFrame:
    """
    Return the points whose geometry intersects the boundary.

    Containment is closed: a point lying exactly on the boundary edge is kept.
    The CRS check runs before any geometry is touched.  Input order is kept
    and the result has a fresh index.
    """
    ensure_same_crs(points, boundary)

    if points.empty:
        return points.iloc[0:0].reset_index(drop=True)

    polygon = boundary.geometry.union_all()
    inside = points.geometry.intersects(polygon)
    clipped = points[inside].reset_index(drop=True)

    logger.info(
        "Containment filter (%s): %d in, %d outside boundary, %d kept",
        layer,
        len(points),
        len(points) - len(clipped),
        len(clipped),
    )
    return clipped
