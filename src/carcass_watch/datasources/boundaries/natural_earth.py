"""Country boundary polygons from a countries-of-the-world collection."""

from __future__ import annotations

import logging
from pathlib import Path

import geopandas as gpd
from pyogrio.errors import DataSourceError

from carcass_watch.errors import BoundaryNotFoundError, MissingReferenceFileError

logger = logging.getLogger(__name__)


def _is_remote(source: str) -> bool:
    return "://" in source


def read_countries(source: str | Path) -> gpd.GeoDataFrame:
    """Read every country polygon from ``source`` (local path or URL)."""
    source = str(source)
    if not _is_remote(source) and not Path(source).exists():
        msg = f"Boundary source not found: {source}"
        raise MissingReferenceFileError(msg)
    try:
        return gpd.read_file(source)
    except (OSError, DataSourceError) as exc:
        msg = f"Boundary source {source} could not be read: {exc}"
        raise MissingReferenceFileError(msg) from exc


def select_country(
    countries: gpd.GeoDataFrame,
    country: str,
    *,
    name_column: str = "ADMIN",
    crs: str = "EPSG:4326",
) -> gpd.GeoDataFrame:
    """
    Pick one country out of a polygon collection by exact name.

    Matching rows are dissolved into a single boundary row.  The result is
    brought into ``crs``: assigned if the source declares none, reprojected if
    it declares another.

    Raises:
        BoundaryNotFoundError: if the name column is absent or nothing matches.
    """
    if name_column not in countries.columns:
        msg = f"Boundary source has no {name_column!r} column"
        raise BoundaryNotFoundError(msg)

    matches = countries[countries[name_column] == country]
    if matches.empty:
        msg = f"No boundary named {country!r} in column {name_column!r}"
        raise BoundaryNotFoundError(msg)

    if matches.crs is None:
        matches = matches.set_crs(crs)
    elif matches.crs != crs:
        logger.info("Reprojecting boundary from %s to %s", matches.crs, crs)
        matches = matches.to_crs(crs)

    return gpd.GeoDataFrame(
        {name_column: [country]},
        geometry=[matches.geometry.union_all()],
        crs=matches.crs,
    )


def load_country_boundary(
    source: str | Path,
    country: str,
    *,
    name_column: str = "ADMIN",
    crs: str = "EPSG:4326",
) -> gpd.GeoDataFrame:
    """Read ``source`` and return the single-row boundary for ``country``."""
    boundary = select_country(read_countries(source), country, name_column=name_column, crs=crs)
    logger.info("Loaded boundary for %s from %s", country, source)
    return boundary
