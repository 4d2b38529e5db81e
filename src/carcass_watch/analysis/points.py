"""Point geometry construction from tabular records.

One builder serves every input table; a ``ColumnMapping`` says where the
longitude/latitude live.  Records without a valid coordinate pair are dropped
and counted, never defaulted.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import geopandas as gpd
import pandas as pd
from shapely.geometry import Point

from carcass_watch.errors import InvalidCoordinateError
from carcass_watch.schemas import ColumnMapping

logger = logging.getLogger(__name__)

DEFAULT_CRS = "EPSG:4326"

MAX_LONGITUDE = 180.0
MAX_LATITUDE = 90.0

# Column mappings for the three input tables
OBSERVATION_COLUMNS = ColumnMapping(longitude="longitude", latitude="latitude")
COLONY_COLUMNS = ColumnMapping(longitude="longitude", latitude="latitude")
OUTBREAK_COLUMNS = ColumnMapping(longitude="longitude", latitude="latitude")


def _to_float(value: object, axis: str) -> float:
    if value is None or isinstance(value, bool):
        msg = f"{axis} is missing"
        raise InvalidCoordinateError(msg)
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        msg = f"{axis} is not numeric: {value!r}"
        raise InvalidCoordinateError(msg) from None
    if not math.isfinite(number):
        msg = f"{axis} is missing or not finite: {value!r}"
        raise InvalidCoordinateError(msg)
    return number


def validate_coordinates(longitude: object, latitude: object) -> tuple[float, float]:
    """
    Return ``(longitude, latitude)`` as floats.

    Raises:
        InvalidCoordinateError: if either value is missing, non-numeric,
            non-finite, or outside [-180, 180] / [-90, 90].
    """
    lon = _to_float(longitude, "longitude")
    lat = _to_float(latitude, "latitude")
    if not -MAX_LONGITUDE <= lon <= MAX_LONGITUDE:
        msg = f"longitude {lon} outside [-180, 180]"
        raise InvalidCoordinateError(msg)
    if not -MAX_LATITUDE <= lat <= MAX_LATITUDE:
        msg = f"latitude {lat} outside [-90, 90]"
        raise InvalidCoordinateError(msg)
    return lon, lat


def build_point(record: Mapping[str, Any], columns: ColumnMapping = OBSERVATION_COLUMNS) -> Point:
    """Point for one record; raises ``InvalidCoordinateError``."""
    lon, lat = validate_coordinates(record.get(columns.longitude), record.get(columns.latitude))
    return Point(lon, lat)


@dataclass(frozen=True)
class PointBuildResult:
    """Point layer plus the number of records dropped for bad coordinates."""

    points: gpd.GeoDataFrame
    dropped: int


def build_points(
    frame: pd.DataFrame,
    columns: ColumnMapping = OBSERVATION_COLUMNS,
    crs: str = DEFAULT_CRS,
    *,
    layer: str = "points",
) -> PointBuildResult:
    """
    Convert a table with lon/lat columns into a point layer in ``crs``.

    Every original column is kept; the lon/lat columns are coerced to float.
    Rows with invalid coordinates are excluded and counted.
    """
    keep: list[bool] = []
    geometries: list[Point] = []
    for row in frame.to_dict(orient="records"):
        try:
            geometries.append(build_point(row, columns))
        except InvalidCoordinateError as exc:
            logger.debug("Dropping %s record: %s", layer, exc)
            keep.append(False)
        else:
            keep.append(True)

    kept = frame[pd.Series(keep, index=frame.index, dtype=bool)].reset_index(drop=True)
    dropped = len(frame) - len(kept)
    if dropped:
        logger.warning("Dropped %d %s record(s) with invalid coordinates", dropped, layer)

    coord_columns = [c for c in (columns.longitude, columns.latitude) if c in kept.columns]
    kept = kept.astype(dict.fromkeys(coord_columns, float))
    points = gpd.GeoDataFrame(kept, geometry=gpd.GeoSeries(geometries, crs=crs))
    logger.info("Built %d %s point(s) in %s", len(points), layer, crs)
    return PointBuildResult(points=points, dropped=dropped)
