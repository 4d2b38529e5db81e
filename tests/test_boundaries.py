"""
Tests for the country boundary loader.
"""

from __future__ import annotations

from pathlib import Path

import geopandas as gpd
import pytest
from shapely.geometry import Point, box

from carcass_watch.datasources.boundaries import (
    load_country_boundary,
    read_countries,
    select_country,
)
from carcass_watch.errors import BoundaryNotFoundError, MissingReferenceFileError


def countries(crs: str | None = "EPSG:4326") -> gpd.GeoDataFrame:
    return gpd.GeoDataFrame(
        {"ADMIN": ["Squareland", "Squareland", "Elsewhere"]},
        geometry=[box(0, 0, 1, 1), box(2, 2, 3, 3), box(10, 10, 11, 11)],
        crs=crs,
    )


class TestSelectCountry:
    """Test select_country."""

    def test_single_dissolved_row(self) -> None:
        boundary = select_country(countries(), "Squareland")
        assert len(boundary) == 1
        assert boundary["ADMIN"].iloc[0] == "Squareland"
        geom = boundary.geometry.iloc[0]
        assert geom.covers(Point(0.5, 0.5))
        assert geom.covers(Point(2.5, 2.5))
        assert not geom.covers(Point(10.5, 10.5))

    def test_crs_assigned_when_undeclared(self) -> None:
        boundary = select_country(countries(crs=None), "Squareland")
        assert boundary.crs.to_epsg() == 4326

    def test_reprojected_to_target(self) -> None:
        metric = countries().to_crs("EPSG:3857")
        boundary = select_country(metric, "Squareland", crs="EPSG:4326")
        assert boundary.crs.to_epsg() == 4326
        minx, miny, maxx, maxy = boundary.total_bounds
        assert minx == pytest.approx(0, abs=1e-6)
        assert maxy == pytest.approx(3, abs=1e-6)

    def test_unknown_country(self) -> None:
        with pytest.raises(BoundaryNotFoundError, match="Atlantis"):
            select_country(countries(), "Atlantis")

    def test_name_match_is_exact(self) -> None:
        with pytest.raises(BoundaryNotFoundError):
            select_country(countries(), "squareland")

    def test_missing_name_column(self) -> None:
        with pytest.raises(BoundaryNotFoundError, match="NAME_EN"):
            select_country(countries(), "Squareland", name_column="NAME_EN")


class TestReadCountries:
    """Test read_countries and load_country_boundary against local files."""

    def test_round_trip_geojson(self, tmp_path: Path) -> None:
        path = tmp_path / "countries.geojson"
        countries().to_file(path, driver="GeoJSON")
        boundary = load_country_boundary(path, "Elsewhere")
        assert len(boundary) == 1
        assert boundary.crs.to_epsg() == 4326

    def test_geopackage_reprojected(self, tmp_path: Path) -> None:
        path = tmp_path / "countries.gpkg"
        countries().to_crs("EPSG:3857").to_file(path, driver="GPKG")
        boundary = load_country_boundary(path, "Squareland", crs="EPSG:4326")
        assert boundary.crs.to_epsg() == 4326

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(MissingReferenceFileError, match="not found"):
            read_countries(tmp_path / "missing.geojson")

    def test_unreadable_file(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.geojson"
        path.write_text("this is not geojson", encoding="utf-8")
        with pytest.raises(MissingReferenceFileError):
            read_countries(path)
