"""
Tests for layer export and staged output commits.
"""

from __future__ import annotations

import json
from pathlib import Path

import geopandas as gpd
import pandas as pd
import pytest
from shapely.geometry import Point

from carcass_watch.export import export_all, export_layer, staged_outputs, write_table
from carcass_watch.schemas import ExportFormat


def sample_layer() -> gpd.GeoDataFrame:
    return gpd.GeoDataFrame(
        {
            "id": [1, 2],
            "description": ["Dead on beach", "Carcass, tideline"],
            "latitude": [56.07, 55.25],
            "longitude": [-2.64, -5.11],
        },
        geometry=[Point(-2.64, 56.07), Point(-5.11, 55.25)],
        crs="EPSG:4326",
    )


class TestWriteTable:
    """CSV output."""

    def test_geometry_column_dropped(self, tmp_path: Path) -> None:
        path = write_table(sample_layer(), tmp_path / "layer.csv")
        header = path.read_text(encoding="utf-8").splitlines()[0]
        assert header == "id,description,latitude,longitude"

    def test_unix_line_endings(self, tmp_path: Path) -> None:
        path = write_table(pd.DataFrame({"a": [1, 2]}), tmp_path / "t.csv")
        assert path.read_bytes() == b"a\n1\n2\n"

    def test_quoting(self, tmp_path: Path) -> None:
        path = write_table(sample_layer(), tmp_path / "layer.csv")
        assert '"Carcass, tideline"' in path.read_text(encoding="utf-8")


class TestExportLayer:
    """Per-format export."""

    def test_csv(self, tmp_path: Path) -> None:
        path = export_layer(sample_layer(), tmp_path, "carcasses", ExportFormat.CSV)
        assert path == tmp_path / "carcasses.csv"
        assert pd.read_csv(path)["id"].tolist() == [1, 2]

    def test_geojson(self, tmp_path: Path) -> None:
        path = export_layer(sample_layer(), tmp_path, "carcasses", "geojson")
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["type"] == "FeatureCollection"
        assert len(data["features"]) == 2
        assert data["features"][0]["geometry"]["coordinates"] == [-2.64, 56.07]

    def test_geopackage(self, tmp_path: Path) -> None:
        path = export_layer(sample_layer(), tmp_path, "carcasses", ExportFormat.GPKG)
        back = gpd.read_file(path, layer="carcasses")
        assert len(back) == 2
        assert back.crs.to_epsg() == 4326

    def test_overwrites_existing(self, tmp_path: Path) -> None:
        export_layer(sample_layer(), tmp_path, "carcasses", ExportFormat.GEOJSON)
        path = export_layer(sample_layer().iloc[:1], tmp_path, "carcasses", ExportFormat.GEOJSON)
        data = json.loads(path.read_text(encoding="utf-8"))
        assert len(data["features"]) == 1

    def test_empty_layer(self, tmp_path: Path) -> None:
        empty = sample_layer().iloc[0:0]
        path = export_layer(empty, tmp_path, "carcasses", ExportFormat.CSV)
        assert path.read_text(encoding="utf-8").strip() == "id,description,latitude,longitude"

    def test_unknown_format(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError):
            export_layer(sample_layer(), tmp_path, "carcasses", "shp")


class TestExportAll:
    """Multi-layer export."""

    def test_every_layer_every_format(self, tmp_path: Path) -> None:
        paths = export_all(
            {"carcasses": sample_layer(), "colonies": sample_layer()},
            tmp_path,
            [ExportFormat.CSV, ExportFormat.GEOJSON],
            tables={"observations_raw": pd.DataFrame({"id": [1]})},
        )
        assert [p.name for p in paths] == [
            "observations_raw.csv",
            "carcasses.csv",
            "carcasses.geojson",
            "colonies.csv",
            "colonies.geojson",
        ]
        assert all(p.exists() for p in paths)

    def test_byte_identical_reruns(self, tmp_path: Path) -> None:
        first = export_all({"carcasses": sample_layer()}, tmp_path, ["csv"])[0].read_bytes()
        second = export_all({"carcasses": sample_layer()}, tmp_path, ["csv"])[0].read_bytes()
        assert first == second


class TestStagedOutputs:
    """All-or-nothing commit of a run's files."""

    def test_files_moved_on_success(self, tmp_path: Path) -> None:
        out = tmp_path / "output"
        with staged_outputs(out) as staging:
            (staging / "a.csv").write_text("new", encoding="utf-8")
            assert not (out / "a.csv").exists()
        assert (out / "a.csv").read_text(encoding="utf-8") == "new"
        assert [p.name for p in out.iterdir()] == ["a.csv"]

    def test_previous_outputs_kept_on_failure(self, tmp_path: Path) -> None:
        out = tmp_path / "output"
        out.mkdir()
        (out / "a.csv").write_text("old", encoding="utf-8")

        with pytest.raises(RuntimeError), staged_outputs(out) as staging:
            (staging / "a.csv").write_text("new", encoding="utf-8")
            raise RuntimeError("render failed")

        assert (out / "a.csv").read_text(encoding="utf-8") == "old"
        assert [p.name for p in out.iterdir()] == ["a.csv"]

    def test_dropped_format_removed(self, tmp_path: Path) -> None:
        out = tmp_path / "output"
        out.mkdir()
        (out / "colonies.gpkg").write_text("old", encoding="utf-8")
        (out / "colonies.csv").write_text("old", encoding="utf-8")
        (out / "notes.gpkg").write_text("keep", encoding="utf-8")
        (out / "colonies.txt").write_text("keep", encoding="utf-8")

        with staged_outputs(out) as staging:
            (staging / "colonies.csv").write_text("new", encoding="utf-8")

        assert sorted(p.name for p in out.iterdir()) == [
            "colonies.csv",
            "colonies.txt",
            "notes.gpkg",
        ]
        assert (out / "colonies.csv").read_text(encoding="utf-8") == "new"

    def test_dropped_format_kept_on_failure(self, tmp_path: Path) -> None:
        out = tmp_path / "output"
        out.mkdir()
        (out / "colonies.gpkg").write_text("old", encoding="utf-8")

        with pytest.raises(RuntimeError), staged_outputs(out) as staging:
            (staging / "colonies.csv").write_text("new", encoding="utf-8")
            raise RuntimeError("render failed")

        assert [p.name for p in out.iterdir()] == ["colonies.gpkg"]

    def test_creates_output_directory(self, tmp_path: Path) -> None:
        out = tmp_path / "nested" / "output"
        with staged_outputs(out):
            pass
        assert out.is_dir()
