"""
Prefect flow for building the maps and export files from a snapshot.

Pipeline (fixed order):
    snapshot -> lexical filter -> point layers -> boundary clip -> render/export

Run locally:
    python -m carcass_watch.flows.build
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any

import geopandas as gpd
import pandas as pd
from prefect import flow, task
from prefect.cache_policies import NO_CACHE

from carcass_watch.analysis.containment import clip_to_boundary
from carcass_watch.analysis.keywords import LexicalFilterResult, filter_records
from carcass_watch.analysis.points import PointBuildResult, build_points
from carcass_watch.config import Settings, get_settings
from carcass_watch.datasources.boundaries import load_country_boundary
from carcass_watch.datasources.inaturalist import parse_observations, records_to_frame
from carcass_watch.datasources.sites import load_colonies, load_outbreaks
from carcass_watch.errors import MissingSnapshotError
from carcass_watch.export import export_all, staged_outputs
from carcass_watch.renderers.layer_styles import CARCASSES, COLONIES, OUTBREAKS
from carcass_watch.renderers.static_map import render_static_map
from carcass_watch.renderers.web_map import build_web_map_html
from carcass_watch.schemas import ColumnMapping, ExportFormat, KeywordRule
from carcass_watch.store import SnapshotStore

RAW_TABLE = "observations_raw"
STATIC_MAP = "map.png"
WEB_MAP = "map.html"


# =============================================================================
# Loading tasks
# =============================================================================


@task(name="load-observations", cache_policy=NO_CACHE)
def load_observations(store: SnapshotStore, path: Path) -> pd.DataFrame:
    """Load the observation snapshot as a table."""
    raw = store.read(path)
    if raw is None:
        msg = f"No observation snapshot at {store.base / path}. Run the fetch flow first."
        raise MissingSnapshotError(msg)
    return records_to_frame(parse_observations(raw))


@task(name="load-reference-sites", cache_policy=NO_CACHE)
def load_reference_sites(settings: Settings) -> tuple[pd.DataFrame, pd.DataFrame]:
    """Load the colony and outbreak tables."""
    colonies = load_colonies(settings.colonies_path, settings.colony_columns)
    outbreaks = load_outbreaks(settings.outbreaks_path, settings.outbreak_columns)
    return colonies, outbreaks


@task(name="load-boundary", cache_policy=NO_CACHE)
def load_boundary(settings: Settings) -> gpd.GeoDataFrame:
    """Load the country boundary polygon in the pipeline CRS."""
    return load_country_boundary(
        settings.boundary_source,
        settings.country_name,
        name_column=settings.boundary_name_column,
        crs=settings.crs,
    )


# =============================================================================
# Transform tasks
# =============================================================================


@task(name="filter-observations", cache_policy=NO_CACHE)
def filter_observations(
    frame: pd.DataFrame, rule: KeywordRule, cutoff: date
) -> LexicalFilterResult:
    """Keep observations whose text describes a carcass, dated on/after cutoff."""
    return filter_records(frame, rule, cutoff)


@task(name="build-layer", cache_policy=NO_CACHE)
def build_layer(
    frame: pd.DataFrame, columns: ColumnMapping, crs: str, name: str
) -> PointBuildResult:
    """Build one point layer; invalid coordinates are dropped and counted."""
    return build_points(frame, columns, crs, layer=name)


@task(name="clip-layers", cache_policy=NO_CACHE)
def clip_layers(
    layers: dict[str, gpd.GeoDataFrame], boundary: gpd.GeoDataFrame
) -> dict[str, gpd.GeoDataFrame]:
    """Clip every layer to the boundary (raises on CRS mismatch)."""
    return {name: clip_to_boundary(layer, boundary, layer=name) for name, layer in layers.items()}


# =============================================================================
# Output task
# =============================================================================


@task(name="write-outputs", cache_policy=NO_CACHE)
def write_outputs(
    observations: pd.DataFrame,
    layers: dict[str, gpd.GeoDataFrame],
    boundary: gpd.GeoDataFrame,
    output_dir: Path,
    formats: list[ExportFormat],
    title: str,
) -> list[Path]:
    """Write tables, geometry files and both maps; all or nothing."""
    with staged_outputs(output_dir) as staging:
        written = export_all(layers, staging, formats, tables={RAW_TABLE: observations})
        written.append(render_static_map(boundary, layers, staging / STATIC_MAP, title=title))
        web_map = staging / WEB_MAP
        web_map.write_text(build_web_map_html(boundary, layers, title=title), encoding="utf-8")
        written.append(web_map)
    return [Path(output_dir) / p.name for p in written]


# =============================================================================
# Flow
# =============================================================================


@flow(name="build-maps", log_prints=True)
def build_all(settings: Settings | None = None) -> dict[str, Any]:
    """
    Build maps and export files from the current observation snapshot.

    Returns per-stage record counts and the written paths.
    """
    settings = settings or get_settings()
    store = SnapshotStore(settings.data_dir)

    print("Loading observation snapshot...")
    snapshot = SnapshotStore.snapshot_path(settings.taxon_name, settings.place_id)
    observations = load_observations(store, snapshot)

    print(f"Filtering {len(observations)} observations by keyword and date...")
    lexical = filter_observations(observations, settings.keyword_rule(), settings.cutoff_date)

    print("Loading reference sites...")
    colonies, outbreaks = load_reference_sites(settings)

    print("Building point layers...")
    sources = {
        CARCASSES: (lexical.records, settings.observation_columns),
        COLONIES: (colonies, settings.colony_columns),
        OUTBREAKS: (outbreaks, settings.outbreak_columns),
    }
    built = {
        name: build_layer(frame, columns, settings.crs, name)
        for name, (frame, columns) in sources.items()
    }

    print(f"Loading boundary for {settings.country_name}...")
    boundary = load_boundary(settings)

    print("Clipping layers to boundary...")
    layers = clip_layers({name: result.points for name, result in built.items()}, boundary)

    print(f"Writing outputs to {settings.output_dir}...")
    outputs = write_outputs(
        observations,
        layers,
        boundary,
        settings.output_dir,
        list(settings.export_formats),
        settings.map_title,
    )

    summary: dict[str, Any] = {
        "observations": len(observations),
        "lexical": lexical.counts.as_dict(),
        "invalid_coordinates": {name: result.dropped for name, result in built.items()},
        "points": {name: len(result.points) for name, result in built.items()},
        "in_boundary": {name: len(layer) for name, layer in layers.items()},
        "outputs": [str(p) for p in outputs],
    }
    for name, layer in layers.items():
        print(f"{name}: {len(layer)} inside {settings.country_name}")
    print(f"Wrote {len(outputs)} files to {settings.output_dir}")
    return summary


if __name__ == "__main__":
    result = build_all()
    print(f"Flow complete: {result}")
